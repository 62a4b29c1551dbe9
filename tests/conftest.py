"""Pytest configuration and fixtures for dockercache.

No docker daemon, cloud CLI or network is needed: the container engine is an
in-memory fake, external commands go through a scripted runner, and boto3
sessions are MagicMocks.
"""

import base64
import os
from collections.abc import Callable, Iterator, Sequence
from typing import Any
from unittest.mock import MagicMock

import pytest

from dockercache.core.config import get_settings
from dockercache.core.constants import (
    ENV_BUILDKITE_API_TOKEN,
    ENV_COMMIT,
    ENV_ORGANIZATION_SLUG,
    ENV_PREFIX,
)
from dockercache.domain.entities import BuildRequest, CacheConfig
from dockercache.domain.enums import ProviderType
from dockercache.infrastructure.exceptions import CommandFailedError
from dockercache.infrastructure.process import CommandResult

TEST_ACCOUNT_ID = "123456789012"
TEST_REGION = "us-east-1"
TEST_ECR_REGISTRY = f"{TEST_ACCOUNT_ID}.dkr.ecr.{TEST_REGION}.amazonaws.com"


class FakeEngine:
    """In-memory container engine.

    images maps a local reference to an image id; remote is the set of
    references the registry holds. Every call is recorded in calls.
    """

    def __init__(self) -> None:
        self.images: dict[str, str] = {}
        self.remote: set[str] = set()
        self.calls: list[tuple[Any, ...]] = []
        self.builds: list[BuildRequest] = []
        self.logins: list[tuple[str, str, str]] = []
        self.fail_pull = False
        self.fail_build = False
        self.fail_login = False
        self.fail_push: set[str] = set()

    def image_exists_locally(self, image_ref: str) -> bool:
        return image_ref in self.images

    def manifest_exists(self, image_ref: str) -> bool:
        self.calls.append(("manifest", image_ref))
        return image_ref in self.remote

    def pull(self, image_ref: str) -> None:
        self.calls.append(("pull", image_ref))
        if self.fail_pull or image_ref not in self.remote:
            raise CommandFailedError(f"docker pull {image_ref}", 1, "pull failed")
        self.images[image_ref] = f"id:{image_ref}"

    def push(self, image_ref: str) -> None:
        self.calls.append(("push", image_ref))
        if image_ref in self.fail_push:
            raise CommandFailedError(f"docker push {image_ref}", 1, "push denied")
        self.remote.add(image_ref)

    def tag(self, source_ref: str, target_ref: str) -> None:
        self.calls.append(("tag", source_ref, target_ref))
        if source_ref not in self.images:
            raise CommandFailedError(
                f"docker tag {source_ref} {target_ref}", 1, "No such image"
            )
        self.images[target_ref] = self.images[source_ref]

    def build(self, request: BuildRequest) -> None:
        self.calls.append(("build", request.tag))
        self.builds.append(request)
        if self.fail_build:
            raise CommandFailedError("docker build", 1, "build failed")
        self.images[request.tag] = f"built:{request.tag}"

    def login(self, registry: str, username: str, password: str) -> None:
        self.logins.append((registry, username, password))
        if self.fail_login:
            raise CommandFailedError("docker login", 1, "unauthorized")

    def pushed(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "push"]


class FakeRunner:
    """Command runner returning scripted results by argument prefix.

    Unscripted commands succeed with empty output. Executables listed in
    missing are reported absent by which().
    """

    def __init__(self, missing: Sequence[str] = ()) -> None:
        self.missing = set(missing)
        self.calls: list[tuple[str, ...]] = []
        self.inputs: list[str | None] = []
        self._scripted: list[tuple[tuple[str, ...], CommandResult]] = []

    def script(
        self, prefix: Sequence[str], returncode: int = 0, stdout: str = "", stderr: str = ""
    ) -> None:
        self._scripted.append(
            (tuple(prefix), CommandResult(tuple(prefix), returncode, stdout, stderr))
        )

    def which(self, name: str) -> bool:
        return name not in self.missing

    def run(
        self, args: Sequence[str], *, input: str | None = None, capture: bool = True
    ) -> CommandResult:
        args = tuple(args)
        self.calls.append(args)
        self.inputs.append(input)
        best: CommandResult | None = None
        best_len = -1
        for prefix, result in self._scripted:
            if args[: len(prefix)] == prefix and len(prefix) > best_len:
                best, best_len = result, len(prefix)
        if best is None:
            return CommandResult(args, 0)
        return CommandResult(args, best.returncode, best.stdout, best.stderr)

    def run_checked(
        self, args: Sequence[str], *, input: str | None = None, capture: bool = True
    ) -> CommandResult:
        result = self.run(args, input=input, capture=capture)
        if not result.ok:
            raise CommandFailedError(result.command, result.returncode, result.stderr)
        return result

    def called(self, *prefix: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[: len(prefix)] == prefix]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Remove plugin and ambient CI variables so tests start from defaults."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    for name in (ENV_COMMIT, ENV_ORGANIZATION_SLUG, ENV_BUILDKITE_API_TOKEN):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_config() -> Callable[..., CacheConfig]:
    """Factory for CacheConfig with ECR and image 'my-app' as defaults."""

    def _make(**overrides: Any) -> CacheConfig:
        values: dict[str, Any] = {"provider": ProviderType.ECR, "image": "my-app"}
        values.update(overrides)
        return CacheConfig(**values)

    return _make


@pytest.fixture
def aws_session() -> MagicMock:
    """boto3 Session mock with STS identity and an ECR authorization token.

    session.ecr_client is the client returned for 'ecr'; tests configure
    describe/create responses on it.
    """
    session = MagicMock()
    session.region_name = TEST_REGION
    sts_client = MagicMock()
    sts_client.get_caller_identity.return_value = {"Account": TEST_ACCOUNT_ID}
    ecr_client = MagicMock()
    token = base64.b64encode(b"AWS:ecr-password").decode()
    ecr_client.get_authorization_token.return_value = {
        "authorizationData": [{"authorizationToken": token}]
    }
    session.client.side_effect = lambda name, region_name=None: (
        sts_client if name == "sts" else ecr_client
    )
    session.sts_client = sts_client
    session.ecr_client = ecr_client
    return session


@pytest.fixture
def session_factory(aws_session: MagicMock) -> MagicMock:
    return MagicMock(return_value=aws_session)
