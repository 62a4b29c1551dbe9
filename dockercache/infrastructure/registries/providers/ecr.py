"""AWS Elastic Container Registry provider.

Uses boto3 for account/region discovery, the registry login token, and
repository management. ECR needs the repository to exist before the first
push, so ensure_repository creates it.
"""

from __future__ import annotations

import base64
import binascii
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dockercache.application.interfaces import IContainerEngine
from dockercache.core.constants import ECR_DEFAULT_REGION, ECR_LOGIN_USERNAME
from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    RepositoryException,
)
from dockercache.domain.value_objects import AwsAccountId, AwsRegion, RegistryHost
from dockercache.infrastructure.process import CommandRunner
from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.shared.telemetry.logging import get_logger, log_success

logger = get_logger(__name__)

_PERMISSION_HINT = (
    "Ensure the agent's AWS credentials allow ecr:GetAuthorizationToken, "
    "ecr:DescribeRepositories, ecr:CreateRepository and image push/pull"
)


class EcrProvider(RegistryProvider):
    """ECR: '<account>.dkr.ecr.<region>.amazonaws.com/<image>:<suffix>'."""

    provider_type = ProviderType.ECR
    display_name = "ECR"

    def __init__(
        self,
        engine: IContainerEngine,
        runner: CommandRunner | None = None,
        session_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize ECR provider.

        Args:
            engine: Container engine used for docker login.
            runner: Command runner (dependency checks).
            session_factory: boto3 Session factory; injectable for tests.
        """
        super().__init__(engine, runner)
        self._session_factory = session_factory or boto3.session.Session

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Resolve region/account, build the registry URL, and log in.

        Raises:
            ConfigurationException: Invalid region or account id, or the
                account id cannot be auto-detected.
            AuthenticationException: Token request or docker login failed.
        """
        self._require_commands()
        ecr = config.ecr

        session = self._session_factory()
        region = ecr.region
        if not region:
            region = session.region_name or ECR_DEFAULT_REGION
            logger.info("Using AWS region: %s", region)
        try:
            AwsRegion(region)
        except ValueError as e:
            raise ConfigurationException(str(e), parameter="ecr.region") from e

        account_id = ecr.account_id
        if not account_id:
            logger.info("Auto-detecting AWS account ID...")
            account_id = self._detect_account_id(session, region)
            logger.info("Using AWS account ID: %s", account_id)
        try:
            AwsAccountId(account_id)
        except ValueError as e:
            raise ConfigurationException(
                f"Invalid AWS account ID {account_id!r}: {e}",
                parameter="ecr.account-id",
            ) from e

        if ecr.registry_url:
            try:
                registry = RegistryHost(ecr.registry_url).value
            except ValueError as e:
                raise ConfigurationException(
                    str(e), parameter="ecr.registry-url"
                ) from e
        else:
            registry = f"{account_id}.dkr.ecr.{region}.amazonaws.com"
        logger.info("ECR registry URL: %s", registry)

        username, password = self._authorization(session, region)
        self._login(registry, username, password, [_PERMISSION_HINT])
        return ProviderIdentity(
            registry=registry,
            region=region,
            account_id=account_id,
            repository=config.image,
        )

    def ensure_repository(
        self, config: CacheConfig, identity: ProviderIdentity
    ) -> None:
        """Create the ECR repository named after the image if it is missing.

        Raises:
            RepositoryException: Describe or create failed.
        """
        repository = identity.repository or config.image
        logger.info("Ensuring ECR repository exists: %s", repository)
        client = self._session_factory().client("ecr", region_name=identity.region)
        try:
            client.describe_repositories(repositoryNames=[repository])
            return
        except ClientError as e:
            if e.response["Error"]["Code"] != "RepositoryNotFoundException":
                raise RepositoryException(repository, str(e)) from e
        except BotoCoreError as e:
            raise RepositoryException(repository, str(e)) from e

        logger.info("Creating ECR repository: %s", repository)
        try:
            client.create_repository(repositoryName=repository)
        except ClientError as e:
            if e.response["Error"]["Code"] == "RepositoryAlreadyExistsException":
                return
            raise RepositoryException(repository, str(e)) from e
        except BotoCoreError as e:
            raise RepositoryException(repository, str(e)) from e
        log_success(logger, "ECR repository created successfully")

    def _detect_account_id(self, session: Any, region: str) -> str:
        try:
            identity = session.client("sts", region_name=region).get_caller_identity()
        except (BotoCoreError, ClientError) as e:
            raise ConfigurationException(
                "Failed to auto-detect AWS account ID. Please provide it in the configuration.",
                parameter="ecr.account-id",
            ) from e
        account_id = identity.get("Account")
        if not account_id:
            raise ConfigurationException(
                "Failed to auto-detect AWS account ID. Please provide it in the configuration.",
                parameter="ecr.account-id",
            )
        return account_id

    def _authorization(self, session: Any, region: str) -> tuple[str, str]:
        """Return (username, password) from ECR GetAuthorizationToken."""
        try:
            response = session.client("ecr", region_name=region).get_authorization_token()
            token = response["authorizationData"][0]["authorizationToken"]
            decoded = base64.b64decode(token, validate=True).decode()
        except (
            BotoCoreError,
            ClientError,
            KeyError,
            IndexError,
            binascii.Error,
            UnicodeDecodeError,
        ) as e:
            raise AuthenticationException(
                self.provider_type.value,
                f"Failed to get ECR authorization token: {e}",
                [_PERMISSION_HINT],
            ) from e
        username, _, password = decoded.partition(":")
        return username or ECR_LOGIN_USERNAME, password
