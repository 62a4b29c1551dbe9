"""Tests for token-configured providers: Artifactory and Buildkite Packages."""

import pytest

from dockercache.domain.entities import ArtifactoryConfig, BuildkiteConfig
from dockercache.domain.enums import BuildkiteAuthMethod, ProviderType
from dockercache.domain.exceptions import (
    AuthenticationException,
    ConfigurationException,
    ContainerEngineException,
)
from dockercache.infrastructure.exceptions import CommandNotFoundError
from dockercache.infrastructure.registries.providers import (
    ArtifactoryProvider,
    BuildkiteProvider,
)
from dockercache.shared.utils.env_lookup import AllowListedEnvLookup
from tests.conftest import FakeRunner


def _artifactory_config(make_config, **overrides):
    values = {
        "registry_url": "https://acme.jfrog.io",
        "username": "ci-user",
        "identity_token": "identity-token",
    }
    values.update(overrides)
    return make_config(
        provider=ProviderType.ARTIFACTORY, artifactory=ArtifactoryConfig(**values)
    )


class TestArtifactoryProvider:
    def test_setup_strips_scheme_and_logs_in(self, engine, runner, make_config) -> None:
        config = _artifactory_config(make_config, repository="docker-local")
        provider = ArtifactoryProvider(engine, runner)

        identity = provider.setup_environment(config)

        assert identity.registry == "acme.jfrog.io"
        assert engine.logins == [("acme.jfrog.io", "ci-user", "identity-token")]
        assert (
            provider.compute_cache_image_name(config, identity, "cache-abc")
            == "acme.jfrog.io/docker-local/my-app:cache-abc"
        )

    def test_repository_defaults_to_image(self, engine, runner, make_config) -> None:
        identity = ArtifactoryProvider(engine, runner).setup_environment(
            _artifactory_config(make_config)
        )
        assert identity.namespace == "my-app"

    @pytest.mark.parametrize(
        "field,parameter",
        [
            ("registry_url", "artifactory.registry-url"),
            ("username", "artifactory.username"),
            ("identity_token", "artifactory.identity-token"),
        ],
    )
    def test_required_parameters(self, engine, runner, make_config, field, parameter) -> None:
        with pytest.raises(ConfigurationException) as exc_info:
            ArtifactoryProvider(engine, runner).setup_environment(
                _artifactory_config(make_config, **{field: None})
            )
        assert exc_info.value.details["parameter"] == parameter
        assert engine.logins == []

    def test_invalid_hostname(self, engine, runner, make_config) -> None:
        with pytest.raises(ConfigurationException) as exc_info:
            ArtifactoryProvider(engine, runner).setup_environment(
                _artifactory_config(make_config, registry_url="https://bad_host!")
            )
        assert exc_info.value.details["parameter"] == "artifactory.registry-url"

    def test_allowed_env_reference_is_expanded(self, engine, runner, make_config) -> None:
        env = {"ARTIFACTORY_IDENTITY_TOKEN": "from-env"}
        lookup = AllowListedEnvLookup(prefixes=("ARTIFACTORY_",), source=env.get)
        provider = ArtifactoryProvider(engine, runner, env_lookup=lookup)
        provider.setup_environment(
            _artifactory_config(make_config, identity_token="$ARTIFACTORY_IDENTITY_TOKEN")
        )
        assert engine.logins[0][2] == "from-env"

    def test_unset_env_reference(self, engine, runner, make_config) -> None:
        lookup = AllowListedEnvLookup(prefixes=("ARTIFACTORY_",), source={}.get)
        with pytest.raises(ConfigurationException, match="unset variable"):
            ArtifactoryProvider(engine, runner, env_lookup=lookup).setup_environment(
                _artifactory_config(make_config, identity_token="$ARTIFACTORY_TOKEN")
            )

    def test_login_failure(self, engine, runner, make_config) -> None:
        engine.fail_login = True
        with pytest.raises(AuthenticationException) as exc_info:
            ArtifactoryProvider(engine, runner).setup_environment(
                _artifactory_config(make_config)
            )
        assert "unauthorized" in exc_info.value.message

    def test_engine_login_failure_from_any_engine(self, engine, runner, make_config) -> None:
        """Any ContainerEngineException from login maps to AuthenticationException."""

        def refuse(registry: str, username: str, password: str) -> None:
            raise ContainerEngineException("engine refused login")

        engine.login = refuse
        with pytest.raises(AuthenticationException) as exc_info:
            ArtifactoryProvider(engine, runner).setup_environment(
                _artifactory_config(make_config)
            )
        assert "engine refused login" in exc_info.value.message
        assert exc_info.value.details["provider"] == "artifactory"


def _buildkite_config(make_config, **overrides):
    return make_config(
        provider=ProviderType.BUILDKITE,
        organization_slug=overrides.pop("organization_slug", None),
        buildkite=BuildkiteConfig(**overrides),
    )


class TestBuildkiteProvider:
    def test_api_token_login(self, engine, runner, make_config) -> None:
        config = _buildkite_config(
            make_config, org_slug="acme", registry_slug="docker", api_token="bk-token"
        )
        provider = BuildkiteProvider(engine, runner)

        identity = provider.setup_environment(config)

        assert identity.registry == "packages.buildkite.com/acme/docker"
        assert engine.logins == [
            ("packages.buildkite.com/acme/docker", "buildkite", "bk-token")
        ]
        assert (
            provider.compute_cache_image_name(config, identity, "cache-abc")
            == "packages.buildkite.com/acme/docker/my-app:cache-abc"
        )

    def test_org_from_environment_and_registry_from_image(
        self, engine, runner, make_config
    ) -> None:
        config = _buildkite_config(
            make_config, organization_slug="acme", api_token="bk-token"
        )
        identity = BuildkiteProvider(engine, runner).setup_environment(config)
        assert identity.registry == "packages.buildkite.com/acme/my-app"

    def test_org_slug_required(self, engine, runner, make_config) -> None:
        with pytest.raises(ConfigurationException) as exc_info:
            BuildkiteProvider(engine, runner).setup_environment(
                _buildkite_config(make_config, api_token="bk-token")
            )
        assert exc_info.value.details["parameter"] == "buildkite.org-slug"

    def test_token_reference_in_allow_list(self, engine, runner, make_config) -> None:
        env = {"CONTAINER_PACKAGE_REGISTRY_TOKEN": "registry-token"}
        lookup = AllowListedEnvLookup(
            names=BuildkiteProvider.env_allowed_names,
            prefixes=BuildkiteProvider.env_allowed_prefixes,
            source=env.get,
        )
        BuildkiteProvider(engine, runner, env_lookup=lookup).setup_environment(
            _buildkite_config(
                make_config, org_slug="acme", api_token="$CONTAINER_PACKAGE_REGISTRY_TOKEN"
            )
        )
        assert engine.logins[0][2] == "registry-token"

    def test_token_reference_outside_allow_list_is_literal(
        self, engine, runner, make_config
    ) -> None:
        env = {"SECRET_THING": "leaked"}
        lookup = AllowListedEnvLookup(
            names=BuildkiteProvider.env_allowed_names,
            prefixes=BuildkiteProvider.env_allowed_prefixes,
            source=env.get,
        )
        BuildkiteProvider(engine, runner, env_lookup=lookup).setup_environment(
            _buildkite_config(make_config, org_slug="acme", api_token="$SECRET_THING")
        )
        assert engine.logins[0][2] == "$SECRET_THING"

    def test_token_from_buildkite_api_token(self, engine, runner, make_config) -> None:
        env = {"BUILDKITE_API_TOKEN": "ambient-token"}
        lookup = AllowListedEnvLookup(
            names=BuildkiteProvider.env_allowed_names, source=env.get
        )
        BuildkiteProvider(engine, runner, env_lookup=lookup).setup_environment(
            _buildkite_config(make_config, org_slug="acme")
        )
        assert engine.logins[0][2] == "ambient-token"

    def test_api_token_required(self, engine, runner, make_config) -> None:
        lookup = AllowListedEnvLookup(
            names=BuildkiteProvider.env_allowed_names, source={}.get
        )
        with pytest.raises(ConfigurationException) as exc_info:
            BuildkiteProvider(engine, runner, env_lookup=lookup).setup_environment(
                _buildkite_config(make_config, org_slug="acme")
            )
        assert exc_info.value.details["parameter"] == "buildkite.api-token"
        assert any("Write Packages" in hint for hint in exc_info.value.hints)

    def test_oidc_login(self, engine, runner, make_config) -> None:
        runner.script(["buildkite-agent", "oidc"], stdout="oidc-jwt\n")
        config = _buildkite_config(
            make_config, org_slug="acme", auth_method=BuildkiteAuthMethod.OIDC
        )

        BuildkiteProvider(engine, runner).setup_environment(config)

        assert runner.called("buildkite-agent") == [
            (
                "buildkite-agent", "oidc", "request-token",
                "--audience", "https://packages.buildkite.com/acme/my-app",
                "--lifetime", "300",
            )
        ]
        assert engine.logins[0][1:] == ("buildkite", "oidc-jwt")

    def test_oidc_failure(self, engine, runner, make_config) -> None:
        runner.script(["buildkite-agent", "oidc"], returncode=1, stderr="policy denied")
        with pytest.raises(AuthenticationException, match="policy denied"):
            BuildkiteProvider(engine, runner).setup_environment(
                _buildkite_config(
                    make_config, org_slug="acme", auth_method=BuildkiteAuthMethod.OIDC
                )
            )

    def test_oidc_requires_agent(self, engine, make_config) -> None:
        with pytest.raises(CommandNotFoundError):
            BuildkiteProvider(engine, FakeRunner(missing=["buildkite-agent"])).setup_environment(
                _buildkite_config(
                    make_config, org_slug="acme", auth_method=BuildkiteAuthMethod.OIDC
                )
            )

    def test_custom_fallback_tag(self, engine, runner, make_config) -> None:
        config = _buildkite_config(make_config, fallback_tag="main")
        assert BuildkiteProvider(engine, runner).fallback_tag(config) == "main"
