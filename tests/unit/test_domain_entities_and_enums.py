"""Tests for domain entities (references, run result) and enums."""

import pytest

from dockercache.domain.entities import (
    CacheConfig,
    CacheRunResult,
    LocalImageReferences,
    keyed_tag,
)
from dockercache.domain.enums import BuildkiteAuthMethod, CacheStrategy, ProviderType


def test_enum_values() -> None:
    assert ProviderType.values() == ["ecr", "acr", "gar", "artifactory", "buildkite"]
    assert CacheStrategy.values() == ["artifact", "build", "hybrid"]
    assert BuildkiteAuthMethod("oidc") is BuildkiteAuthMethod.OIDC


def test_cache_config_is_frozen(make_config) -> None:
    config = make_config()
    with pytest.raises(AttributeError):
        config.image = "other"  # type: ignore[misc]


def test_cache_config_defaults() -> None:
    config = CacheConfig(provider=ProviderType.ACR, image="my-app")
    assert config.strategy is CacheStrategy.HYBRID
    assert config.tag == "cache"
    assert config.gar.region == "us"


def test_local_references(make_config) -> None:
    config = make_config(tag="build")
    refs = LocalImageReferences.for_run(config, "abc")
    assert keyed_tag(config, "abc") == "build-abc"
    assert refs.keyed == "my-app:build-abc"
    assert refs.fallback == "my-app:build"


def test_run_result_image_and_tag_for_namespaced_image() -> None:
    result = CacheRunResult(
        image_ref="team/my-app:cache-abc",
        cache_key="abc",
        strategy=CacheStrategy.BUILD,
        export_env_variable="IMG",
    )
    assert result.image == "team/my-app"
    assert result.tag == "cache-abc"
    assert result.exit_code == 0


def test_run_result_env_for_artifact_has_no_cache_from() -> None:
    result = CacheRunResult(
        image_ref="my-app:cache-abc",
        cache_key="abc",
        strategy=CacheStrategy.ARTIFACT,
        export_env_variable="IMG",
        cache_hit=True,
    )
    env = result.as_env()
    assert env["BUILDKITE_PLUGIN_DOCKER_CACHE_HIT"] == "true"
    assert "BUILDKITE_PLUGIN_DOCKER_CACHE_FROM" not in env


def test_run_result_save_error_sets_exit_code() -> None:
    result = CacheRunResult(
        image_ref="my-app:cache-abc",
        cache_key="abc",
        strategy=CacheStrategy.HYBRID,
        export_env_variable="IMG",
        cache_from="reg/my-app:latest",
        save_error="push denied",
    )
    assert result.exit_code == 1
    assert result.as_env()["BUILDKITE_PLUGIN_DOCKER_CACHE_FROM"] == "reg/my-app:latest"
