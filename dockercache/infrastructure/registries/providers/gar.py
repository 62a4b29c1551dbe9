"""Google Artifact Registry / Container Registry provider.

region is either a short location ('us', 'eu', 'asia'), which targets the
Container Registry host '<region>.gcr.io', or a full Artifact Registry host
ending in '.pkg.dev', used verbatim. Only the Artifact Registry form needs
(and supports) explicit repository creation.
"""

from __future__ import annotations

from dockercache.core.constants import GAR_HOST_SUFFIX, GCR_HOST_SUFFIX
from dockercache.domain.entities import CacheConfig, ProviderIdentity
from dockercache.domain.enums import ProviderType
from dockercache.domain.exceptions import AuthenticationException, ConfigurationException
from dockercache.domain.value_objects import GcpProjectId
from dockercache.infrastructure.registries.base import RegistryProvider
from dockercache.shared.telemetry.logging import get_logger, log_success

logger = get_logger(__name__)

_ARTIFACT_HOST_TAIL = "-docker" + GAR_HOST_SUFFIX


def registry_host_for(region: str) -> str:
    """Registry host for a configured region or host."""
    if region.endswith(GAR_HOST_SUFFIX):
        return region
    return f"{region}{GCR_HOST_SUFFIX}"


def is_artifact_registry(host: str) -> bool:
    return host.endswith(GAR_HOST_SUFFIX)


def artifact_registry_location(host: str) -> str:
    """'europe-west10-docker.pkg.dev' -> 'europe-west10'."""
    if host.endswith(_ARTIFACT_HOST_TAIL):
        return host[: -len(_ARTIFACT_HOST_TAIL)]
    return host[: -len(GAR_HOST_SUFFIX)]


class GarProvider(RegistryProvider):
    """GAR/GCR: '<host>/<project>/<repository>/<image>:<suffix>'."""

    provider_type = ProviderType.GAR
    display_name = "GAR"
    required_commands = ("docker", "gcloud")

    def setup_environment(self, config: CacheConfig) -> ProviderIdentity:
        """Validate project, resolve host, and configure docker credentials.

        Raises:
            ConfigurationException: Project missing or malformed.
            AuthenticationException: gcloud auth configure-docker failed.
        """
        self._require_commands()
        gar = config.gar
        project = self._require(gar.project, "gar.project", "GAR project")
        try:
            GcpProjectId(project)
        except ValueError as e:
            raise ConfigurationException(str(e), parameter="gar.project") from e

        logger.info("Using GAR project: %s", project)
        logger.info("Using GAR region: %s", gar.region)
        host = registry_host_for(gar.region)

        logger.info("Authenticating with registry: %s", host)
        result = self._runner.run(["gcloud", "auth", "configure-docker", host, "--quiet"])
        if not result.ok:
            raise AuthenticationException(
                self.provider_type.value,
                f"Failed to authenticate with {host}: {result.stderr.strip()}",
                [
                    "Ensure gcloud is authenticated (gcloud auth login or a service account) "
                    "with Artifact Registry Writer or Storage Admin on the project",
                ],
            )
        log_success(logger, "Successfully authenticated with %s", host)

        repository = gar.repository or config.image
        # Domain-scoped projects use '/' in image paths ('example.com/my-proj').
        project_path = project.replace(":", "/")
        return ProviderIdentity(
            registry=host,
            namespace=f"{project_path}/{repository}",
            region=gar.region,
            project=project,
            repository=repository,
        )

    def ensure_repository(
        self, config: CacheConfig, identity: ProviderIdentity
    ) -> None:
        """Create the Artifact Registry repository if missing.

        Container Registry hosts are skipped. A failed create is only a
        warning: the repository may exist under a permission we cannot read.
        """
        if not is_artifact_registry(identity.registry):
            logger.debug("Container Registry host %s needs no repository", identity.registry)
            return
        repository = identity.repository or config.image
        location = artifact_registry_location(identity.registry)
        logger.info("Ensuring GAR repository exists: %s", repository)
        scope = [f"--location={location}", f"--project={identity.project}"]
        describe = self._runner.run(
            ["gcloud", "artifacts", "repositories", "describe", repository, *scope]
        )
        if describe.ok:
            return
        logger.info("Creating GAR repository: %s", repository)
        create = self._runner.run(
            [
                "gcloud", "artifacts", "repositories", "create", repository,
                "--repository-format=docker", *scope,
            ]
        )
        if create.ok:
            log_success(logger, "GAR repository created successfully")
        else:
            logger.warning(
                "Failed to create GAR repository - it may already exist or you may lack permissions"
            )
