"""Core constants: environment names, defaults, and shared literal values.

Single source of truth for the plugin's environment variable surface and the
tags used when naming cache images.
"""

# Prefix for every plugin configuration variable (nested keys are flattened)
ENV_PREFIX = "BUILDKITE_PLUGIN_DOCKER_CACHE_"

# Ambient CI variables
ENV_COMMIT = "BUILDKITE_COMMIT"
ENV_ORGANIZATION_SLUG = "BUILDKITE_ORGANIZATION_SLUG"
ENV_BUILDKITE_API_TOKEN = "BUILDKITE_API_TOKEN"

# Exported output variables
ENV_CACHE_HIT = f"{ENV_PREFIX}HIT"
ENV_CACHE_FROM = f"{ENV_PREFIX}FROM"
ENV_CACHE_KEY = f"{ENV_PREFIX}KEY"
ENV_EXPORT_IMAGE = f"{ENV_PREFIX}EXPORT_IMAGE"
ENV_EXPORT_TAG = f"{ENV_PREFIX}EXPORT_TAG"
DEFAULT_EXPORT_ENV_VARIABLE = "BUILDKITE_PLUGIN_DOCKER_IMAGE"

# Tags
DEFAULT_CACHE_TAG = "cache"
DEFAULT_FALLBACK_TAG = "latest"
TAG_KEY_SEP = "-"

# Cache key inputs, checked in this order when no explicit key is given
DEPENDENCY_MANIFESTS = (
    "package.json",
    "yarn.lock",
    "requirements.txt",
    "Gemfile.lock",
    "composer.lock",
    "go.mod",
)
DEFAULT_DOCKERFILE = "Dockerfile"
DEFAULT_CONTEXT = "."
DEFAULT_MAX_AGE_DAYS = 30

# Registry specifics
ECR_DEFAULT_REGION = "us-east-1"
ECR_LOGIN_USERNAME = "AWS"
ACR_TOKEN_USERNAME = "00000000-0000-0000-0000-000000000000"
GAR_DEFAULT_REGION = "us"
GAR_HOST_SUFFIX = ".pkg.dev"
GCR_HOST_SUFFIX = ".gcr.io"
BUILDKITE_PACKAGES_HOST = "packages.buildkite.com"
BUILDKITE_LOGIN_USERNAME = "buildkite"
BUILDKITE_OIDC_LIFETIME_SECONDS = 300
