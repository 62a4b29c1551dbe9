"""Docker image cache for CI pipelines backed by remote container registries."""

__version__ = "1.0.0"
