"""Application layer: cache key generation, strategy engine, run use case."""
