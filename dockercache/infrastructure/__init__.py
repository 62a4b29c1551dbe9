"""Infrastructure: command execution, docker engine, registry providers."""
