# Error types shared by the engine, the parser and the CLI


class InvariantViolation(RuntimeError):
    """A transition precondition failed; the job table can no longer be trusted."""


class WorkloadError(ValueError):
    """A single workload line could not be parsed."""


class ConfigError(ValueError):
    """Bad runtime configuration (paths, quantum)."""
