"""cmdsweep custom error types."""


class CmdsweepError(Exception):
    """Base exception for all cmdsweep errors."""


class ConfigurationError(CmdsweepError):
    """Raised for invalid configuration values."""


class ValueSpecError(CmdsweepError):
    """Raised when a variable definition or value list cannot be parsed."""

    def __init__(self, spec: str, message: str):
        self.spec = spec
        super().__init__(f"Invalid value spec {spec!r}: {message}")


class TemplateError(CmdsweepError):
    """Raised when a command template is missing or unusable."""


class ExecutableNotFoundError(CmdsweepError):
    """Raised when the wrapped CLI cannot be found on PATH."""

    def __init__(self, executable: str):
        self.executable = executable
        super().__init__(f"Executable {executable!r} not found on PATH")


class PollTimeoutError(CmdsweepError):
    """Raised when completion polling exceeds its attempt or time budget."""


class PollCancelledError(CmdsweepError):
    """Raised when completion polling is cancelled from outside."""
