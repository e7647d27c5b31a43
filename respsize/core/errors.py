class SizeSpecError(Exception):
    """Base class for every failure raised while resolving a size spec."""


class SizeValidationError(SizeSpecError, ValueError):
    """A size spec that cannot be resolved into pixels."""


class PipelineNonTerminationError(SizeSpecError, RuntimeError):
    """The scaling queue kept growing past the configured step limit."""

    def __init__(self, max_steps: int, pending: int):
        super().__init__(
            f"Scaling functions did not terminate after {max_steps} steps "
            f"({pending} still queued)"
        )
        self.max_steps = max_steps
        self.pending = pending


class UnknownFunctionError(SizeSpecError, KeyError):
    """Misuse of the scaling function registry."""

    def __str__(self):
        # KeyError quotes its message otherwise
        return str(self.args[0]) if self.args else ""


def fatal(log, message: str, exc_type=SizeValidationError):
    """Report ``message`` through ``log.error`` and abort with ``exc_type``."""
    log.error(message)
    raise exc_type(message)
