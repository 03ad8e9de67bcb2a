"""sigbridge-specific exception types"""


class SignalBridgeException(BaseException):
    """Base class for sigbridge-specific exceptions"""


# -- Registration -------------------------------------------------------------


class UnsupportedSignalError(SignalBridgeException, ValueError):
    """Raised if a signal number is not representable or not controllable on
    this platform, e.g. ``SIGKILL`` or an out-of-range number."""


class InvalidSeverityError(SignalBridgeException, ValueError):
    """Raised upon an unrecognized log severity"""


# -- Disposition registry -----------------------------------------------------


class InvalidDispositionError(SignalBridgeException, ValueError):
    """Raised when restoring a disposition from a stale or foreign handle, or
    from a handle that was captured for another signal number."""


# -- Delivery -----------------------------------------------------------------


class DeliveryHandlerFault(SignalBridgeException):
    """Describes an exception that occurred *during* signal delivery, either
    in the logger sink or in the previous disposition.

    These are never raised into the interrupted frame; the bridge stores them
    and writes a short notice to stderr instead.
    """

    def __init__(self, signum: int, stage: str, cause: BaseException):
        self.signum = signum
        self.stage = stage
        self.cause = cause
        super().__init__(signum, stage, cause)

    def __str__(self) -> str:
        return (
            f"Failed handling signal {self.signum} during stage "
            f"'{self.stage}': {type(self.cause).__name__}: {self.cause}"
        )


# -- Configuration ------------------------------------------------------------


class ConfigValidationError(SignalBridgeException, ValueError):
    """Raised if a bridge configuration failed schema validation"""
