"""Domain-specific errors for hpglctl."""


class HpglctlError(Exception):
    """Base error for hpglctl."""


class ProfileValidationError(HpglctlError):
    """Raised when a profile file does not conform to schema or semantics."""


class ProfileLoadError(HpglctlError):
    """Raised when loading profile sources fails."""


class ProfileSelectionError(HpglctlError):
    """Raised when a requested plotter profile cannot be resolved."""


class JobValidationError(HpglctlError):
    """Raised when a job file cannot be read or does not describe a valid program."""


class TransportError(HpglctlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised when the serial port cannot be opened."""


class TransportSendError(TransportError):
    """Raised when writing to the plotter fails."""


class TransportTimeoutError(TransportError):
    """Raised when a write to the plotter times out."""
