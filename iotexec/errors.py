"""Error types raised by iotexec modules.

Each error carries the `ExecStatus` the dispatcher reports for it.
"""

from iotexec.models import ExecStatus


class IotExecError(Exception):
    """Base class for per-message failures."""

    status = ExecStatus.INVALID_ARGUMENT


class InvalidArgument(IotExecError):
    """Null or malformed internal call."""

    status = ExecStatus.INVALID_ARGUMENT


class MessageTooLarge(IotExecError):
    """Header plus body exceed the message size bound."""

    status = ExecStatus.MESSAGE_TOO_LARGE


class PropertyMissingOrMalformed(IotExecError):
    """A header property could not be extracted."""

    status = ExecStatus.PROPERTY_MISSING_OR_MALFORMED


class PropertyNotFound(PropertyMissingOrMalformed):
    """The header has no usable entry for the requested property."""


class PropertyTooLong(PropertyMissingOrMalformed):
    """The property value does not fit the destination capacity."""


class StreamUnavailable(IotExecError):
    """The command's output stream could not be obtained."""

    status = ExecStatus.STREAM_UNAVAILABLE


class NotSupported(IotExecError):
    """The command subprocess could not be started."""

    status = ExecStatus.NOT_SUPPORTED


class TransportError(IotExecError):
    """Failure reported by the message transport."""

    status = ExecStatus.TRANSPORT_ERROR


class ReceiveTimeout(TransportError):
    """No message arrived within the receive timeout."""

    status = ExecStatus.IDLE
