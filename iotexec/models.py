"""
iotexec shared data models.

These models define the structure of the data passed between
components in the iotexec service.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

# Limits

MAX_MESSAGE_LENGTH = 4096
"""Upper bound (exclusive) on header length + body length."""

MAX_PENDING_MESSAGES = 10
"""Pending messages the transport may buffer while a command runs."""

MAX_CORRELATION_ID_LENGTH = 63
"""Longest messageId that is carried over as a correlation id."""


# Enums


class ExecStatus(str, Enum):
    """Outcome of one dispatch cycle."""

    OK = "ok"
    IDLE = "idle"
    RECEIVE_FAILED = "receive_failed"
    INVALID_ARGUMENT = "invalid_argument"
    MESSAGE_TOO_LARGE = "message_too_large"
    PROPERTY_MISSING_OR_MALFORMED = "property_missing_or_malformed"
    STREAM_UNAVAILABLE = "stream_unavailable"
    NOT_SUPPORTED = "not_supported"
    TRANSPORT_ERROR = "transport_error"


# Messages


@dataclass(frozen=True)
class InboundMessage:
    """A received cloud-to-device message. Consumed by one dispatch cycle."""

    header: Optional[bytes]
    body: Optional[bytes]

    @property
    def header_length(self) -> int:
        return len(self.header) if self.header is not None else 0

    @property
    def body_length(self) -> int:
        return len(self.body) if self.body is not None else 0


class MessageEvent(BaseModel):
    """Payload of a `message` event on the receiver stream."""

    header: Optional[str] = Field(None, description="Newline separated key:value header blob")
    body: str = Field(..., description="Command line to execute")

    def to_inbound(self) -> InboundMessage:
        return InboundMessage(
            header=self.header.encode("utf-8") if self.header is not None else None,
            body=self.body.encode("utf-8"),
        )
