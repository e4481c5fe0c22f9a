"""Transport interfaces following Black Box Design principles."""
from typing import BinaryIO, Optional, Protocol

from iotexec.models import InboundMessage


class Transport(Protocol):
    """Protocol for message transports - allows swappable implementations."""

    def create_receiver(self, topic: str, max_pending: int, max_message_bytes: int) -> None:
        """
        Subscribe to cloud-to-device messages on a topic.

        Args:
            topic: Receiver topic, e.g. "exec"
            max_pending: Messages buffered while the consumer is busy
            max_message_bytes: Largest message the receiver accepts

        Raises:
            TransportError: the receiver could not be created
        """
        ...

    def receive(self, timeout: Optional[float] = None) -> InboundMessage:
        """
        Block until a message is available.

        Raises:
            ReceiveTimeout: nothing arrived within `timeout`
            TransportError: receive failed
        """
        ...

    def stream(self, headers: str, handle: BinaryIO) -> None:
        """
        Read `handle` to end-of-stream and publish it as one
        device-to-cloud message tagged with `headers`.

        Raises:
            TransportError: publishing failed (possibly after partial send)
        """
        ...

    def close(self) -> None:
        """Release the connection. Safe to call more than once."""
        ...
