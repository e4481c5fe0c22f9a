"""
SSE transport - Server-Sent Events based message transport.

Cloud-to-device messages arrive as SSE events on a long-lived HTTP
connection serviced by a background listener thread. Device-to-cloud
replies are published with a chunked HTTP POST so command output is
relayed in bounded read windows rather than buffered whole.
"""

import logging
import queue
from threading import Event, Thread
from typing import BinaryIO, Iterator, Optional, Union

import requests
import sseclient
from pydantic import ValidationError

from iotexec.config.provider import TransportConfig
from iotexec.errors import ReceiveTimeout, TransportError
from iotexec.models import InboundMessage, MessageEvent

logger = logging.getLogger(__name__)

READ_WINDOW = 4096
"""Bytes read from the command output per chunk."""

_Pending = Union[InboundMessage, TransportError]


def iter_chunks(handle: BinaryIO, size: int = READ_WINDOW) -> Iterator[bytes]:
    """Yield chunks of at most `size` bytes from `handle` until end-of-stream."""
    read = getattr(handle, "read1", handle.read)
    while True:
        chunk = read(size)
        if not chunk:
            return
        yield chunk


class SSETransport:
    """Transport that receives over Server-Sent Events and replies over HTTP POST."""

    def __init__(self, config: TransportConfig, verbose: bool = False):
        """
        Initialize SSE transport.

        Args:
            config: Broker connection settings
            verbose: Log every received event
        """
        self.config = config
        self.verbose = verbose

        self.topic: Optional[str] = None
        self.max_message_bytes = 0

        self._queue: Optional["queue.Queue[_Pending]"] = None
        self._listener: Optional[Thread] = None
        self._response: Optional[requests.Response] = None
        self._stop = Event()
        self._closed = False

        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.token}",
                "X-Device-ID": config.device_id,
            }
        )

        # Security validation: Warn if using HTTP in production
        if config.api_url.startswith("http://") and config.verify_ssl:
            logger.warning("Using HTTP without TLS - this should only be used for local development!")

    @property
    def verify_setting(self) -> Union[str, bool]:
        return self.config.ca_cert_path if self.config.ca_cert_path else self.config.verify_ssl

    @property
    def topic_url(self) -> str:
        return f"{self.config.api_url}/devices/{self.config.device_id}/topics/{self.topic}"

    def create_receiver(self, topic: str, max_pending: int, max_message_bytes: int) -> None:
        if self._closed:
            raise TransportError("transport is closed")
        if self._listener is not None:
            raise TransportError(f"receiver already created for topic '{self.topic}'")
        if not topic or max_pending <= 0 or max_message_bytes <= 0:
            raise TransportError("invalid receiver parameters")

        self.topic = topic
        self.max_message_bytes = max_message_bytes
        self._queue = queue.Queue(maxsize=max_pending)

        self._listener = Thread(target=self._listen, name=f"sse-{topic}", daemon=True)
        self._listener.start()

        logger.info(f"Receiver created for topic '{topic}' (max pending: {max_pending})")

    def receive(self, timeout: Optional[float] = None) -> InboundMessage:
        if self._queue is None:
            raise TransportError("no receiver has been created")
        if self._closed:
            raise TransportError("transport is closed")

        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            raise ReceiveTimeout(f"no message within {timeout}s") from None

        if isinstance(item, TransportError):
            raise item

        return item

    def stream(self, headers: str, handle: BinaryIO) -> None:
        if self.topic is None:
            raise TransportError("no receiver has been created")

        try:
            response = self._session.post(
                f"{self.topic_url}/replies",
                params={"headers": headers},
                data=iter_chunks(handle),
                headers={"Content-Type": "application/octet-stream"},
                timeout=self.config.request_timeout,
                verify=self.verify_setting,
            )
        except requests.RequestException as e:
            raise TransportError(f"Failed to publish reply: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(f"Failed to publish reply: {response.status_code}")

        logger.debug(f"Reply published ({response.status_code})")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._stop.set()

        if self._response is not None:
            self._response.close()
        self._session.close()

        if self._listener is not None:
            self._listener.join(timeout=1.0)

        logger.info("Transport closed")

    def _listen(self) -> None:
        """Keep the SSE connection open until the transport is closed."""
        while not self._stop.is_set():
            try:
                self._connect_sse()
                if self._stop.is_set():
                    break
                raise TransportError("SSE stream ended")
            except Exception as e:
                if self._stop.is_set():
                    break
                logger.error(f"SSE connection error: {e}")
                self._offer(e if isinstance(e, TransportError) else TransportError(str(e)))
                logger.info(f"Reconnecting in {self.config.reconnect_delay} seconds...")
                self._stop.wait(self.config.reconnect_delay)

    def _connect_sse(self) -> None:
        """
        Connect to SSE endpoint and listen for messages.
        """
        url = f"{self.topic_url}/stream"
        logger.info(f"Connecting to SSE endpoint: {url}")

        response = self._session.get(url, stream=True, verify=self.verify_setting)
        if response.status_code != 200:
            response.close()
            raise TransportError(f"Failed to connect: {response.status_code}")

        self._response = response
        client = sseclient.SSEClient(response)

        logger.info("SSE connection established")

        for event in client.events():
            if self._stop.is_set():
                return
            self._handle_event(event)

    def _handle_event(self, event) -> None:
        if event.event == "connected":
            logger.info(f"Connected to server: {event.data}")

        elif event.event == "message":
            try:
                payload = MessageEvent.model_validate_json(event.data)
            except ValidationError as e:
                logger.error(f"Failed to parse message event: {e}")
                return

            message = payload.to_inbound()
            if self.verbose:
                logger.debug(f"Message event: {event.data}")

            size = message.header_length + message.body_length
            if size > self.max_message_bytes:
                logger.warning(f"Dropping {size} byte message (limit {self.max_message_bytes})")
                return

            if not self._offer(message):
                logger.warning("Pending message queue full, dropping message")

        elif event.event == "keepalive":
            logger.debug("Keepalive received")

    def _offer(self, item: _Pending) -> bool:
        try:
            self._queue.put_nowait(item)
        except queue.Full:
            return False
        return True
