"""
Command dispatcher.

The dispatch loop alternates between two states: waiting for a message
(blocking receive) and dispatching it (validate, extract the message id,
execute). Every per-message failure is local to that message; the loop
always returns to waiting. Commands run strictly one at a time and no
message is received while a command executes.
"""

import logging
from typing import Optional

from iotexec.errors import (
    IotExecError,
    MessageTooLarge,
    PropertyMissingOrMalformed,
    ReceiveTimeout,
    TransportError,
)
from iotexec.models import MAX_MESSAGE_LENGTH, ExecStatus, InboundMessage
from iotexec.modules.dispatcher.context import ServiceContext
from iotexec.modules.executor.command_executor import CommandExecutor
from iotexec.modules.headers.properties import get_property

logger = logging.getLogger(__name__)

MESSAGE_ID = "messageId"


class CommandDispatcher:
    """Receives command messages and hands them to the executor."""

    def __init__(
        self,
        context: ServiceContext,
        executor: CommandExecutor,
        max_message_length: int = MAX_MESSAGE_LENGTH,
        poll_interval: Optional[float] = 1.0,
    ):
        """
        Initialize dispatcher.

        Args:
            context: Service context holding the transport and flags
            executor: Executor that runs each command
            max_message_length: Exclusive bound on header + body length
            poll_interval: Receive timeout; bounds how long a shutdown
                request waits to be observed while idle
        """
        self.context = context
        self.executor = executor
        self.max_message_length = max_message_length
        self.poll_interval = poll_interval

    def run(self) -> None:
        """
        Main dispatch loop.

        Runs until shutdown is requested on the service context. A command
        in flight when shutdown is requested completes (and its subprocess
        is reaped) before the loop exits.
        """
        logger.info("Waiting for commands")

        while not self.context.shutdown_requested:
            try:
                self.process_message(timeout=self.poll_interval)
            except Exception as e:
                logger.error(f"Error processing message: {e}")

        logger.info("Dispatcher stopped")

    def process_message(self, timeout: Optional[float] = None) -> ExecStatus:
        """
        Wait for one message and process it.

        Returns:
            Status of the cycle. IDLE when no message arrived in time.
        """
        try:
            message = self.context.transport.receive(timeout=timeout)
        except ReceiveTimeout:
            return ExecStatus.IDLE
        except TransportError as e:
            self._report(ExecStatus.RECEIVE_FAILED, e)
            return ExecStatus.RECEIVE_FAILED

        return self.dispatch(message)

    def dispatch(self, message: InboundMessage) -> ExecStatus:
        """Validate a received message and execute its body as a command."""
        try:
            self._dispatch(message)
        except IotExecError as e:
            self._report(e.status, e)
            return e.status

        return ExecStatus.OK

    def _dispatch(self, message: InboundMessage) -> None:
        if self.context.verbose:
            logger.info(
                f"header ({message.header_length}): {message.header!r}, "
                f"body ({message.body_length}): {message.body!r}"
            )

        total = message.header_length + message.body_length
        if message.body is None or total >= self.max_message_length:
            raise MessageTooLarge(
                f"message of {total} bytes exceeds limit of {self.max_message_length - 1}"
            )

        correlation_id = self._message_id(message)

        command = self._command_text(message.body)
        self.executor.execute(command, correlation_id)

    def _message_id(self, message: InboundMessage) -> Optional[str]:
        """Extract the inbound messageId; absent or unusable means None."""
        if message.header is None:
            return None

        try:
            message_id = get_property(message.header, MESSAGE_ID)
        except PropertyMissingOrMalformed as e:
            logger.debug(f"No correlation id: {e}")
            return None

        if self.context.verbose:
            logger.info(f"messageId = {message_id}")
        return message_id

    @staticmethod
    def _command_text(body: bytes) -> str:
        # NUL terminates the command
        return body.split(b"\0", 1)[0].decode("utf-8", errors="surrogateescape")

    def _report(self, status: ExecStatus, error: Exception) -> None:
        if self.context.verbose:
            logger.warning(f"ProcessMessage: {status.value}: {error}")
        else:
            logger.debug(f"ProcessMessage: {status.value}: {error}")
