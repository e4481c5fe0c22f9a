"""
Command executor.

Runs a command line through a shell and hands its standard output to the
transport, which relays it as a device-to-cloud reply. The executor never
buffers the output itself; memory stays bounded by the transport's read
window regardless of how much the command prints.
"""

import logging
import os
import signal
import subprocess
from threading import Timer
from typing import Optional

from iotexec.errors import InvalidArgument, NotSupported, StreamUnavailable
from iotexec.modules.headers.response import build_response_headers
from iotexec.modules.transport.interfaces import Transport

logger = logging.getLogger(__name__)


class CommandExecutor:
    """Executes one command at a time and streams its output."""

    def __init__(
        self,
        transport: Transport,
        shell: str = "/bin/sh",
        timeout: Optional[float] = None,
        verbose: bool = False,
    ):
        """
        Initialize command executor.

        Args:
            transport: Transport used to publish the command output
            shell: Shell executable used to interpret the command line
            timeout: Seconds after which a running command is killed.
                None (the default) lets commands run indefinitely.
            verbose: Log each processed command
        """
        self.transport = transport
        self.shell = shell
        self.timeout = timeout
        self.verbose = verbose
        self._process: Optional[subprocess.Popen] = None

    def execute(self, command: str, correlation_id: Optional[str] = None) -> None:
        """
        Execute a command and stream its output as a reply.

        Args:
            command: Command line to run through the shell
            correlation_id: Inbound message id to echo on the reply

        Raises:
            InvalidArgument: command is empty
            NotSupported: the subprocess could not be started
            StreamUnavailable: the subprocess output could not be read
            TransportError: as raised by the transport's stream()
        """
        if not command:
            raise InvalidArgument("command is empty")

        if self.verbose:
            logger.info(f"Processing Command: {command}")
            if correlation_id is not None:
                logger.info(f"MessageID: {correlation_id}")

        headers = build_response_headers(correlation_id)

        try:
            process = subprocess.Popen(
                command,
                shell=True,
                executable=self.shell,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            raise NotSupported(f"could not start command: {e}") from e

        self._process = process
        timer = None
        try:
            if process.stdout is None or process.stdout.closed:
                raise StreamUnavailable("command output stream is unavailable")

            if self.timeout is not None and self.timeout > 0:
                timer = Timer(self.timeout, self._kill, args=(process,))
                timer.daemon = True
                timer.start()

            self.transport.stream(headers, process.stdout)
        finally:
            if timer is not None:
                timer.cancel()
            self._process = None
            self._release(process)

    def terminate(self) -> None:
        """
        Kill the in-flight command, if any, so its output stream ends.

        Safe to call from a signal handler: it does not log.
        """
        process = self._process
        if process is not None:
            self._kill_group(process)

    def _kill(self, process: subprocess.Popen) -> None:
        logger.warning(f"Command timed out after {self.timeout}s, killing pid {process.pid}")
        if not self._kill_group(process):
            logger.debug(f"Process {process.pid} already exited")

    @staticmethod
    def _kill_group(process: subprocess.Popen) -> bool:
        """SIGKILL the command's process group; the shell and its children share it."""
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return False
        return True

    @staticmethod
    def _release(process: subprocess.Popen) -> None:
        """Close the output pipe and reap the process."""
        if process.stdout is not None:
            process.stdout.close()
        return_code = process.wait()
        logger.debug(f"Command exited with status {return_code}")
