"""Service-wide state shared by the dispatcher and the entry point."""

import logging
from dataclasses import dataclass, field
from threading import Event
from typing import Callable, List

from iotexec.modules.transport.interfaces import Transport

logger = logging.getLogger(__name__)


@dataclass
class ServiceContext:
    """
    Handles constructed once at startup and torn down exactly once.

    The shutdown event is the cancellation token: it is set from signal
    handlers and observed by the dispatch loop between cycles. Shutdown
    hooks run when shutdown is requested, so an in-flight command can be
    ended instead of waited on.
    """

    transport: Transport
    verbose: bool = False
    shutdown: Event = field(default_factory=Event)
    terminated_by_signal: bool = False
    _shutdown_hooks: List[Callable[[], None]] = field(default_factory=list, init=False, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def shutdown_requested(self) -> bool:
        return self.shutdown.is_set()

    @property
    def closed(self) -> bool:
        return self._closed

    def add_shutdown_hook(self, hook: Callable[[], None]) -> None:
        """Register a callable run on shutdown. Hooks may run in a signal handler and must not log."""
        self._shutdown_hooks.append(hook)

    def request_shutdown(self, by_signal: bool = False) -> None:
        if by_signal:
            self.terminated_by_signal = True
        self.shutdown.set()
        for hook in self._shutdown_hooks:
            hook()

    def close(self) -> None:
        """Close the transport. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self.shutdown.set()
        self.transport.close()
        logger.debug("Service context closed")
