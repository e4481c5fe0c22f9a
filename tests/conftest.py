"""
Shared pytest fixtures for iotexec tests.

This module provides common fixtures including:
- RecordingTransport: In-memory transport that records published replies
- Service context and dispatcher builders
"""

import os
import sys
from collections import deque
from dataclasses import dataclass, field
from typing import BinaryIO, Iterable, List, Optional, Union
from unittest.mock import MagicMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from iotexec.errors import ReceiveTimeout, TransportError
from iotexec.models import InboundMessage
from iotexec.modules.dispatcher import CommandDispatcher, ServiceContext
from iotexec.modules.executor import CommandExecutor
from iotexec.modules.transport.sse import iter_chunks


# =============================================================================
# Transport Fake
# =============================================================================

@dataclass
class StreamCall:
    """Record of a reply published through the transport."""
    headers: str
    data: bytes
    chunk_sizes: List[int] = field(default_factory=list)
    handle: Optional[BinaryIO] = None


class RecordingTransport:
    """
    In-memory transport with scripted receives and recorded streams.

    Usage:
        def test_reply(recording_transport):
            recording_transport.push(InboundMessage(header=None, body=b"echo hi"))
            ...
            assert recording_transport.streams[0].data == b"hi\\n"
    """

    def __init__(self, messages: Iterable[Union[InboundMessage, Exception]] = ()):
        self.pending = deque(messages)
        self.streams: List[StreamCall] = []
        self.receivers: List[tuple] = []
        self.stream_error: Optional[TransportError] = None
        self.close_count = 0
        self.on_empty = None

    def push(self, *items: Union[InboundMessage, Exception]) -> "RecordingTransport":
        self.pending.extend(items)
        return self

    def create_receiver(self, topic: str, max_pending: int, max_message_bytes: int) -> None:
        self.receivers.append((topic, max_pending, max_message_bytes))

    def receive(self, timeout: Optional[float] = None) -> InboundMessage:
        if not self.pending:
            if self.on_empty is not None:
                self.on_empty()
            raise ReceiveTimeout("no message")

        item = self.pending.popleft()
        if isinstance(item, Exception):
            raise item
        return item

    def stream(self, headers: str, handle: BinaryIO) -> None:
        chunks = list(iter_chunks(handle))
        self.streams.append(
            StreamCall(
                headers=headers,
                data=b"".join(chunks),
                chunk_sizes=[len(c) for c in chunks],
                handle=handle,
            )
        )
        if self.stream_error is not None:
            raise self.stream_error

    def close(self) -> None:
        self.close_count += 1


@pytest.fixture
def recording_transport():
    """Fresh RecordingTransport per test."""
    return RecordingTransport()


@pytest.fixture
def service_context(recording_transport):
    """Verbose service context bound to the recording transport."""
    return ServiceContext(transport=recording_transport, verbose=True)


@pytest.fixture
def mock_executor():
    """Executor double; dispatch tests assert on its execute() calls."""
    return MagicMock(spec=CommandExecutor)


@pytest.fixture
def dispatcher(service_context, mock_executor):
    """Dispatcher with a mocked executor."""
    return CommandDispatcher(service_context, mock_executor, poll_interval=0)


@pytest.fixture
def live_dispatcher(service_context, recording_transport):
    """Dispatcher wired to a real executor that spawns /bin/sh."""
    executor = CommandExecutor(recording_transport, verbose=True)
    return CommandDispatcher(service_context, executor, poll_interval=0)


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Tests that spawn real subprocesses"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
