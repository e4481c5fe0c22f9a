"""
Dispatcher Module - Black Box Interface

Purpose: Receive command messages, validate them, and run them in order
Interface: CommandDispatcher.run(), process_message(), dispatch(); ServiceContext
Hidden: Size validation, correlation id extraction, failure reporting
"""

from .context import ServiceContext
from .dispatcher import CommandDispatcher

__all__ = ["CommandDispatcher", "ServiceContext"]
