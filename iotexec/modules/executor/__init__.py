"""
Executor Module - Black Box Interface

Purpose: Run cloud-to-device commands and stream their output
Interface: CommandExecutor.execute()
Hidden: Subprocess management, stream hand-off, resource release

Can be replaced with different execution mechanisms (containers, remote shells).
"""

from .command_executor import CommandExecutor

__all__ = ["CommandExecutor"]
