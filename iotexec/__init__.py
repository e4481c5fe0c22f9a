"""
iotexec - Cloud-to-Device Command Execution Service

Receives cloud-to-device command messages, executes them through a shell,
and streams the command output back as a device-to-cloud reply message.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- headers: Header property extraction and reply header composition
- executor: Subprocess execution and output streaming
- dispatcher: Receive/validate/dispatch loop
- transport: Message transport (receive and stream primitives)
"""

__version__ = "0.1.0"
