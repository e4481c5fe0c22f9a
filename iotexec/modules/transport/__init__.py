"""
Transport Module - Black Box Interface

Purpose: Deliver cloud-to-device messages and publish device-to-cloud replies
Interface: create_receiver(), receive(), stream(), close()
Hidden: Connection handling, framing, pending-message buffering

Can be replaced with MQTT, AMQP, or any pub/sub client.
"""

from .interfaces import Transport
from .sse import SSETransport

__all__ = ["SSETransport", "Transport"]
