"""
Headers Module - Black Box Interface

Purpose: Read properties from inbound headers and compose reply headers
Interface: HeaderProperties, get_property(), build_response_headers()
Hidden: Header wire format, size bounds, degrade-on-overflow rules

Can be replaced with a structured header codec (JSON, protobuf) as long as
the key:value wire format is kept at the transport boundary.
"""

from .properties import HeaderProperties, get_property
from .response import ResponseHeaders, build_response_headers

__all__ = ["HeaderProperties", "ResponseHeaders", "build_response_headers", "get_property"]
