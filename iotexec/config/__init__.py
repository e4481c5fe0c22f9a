"""
Config Module - Black Box Interface

Purpose: Service configuration management
Interface: ConfigProvider, EnvConfigProvider
Hidden: Config sources, environment parsing, defaults
"""

from .provider import ConfigProvider, EnvConfigProvider, ExecConfig, TransportConfig

__all__ = ["ConfigProvider", "EnvConfigProvider", "ExecConfig", "TransportConfig"]
