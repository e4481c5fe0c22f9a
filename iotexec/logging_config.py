"""
Custom logging configuration to suppress transport keepalive logs
"""

import logging
from typing import Any, Dict


class KeepaliveFilter(logging.Filter):
    """Filter to suppress SSE keepalive logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out keepalive records from the transport loggers."""
        if record.name.startswith("iotexec.modules.transport"):
            if "keepalive" in record.getMessage().lower():
                return False
        return True


def get_logging_config(verbose: bool = False, level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with keepalive suppression."""
    service_level = "DEBUG" if verbose else level
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "keepalive_filter": {
                "()": KeepaliveFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["keepalive_filter"]
            }
        },
        "loggers": {
            "iotexec": {
                "handlers": ["default"],
                "level": service_level,
                "propagate": False
            },
            "urllib3": {
                "handlers": ["default"],
                "level": "DEBUG" if verbose else "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": level,
            "handlers": ["default"]
        }
    }
