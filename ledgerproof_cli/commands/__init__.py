"""
CLI Commands
"""

from . import inspect, verify

__all__ = ["inspect", "verify"]
