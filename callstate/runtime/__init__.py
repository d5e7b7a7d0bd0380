"""
Runtime helpers for driving listeners from recorded notifications.
"""

from .replay import replay

__all__ = ["replay"]
