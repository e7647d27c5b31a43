"""Resolve flexible size objects ("320", "50%", "200X100", {"width": ..., "function": "cover"})
into concrete pixel sizes, and batch-resize images with them."""
from .core import *  # noqa: F401,F403
from .core import __all__

__version__ = "1.0.0"
