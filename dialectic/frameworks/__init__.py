"""Framework registry — persistent store of named frameworks."""
from .models import FrameworkRecord
from .registry import FrameworkRegistry

__all__ = [
    "FrameworkRecord",
    "FrameworkRegistry",
]
