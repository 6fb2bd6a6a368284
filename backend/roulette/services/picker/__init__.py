"""Random picker module."""

from .service import Picker

__all__ = ["Picker"]
