from .base import BaseRule

__all__ = ["BaseRule"]
