"""Protocol definitions for pluggable symbol sources."""

from .resolver import Resolver

__all__ = ["Resolver"]
