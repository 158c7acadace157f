"""Shared Pydantic schema base for provider models."""

from .base import BaseSchema

__all__ = ["BaseSchema"]
