"""Configuration management."""

from .config import ReaderConfig

__all__ = ["ReaderConfig"]
