"""Repository implementations for the infrastructure layer."""

from .user_directory import SqlUserDirectory

__all__ = ["SqlUserDirectory"]
