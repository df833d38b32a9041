"""Receptionist utilities."""

from .sanitize import MAX_ERROR_LENGTH, sanitize_error_message

__all__ = ["MAX_ERROR_LENGTH", "sanitize_error_message"]
