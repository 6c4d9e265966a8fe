"""Вспомогательные утилиты."""

from .files import write_file
from .sanitizer import mask_headers, mask_sensitive_data, mask_url

__all__ = [
    "write_file",
    "mask_headers",
    "mask_sensitive_data",
    "mask_url",
]
