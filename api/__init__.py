"""Vendor API session"""

from .client import ApiClient

__all__ = ["ApiClient"]
