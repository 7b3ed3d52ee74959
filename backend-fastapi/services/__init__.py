# backend-fastapi/services/__init__.py
"""
Services module initialization
Contains services that sit between the import pipeline and its callers
"""

from .password_entry_service import PasswordEntryService, PasswordResult

__all__ = [
    'PasswordEntryService',
    'PasswordResult'
]
