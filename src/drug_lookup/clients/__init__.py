"""Clients for external services."""

from .terminology_client import TerminologyClient

__all__ = [
    "TerminologyClient",
]
