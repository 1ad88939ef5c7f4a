"""
Domain Interfaces (Ports)
"""

from .repositories import LedgerRepository

__all__ = [
    "LedgerRepository",
]
