"""UI service layer for Qt-dependent helpers.

Re-exports UI services that depend on Qt.
"""

from .cover_loader import CoverLoader

__all__ = [
    "CoverLoader",
]
