"""Format-specific extractors.

Importing this package registers one Extractor per known format; look them
up with get_extractor().
"""

from .base import Extractor, get_extractor
from .kev import KevExtractor
from .snf import SnfExtractor

__all__ = [
    "Extractor",
    "KevExtractor",
    "SnfExtractor",
    "get_extractor",
]
