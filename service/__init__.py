"""
Parse service layer: result caching, file handling and text summaries.
"""

from service.cache_manager import CacheManager, content_hash
from service.parse_service import ParseService
from service.summary import build_summary

__all__ = [
    "CacheManager",
    "ParseService",
    "build_summary",
    "content_hash",
]
