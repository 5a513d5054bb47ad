"""
缓存存储模块入口。
"""

from .fingerprint import build_request_fingerprint
from .request_cache import CacheEntry, RequestCache

__all__ = [
    "CacheEntry",
    "RequestCache",
    "build_request_fingerprint",
]
