"""
Adapters - External implementations of ports

This package contains implementations of the core ports:
- memory.py: In-memory cache tier
- filesystem.py: Filesystem-based durable cache tier
- github.py: GitHub brand catalog fetcher
"""
from .memory import MemoryStore
from .filesystem import FilesystemStore
from .github import GitHubFetcher

__all__ = [
    "MemoryStore",
    "FilesystemStore",
    "GitHubFetcher",
]
