"""Network transport for credential downloads."""

from .fetcher import RemoteFetcher

__all__ = ["RemoteFetcher"]
