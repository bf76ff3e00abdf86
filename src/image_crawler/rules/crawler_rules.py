"""
Image Crawler Rules - Restricts crawling to URLs under a scope prefix.
"""

from typing import Any

from .base import CrawlerRules


class ImageCrawlerRules(CrawlerRules):
    """
    Crawl-level rules.

    A URL is in scope if it starts with the scope string, compared
    case-insensitively. The scope is a plain prefix, so
    "https://example.com/" does not cover "https://example.com:443/".
    """

    def __init__(self, scope: str):
        super().__init__()
        if not scope:
            raise ValueError("scope must be a non-empty URL prefix")
        self._scope = scope
        self._scope_lower = scope.lower()

    @property
    def scope(self) -> str:
        return self._scope

    def _matches(self, url: str) -> bool:
        return url.lower().startswith(self._scope_lower)

    def is_valid_page(self, document: Any) -> bool:
        # Hook for content-based page filtering
        return document is not None
