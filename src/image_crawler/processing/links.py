"""
Link Extraction - Pulls link references out of parsed HTML and resolves
them to absolute URLs.
"""

import logging
from typing import Iterator, List, Optional
from urllib.parse import urljoin, urlsplit, urlunsplit

from .fetcher import MalformedURLError


DEFAULT_SKIP_SCHEMES = [
    'mailto:', 'tel:', 'javascript:', 'data:',
    'ftp:', 'file:', 'about:'
]


def to_absolute_url(ref: str, base_url: str) -> str:
    """
    Convert a (possibly relative) reference to a canonical absolute URL.

    - Resolved against base_url
    - Scheme and host lowercased
    - Empty path becomes '/'
    - Fragment removed

    Raises:
        MalformedURLError: If the reference cannot be resolved
    """
    ref = ref.strip()
    try:
        absolute_url = urljoin(base_url, ref)
        parsed = urlsplit(absolute_url)
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise MalformedURLError(ref, f"Cannot resolve against {base_url}: {e}") from e

    if not parsed.scheme or not parsed.netloc:
        raise MalformedURLError(ref, f"Not an absolute URL after resolving against {base_url}")

    return urlunsplit((
        parsed.scheme.lower(),
        parsed.netloc.lower(),
        parsed.path or '/',
        parsed.query,
        ''
    ))


class LinkExtractor:
    """Extracts raw link references from a BeautifulSoup document."""

    def __init__(self, skip_schemes: Optional[List[str]] = None):
        self.skip_schemes = skip_schemes if skip_schemes is not None else DEFAULT_SKIP_SCHEMES
        self.logger = logging.getLogger(self.__class__.__name__)

    def hrefs(self, document) -> Iterator[str]:
        """Yield the href of every <a href="..."> tag."""
        return self._attribute_values(document, 'a', 'href')

    def image_sources(self, document) -> Iterator[str]:
        """Yield the src of every <img src="..."> tag."""
        return self._attribute_values(document, 'img', 'src')

    def _attribute_values(self, document, tag_name: str, attribute: str) -> Iterator[str]:
        for tag in document.find_all(tag_name, attrs={attribute: True}):
            value = tag.get(attribute)
            if not isinstance(value, str):
                continue

            value = value.strip()
            if not value or self._skipped(value):
                continue

            yield value

    def _skipped(self, ref: str) -> bool:
        lowered = ref.lower()
        return any(lowered.startswith(scheme) for scheme in self.skip_schemes)
