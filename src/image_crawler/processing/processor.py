"""
Image Processor - Finds images on a crawled page and downloads them.

Images can be referenced by <img src> or linked with <a href>, so both are
checked. Files are stored under:

    <destination_root>/<page host>/<page path segments>/<image filename>

Existing files are never overwritten.
"""

import io
import logging
import posixpath
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

from PIL import Image, UnidentifiedImageError

from ..rules import ProcessorRules
from .fetcher import FetchConfig, FetchError, HTTPFetcher, MalformedURLError
from .links import LinkExtractor, to_absolute_url


class CrawlerProcessor(ABC):
    """
    Per-page side effect run by the crawler.

    Implementations must contain their own failures; anything raised is
    logged by the crawler and does not stop the page's links being followed.
    """

    @abstractmethod
    def process(self, url: str, document: Any) -> None:
        pass


class ImageProcessor(CrawlerProcessor):
    """Downloads images that pass the processor rules."""

    def __init__(self, rules: ProcessorRules, destination_root: str,
                 fetcher: Optional[HTTPFetcher] = None,
                 fetch_config: Optional[FetchConfig] = None):
        self.rules = rules
        self.destination_root = Path(destination_root)
        self.fetcher = fetcher or HTTPFetcher(fetch_config)
        self.link_extractor = LinkExtractor()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'pages_processed': 0,
            'images_downloaded': 0,
            'images_existing': 0,
            'images_rejected': 0,
            'errors': 0,
        }
        self.stats_lock = threading.Lock()

    def process(self, url: str, document: Any) -> None:
        if not url or document is None:
            return

        self.logger.debug(f"Process: {url}")
        with self.stats_lock:
            self.stats['pages_processed'] += 1

        folder = self.destination_folder(url)

        for src in self.link_extractor.image_sources(document):
            self._handle_reference(src, url, folder)

        for href in self.link_extractor.hrefs(document):
            self._handle_reference(href, url, folder)

    def destination_folder(self, page_url: str) -> Path:
        """Mirror the page URL's host and path onto the destination root."""
        parsed = urlsplit(page_url)
        host = parsed.netloc.replace(':', '_')
        segments = [s for s in parsed.path.split('/') if s not in ('', '.', '..')]
        return self.destination_root.joinpath(host, *segments)

    def _handle_reference(self, ref: str, page_url: str, folder: Path) -> None:
        try:
            image_url = to_absolute_url(ref, page_url)
        except MalformedURLError as e:
            self.logger.error(str(e))
            self._count('errors')
            return

        if not self.rules.is_valid_uri(image_url):
            return

        self._download_image(image_url, folder)

    def _download_image(self, image_url: str, folder: Path) -> None:
        self.logger.debug(f"Download image: {image_url}")

        try:
            data = self.fetcher.fetch_bytes(image_url)

            with Image.open(io.BytesIO(data)) as image:
                if not self.rules.is_valid(image):
                    self.logger.debug(
                        f"Rejected {image_url} ({image.width}x{image.height})"
                    )
                    self._count('images_rejected')
                    return

            filename = posixpath.basename(urlsplit(image_url).path)
            if not filename:
                return

            folder.mkdir(parents=True, exist_ok=True)
            full_path = folder / filename

            try:
                with open(full_path, 'xb') as f:
                    f.write(data)
            except FileExistsError:
                self.logger.debug(f"Already exists: {full_path}")
                self._count('images_existing')
                return

            self.logger.info(f"Saved {image_url} -> {full_path}")
            self._count('images_downloaded')

        except FetchError as e:
            self.logger.error(f"Failed to download {image_url}: {e}")
            self._count('errors')
        except UnidentifiedImageError as e:
            self.logger.error(f"Not a decodable image {image_url}: {e}")
            self._count('errors')
        except Image.DecompressionBombError as e:
            self.logger.error(f"Image too large to decode {image_url}: {e}")
            self._count('errors')
        except OSError as e:
            self.logger.error(f"Failed to store {image_url}: {e}")
            self._count('errors')

    def _count(self, key: str) -> None:
        with self.stats_lock:
            self.stats[key] += 1

    def get_stats(self) -> dict:
        with self.stats_lock:
            return self.stats.copy()

    def close(self):
        self.fetcher.close()
