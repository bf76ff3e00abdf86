"""
Image Crawler - Worker pool that drains the frontier.
Each worker fetches a page, hands it to the processor and feeds the page's
links back into the frontier, so the crawl keeps itself going.
"""

import logging
import os
import threading
import time
from typing import List, Optional
from dataclasses import dataclass, field

from ..rules import CrawlerRules, ImageCrawlerRules, ImageProcessorRules
from ..processing.fetcher import FetchConfig, FetchError, HTTPFetcher, MalformedURLError
from ..processing.links import LinkExtractor, to_absolute_url
from ..processing.processor import CrawlerProcessor, ImageProcessor
from .frontier import Frontier


def _default_threads() -> int:
    return os.cpu_count() or 1


def _default_extensions() -> List[str]:
    return ['.png', '.jpg', '.jpeg', '.gif', '.bmp']


@dataclass
class CrawlerConfig:
    """Master configuration for the crawler."""
    # Crawl scope (URL prefix). None means "use the seed URL".
    scope: Optional[str] = None
    threads: int = field(default_factory=_default_threads)
    poll_interval: float = 1.0

    # Image processing
    destination_root: str = "data/images"
    allowed_extensions: List[str] = field(default_factory=_default_extensions)
    min_width: int = 300
    min_height: int = 300

    # HTTP
    fetch: FetchConfig = field(default_factory=FetchConfig)


class ImageCrawler:
    """
    Crawl engine.

    Worker threads start as soon as the crawler is created and block on
    the frontier until start() supplies a seed. There is no "finished"
    state: once no new URLs turn up, workers simply wait. Call close()
    (or leave the with-block) to release them.
    """

    def __init__(self, rules: CrawlerRules, processor: CrawlerProcessor, threads: int,
                 fetcher: Optional[HTTPFetcher] = None,
                 fetch_config: Optional[FetchConfig] = None,
                 poll_interval: float = 1.0):
        """
        Initialize crawler and start its workers.

        Args:
            rules: Rules validating URLs and fetched pages
            processor: Called with every valid page
            threads: Number of worker threads
            fetcher: Page fetcher (defaults to an HTTPFetcher)
            fetch_config: Configuration for the default fetcher
            poll_interval: How often idle workers check for close()
        """
        if threads < 1:
            raise ValueError("threads must be at least 1")

        self.rules = rules
        self.processor = processor
        self.num_workers = threads
        self.fetcher = fetcher or HTTPFetcher(fetch_config)
        self.frontier = Frontier(rules, poll_interval=poll_interval)
        self.link_extractor = LinkExtractor()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'pages_crawled': 0,
            'fetch_failures': 0,
            'pages_skipped': 0,
            'processor_errors': 0,
            'links_found': 0,
            'links_malformed': 0,
            'urls_admitted': 0,
        }
        self.stats_lock = threading.Lock()
        self.control_lock = threading.Lock()

        self.workers: List[threading.Thread] = []
        self.is_running = False
        self.start_time = None

        self._start_workers()

    @classmethod
    def from_config(cls, config: CrawlerConfig, seed_url: Optional[str] = None) -> 'ImageCrawler':
        """
        Build a crawler with image rules and processor from a configuration.

        Args:
            config: Crawler configuration
            seed_url: Used as scope when config.scope is not set
        """
        scope = config.scope
        if not scope and seed_url:
            try:
                scope = to_absolute_url(seed_url, seed_url)
            except MalformedURLError as e:
                raise ValueError(f"Invalid seed URL: {e}") from e
        if not scope:
            raise ValueError("A scope or seed URL is required")

        rules = ImageCrawlerRules(scope)
        processor_rules = ImageProcessorRules(
            config.allowed_extensions,
            min_width=config.min_width,
            min_height=config.min_height
        )

        fetcher = HTTPFetcher(config.fetch)
        processor = ImageProcessor(processor_rules, config.destination_root, fetcher=fetcher)

        return cls(rules, processor, config.threads,
                   fetcher=fetcher, poll_interval=config.poll_interval)

    def _start_workers(self):
        with self.control_lock:
            self.is_running = True
            self.start_time = time.time()

            for i in range(self.num_workers):
                worker = threading.Thread(
                    target=self._worker_loop,
                    name=f"Crawler-Worker-{i+1}",
                    daemon=True
                )
                worker.start()
                self.workers.append(worker)

        self.logger.info(f"Started crawler with {self.num_workers} workers")

    def start(self, seed_url: str) -> bool:
        """
        Start crawling from a seed URL.

        Returns:
            True if the seed was admitted to the frontier
        """
        if not self.is_running:
            self.logger.warning("Crawler is closed")
            return False

        if not isinstance(seed_url, str):
            self.logger.warning(f"Seed URL rejected: {seed_url!r}")
            return False

        # Same canonical form as discovered links
        try:
            seed_url = to_absolute_url(seed_url, seed_url)
        except MalformedURLError as e:
            self.logger.warning(f"Seed URL rejected: {e}")
            return False

        added = self._add(seed_url)
        if added:
            self.logger.info(f"Injected seed URL: {seed_url}")
        else:
            self.logger.warning(f"Seed URL rejected by rules: {seed_url}")
        return added

    def _add(self, url: str) -> bool:
        added = self.frontier.add(url)
        if added:
            self._count('urls_admitted')
        return added

    def _worker_loop(self):
        worker_name = threading.current_thread().name
        self.logger.debug(f"{worker_name} started")

        for url in self.frontier.take_all():
            try:
                self._crawl(url)
            except Exception as e:
                self.logger.error(f"{worker_name} error crawling {url}: {e}", exc_info=True)

        self.logger.debug(f"{worker_name} stopped")

    def _crawl(self, url: str):
        """Fetch, validate, process and follow the links of a single page."""
        worker_name = threading.current_thread().name
        self.logger.debug(f"[{worker_name}] Crawling: {url}")

        try:
            document = self.fetcher.fetch_document(url)
        except FetchError as e:
            self.logger.warning(f"[{worker_name}] Failed to fetch {url}: {e}")
            self._count('fetch_failures')
            return

        if document is None or not self.rules.is_valid_page(document):
            self._count('pages_skipped')
            return

        try:
            self.processor.process(url, document)
        except Exception as e:
            self.logger.error(f"[{worker_name}] Processor failed on {url}: {e}", exc_info=True)
            self._count('processor_errors')

        self._count('pages_crawled')

        links = 0
        for href in self.link_extractor.hrefs(document):
            try:
                link_url = to_absolute_url(href, url)
            except MalformedURLError as e:
                self.logger.error(f"[{worker_name}] {e}")
                self._count('links_malformed')
                continue

            links += 1
            self._add(link_url)

        with self.stats_lock:
            self.stats['links_found'] += links

        self.logger.info(f"[{worker_name}] Crawled {url} ({links} links)")

    def _count(self, key: str):
        with self.stats_lock:
            self.stats[key] += 1

    def close(self, timeout: float = 30.0):
        """
        Dispose the crawler.

        Workers stop after their current item; anything still queued is
        abandoned.

        Args:
            timeout: Maximum seconds to wait for workers to finish
        """
        with self.control_lock:
            if not self.is_running:
                return
            self.is_running = False

        self.logger.info("Stopping crawler...")
        self.frontier.close()

        start_wait = time.time()
        for worker in self.workers:
            remaining_time = timeout - (time.time() - start_wait)
            if remaining_time > 0:
                worker.join(timeout=remaining_time)

            if worker.is_alive():
                self.logger.warning(f"Worker {worker.name} did not stop in time")

        self.workers.clear()
        self.fetcher.close()
        if hasattr(self.processor, 'close'):
            self.processor.close()

        elapsed = time.time() - self.start_time
        self.logger.info(f"Crawler stopped. Total runtime: {elapsed:.2f} seconds")

    def __enter__(self) -> 'ImageCrawler':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def get_status(self) -> dict:
        """
        Get current crawler status.

        Returns:
            dict with status information
        """
        with self.stats_lock:
            stats = self.stats.copy()

        status = {
            'is_running': self.is_running,
            'runtime_seconds': time.time() - self.start_time if self.start_time else 0,
            'workers': self.num_workers,
            'frontier_size': self.frontier.pending,
            'pages_admitted': len(self.rules.visited),
            'crawler': stats,
        }

        if hasattr(self.processor, 'get_stats'):
            status['processor'] = self.processor.get_stats()

        return status

    def print_status(self):
        """Print a formatted status summary."""
        status = self.get_status()
        crawler_stats = status['crawler']

        print("\n" + "="*60)
        print("CRAWLER STATUS")
        print("="*60)
        print(f"Running: {status['is_running']}")
        print(f"Runtime: {status['runtime_seconds']:.2f} seconds")
        print(f"Workers: {status['workers']}")
        print(f"Frontier: {status['frontier_size']} pending / {status['pages_admitted']} admitted")
        print(f"Pages Crawled: {crawler_stats['pages_crawled']}")
        print(f"Fetch Failures: {crawler_stats['fetch_failures']}")
        print(f"Links Found: {crawler_stats['links_found']}")

        if 'processor' in status:
            print("\nProcessor:")
            print("-"*60)
            for key, value in status['processor'].items():
                print(f"  {key:25} | {value:6}")

        print("="*60 + "\n")
