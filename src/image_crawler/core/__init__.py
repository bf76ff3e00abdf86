"""
Core Module - Crawl engine.

Components:
-----------
- Frontier: Shared blocking queue of admitted URLs
- ImageCrawler: Fixed-size worker pool running the crawl loop
- CrawlerConfig: Configuration for building a crawler

Usage:
------
from image_crawler.core import ImageCrawler, CrawlerConfig

config = CrawlerConfig(scope='https://example.com/', threads=8)

with ImageCrawler.from_config(config) as crawler:
    crawler.start('https://example.com/')
    input("Crawler started, press Enter to stop...")
"""

from .frontier import Frontier
from .crawler import ImageCrawler, CrawlerConfig

__all__ = [
    'Frontier',
    'ImageCrawler',
    'CrawlerConfig',
]
