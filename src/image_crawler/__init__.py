"""
Image Crawler - A multi-threaded site crawler that downloads images.

Features:
- Fixed pool of worker threads sharing one URL frontier
- Exactly-once URL admission per rules instance
- Scope-prefix crawl rules
- Image download with extension and minimum-size filters
- Configurable via YAML
"""

__version__ = "1.0.0"

from .core.crawler import ImageCrawler, CrawlerConfig
from .core.frontier import Frontier
from .config.crawler_config import ConfigLoader, validate_config, ConfigurationError
from .rules import ImageCrawlerRules, ImageProcessorRules
from .processing import ImageProcessor, HTTPFetcher

__all__ = [
    'ImageCrawler',
    'CrawlerConfig',
    'Frontier',
    'ConfigLoader',
    'validate_config',
    'ConfigurationError',
    'ImageCrawlerRules',
    'ImageProcessorRules',
    'ImageProcessor',
    'HTTPFetcher',
]
