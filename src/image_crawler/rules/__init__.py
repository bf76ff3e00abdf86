"""
Rules Module

Admission rules for the crawler and the image processor.

Components:
-----------
- VisitedSet: Thread-safe, grow-only set of admitted URLs
- UriRules: Base class with atomic check-and-record admission
- CrawlerRules / ProcessorRules: Abstract page and content checks
- ImageCrawlerRules: Scope-prefix crawl rules
- ImageProcessorRules: Extension allow-list and minimum image size

Crawl rules and processor rules each keep their own VisitedSet: a URL can be
admitted once as a page and once as an image, independently.
"""

from .visited import VisitedSet
from .base import UriRules, CrawlerRules, ProcessorRules
from .crawler_rules import ImageCrawlerRules
from .processor_rules import ImageProcessorRules

__all__ = [
    'VisitedSet',
    'UriRules',
    'CrawlerRules',
    'ProcessorRules',
    'ImageCrawlerRules',
    'ImageProcessorRules',
]
