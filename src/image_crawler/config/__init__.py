"""
Configuration Module - Configuration management and loading.

This module handles loading, saving, and validating crawler configurations.

Components:
-----------
- ConfigLoader: Loads and saves configurations from/to YAML files
- validate_config: Validates configuration objects
- ConfigurationError: Exception raised for invalid configurations

Usage:
------
from image_crawler.config import ConfigLoader, validate_config

config = ConfigLoader.load_from_yaml('config/default.yaml')
validate_config(config)

config.threads = 16
ConfigLoader.save_to_yaml(config, 'config/my_config.yaml')

Configuration File Format:
-------------------------
crawler:
  scope: https://example.com/
  threads: 8
  destination_root: data/images

images:
  allowed_extensions: [.png, .jpg]
  min_width: 300
  min_height: 300

fetch:
  timeout_seconds: 30
  user_agent: ImageCrawler/1.0
"""

from .crawler_config import (
    ConfigLoader,
    validate_config,
    ConfigurationError
)

__all__ = [
    'ConfigLoader',
    'validate_config',
    'ConfigurationError',
]
