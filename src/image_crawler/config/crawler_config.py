"""
Crawler Configuration Management - Configuration loading and validation.
Supports loading from YAML files with validation and defaults.
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path
from dataclasses import asdict

from ..processing.fetcher import FetchConfig
from ..core.crawler import CrawlerConfig


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""
    pass


class ConfigLoader:
    """Loads and saves crawler configuration as YAML."""

    @staticmethod
    def load_from_yaml(config_path: str) -> CrawlerConfig:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            CrawlerConfig object

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        logger = logging.getLogger(__name__)

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r') as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read {config_path}: {e}")

        if not config_dict:
            raise ConfigurationError(f"Empty configuration file: {config_path}")

        if not isinstance(config_dict, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

        logger.info(f"Loaded configuration from {config_path}")

        try:
            return ConfigLoader._parse_config(config_dict)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationError(f"Failed to parse configuration: {e}")

    @staticmethod
    def _parse_config(config_dict: Dict[str, Any]) -> CrawlerConfig:
        """Parse configuration dictionary into CrawlerConfig object."""
        defaults = CrawlerConfig()

        crawler_cfg = config_dict.get('crawler') or {}
        images_cfg = config_dict.get('images') or {}
        fetch_cfg = config_dict.get('fetch') or {}

        default_fetch = FetchConfig()
        fetch = FetchConfig(
            timeout_seconds=fetch_cfg.get('timeout_seconds', default_fetch.timeout_seconds),
            verify_ssl=fetch_cfg.get('verify_ssl', default_fetch.verify_ssl),
            user_agent=fetch_cfg.get('user_agent', default_fetch.user_agent),
            max_content_size_mb=fetch_cfg.get('max_content_size_mb', default_fetch.max_content_size_mb),
            accept_language=fetch_cfg.get('accept_language', default_fetch.accept_language),
            accept_encoding=fetch_cfg.get('accept_encoding', default_fetch.accept_encoding),
            parser=fetch_cfg.get('parser', default_fetch.parser),
            pool_connections=fetch_cfg.get('pool_connections', default_fetch.pool_connections),
            pool_maxsize=fetch_cfg.get('pool_maxsize', default_fetch.pool_maxsize)
        )

        return CrawlerConfig(
            scope=crawler_cfg.get('scope', defaults.scope),
            threads=int(crawler_cfg.get('threads', defaults.threads)),
            poll_interval=float(crawler_cfg.get('poll_interval', defaults.poll_interval)),
            destination_root=str(crawler_cfg.get('destination_root', defaults.destination_root)),
            allowed_extensions=list(images_cfg.get('allowed_extensions', defaults.allowed_extensions)),
            min_width=int(images_cfg.get('min_width', defaults.min_width)),
            min_height=int(images_cfg.get('min_height', defaults.min_height)),
            fetch=fetch
        )

    @staticmethod
    def save_to_yaml(config: CrawlerConfig, output_path: str):
        """Save configuration to YAML file."""
        logger = logging.getLogger(__name__)

        config_dict = {
            'crawler': {
                'scope': config.scope,
                'threads': config.threads,
                'poll_interval': config.poll_interval,
                'destination_root': config.destination_root,
            },
            'images': {
                'allowed_extensions': list(config.allowed_extensions),
                'min_width': config.min_width,
                'min_height': config.min_height,
            },
            'fetch': asdict(config.fetch),
        }

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, 'w') as f:
                yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)
            logger.info(f"Configuration saved to {output_path}")
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration: {e}")

    @staticmethod
    def create_default_config() -> CrawlerConfig:
        """Create a default configuration."""
        return CrawlerConfig()


def validate_config(config: CrawlerConfig) -> bool:
    """Validate crawler configuration."""
    logger = logging.getLogger(__name__)

    if config.threads < 1:
        raise ConfigurationError("threads must be at least 1")

    if config.poll_interval <= 0:
        raise ConfigurationError("poll_interval must be positive")

    if config.min_width < 0 or config.min_height < 0:
        raise ConfigurationError("min_width and min_height cannot be negative")

    if not config.destination_root:
        raise ConfigurationError("destination_root is required")

    for ext in config.allowed_extensions:
        if not isinstance(ext, str) or not ext.startswith('.') or len(ext) < 2:
            raise ConfigurationError(f"Invalid extension {ext!r}, expected e.g. '.png'")

    if config.scope is not None and not config.scope.lower().startswith(('http://', 'https://')):
        raise ConfigurationError(f"scope must be an http(s) URL prefix: {config.scope}")

    if config.fetch.timeout_seconds <= 0:
        raise ConfigurationError("fetch timeout_seconds must be positive")

    if config.fetch.max_content_size_mb < 1:
        raise ConfigurationError("fetch max_content_size_mb must be at least 1")

    logger.info("Configuration validated successfully")
    return True
