"""
Command Line Interface for the Image Crawler.

Usage Examples:
--------------

# Crawl a site, downloading images into data/images
image-crawler crawl https://example.com/

# Restrict the crawl to a section of the site
image-crawler crawl https://example.com/gallery/ --scope https://example.com/gallery/

# Crawl with custom configuration
image-crawler crawl https://example.com/ -c config/default.yaml

# Only keep large PNG/JPEG files, stop after an hour
image-crawler crawl https://example.com/ --extensions .png .jpg --min-width 800 -t 3600

# Create default configuration
image-crawler config --create-default -o config/default.yaml

# Validate configuration
image-crawler config --validate config/my_config.yaml
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from .core.crawler import ImageCrawler
from .config.crawler_config import ConfigLoader, validate_config, ConfigurationError
from .processing.fetcher import MalformedURLError
from .processing.links import to_absolute_url


STATUS_INTERVAL_SECONDS = 25


def setup_logging(verbose: bool = False):
    """
    Setup logging configuration.

    Args:
        verbose: Enable debug-level logging if True
    """
    level = logging.DEBUG if verbose else logging.INFO

    log_dir = Path('logs')
    log_dir.mkdir(exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_dir / 'crawler.log')
        ]
    )

    # Set third-party loggers to WARNING to reduce noise
    if not verbose:
        logging.getLogger('urllib3').setLevel(logging.WARNING)
        logging.getLogger('requests').setLevel(logging.WARNING)
        logging.getLogger('PIL').setLevel(logging.WARNING)


def build_config(args):
    """Load configuration and apply command line overrides."""
    logger = logging.getLogger(__name__)

    if args.config:
        logger.info(f"Loading configuration from {args.config}")
        config = ConfigLoader.load_from_yaml(args.config)
    else:
        logger.info("Using default configuration")
        config = ConfigLoader.create_default_config()

    if args.scope:
        config.scope = args.scope
    if config.scope is None:
        try:
            config.scope = to_absolute_url(args.url, args.url)
        except MalformedURLError as e:
            raise ConfigurationError(f"Invalid seed URL: {e}")
        logger.info(f"Using seed URL as scope: {config.scope}")

    if args.output:
        config.destination_root = args.output
    if args.workers is not None:
        config.threads = args.workers
    if args.extensions:
        config.allowed_extensions = [
            ext if ext.startswith('.') else '.' + ext for ext in args.extensions
        ]
    if args.min_width is not None:
        config.min_width = args.min_width
    if args.min_height is not None:
        config.min_height = args.min_height
    if args.user_agent:
        config.fetch.user_agent = args.user_agent

    validate_config(config)
    return config


def crawl_command(args):
    """
    Execute the crawl command.

    Runs until interrupted (Ctrl+C) or until --timeout expires.
    """
    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error(f"Configuration validation failed: {e}")
        sys.exit(1)

    logger.info(f"Creating crawler with {config.threads} workers")
    crawler = ImageCrawler.from_config(config, seed_url=args.url)

    print("\n" + "="*60)
    print("STARTING IMAGE CRAWLER")
    print("="*60)

    try:
        if not crawler.start(args.url):
            logger.error(f"Seed URL {args.url} is outside scope {config.scope}")
            sys.exit(1)

        start_time = time.time()
        last_status = start_time

        while True:
            time.sleep(1)

            if time.time() - last_status >= STATUS_INTERVAL_SECONDS:
                crawler.print_status()
                last_status = time.time()

            if args.timeout and time.time() - start_time > args.timeout:
                logger.warning(f"Timeout ({args.timeout}s) reached")
                break

    except KeyboardInterrupt:
        logger.info("Crawl interrupted by user")

    finally:
        print("\n" + "="*60)
        print("STOPPING CRAWLER")
        print("="*60)
        crawler.close()

    print("\n" + "="*60)
    print("FINAL STATISTICS")
    print("="*60)
    crawler.print_status()


def config_command(args):
    """Execute the config command."""
    logger = logging.getLogger(__name__)

    try:
        if args.create_default:
            config = ConfigLoader.create_default_config()
            output_path = args.output or 'config/default.yaml'
            ConfigLoader.save_to_yaml(config, output_path)
            print(f"✓ Default configuration created at: {output_path}")

        elif args.validate:
            print(f"Validating configuration: {args.validate}")
            config = ConfigLoader.load_from_yaml(args.validate)
            validate_config(config)
            print(f"✓ Configuration is valid: {args.validate}")

        else:
            print("Error: Please specify --create-default or --validate")
            sys.exit(1)

    except ConfigurationError as e:
        print(f"✗ Configuration error: {e}")
        logger.error(f"Configuration error: {e}")
        sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='image-crawler',
        description='Image Crawler - crawl a site and download its images',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s crawl https://example.com/
  %(prog)s crawl https://example.com/ -w 16 --min-width 800 --min-height 600
  %(prog)s crawl https://example.com/ -c config/default.yaml
  %(prog)s config --create-default -o config/default.yaml
  %(prog)s config --validate config/my_config.yaml
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose (debug) logging'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # ========================================================================
    # CRAWL COMMAND
    # ========================================================================
    crawl_parser = subparsers.add_parser(
        'crawl',
        help='Start crawling a website',
        description='Crawl every page under the scope and download its images'
    )

    crawl_parser.add_argument('url', help='Seed URL to start crawling from')

    crawl_parser.add_argument(
        '-c', '--config',
        help='Path to YAML configuration file (default: use built-in defaults)'
    )

    crawl_parser.add_argument(
        '--scope',
        metavar='PREFIX',
        help='Only crawl URLs starting with this prefix (default: the seed URL)'
    )

    crawl_parser.add_argument(
        '-o', '--output',
        metavar='DIR',
        help='Directory where images are saved'
    )

    crawl_parser.add_argument(
        '-w', '--workers',
        type=int,
        metavar='N',
        help='Number of worker threads (default: one per CPU)'
    )

    crawl_parser.add_argument(
        '--extensions',
        nargs='+',
        metavar='EXT',
        help='Image extensions to download, e.g. .png .jpg'
    )

    crawl_parser.add_argument('--min-width', type=int, metavar='PX',
                              help='Only keep images wider than this')
    crawl_parser.add_argument('--min-height', type=int, metavar='PX',
                              help='Only keep images taller than this')

    crawl_parser.add_argument(
        '-t', '--timeout',
        type=float,
        metavar='SECONDS',
        help='Stop crawling after this many seconds'
    )

    crawl_parser.add_argument(
        '--user-agent',
        metavar='STRING',
        help='Custom User-Agent string'
    )

    crawl_parser.set_defaults(func=crawl_command)

    # ========================================================================
    # CONFIG COMMAND
    # ========================================================================
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Create or validate configuration files'
    )

    config_parser.add_argument(
        '--create-default',
        action='store_true',
        help='Create a default configuration file'
    )

    config_parser.add_argument(
        '--validate',
        metavar='FILE',
        help='Validate a configuration file'
    )

    config_parser.add_argument(
        '-o', '--output',
        metavar='FILE',
        help='Output path for created configuration (default: config/default.yaml)'
    )

    config_parser.set_defaults(func=config_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if hasattr(args, 'func'):
        args.func(args)
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == '__main__':
    main()
