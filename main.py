#!/usr/bin/env python3
"""
Catalog Crawler - Main Entry Point
==================================

Two-phase browser crawler:
- Environment-based configuration (.env)
- Worker pools of Selenium sessions
- MongoDB persistence
- Profiling and timing logs

Usage:
    python main.py

Configuration:
    Edit .env file to change workers, delays, database and browser settings

Output:
    - MongoDB collections product_urls / products
    - catalog_export_raw/, catalog_export_dedup/  (when EXPORT_ON_FINISH=true)
    - crawler_profiling.log, logs/                (timing/profiling)
"""

import sys
from datetime import datetime

from config import Config
from scrapers import CatalogCrawlManager
from scrapers.exporter import CsvExporter
from storage import MongoStore
from utils import logger


def print_banner():
    """Print startup banner."""
    print("""
================================================================================
     CATALOG CRAWLER
================================================================================

  Phase 1 - URL discovery (only when product_urls is empty):
    root page -> categories -> listing pages -> product_urls

  Phase 2 - product extraction:
    product_urls (first batch) -> product pages -> products

================================================================================
    """)


def main():
    """Main entry point."""
    print_banner()
    Config.print_config()

    # Log start time
    start_time = datetime.now()
    logger.info(f"Crawling started at: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")

    store = None
    try:
        store = MongoStore()
        exporter = CsvExporter() if Config.EXPORT_ON_FINISH else None

        manager = CatalogCrawlManager(store, exporter=exporter)
        manager.run()

    except KeyboardInterrupt:
        logger.warning("\nCrawling interrupted by user (Ctrl+C)")
        sys.exit(1)

    except Exception as e:
        logger.error(f"\nFatal error: {e}")
        raise

    finally:
        if store is not None:
            store.close()

        # Log end time
        end_time = datetime.now()
        duration = end_time - start_time
        logger.info(f"\nCrawling finished at: {end_time.strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info(f"Total duration: {duration}")


if __name__ == "__main__":
    main()
