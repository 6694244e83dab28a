"""
Settings Module
===============
Loads configuration from .env file so workers, delays, database and
browser settings can change without code edits.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Configuration class that loads all settings from .env"""

    # Target site
    BASE_SITE_URL: str = os.getenv('BASE_SITE_URL', 'https://shop.adidas.jp')
    ROOT_CATEGORY_URL: str = os.getenv('ROOT_CATEGORY_URL', 'https://shop.adidas.jp/men/')
    # Comma separated indexes into the discovered category list ("" = all)
    CATEGORY_SELECTION: str = os.getenv('CATEGORY_SELECTION', '1')

    # Worker pool
    NUM_WORKERS: int = int(os.getenv('NUM_WORKERS', '10'))
    TASK_QUEUE_SIZE: int = int(os.getenv('TASK_QUEUE_SIZE', '20'))
    PRODUCT_URL_BATCH_LIMIT: int = int(os.getenv('PRODUCT_URL_BATCH_LIMIT', '300'))

    # Page timing
    PAGE_SETTLE_SECONDS: float = float(os.getenv('PAGE_SETTLE_SECONDS', '5'))
    SCROLL_STEP_PX: int = int(os.getenv('SCROLL_STEP_PX', '1000'))
    SCROLL_SETTLE_SECONDS: float = float(os.getenv('SCROLL_SETTLE_SECONDS', '5'))
    SCROLL_MAX_ITERATIONS: int = int(os.getenv('SCROLL_MAX_ITERATIONS', '200'))

    # Browser
    SELENIUM_REMOTE_URL: str = os.getenv('SELENIUM_REMOTE_URL', 'http://localhost:4444/wd/hub')
    HEADLESS: bool = _as_bool(os.getenv('HEADLESS', 'false'))
    BROWSER_ARGS: str = os.getenv('BROWSER_ARGS', '--start-fullscreen')

    # MongoDB
    MONGO_URI: str = os.getenv('MONGO_URI', 'mongodb://127.0.0.1:27017')
    MONGO_DB_NAME: str = os.getenv('MONGO_DB_NAME', 'adidas')
    PRODUCT_URL_COLLECTION: str = os.getenv('PRODUCT_URL_COLLECTION', 'product_urls')
    PRODUCT_COLLECTION: str = os.getenv('PRODUCT_COLLECTION', 'products')

    # Logging
    LOG_FILE: str = os.getenv('LOG_FILE', 'crawler_profiling.log')
    LOG_DIR: str = os.getenv('LOG_DIR', 'logs')

    # CSV export
    EXPORT_ON_FINISH: bool = _as_bool(os.getenv('EXPORT_ON_FINISH', 'false'))
    RAW_OUTPUT_FOLDER: str = os.getenv('RAW_OUTPUT_FOLDER', 'catalog_export_raw')
    DEDUP_OUTPUT_FOLDER: str = os.getenv('DEDUP_OUTPUT_FOLDER', 'catalog_export_dedup')

    @classmethod
    def get_category_selection(cls) -> List[int]:
        """Get category indexes to crawl. Empty list means every category."""
        return [int(part) for part in cls.CATEGORY_SELECTION.split(',') if part.strip()]

    @classmethod
    def get_browser_args(cls) -> List[str]:
        """Get extra command line arguments for the browser."""
        args = [arg.strip() for arg in cls.BROWSER_ARGS.split(',') if arg.strip()]
        if cls.HEADLESS and '--headless=new' not in args:
            args.append('--headless=new')
        return args

    @classmethod
    def print_config(cls):
        """Print current configuration for debugging."""
        print("\n" + "=" * 50)
        print("CURRENT CONFIGURATION")
        print("=" * 50)
        print(f"BASE_SITE_URL: {cls.BASE_SITE_URL}")
        print(f"ROOT_CATEGORY_URL: {cls.ROOT_CATEGORY_URL}")
        print(f"CATEGORY_SELECTION: {cls.CATEGORY_SELECTION or 'all'}")
        print(f"NUM_WORKERS: {cls.NUM_WORKERS}")
        print(f"PRODUCT_URL_BATCH_LIMIT: {cls.PRODUCT_URL_BATCH_LIMIT}")
        print(f"PAGE_SETTLE: {cls.PAGE_SETTLE_SECONDS}s")
        print(f"SCROLL: {cls.SCROLL_STEP_PX}px every {cls.SCROLL_SETTLE_SECONDS}s (max {cls.SCROLL_MAX_ITERATIONS})")
        print(f"SELENIUM_REMOTE_URL: {cls.SELENIUM_REMOTE_URL or 'local chromedriver'}")
        print(f"MONGO: {cls.MONGO_URI} / {cls.MONGO_DB_NAME}")
        print(f"COLLECTIONS: {cls.PRODUCT_URL_COLLECTION}, {cls.PRODUCT_COLLECTION}")
        print(f"EXPORT_ON_FINISH: {cls.EXPORT_ON_FINISH}")
        print("=" * 50 + "\n")
