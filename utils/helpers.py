"""
Helper Functions Module
=======================
Contains URL utilities, profiling tools, and logging setup.
"""

import os
import re
import time
import logging
import functools
import threading
import pandas as pd
from datetime import datetime
from typing import List, Callable, Any
from contextlib import contextmanager

from config import Config


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging() -> logging.Logger:
    """
    Setup dual logging: console + file for profiling.
    Returns the configured logger.
    """
    log_logger = logging.getLogger('catalog_crawler')
    log_logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    log_logger.handlers = []

    # Console handler (INFO level)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_format = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(threadName)s] - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_format)

    # File handler (DEBUG level - includes profiling and soft misses)
    file_handler = logging.FileHandler(Config.LOG_FILE, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        '%(asctime)s - %(levelname)s - [%(name)s] [%(threadName)s] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_format)

    log_logger.addHandler(console_handler)
    log_logger.addHandler(file_handler)

    return log_logger


# Global logger instance
logger = setup_logging()


# Generate timestamp for phase log files (once at module load)
_log_timestamp = datetime.now().strftime('%Y_%m_%d_%H_%M_%S')


def setup_phase_logger(name: str, tag: str) -> logging.Logger:
    """Setup logger for one crawl phase with a timestamped log file."""
    log_logger = logging.getLogger(name)
    log_logger.setLevel(logging.INFO)
    log_logger.handlers = []

    os.makedirs(Config.LOG_DIR, exist_ok=True)
    log_filename = os.path.join(Config.LOG_DIR, f'{name}_{_log_timestamp}.log')
    file_handler = logging.FileHandler(log_filename, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_format = logging.Formatter(
        f'%(asctime)s - %(levelname)s - [{tag}] [%(threadName)s] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_format)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(file_format)

    log_logger.addHandler(file_handler)
    log_logger.addHandler(console_handler)
    return log_logger


# =============================================================================
# PROFILING UTILITIES
# =============================================================================

class Profiler:
    """
    Profiler class to track timing of operations.
    Outputs timing data to the log file. Safe to record from worker threads.
    """

    def __init__(self):
        self.timings = {}
        self.start_time = None
        self._lock = threading.Lock()

    def start_session(self):
        """Mark the start of a crawling session."""
        self.start_time = time.time()
        with self._lock:
            self.timings = {}
        logger.debug("=" * 80)
        logger.debug("PROFILING SESSION STARTED")
        logger.debug("=" * 80)

    def end_session(self):
        """End session and output summary."""
        if self.start_time:
            total_time = time.time() - self.start_time
            logger.debug("=" * 80)
            logger.debug("PROFILING SESSION SUMMARY")
            logger.debug("=" * 80)
            logger.debug(f"Total session time: {total_time:.2f}s ({total_time/60:.2f} minutes)")

            with self._lock:
                sorted_timings = sorted(self.timings.items(), key=lambda x: x[1], reverse=True)

            if sorted_timings:
                logger.debug("\nTiming breakdown (summed across workers):")
                for operation, duration in sorted_timings:
                    percentage = (duration / total_time) * 100 if total_time else 0.0
                    logger.debug(f"  {operation}: {duration:.2f}s ({percentage:.1f}%)")

            logger.debug("=" * 80)

    def record(self, operation: str, duration: float):
        """Record timing for an operation."""
        with self._lock:
            self.timings[operation] = self.timings.get(operation, 0.0) + duration


# Global profiler instance
profiler = Profiler()


@contextmanager
def profile_step(step_name: str):
    """
    Context manager to profile a step.

    Usage:
        with profile_step("Render listing page"):
            # code here
    """
    start = time.time()
    logger.debug(f"[PROFILE START] {step_name}")

    try:
        yield
    finally:
        duration = time.time() - start
        profiler.record(step_name, duration)
        logger.debug(f"[PROFILE END] {step_name} - {duration:.3f}s")


def profile_function(func: Callable) -> Callable:
    """
    Decorator to profile a function.

    Usage:
        @profile_function
        def my_function():
            pass
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        start = time.time()
        func_name = func.__name__
        logger.debug(f"[PROFILE START] {func_name}")

        try:
            result = func(*args, **kwargs)
            return result
        finally:
            duration = time.time() - start
            profiler.record(func_name, duration)
            logger.debug(f"[PROFILE END] {func_name} - {duration:.3f}s")

    return wrapper


# =============================================================================
# URL UTILITIES
# =============================================================================

_PAGE_NUMBER_RE = re.compile(r'page=(\d+)')
_CATEGORY_RE = re.compile(r'category=([^&]+)')


def extract_page_number(url: str) -> int:
    """
    Extract the listing page number from a URL.

    Example URL: https://shop.adidas.jp/item/?gender=mens&category=wear&page=3
    Result: 3  (-1 when the URL has no page parameter)
    """
    match = _PAGE_NUMBER_RE.search(url)
    if not match:
        return -1
    try:
        return int(match.group(1))
    except ValueError:
        logger.debug(f"Failed to convert page number in {url}")
        return -1


def extract_category(url: str) -> str:
    """
    Extract the category query value from a URL.

    Example URL: https://shop.adidas.jp/item/?gender=mens&category=wear&page=3
    Result: wear  ('' when the URL has no category parameter)
    """
    match = _CATEGORY_RE.search(url)
    return match.group(1) if match else ''


def resolve_url(base_url: str, href: str) -> str:
    """Prefix a site-relative href with the site base URL."""
    if not href:
        return ''
    if href.startswith(('http://', 'https://')):
        return href
    return base_url + href


def build_page_url(category_url: str, page: int) -> str:
    """Append the page query parameter to a category URL."""
    separator = '&' if '?' in category_url else '?'
    return f"{category_url}{separator}page={page}"


# =============================================================================
# FILE & DATA UTILITIES
# =============================================================================

def build_export_filename(collection: str, prefix: str = '') -> str:
    """
    Build a timestamped CSV filename for a collection snapshot.

    Example: products -> dedup_products_(2026_10_17_14_30_45).csv
    """
    timestamp = datetime.now().strftime('%Y_%m_%d_%H_%M_%S')
    return f"{prefix}{collection}_({timestamp}).csv"


def calculate_data_schema(df: pd.DataFrame) -> str:
    """
    Calculate the data schema showing non-null counts for each column.
    Format: column1:count|column2:count|...
    """
    schema_parts = []
    for col in df.columns:
        non_null_count = df[col].notna().sum()
        schema_parts.append(f"{col}:{non_null_count}")
    return '|'.join(schema_parts)


def get_priority_columns() -> List[str]:
    """Get list of priority columns for CSV ordering."""
    return [
        'product_url', 'url', 'category', 'page_no',
        'title', 'price', 'breadcrumbs',
        'available_colors', 'available_sizes',
        'review_summary', 'tags'
    ]


def reorder_dataframe_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Reorder DataFrame columns with priority columns first."""
    priority_cols = get_priority_columns()
    all_cols = df.columns.tolist()

    ordered_cols = [c for c in priority_cols if c in all_cols]
    ordered_cols.extend([c for c in all_cols if c not in priority_cols])

    return df[ordered_cols]
