"""
Crawl Manager Module
====================
Orchestrates the two crawl phases over the same worker pool pattern:
- URL discovery: root page -> categories -> listing pages -> product_urls
  (only when product_urls is empty; a worker that cannot open a browser
  session aborts the run)
- Product extraction: up to PRODUCT_URL_BATCH_LIMIT stored links ->
  product pages -> products (a worker without a session just exits)
"""

import threading
from typing import Callable, List, Optional

from config import Config
from utils import profiler, profile_step, setup_phase_logger
from .models import ProductURL
from .page import RenderedPage, create_browser_session
from .site import SiteAdapter, ADIDAS_JP
from .worker_pool import WorkerPool, PoolStats
from .category_scraper import CategoryListScraper
from .product_scraper import ProductDetailScraper
from .exporter import CsvExporter


discovery_logger = setup_phase_logger('url_discovery', 'DISCOVERY')
extraction_logger = setup_phase_logger('product_extraction', 'PRODUCT')


class CatalogCrawlManager:
    """
    Runs URL discovery then product extraction against one store.

    The store needs insert_product_url, insert_product, count_product_urls,
    find_product_urls and iter_documents (see storage.MongoStore).
    """

    def __init__(
        self,
        store,
        session_factory: Callable[[], RenderedPage] = create_browser_session,
        site: Optional[SiteAdapter] = None,
        num_workers: int = Config.NUM_WORKERS,
        queue_size: int = Config.TASK_QUEUE_SIZE,
        batch_limit: int = Config.PRODUCT_URL_BATCH_LIMIT,
        category_selection: Optional[List[int]] = None,
        root_url: str = Config.ROOT_CATEGORY_URL,
        category_scraper: Optional[CategoryListScraper] = None,
        product_scraper: Optional[ProductDetailScraper] = None,
        exporter: Optional[CsvExporter] = None
    ):
        self.store = store
        self.session_factory = session_factory
        self.site = site or ADIDAS_JP
        self.num_workers = num_workers
        self.queue_size = queue_size
        self.batch_limit = batch_limit
        self.category_selection = (
            category_selection if category_selection is not None else Config.get_category_selection()
        )
        self.root_url = root_url
        self.category_scraper = category_scraper or CategoryListScraper(self.site)
        self.product_scraper = product_scraper or ProductDetailScraper(self.site)
        self.exporter = exporter

        self._counter_lock = threading.Lock()
        self.urls_written = 0
        self.products_written = 0
        self.discovery_stats: Optional[PoolStats] = None
        self.extraction_stats: Optional[PoolStats] = None

        discovery_logger.info("CatalogCrawlManager initialized")
        discovery_logger.info(f"  - Workers: {self.num_workers}")
        discovery_logger.info(f"  - Queue size: {self.queue_size}")
        discovery_logger.info(f"  - Product URL batch limit: {self.batch_limit}")
        discovery_logger.info(f"  - Category selection: {self.category_selection or 'all'}")

    # =========================================================================
    # PHASE 1 - URL DISCOVERY
    # =========================================================================

    def _handle_listing_page(self, page: RenderedPage, url: str):
        records = self.category_scraper.scrape_listing_page(page, url)
        written = sum(1 for record in records if self.store.insert_product_url(record))
        with self._counter_lock:
            self.urls_written += written
        discovery_logger.info(f"{url} -> {written}/{len(records)} product URLs stored")

    def _iter_page_urls(self, page: RenderedPage):
        categories = self.category_scraper.discover_categories(page, self.root_url)
        selected = self.category_scraper.select_categories(categories, self.category_selection)
        discovery_logger.info(f"Crawling {len(selected)}/{len(categories)} categories")

        for category_url in selected:
            for page_url in self.category_scraper.enumerate_page_urls(page, category_url):
                yield page_url

    def run_url_discovery(self) -> PoolStats:
        """
        Enumerate listing pages with a dedicated session and fan them out
        to the pool. Raises SessionStartError or DiscoveryError on failure.
        """
        discovery_logger.info("=" * 60)
        discovery_logger.info("URL DISCOVERY STARTED")
        discovery_logger.info("=" * 60)

        pool = WorkerPool(
            'discovery',
            self.session_factory,
            self._handle_listing_page,
            num_workers=self.num_workers,
            queue_size=self.queue_size,
            session_failure_fatal=True,
            log=discovery_logger
        )

        with profile_step("Phase 1: URL discovery"):
            page = self.session_factory()
            try:
                self.discovery_stats = pool.run(self._iter_page_urls(page))
            finally:
                page.close()

        discovery_logger.info(f"URL DISCOVERY COMPLETE: {self.urls_written} product URLs stored")
        return self.discovery_stats

    # =========================================================================
    # PHASE 2 - PRODUCT EXTRACTION
    # =========================================================================

    def _handle_product(self, page: RenderedPage, record: ProductURL):
        product = self.product_scraper.scrape_product(page, record.url)
        if self.store.insert_product(product):
            with self._counter_lock:
                self.products_written += 1

    def run_product_extraction(self) -> Optional[PoolStats]:
        """Extract every product in the next batch of stored links."""
        records = self.store.find_product_urls(limit=self.batch_limit)
        if not records:
            extraction_logger.info("No product URLs stored - nothing to extract")
            return None

        extraction_logger.info("=" * 60)
        extraction_logger.info(f"PRODUCT EXTRACTION STARTED: {len(records)} product URLs")
        extraction_logger.info("=" * 60)

        pool = WorkerPool(
            'extraction',
            self.session_factory,
            self._handle_product,
            num_workers=self.num_workers,
            queue_size=self.queue_size,
            session_failure_fatal=False,
            log=extraction_logger
        )

        with profile_step("Phase 2: product extraction"):
            self.extraction_stats = pool.run(records)

        extraction_logger.info(f"PRODUCT EXTRACTION COMPLETE: {self.products_written} products stored")
        return self.extraction_stats

    # =========================================================================
    # ENTRY POINTS
    # =========================================================================

    def export(self):
        """Write CSV snapshots of both collections."""
        if self.exporter is None:
            return
        self.exporter.export(self.store.iter_documents(self.store.product_urls), 'product_urls', key='url')
        self.exporter.export(self.store.iter_documents(self.store.products), 'products', key='product_url')

    def run(self):
        """Run discovery when no links are stored yet, then extraction."""
        profiler.start_session()
        try:
            existing = self.store.count_product_urls()
            if existing == 0:
                self.run_url_discovery()
            else:
                discovery_logger.info(f"{existing} product URLs already stored - skipping discovery")

            self.run_product_extraction()
            self.export()
        finally:
            profiler.end_session()
            self._print_summary()

    def _print_summary(self):
        """Print final summary."""
        extraction_logger.info("=" * 60)
        extraction_logger.info("CRAWL SUMMARY")
        extraction_logger.info("=" * 60)
        extraction_logger.info(f"Product URLs stored: {self.urls_written}")
        extraction_logger.info(f"Products stored: {self.products_written}")
        for label, stats in (('Discovery', self.discovery_stats), ('Extraction', self.extraction_stats)):
            if stats is not None:
                extraction_logger.info(
                    f"{label}: {stats.processed} processed, {stats.failed} failed, "
                    f"{stats.dropped} dropped, {stats.workers_started}/{self.num_workers} workers started"
                )
        extraction_logger.info("=" * 60)
