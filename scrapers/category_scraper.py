"""
Category List Scraper Module
============================
Discovers category URLs from the catalog root page, enumerates each
category's listing pages and collects product links from a rendered
listing page.
"""

import time
from typing import List, Optional

from config import Config
from utils import (
    logger,
    profile_step,
    profile_function,
    extract_page_number,
    extract_category,
    build_page_url
)
from .models import ProductURL
from .page import PageError, RenderedPage
from .site import SiteAdapter, ADIDAS_JP
from .interactions import close_modals, scroll_to_bottom


class DiscoveryError(Exception):
    """The root or a category page could not be used for discovery."""


class CategoryListScraper:
    """
    Scraper for the category navigation and listing pages.
    Produces listing page URLs for the pool and ProductURL records from them.
    """

    def __init__(
        self,
        site: Optional[SiteAdapter] = None,
        settle_seconds: float = Config.PAGE_SETTLE_SECONDS,
        scroll_step: int = Config.SCROLL_STEP_PX,
        scroll_settle: float = Config.SCROLL_SETTLE_SECONDS,
        scroll_max_iterations: int = Config.SCROLL_MAX_ITERATIONS
    ):
        self.site = site or ADIDAS_JP
        self.settle_seconds = settle_seconds
        self.scroll_step = scroll_step
        self.scroll_settle = scroll_settle
        self.scroll_max_iterations = scroll_max_iterations

        logger.debug(f"CategoryListScraper initialized for {self.site.base_url}")

    @profile_function
    def discover_categories(self, page: RenderedPage, root_url: str) -> List[str]:
        """Load the catalog root and return every category URL in navigation order."""
        try:
            page.navigate(root_url)
        except PageError as e:
            raise DiscoveryError(f"Failed to load root page: {e}") from e

        time.sleep(self.settle_seconds)

        try:
            links = page.find_all(self.site.selector('category_links'))
        except PageError as e:
            raise DiscoveryError(f"Failed to find category elements: {e}") from e

        categories = []
        for link in links:
            try:
                href = page.attribute(link, 'href')
            except PageError as e:
                logger.debug(f"Failed to get href attribute: {e}")
                continue
            if href:
                categories.append(self.site.resolve(href))

        logger.info(f"Discovered {len(categories)} categories")
        return categories

    def select_categories(self, categories: List[str], selection: List[int]) -> List[str]:
        """Keep the categories at the configured indexes (all when selection is empty)."""
        if not selection:
            return list(categories)

        selected = [url for index, url in enumerate(categories) if index in selection]
        missing = [index for index in selection if index >= len(categories)]
        if missing:
            logger.warning(f"Category indexes out of range: {missing}")
        return selected

    def get_page_count(self, page: RenderedPage) -> int:
        """Read the page total indicator. Defaults to 1 when absent or unparsable."""
        try:
            total_elem = page.find_one(self.site.selector('page_total'))
            return int(page.text(total_elem).strip())
        except (PageError, ValueError) as e:
            logger.debug(f"Page total unavailable, assuming 1 page: {e}")
            return 1

    @profile_function
    def enumerate_page_urls(self, page: RenderedPage, category_url: str) -> List[str]:
        """Load a category and return one URL per listing page."""
        try:
            page.navigate(category_url)
        except PageError as e:
            raise DiscoveryError(f"Failed to load category page: {e}") from e

        page_count = self.get_page_count(page)
        logger.info(f"Category {category_url} has {page_count} pages")

        return [build_page_url(category_url, page_no) for page_no in range(1, page_count + 1)]

    def scrape_listing_page(self, page: RenderedPage, url: str) -> List[ProductURL]:
        """
        Render one listing page and return a ProductURL for every product link.
        Load and lookup failures skip the page.
        """
        page_no = extract_page_number(url)
        category = extract_category(url)
        if page_no == -1 or not category:
            logger.warning(f"Failed to extract page number or category from URL: {url}")
            return []

        try:
            with profile_step("Render listing page"):
                page.navigate(url)
        except PageError as e:
            logger.warning(f"Failed to load page URL: {e}")
            return []

        close_modals(page, self.site.selector('modal_close'))
        scroll_to_bottom(page, self.scroll_step, self.scroll_settle, self.scroll_max_iterations)
        time.sleep(self.settle_seconds)

        try:
            links = page.find_all(self.site.selector('listing_product_links'))
        except PageError as e:
            logger.warning(f"Failed to find product elements on {url}: {e}")
            return []

        product_urls = []
        for link in links:
            try:
                href = page.attribute(link, 'href')
            except PageError:
                continue
            if not href:
                continue
            product_urls.append(ProductURL(category=category, page_no=page_no, url=self.site.resolve(href)))

        logger.debug(f"Page {page_no} of '{category}': {len(product_urls)} product links")
        return product_urls
