"""
Scrapers Package
================
Contains the discovery and extraction scrapers and the crawl manager.
"""

from .category_scraper import CategoryListScraper, DiscoveryError
from .product_scraper import ProductDetailScraper, SizeChartError
from .manager import CatalogCrawlManager

__all__ = [
    'CategoryListScraper',
    'DiscoveryError',
    'ProductDetailScraper',
    'SizeChartError',
    'CatalogCrawlManager'
]
