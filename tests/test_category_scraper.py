"""
Unit tests for category discovery, pagination and listing page scraping.
"""

import pytest

from scrapers.category_scraper import CategoryListScraper, DiscoveryError
from scrapers.models import ProductURL
from tests.fakes import FakePage, el

ROOT = 'https://shop.example.jp/men/'
CATEGORY = 'https://shop.example.jp/item/?gender=mens&category=wear'


@pytest.fixture
def scraper(site):
    return CategoryListScraper(site, settle_seconds=0, scroll_settle=0, scroll_max_iterations=5)


class TestDiscoverCategories:

    def test_resolves_hrefs_and_skips_empty(self, scraper, sel):
        page = FakePage(pages={ROOT: {sel('category_links'): [
            el(href='/item/?gender=mens&category=footwear'),
            el(href=''),
            el(href='/item/?gender=mens&category=wear'),
        ]}})

        assert scraper.discover_categories(page, ROOT) == [
            'https://shop.example.jp/item/?gender=mens&category=footwear',
            'https://shop.example.jp/item/?gender=mens&category=wear',
        ]

    def test_root_load_failure_is_fatal(self, scraper):
        page = FakePage(failing_urls=[ROOT])
        with pytest.raises(DiscoveryError):
            scraper.discover_categories(page, ROOT)

    def test_navigation_lookup_failure_is_fatal(self, scraper, sel):
        page = FakePage(failing_selectors=[sel('category_links')])
        with pytest.raises(DiscoveryError):
            scraper.discover_categories(page, ROOT)

    def test_select_by_index(self, scraper):
        assert scraper.select_categories(['a', 'b', 'c'], [1]) == ['b']
        assert scraper.select_categories(['a', 'b', 'c'], []) == ['a', 'b', 'c']
        assert scraper.select_categories(['a'], [1]) == []


class TestPagination:

    def test_page_total_three_yields_three_pages(self, scraper, sel):
        page = FakePage(pages={CATEGORY: {sel('page_total'): [el(' 3 ')]}})

        assert scraper.enumerate_page_urls(page, CATEGORY) == [
            CATEGORY + '&page=1',
            CATEGORY + '&page=2',
            CATEGORY + '&page=3',
        ]

    def test_missing_page_total_defaults_to_one(self, scraper):
        assert scraper.get_page_count(FakePage()) == 1

    def test_unparsable_page_total_defaults_to_one(self, scraper, sel):
        assert scraper.get_page_count(FakePage({sel('page_total'): [el('many')]})) == 1

    def test_category_load_failure_is_fatal(self, scraper):
        with pytest.raises(DiscoveryError):
            scraper.enumerate_page_urls(FakePage(failing_urls=[CATEGORY]), CATEGORY)


class TestScrapeListingPage:

    def test_collects_product_links(self, scraper, sel):
        url = CATEGORY + '&page=2'
        page = FakePage(pages={url: {sel('listing_product_links'): [
            el(href='/products/HB9386/'),
            el(href=''),
            el(href='/products/GZ5922/'),
        ]}})

        assert scraper.scrape_listing_page(page, url) == [
            ProductURL(category='wear', page_no=2, url='https://shop.example.jp/products/HB9386/'),
            ProductURL(category='wear', page_no=2, url='https://shop.example.jp/products/GZ5922/'),
        ]

    def test_closes_modals_and_scrolls(self, scraper, sel):
        url = CATEGORY + '&page=1'
        close_button = el()
        page = FakePage(pages={url: {sel('modal_close'): [close_button]}})

        scraper.scrape_listing_page(page, url)

        assert close_button.clicked == 1
        assert page.scroll_count == 1

    def test_load_failure_skips_page(self, scraper):
        url = CATEGORY + '&page=1'
        assert scraper.scrape_listing_page(FakePage(failing_urls=[url]), url) == []

    def test_url_without_page_number_is_skipped(self, scraper, sel):
        page = FakePage({sel('listing_product_links'): [el(href='/products/HB9386/')]})
        assert scraper.scrape_listing_page(page, CATEGORY) == []
        assert page.visited == []
