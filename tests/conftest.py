import pytest

from scrapers.site import ADIDAS_JP_SELECTORS, SiteAdapter


@pytest.fixture
def site():
    return SiteAdapter(base_url='https://shop.example.jp', selectors=dict(ADIDAS_JP_SELECTORS))


@pytest.fixture
def sel(site):
    """Shortcut to build selectors the scrapers will query."""
    return site.selector
