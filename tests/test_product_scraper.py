"""
Unit tests for the product page extraction pipeline.
"""

import pytest

from scrapers.models import (
    ColorOption,
    CoordinatedProduct,
    Media,
    Product,
    ReviewSummary,
    SpecialDescription,
)
from scrapers.product_scraper import (
    ProductDetailScraper,
    SizeChartError,
    build_size_chart,
    parse_review_rating,
)
from tests.fakes import FakeElement, FakePage, el

URL = 'https://shop.example.jp/products/HB9386/'


@pytest.fixture
def scraper(site):
    return ProductDetailScraper(site, settle_seconds=0, scroll_settle=0, scroll_max_iterations=5)


def scrape(scraper, dom, **page_kwargs):
    page = FakePage(pages={URL: dom}, **page_kwargs)
    return scraper.scrape_product(page, URL)


class TestEmptyPage:

    def test_only_product_url_is_populated(self, scraper):
        assert scrape(scraper, {}) == Product(product_url=URL)

    def test_load_failure_still_returns_record(self, scraper):
        product = scrape(scraper, {}, failing_urls=[URL])
        assert product == Product(product_url=URL)

    def test_every_soft_lookup_failing_still_returns_record(self, scraper, sel):
        failing = [sel(name) for name in ('breadcrumbs', 'color_options', 'sizes', 'images',
                                          'coordinated_items', 'reviews', 'tags')]
        assert scrape(scraper, {}, failing_selectors=failing) == Product(product_url=URL)


class TestHeaderFields:

    def test_breadcrumbs_skip_first_two_positions(self, scraper, sel):
        product = scrape(scraper, {sel('breadcrumbs'): [el('Home'), el('Men'), el('Wear'), el(''), el('Jackets')]})
        assert product.breadcrumbs == ['Wear', 'Jackets']

    def test_breadcrumbs_skip_by_position_not_content(self, scraper, sel):
        product = scrape(scraper, {sel('breadcrumbs'): [el('Sale'), el('Outlet'), el('Home')]})
        assert product.breadcrumbs == ['Home']

    def test_simple_text_fields(self, scraper, sel):
        product = scrape(scraper, {
            sel('category'): [el('Originals')],
            sel('title'): [el('Track Jacket')],
            sel('price'): [el('¥9,889')],
            sel('description_heading'): [el('Classic')],
            sel('description_title'): [el('Heritage style')],
            sel('description'): [el('A jacket.')],
        })
        assert (product.category, product.title, product.price) == ('Originals', 'Track Jacket', '¥9,889')
        assert product.description_heading == 'Classic'
        assert product.description_title == 'Heritage style'
        assert product.description == 'A jacket.'

    def test_unreadable_text_leaves_field_empty(self, scraper, sel):
        product = scrape(scraper, {sel('title'): [FakeElement(broken=True)], sel('price'): [el('¥1')]})
        assert product.title == ''
        assert product.price == '¥1'


class TestColorsSizesMedia:

    def color(self, sel, src, alt):
        return FakeElement(children={sel('color_image'): [el(src=src, alt=alt)]})

    def test_color_needs_both_src_and_alt(self, scraper, sel):
        product = scrape(scraper, {sel('color_options'): [
            self.color(sel, '/img/black.jpg', 'Black'),
            self.color(sel, '/img/white.jpg', ''),
            self.color(sel, '', 'Red'),
            FakeElement(),
        ]})
        assert product.available_colors == [ColorOption(path='https://shop.example.jp/img/black.jpg', color='Black')]

    def test_sizes_skip_empty(self, scraper, sel):
        product = scrape(scraper, {sel('sizes'): [el('S'), el(''), el('M')]})
        assert product.available_sizes == ['S', 'M']

    def test_images_before_videos(self, scraper, sel):
        product = scrape(scraper, {
            sel('videos'): [el(src='/v/1.mp4')],
            sel('images'): [el(src='/i/1.jpg'), el(src='/i/2.jpg')],
        })
        assert product.media == [
            Media(type='image', path='https://shop.example.jp/i/1.jpg'),
            Media(type='image', path='https://shop.example.jp/i/2.jpg'),
            Media(type='video', path='https://shop.example.jp/v/1.mp4'),
        ]


class TestCoordinatedProducts:

    def card(self, sel, src='', alt='', price=None):
        children = {sel('coordinated_image'): [el(src=src, alt=alt)]}
        if price is not None:
            children[sel('coordinated_price')] = [el(price)]
        return FakeElement(children=children)

    def test_product_number_from_image_path(self, scraper, sel):
        product = scrape(scraper, {sel('coordinated_items'): [
            self.card(sel, src='/static/img/HB9386/HB9386_01.jpg', alt='Pants', price='¥5,000'),
        ]})
        assert product.coordinated_products == [CoordinatedProduct(
            title='Pants',
            price='¥5,000',
            path='https://shop.example.jp/static/img/HB9386/HB9386_01.jpg',
            product_number='HB9386',
            product_page_url='https://shop.example.jp/products/HB9386',
        )]

    def test_short_path_gives_empty_number(self, scraper, sel):
        product = scrape(scraper, {sel('coordinated_items'): [self.card(sel, src='/img/x.jpg', alt='Cap')]})
        item = product.coordinated_products[0]
        assert item.product_number == ''
        assert item.product_page_url == 'https://shop.example.jp/products/'
        assert item.price == ''


class TestDescriptions:

    def test_specifications_keep_page_order(self, scraper, sel):
        product = scrape(scraper, {sel('specifications'): [el('Regular fit'), el('Polyester 100%')]})
        assert product.specifications == ['Regular fit', 'Polyester 100%']

    def test_special_description_needs_title_and_illustration(self, scraper, sel):
        def content(title=None, alt=None):
            children = {}
            if title is not None:
                children[sel('special_title')] = [el(title)]
            if alt is not None:
                children[sel('special_illustration')] = [el(alt=alt)]
            return FakeElement(children=children)

        product = scrape(scraper, {sel('special_contents'): [
            content('AEROREADY', 'Moisture managing'),
            content('Primegreen'),
            content(alt='orphan image'),
        ]})
        assert product.special_description == [SpecialDescription(title='AEROREADY', description='Moisture managing')]


class TestSizeChart:

    def test_build_geometry(self):
        chart = build_size_chart(['Chest', 'Waist'], ['S', 'M', 'L'], [['88', '92', '96'], ['70', '74', '78']])
        assert chart == {
            'Chest': [{'S': '88'}, {'M': '92'}, {'L': '96'}],
            'Waist': [{'S': '70'}, {'M': '74'}, {'L': '78'}],
        }

    def test_short_column_is_padded(self):
        chart = build_size_chart(['Chest'], ['S', 'M'], [['88']])
        assert chart == {'Chest': [{'S': '88'}, {'M': ''}]}

    def test_extra_cells_rejected(self):
        with pytest.raises(SizeChartError):
            build_size_chart(['Chest'], ['S'], [['88', '92']])

    def test_extracted_from_table_rows(self, scraper, sel):
        product = scrape(scraper, {
            sel('size_chart_headers'): [el('Chest'), el(''), el('Waist')],
            sel('size_chart_row_cells', row=1): [el('S'), el('M')],
            sel('size_chart_row_cells', row=2): [el('88'), el('92')],
            sel('size_chart_row_cells', row=3): [el('70'), el('74')],
            sel('size_remarks'): [el('Measured flat'), el('')],
        })
        assert product.size_chart == {
            'Chest': [{'S': '88'}, {'M': '92'}],
            'Waist': [{'S': '70'}, {'M': '74'}],
        }
        assert product.size_remarks == ['Measured flat']

    def test_lookup_failure_is_hard(self, scraper, sel):
        with pytest.raises(SizeChartError):
            scrape(scraper, {sel('size_chart_headers'): [el('Chest')]},
                   failing_selectors=[sel('size_chart_row_cells', row=1)])

    def test_unreadable_cell_is_hard(self, scraper, sel):
        with pytest.raises(SizeChartError):
            scrape(scraper, {
                sel('size_chart_headers'): [el('Chest')],
                sel('size_chart_row_cells', row=1): [el('S')],
                sel('size_chart_row_cells', row=2): [FakeElement(broken=True)],
            })


class TestReviewSummary:

    def test_full_summary(self, scraper, sel):
        product = scrape(scraper, {
            sel('summary_rating'): [el('4.6')],
            sel('summary_review_count'): [el('128')],
            sel('summary_recommended'): [el('93.75%')],
            sel('summary_secondary_ratings'): [
                el(title='Tight'), el(title='Long'), el(title='High'), el(title='Comfortable'),
            ],
        })
        assert product.review_summary == ReviewSummary(
            rating=4.6, number_of_reviews=128, recommended_rate='93.75%',
            fit='Tight', length='Long', quality='High', comfort='Comfortable',
        )

    def test_secondary_ratings_are_positional(self, scraper, sel):
        product = scrape(scraper, {sel('summary_secondary_ratings'): [el(title='A'), el(title='B')]})
        summary = product.review_summary
        assert (summary.fit, summary.length, summary.quality, summary.comfort) == ('A', 'B', '', '')

    def test_parse_failures_default(self, scraper, sel):
        product = scrape(scraper, {
            sel('summary_rating'): [el('n/a')],
            sel('summary_review_count'): [el('many')],
            sel('summary_recommended'): [FakeElement(broken=True)],
        })
        assert product.review_summary == ReviewSummary(rating=0.0, number_of_reviews=0, recommended_rate='0.00%')


class TestReviews:

    def test_rating_uses_value_after_slash(self):
        assert parse_review_rating('4.5/5') == 5.0
        assert parse_review_rating('3 / 4') == 4.0

    def test_rating_defaults_to_zero(self):
        assert parse_review_rating('') == 0.0
        assert parse_review_rating('4.5') == 0.0
        assert parse_review_rating('4/five') == 0.0

    def test_review_blocks(self, scraper, sel):
        full = FakeElement(children={
            sel('review_rating'): [el(title='4/5')],
            sel('review_date'): [el(content='2023-05-01')],
            sel('review_title'): [el('Great')],
            sel('review_text'): [el('Fits well')],
            sel('review_author'): [el('runner42')],
        })
        empty = FakeElement()

        product = scrape(scraper, {sel('reviews'): [full, empty]})

        first, second = product.reviews
        assert (first.rating, first.date, first.title, first.description, first.review_id) == \
            (5.0, '2023-05-01', 'Great', 'Fits well', 'runner42')
        assert (second.rating, second.date, second.title, second.description, second.review_id) == \
            (0.0, '', '', '', '')


class TestTags:

    def test_tags_skip_empty(self, scraper, sel):
        product = scrape(scraper, {sel('tags'): [el('Running'), el(''), el('Originals')]})
        assert product.tags == ['Running', 'Originals']


class TestDocument:

    def test_to_document_is_plain_nested_dict(self, scraper, sel):
        product = scrape(scraper, {sel('images'): [el(src='/i/1.jpg')]})
        doc = product.to_document()
        assert doc['product_url'] == URL
        assert doc['media'] == [{'type': 'image', 'path': 'https://shop.example.jp/i/1.jpg'}]
        assert doc['review_summary']['rating'] == 0.0
