"""
Product Detail Scraper Module
=============================
Turns one rendered product page into a Product record.

Every extraction step is independent: a selector that matches nothing, or
an element whose text/attribute cannot be read, leaves that field at its
zero value and the next step runs anyway. The size chart is the exception;
its geometry is load-bearing, so a lookup failure there raises
SizeChartError and the record is abandoned.
"""

import time
from typing import Any, Dict, List, Optional

from config import Config
from utils import logger, profile_step, profile_function
from .models import (
    Product,
    ColorOption,
    Media,
    CoordinatedProduct,
    SpecialDescription,
    ReviewSummary,
    Review
)
from .page import PageError, RenderedPage
from .site import SiteAdapter, ADIDAS_JP
from .interactions import close_modals, scroll_to_bottom, expand_gallery


DEFAULT_RECOMMENDED_RATE = '0.00%'

# Path segment of a coordinated product image that holds the product number,
# e.g. /static/img/HB9386/... -> HB9386
PRODUCT_NUMBER_SEGMENT = 3


class SizeChartError(Exception):
    """The size chart table could not be read."""


def build_size_chart(
    headers: List[str],
    row_keys: List[str],
    column_cells: List[List[str]]
) -> Dict[str, List[Dict[str, str]]]:
    """
    Zip each header's cells with the row keys.

    Every header maps to exactly len(row_keys) single-entry dicts; missing
    cells read as ''. More cells than row keys means the table geometry is
    not what we expect.
    """
    chart = {}
    for header, cells in zip(headers, column_cells):
        if len(cells) > len(row_keys):
            raise SizeChartError(
                f"Column '{header}' has {len(cells)} cells for {len(row_keys)} row keys"
            )
        chart[header] = [
            {key: cells[j] if j < len(cells) else ''}
            for j, key in enumerate(row_keys)
        ]
    return chart


def parse_review_rating(title: str) -> float:
    """
    Parse a review rating image title such as '4/5'.
    The value after the slash is used.
    """
    parts = title.split('/')
    if len(parts) < 2:
        return 0.0
    try:
        return float(parts[1].strip())
    except ValueError:
        return 0.0


class ProductDetailScraper:
    """
    Scraper for individual product pages.
    Runs the extraction steps in page order and returns the populated Product.
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

        logger.debug(f"ProductDetailScraper initialized for {self.site.base_url}")

    # =========================================================================
    # SOFT LOOKUP HELPERS
    # =========================================================================

    def _find_all(self, page: RenderedPage, name: str, within: Any = None) -> List[Any]:
        try:
            return page.find_all(self.site.selector(name), within)
        except PageError as e:
            logger.debug(f"[{name}] lookup failed: {e}")
            return []

    def _text(self, page: RenderedPage, name: str, within: Any = None) -> str:
        try:
            return page.text(page.find_one(self.site.selector(name), within))
        except PageError as e:
            logger.debug(f"[{name}] not read: {e}")
            return ''

    def _texts(self, page: RenderedPage, name: str, skip_empty: bool = True) -> List[str]:
        texts = []
        for element in self._find_all(page, name):
            try:
                text = page.text(element)
            except PageError:
                continue
            if text or not skip_empty:
                texts.append(text)
        return texts

    def _attribute(self, page: RenderedPage, element: Any, name: str) -> str:
        try:
            return page.attribute(element, name)
        except PageError:
            return ''

    # =========================================================================
    # PAGE PIPELINE
    # =========================================================================

    @profile_function
    def scrape_product(self, page: RenderedPage, url: str) -> Product:
        """Render the product page and extract every field."""
        product = Product(product_url=url)

        try:
            with profile_step("Render product page"):
                page.navigate(url)
        except PageError as e:
            logger.warning(f"Failed to load page: {e}")

        time.sleep(self.settle_seconds)

        expand_gallery(page, self.site.selector('gallery_wrapper'), self.site.gallery_expand_class)
        close_modals(page, self.site.selector('modal_close'))
        scroll_to_bottom(page, self.scroll_step, self.scroll_settle, self.scroll_max_iterations)

        time.sleep(self.settle_seconds)

        with profile_step("Extract product fields"):
            self.extract_fields(page, product)

        return product

    def extract_fields(self, page: RenderedPage, product: Product) -> Product:
        """Run every extraction step against an already rendered page."""
        product.breadcrumbs = self._extract_breadcrumbs(page)
        product.category = self._text(page, 'category')
        product.title = self._text(page, 'title')
        product.price = self._text(page, 'price')
        product.available_colors = self._extract_colors(page)
        product.available_sizes = self._texts(page, 'sizes')
        product.media = self._extract_media(page)
        product.coordinated_products = self._extract_coordinated_products(page)
        product.description_heading = self._text(page, 'description_heading')
        product.description_title = self._text(page, 'description_title')
        product.description = self._text(page, 'description')
        product.specifications = self._texts(page, 'specifications', skip_empty=False)
        product.special_description = self._extract_special_descriptions(page)
        product.size_chart = self._extract_size_chart(page)
        product.size_remarks = self._texts(page, 'size_remarks')
        product.review_summary = self._extract_review_summary(page)
        product.reviews = self._extract_reviews(page)
        product.tags = self._texts(page, 'tags')
        return product

    # =========================================================================
    # EXTRACTION STEPS
    # =========================================================================

    def _extract_breadcrumbs(self, page: RenderedPage) -> List[str]:
        breadcrumbs = []
        for index, element in enumerate(self._find_all(page, 'breadcrumbs')):
            if index in self.site.breadcrumb_skip:
                continue
            try:
                text = page.text(element)
            except PageError:
                continue
            if text:
                breadcrumbs.append(text)
        return breadcrumbs

    def _extract_colors(self, page: RenderedPage) -> List[ColorOption]:
        colors = []
        for option in self._find_all(page, 'color_options'):
            try:
                image = page.find_one(self.site.selector('color_image'), option)
            except PageError:
                continue
            src = self._attribute(page, image, 'src')
            color = self._attribute(page, image, 'alt')
            if src and color:
                colors.append(ColorOption(path=self.site.resolve(src), color=color))
        return colors

    def _extract_media(self, page: RenderedPage) -> List[Media]:
        media = []
        for media_type, name in (('image', 'images'), ('video', 'videos')):
            for element in self._find_all(page, name):
                src = self._attribute(page, element, 'src')
                if src:
                    media.append(Media(type=media_type, path=self.site.resolve(src)))
        return media

    def _extract_coordinated_products(self, page: RenderedPage) -> List[CoordinatedProduct]:
        products = []
        for card in self._find_all(page, 'coordinated_items'):
            item = CoordinatedProduct()

            image_src = ''
            try:
                image = page.find_one(self.site.selector('coordinated_image'), card)
                item.title = self._attribute(page, image, 'alt')
                image_src = self._attribute(page, image, 'src')
            except PageError:
                pass

            item.price = self._text(page, 'coordinated_price', within=card)
            if image_src:
                item.path = self.site.resolve(image_src)

            segments = image_src.split('/')
            if len(segments) > PRODUCT_NUMBER_SEGMENT:
                item.product_number = segments[PRODUCT_NUMBER_SEGMENT]
            item.product_page_url = self.site.product_page_url(item.product_number)

            products.append(item)
        return products

    def _extract_special_descriptions(self, page: RenderedPage) -> List[SpecialDescription]:
        descriptions = []
        for content in self._find_all(page, 'special_contents'):
            title = self._text(page, 'special_title', within=content)
            try:
                illustration = page.find_one(self.site.selector('special_illustration'), content)
            except PageError:
                continue
            description = self._attribute(page, illustration, 'alt')
            if title and description:
                descriptions.append(SpecialDescription(title=title, description=description))
        return descriptions

    def _extract_size_chart(self, page: RenderedPage) -> Dict[str, List[Dict[str, str]]]:
        try:
            headers = [
                text for text in
                (page.text(el) for el in page.find_all(self.site.selector('size_chart_headers')))
                if text
            ]
            row_keys = [
                page.text(el)
                for el in page.find_all(self.site.selector('size_chart_row_cells', row=1))
            ]
            column_cells = []
            for index in range(len(headers)):
                cells = page.find_all(self.site.selector('size_chart_row_cells', row=index + 2))
                column_cells.append([page.text(cell) for cell in cells])
        except PageError as e:
            raise SizeChartError(f"Failed to read size chart: {e}") from e

        return build_size_chart(headers, row_keys, column_cells)

    def _extract_review_summary(self, page: RenderedPage) -> ReviewSummary:
        summary = ReviewSummary()

        try:
            rating_elem = page.find_one(self.site.selector('summary_rating'))
            summary.rating = float(page.text(rating_elem))
        except (PageError, ValueError):
            summary.rating = 0.0

        try:
            count_elem = page.find_one(self.site.selector('summary_review_count'))
            summary.number_of_reviews = int(page.text(count_elem))
        except (PageError, ValueError):
            summary.number_of_reviews = 0

        try:
            recommended_elem = page.find_one(self.site.selector('summary_recommended'))
        except PageError:
            recommended_elem = None
        if recommended_elem is not None:
            try:
                summary.recommended_rate = page.text(recommended_elem)
            except PageError:
                summary.recommended_rate = DEFAULT_RECOMMENDED_RATE

        # Secondary ratings carry no labels; their order decides the field.
        secondary = self._find_all(page, 'summary_secondary_ratings')
        for field_name, element in zip(self.site.summary_rating_fields, secondary):
            try:
                setattr(summary, field_name, page.attribute(element, 'title'))
            except PageError:
                continue

        return summary

    def _extract_reviews(self, page: RenderedPage) -> List[Review]:
        reviews = []
        for block in self._find_all(page, 'reviews'):
            review = Review()

            try:
                rating_img = page.find_one(self.site.selector('review_rating'), block)
                review.rating = parse_review_rating(page.attribute(rating_img, 'title'))
            except PageError:
                pass

            try:
                date_meta = page.find_one(self.site.selector('review_date'), block)
                review.date = page.attribute(date_meta, 'content')
            except PageError:
                pass

            review.title = self._text(page, 'review_title', within=block)
            review.description = self._text(page, 'review_text', within=block)
            review.review_id = self._text(page, 'review_author', within=block)

            reviews.append(review)
        return reviews
