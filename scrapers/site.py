"""
Site Adapter Module
===================
Everything that ties the crawler to one site's markup: the base URL, the
CSS selector for every field, and the positional tables used where the
page offers no labels.

Positional tables are a known fragility: breadcrumbs drop fixed leading
crumbs by index and the secondary review ratings are mapped to fields by
their order on the page, not by label.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from config import Config
from utils import resolve_url


# Leading breadcrumb positions that are always "home" / "men"
BREADCRUMB_SKIP: Tuple[int, ...] = (0, 1)

# Secondary rating images, in page order
SUMMARY_RATING_FIELDS: Tuple[str, ...] = ('fit', 'length', 'quality', 'comfort')


ADIDAS_JP_SELECTORS: Dict[str, str] = {
    # Discovery
    'category_links': '.lpc-ukLocalNavigation_itemList li a',
    'page_total': '.pageTotal',
    'listing_product_links': '.articleDisplayCard-children a.image_link',

    # Interaction
    'modal_close': '.modal .boxClose',
    'gallery_wrapper': '.article_image_wrapper',

    # Header
    'breadcrumbs': '.breadcrumbListItem a',
    'category': '.categoryName',
    'title': '.itemTitle',
    'price': '.price-value',

    # Variants
    'color_options': '.selectable-image-group .selectableImageListItem',
    'color_image': 'img',
    'sizes': '.sizeSelectorList .sizeSelectorListItemButton',

    # Media
    'images': '.article_image_wrapper img.test-img',
    'videos': '.pdp-article-video-wrap video',

    # Coordinated products
    'coordinated_items': '.coordinateItems .carouselListitem',
    'coordinated_image': '.coordinate_image img',
    'coordinated_price': '.price-value.test-price-value',

    # Description
    'description_heading': '.heading.itemName.test-commentItem-topHeading',
    'description_title': '.heading.itemFeature.test-commentItem-subheading',
    'description': (
        '.description.clearfix.test-descriptionBlock '
        '.description_part.details.test-itemComment-descriptionPart '
        '.commentItem-mainText.test-commentItem-mainText'
    ),
    'specifications': '.articleFeatures.description_part .articleFeaturesItem',
    'special_contents': '.contents .content',
    'special_title': '.tecTextTitle',
    'special_illustration': 'div.item_part.illustration img',

    # Size chart ({row} is the 1-based table row)
    'size_chart_headers': '.sizeChartTable thead .sizeChartTHeaderCell',
    'size_chart_row_cells': '.sizeChartTable tbody .sizeChartTRow:nth-of-type({row}) .sizeChartTCell span',
    'size_remarks': '.remarkList.test-remarkList .sizeDescriptionRemark',

    # Review summary
    'summary_rating': (
        '.BVRRRating.BVRRRatingNormal.BVRRRatingOverall '
        '.BVRRRatingNormalOutOf .BVRRRatingNumber'
    ),
    'summary_review_count': '.BVRRQuickTakeCustomWrapper .BVRRBuyAgainTotal',
    'summary_recommended': '.BVRRQuickTakeCustomWrapper .BVRRBuyAgainPercentage',
    'summary_secondary_ratings': '.BVRRSecondaryRatingsContainer .BVRRRatingRadioImage img',

    # Reviews
    'reviews': '.BVRRDisplayContent .BVRRDisplayContentBody .BVRRContentReview',
    'review_rating': '.BVRRReviewDisplayStyle5Header .BVRRRatingNormalImage img',
    'review_date': '.BVRRReviewDateContainer meta',
    'review_title': '.BVRRReviewTitleContainer .BVRRReviewTitle',
    'review_text': '.BVRRReviewTextContainer .BVRRReviewText',
    'review_author': '.BVRRUserNicknameContainer .BVRRUserNickname .BVRRNickname',

    # Tags
    'tags': '.itemTagsPosition a',
}


@dataclass
class SiteAdapter:
    """Selectors and base URL injected into the scrapers."""

    base_url: str
    selectors: Dict[str, str]
    breadcrumb_skip: Tuple[int, ...] = BREADCRUMB_SKIP
    summary_rating_fields: Tuple[str, ...] = SUMMARY_RATING_FIELDS
    gallery_expand_class: str = 'isExpand'
    product_path: str = '/products/'

    def selector(self, name: str, **fmt) -> str:
        """Look up a selector by field name. Raises KeyError for unknown names."""
        query = self.selectors[name]
        return query.format(**fmt) if fmt else query

    def resolve(self, href: str) -> str:
        """Resolve a site-relative path against the base URL."""
        return resolve_url(self.base_url, href)

    def product_page_url(self, product_number: str) -> str:
        return f"{self.base_url}{self.product_path}{product_number}"


ADIDAS_JP = SiteAdapter(base_url=Config.BASE_SITE_URL, selectors=ADIDAS_JP_SELECTORS)
