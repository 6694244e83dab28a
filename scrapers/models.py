"""
Record Models
=============
Dataclasses for the two records the crawler writes: ProductURL (phase 1)
and Product (phase 2). Every Product field defaults to its zero value so a
page where nothing matches still yields a valid record.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List


@dataclass
class ProductURL:
    """One product link discovered on a category listing page."""

    category: str
    page_no: int
    url: str

    def to_document(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_document(cls, doc: Dict) -> 'ProductURL':
        return cls(
            category=doc.get('category', ''),
            page_no=int(doc.get('page_no', 0) or 0),
            url=doc.get('url', ''),
        )


@dataclass
class ColorOption:
    path: str = ''
    color: str = ''


@dataclass
class Media:
    type: str = ''
    path: str = ''


@dataclass
class CoordinatedProduct:
    title: str = ''
    price: str = ''
    path: str = ''
    product_number: str = ''
    product_page_url: str = ''


@dataclass
class SpecialDescription:
    title: str = ''
    description: str = ''


@dataclass
class ReviewSummary:
    rating: float = 0.0
    number_of_reviews: int = 0
    recommended_rate: str = ''
    fit: str = ''
    length: str = ''
    quality: str = ''
    comfort: str = ''


@dataclass
class Review:
    rating: float = 0.0
    title: str = ''
    description: str = ''
    date: str = ''
    review_id: str = ''


@dataclass
class Product:
    """Everything extracted from one rendered product page."""

    product_url: str
    breadcrumbs: List[str] = field(default_factory=list)
    category: str = ''
    title: str = ''
    price: str = ''
    available_colors: List[ColorOption] = field(default_factory=list)
    available_sizes: List[str] = field(default_factory=list)
    media: List[Media] = field(default_factory=list)
    coordinated_products: List[CoordinatedProduct] = field(default_factory=list)
    description_heading: str = ''
    description_title: str = ''
    description: str = ''
    specifications: List[str] = field(default_factory=list)
    special_description: List[SpecialDescription] = field(default_factory=list)
    size_chart: Dict[str, List[Dict[str, str]]] = field(default_factory=dict)
    size_remarks: List[str] = field(default_factory=list)
    review_summary: ReviewSummary = field(default_factory=ReviewSummary)
    reviews: List[Review] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)

    def to_document(self) -> Dict:
        """Convert to a plain nested dict ready for insertion."""
        return asdict(self)
