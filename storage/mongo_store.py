"""
Mongo Store Module
==================
Single-document writes of ProductURL and Product records, and the bulk
read that seeds product extraction.

Inserts are independent and unkeyed: running discovery twice stores every
link twice. Duplicates are only collapsed in the CSV export.
"""

from typing import Dict, Iterator, List, Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config import Config
from utils import logger
from scrapers.models import Product, ProductURL


class MongoStore:
    """Thin wrapper over the two crawl collections."""

    def __init__(
        self,
        client: Optional[MongoClient] = None,
        uri: str = Config.MONGO_URI,
        db_name: str = Config.MONGO_DB_NAME,
        product_url_collection: str = Config.PRODUCT_URL_COLLECTION,
        product_collection: str = Config.PRODUCT_COLLECTION
    ):
        self.client = client if client is not None else MongoClient(uri)
        db = self.client[db_name]
        self.product_urls: Collection = db[product_url_collection]
        self.products: Collection = db[product_collection]

        logger.info(f"MongoStore ready: {db_name}.{product_url_collection}, {db_name}.{product_collection}")

    def insert_product_url(self, record: ProductURL) -> bool:
        """Insert one discovered link. Failures are logged, not raised."""
        try:
            self.product_urls.insert_one(record.to_document())
            return True
        except PyMongoError as e:
            logger.error(f"Failed to insert product URL {record.url}: {e}")
            return False

    def insert_product(self, product: Product) -> bool:
        """Insert one extracted product. Failures are logged, not raised."""
        try:
            self.products.insert_one(product.to_document())
        except PyMongoError as e:
            logger.error(f"Failed to insert product {product.product_url}: {e}")
            return False

        logger.info(f"Inserted product: {product.product_url}")
        return True

    def count_product_urls(self) -> int:
        return self.product_urls.count_documents({})

    def find_product_urls(self, limit: int = Config.PRODUCT_URL_BATCH_LIMIT) -> List[ProductURL]:
        """Read up to `limit` stored links to seed product extraction."""
        cursor = self.product_urls.find({}, limit=limit)
        try:
            return [ProductURL.from_document(doc) for doc in cursor]
        finally:
            cursor.close()

    def iter_documents(self, collection: Collection) -> Iterator[Dict]:
        """Yield every document of a collection without Mongo's _id."""
        cursor = collection.find({}, {'_id': False})
        try:
            yield from cursor
        finally:
            cursor.close()

    def close(self):
        self.client.close()
