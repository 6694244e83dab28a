"""
Storage Package
===============
MongoDB persistence for crawl records.
"""

from .mongo_store import MongoStore

__all__ = ['MongoStore']
