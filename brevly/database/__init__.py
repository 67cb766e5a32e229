"""Database layer for the Brevly service."""

from .base import LinkStoreBase, LinkStoreTransaction
from .postgres import PostgresLinkStore
from .models import Link, Report

__all__ = ["LinkStoreBase", "LinkStoreTransaction", "PostgresLinkStore", "Link", "Report"]
