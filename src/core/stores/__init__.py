"""Persistence layer: store interfaces and their DynamoDB implementations."""

from core.stores.dynamo import DynamoLocationStore, DynamoRegionStore, DynamoSiteStore
from core.stores.interface import LocationStore, RegionStore, SiteStore

__all__ = [
    "DynamoLocationStore",
    "DynamoRegionStore",
    "DynamoSiteStore",
    "LocationStore",
    "RegionStore",
    "SiteStore",
]
