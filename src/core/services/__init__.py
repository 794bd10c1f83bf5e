"""
Business services for City Atlas.

- reconciler.py: writes that keep location and site references consistent
- query.py: listings, orphan detection and location detail
"""

from typing import Any

from core.config import Config
from core.services.query import LocationQueryService
from core.services.reconciler import LocationReconciler
from core.stores import DynamoLocationStore, DynamoRegionStore, DynamoSiteStore

__all__ = ["LocationQueryService", "LocationReconciler", "build_query_service", "build_reconciler"]


def build_reconciler(dynamo_client: Any, config: Config) -> LocationReconciler:
    return LocationReconciler(
        DynamoLocationStore(dynamo_client, config.locations_table),
        DynamoSiteStore(dynamo_client, config.sites_table),
    )


def build_query_service(dynamo_client: Any, config: Config) -> LocationQueryService:
    return LocationQueryService(
        DynamoLocationStore(dynamo_client, config.locations_table),
        DynamoSiteStore(dynamo_client, config.sites_table),
        DynamoRegionStore(dynamo_client, config.regions_table),
    )
