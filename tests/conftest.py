"""Shared test fixtures for City Atlas."""

import itertools
import os
import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Unset AWS_PROFILE for local testing (DynamoDB Local doesn't need it)
if "AWS_PROFILE" in os.environ:
    del os.environ["AWS_PROFILE"]

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from core.models import Location, Region, Site  # noqa: E402
from core.stores import LocationStore, RegionStore, SiteStore  # noqa: E402


# In-memory stores for service-level unit tests
class InMemoryLocationStore(LocationStore):
    def __init__(self) -> None:
        self.items: dict[str, Location] = {}
        self._clock = itertools.count(1)

    def _stamp(self) -> str:
        return f"2026-01-01T00:00:{next(self._clock):02d}+00:00"

    def add(self, location: Location) -> Location:
        """Seed a record directly, bypassing the reconciler."""
        stamped = location.model_copy(update={"created_at": location.created_at or self._stamp()})
        self.items[stamped.id] = stamped
        return stamped

    def get(self, location_id):
        return self.items.get(location_id)

    def find_by_pincode(self, pincode):
        return next((loc for loc in self.items.values() if loc.pincode == pincode), None)

    def insert(self, location):
        now = self._stamp()
        saved = location.model_copy(update={"created_at": now, "updated_at": now})
        self.items[saved.id] = saved
        return saved

    def upsert(self, location_id, name, pincode, site_ids):
        now = self._stamp()
        prior = self.items.get(location_id)
        saved = Location(
            id=location_id,
            name=name,
            pincode=pincode,
            site_ids=list(site_ids),
            region_id=prior.region_id if prior else None,
            created_at=prior.created_at if prior else now,
            updated_at=now,
        )
        self.items[location_id] = saved
        return saved

    def append_site(self, location_id, site_id):
        prior = self.items.get(location_id)
        if prior is None:
            return None
        saved = prior.model_copy(update={"site_ids": [*prior.site_ids, site_id], "updated_at": self._stamp()})
        self.items[location_id] = saved
        return saved

    def remove_sites(self, location_id, site_ids):
        prior = self.items.get(location_id)
        if prior is None:
            return 0
        drop = set(site_ids)
        keep = [site_id for site_id in prior.site_ids if site_id not in drop]
        self.items[location_id] = prior.model_copy(update={"site_ids": keep, "updated_at": self._stamp()})
        return len(prior.site_ids) - len(keep)

    def list_with_region(self):
        return [loc for loc in self.items.values() if loc.region_id]

    def list_without_region(self):
        return [loc for loc in self.items.values() if not loc.region_id]

    def list_by_region(self, region_id):
        return [loc for loc in self.items.values() if loc.region_id == region_id]


class InMemorySiteStore(SiteStore):
    def __init__(self, *sites: Site) -> None:
        self.items: dict[str, Site] = {site.id: site for site in sites}

    def get_many(self, site_ids):
        return [self.items[i] for i in dict.fromkeys(site_ids) if i in self.items]

    def _set(self, site_ids, location_id, owned_by=None):
        updated = 0
        for site_id in dict.fromkeys(site_ids):
            site = self.items.get(site_id)
            if site is None or (owned_by is not None and site.location_id != owned_by):
                continue
            self.items[site_id] = site.model_copy(update={"location_id": location_id})
            updated += 1
        return updated

    def set_location(self, site_ids, location_id):
        return self._set(site_ids, location_id)

    def clear_location(self, site_ids, location_id):
        return self._set(site_ids, None, owned_by=location_id)


class InMemoryRegionStore(RegionStore):
    def __init__(self, *regions: Region) -> None:
        self.items: dict[str, Region] = {region.id: region for region in regions}

    def get_many(self, region_ids):
        return [self.items[i] for i in dict.fromkeys(region_ids) if i in self.items]


@pytest.fixture
def location_store():
    return InMemoryLocationStore()


@pytest.fixture
def site_store():
    return InMemorySiteStore(*(Site(id=f"S{n}", name=f"Site {n}", likes=n) for n in range(1, 7)))


@pytest.fixture
def region_store():
    return InMemoryRegionStore(Region(id="MH", name="Maharashtra"), Region(id="KA", name="Karnataka"))


# DynamoDB fixtures
@pytest.fixture
def dynamodb_client():
    """Provide a low-level DynamoDB client for integration tests."""
    import boto3
    from core.config import get_config

    config = get_config()

    return boto3.client(
        "dynamodb",
        endpoint_url=config.dynamodb_endpoint,
        region_name=config.aws_region,
        aws_access_key_id="dummy",
        aws_secret_access_key="dummy",
    )


def _clear_table(dynamodb_client, table_name, key_attr):
    response = dynamodb_client.scan(TableName=table_name, ProjectionExpression=key_attr)
    for item in response.get("Items", []):
        dynamodb_client.delete_item(TableName=table_name, Key={key_attr: item[key_attr]})


@pytest.fixture
def dynamo_tables(dynamodb_client):
    """Yield the configured table names, emptying them after the test."""
    from core.config import get_config

    config = get_config()
    yield config
    _clear_table(dynamodb_client, config.locations_table, "locationId")
    _clear_table(dynamodb_client, config.sites_table, "siteId")
    _clear_table(dynamodb_client, config.regions_table, "regionId")
