"""DynamoDB-backed stores using the low-level boto3 client."""

import logging
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import ClientError

from core.errors import ErrorCode, StoreError
from core.models import Location, Region, Site
from core.stores.interface import LocationStore, RegionStore, SiteStore

logger = logging.getLogger(__name__)

PINCODE_INDEX = "pincode-index"
REGION_INDEX = "regionId-index"

# BatchGetItem accepts at most 100 keys per request
_BATCH_SIZE = 100
# UnprocessedKeys are re-requested with exponential backoff, then given up on
_BATCH_MAX_ATTEMPTS = 5
_BATCH_BASE_DELAY = 0.05


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def _store_call(action: str) -> Iterator[None]:
    try:
        yield
    except ClientError as e:
        raise StoreError(f"DynamoDB {action} failed: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e


@contextmanager
def _parsing(table_key: str, item: dict[str, Any]) -> Iterator[None]:
    try:
        yield
    except (KeyError, TypeError, ValueError) as e:
        # pydantic.ValidationError is a ValueError
        key = item.get(table_key, {}).get("S", "?")
        raise StoreError(f"Malformed item {table_key}={key}: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e


def _opt_s(item: dict[str, Any], attr: str) -> str | None:
    value = item.get(attr)
    return value["S"] if value else None


def _location_from_item(item: dict[str, Any]) -> Location:
    with _parsing("locationId", item):
        return Location(
            id=item["locationId"]["S"],
            name=item["name"]["S"],
            pincode=item["pincode"]["S"],
            site_ids=[v["S"] for v in item.get("siteIds", {}).get("L", [])],
            region_id=_opt_s(item, "regionId"),
            created_at=_opt_s(item, "createdAt"),
            updated_at=_opt_s(item, "updatedAt"),
        )


def _site_from_item(item: dict[str, Any]) -> Site:
    with _parsing("siteId", item):
        return Site(
            id=item["siteId"]["S"],
            name=item["name"]["S"],
            location_id=_opt_s(item, "locationId"),
            likes=int(item.get("likes", {}).get("N", "0")),
            created_at=_opt_s(item, "createdAt"),
            updated_at=_opt_s(item, "updatedAt"),
        )


def _region_from_item(item: dict[str, Any]) -> Region:
    with _parsing("regionId", item):
        return Region(id=item["regionId"]["S"], name=item["name"]["S"])


def _site_list(site_ids: list[str]) -> dict[str, Any]:
    return {"L": [{"S": site_id} for site_id in site_ids]}


def _scan(dynamo_client: Any, **scan_kwargs: Any) -> Iterator[dict[str, Any]]:
    last_key = None
    while True:
        if last_key:
            scan_kwargs["ExclusiveStartKey"] = last_key
        response = dynamo_client.scan(**scan_kwargs)
        yield from response.get("Items", [])
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            break


def _query(dynamo_client: Any, **query_kwargs: Any) -> Iterator[dict[str, Any]]:
    last_key = None
    while True:
        if last_key:
            query_kwargs["ExclusiveStartKey"] = last_key
        response = dynamo_client.query(**query_kwargs)
        yield from response.get("Items", [])
        last_key = response.get("LastEvaluatedKey")
        if not last_key:
            break


def _batch_get(dynamo_client: Any, table: str, key_attr: str, ids: Iterable[str]) -> list[dict[str, Any]]:
    unique_ids = list(dict.fromkeys(ids))
    items: list[dict[str, Any]] = []
    for start in range(0, len(unique_ids), _BATCH_SIZE):
        chunk = unique_ids[start : start + _BATCH_SIZE]
        request: dict[str, Any] = {table: {"Keys": [{key_attr: {"S": i}} for i in chunk]}}
        for attempt in range(_BATCH_MAX_ATTEMPTS):
            if attempt:
                time.sleep(_BATCH_BASE_DELAY * 2 ** (attempt - 1))
            response = dynamo_client.batch_get_item(RequestItems=request)
            items.extend(response.get("Responses", {}).get(table, []))
            request = response.get("UnprocessedKeys") or {}
            if not request:
                break
        else:
            pending = len(request.get(table, {}).get("Keys", []))
            raise StoreError(
                f"DynamoDB batch get on {table} left {pending} keys unprocessed after {_BATCH_MAX_ATTEMPTS} attempts",
                code=ErrorCode.STORE_UNAVAILABLE,
            )
    return items


class DynamoLocationStore(LocationStore):
    def __init__(self, dynamo_client: Any, table_name: str) -> None:
        self._client = dynamo_client
        self._table = table_name

    def get(self, location_id: str) -> Location | None:
        with _store_call("get location"):
            response = self._client.get_item(TableName=self._table, Key={"locationId": {"S": location_id}})
        item = response.get("Item")
        return _location_from_item(item) if item else None

    def find_by_pincode(self, pincode: str) -> Location | None:
        with _store_call("query pincode"):
            response = self._client.query(
                TableName=self._table,
                IndexName=PINCODE_INDEX,
                KeyConditionExpression="pincode = :pincode",
                ExpressionAttributeValues={":pincode": {"S": pincode}},
                Limit=1,
            )
        items = response.get("Items", [])
        return _location_from_item(items[0]) if items else None

    def insert(self, location: Location) -> Location:
        now = _now()
        saved = location.model_copy(update={"created_at": now, "updated_at": now})
        item: dict[str, Any] = {
            "locationId": {"S": saved.id},
            "name": {"S": saved.name},
            "pincode": {"S": saved.pincode},
            "siteIds": _site_list(saved.site_ids),
            "createdAt": {"S": now},
            "updatedAt": {"S": now},
        }
        if saved.region_id:
            item["regionId"] = {"S": saved.region_id}
        with _store_call("put location"):
            self._client.put_item(
                TableName=self._table,
                Item=item,
                ConditionExpression="attribute_not_exists(locationId)",
            )
        return saved

    def upsert(self, location_id: str, name: str, pincode: str, site_ids: list[str]) -> Location:
        now = _now()
        with _store_call("upsert location"):
            response = self._client.update_item(
                TableName=self._table,
                Key={"locationId": {"S": location_id}},
                UpdateExpression=(
                    "SET #name = :name, pincode = :pincode, siteIds = :siteIds, "
                    "updatedAt = :now, createdAt = if_not_exists(createdAt, :now)"
                ),
                ExpressionAttributeNames={"#name": "name"},
                ExpressionAttributeValues={
                    ":name": {"S": name},
                    ":pincode": {"S": pincode},
                    ":siteIds": _site_list(site_ids),
                    ":now": {"S": now},
                },
                ReturnValues="ALL_NEW",
            )
        return _location_from_item(response["Attributes"])

    def append_site(self, location_id: str, site_id: str) -> Location | None:
        try:
            response = self._client.update_item(
                TableName=self._table,
                Key={"locationId": {"S": location_id}},
                UpdateExpression="SET siteIds = list_append(if_not_exists(siteIds, :empty), :site), updatedAt = :now",
                ConditionExpression="attribute_exists(locationId)",
                ExpressionAttributeValues={
                    ":empty": {"L": []},
                    ":site": _site_list([site_id]),
                    ":now": {"S": _now()},
                },
                ReturnValues="ALL_NEW",
            )
        except self._client.exceptions.ConditionalCheckFailedException:
            return None
        except ClientError as e:
            raise StoreError(f"DynamoDB append site failed: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e
        return _location_from_item(response["Attributes"])

    def remove_sites(self, location_id: str, site_ids: Iterable[str]) -> int:
        """Rewrite the site list without ``site_ids``.

        The rewrite is conditional on the list read a moment earlier, so a
        concurrent append is never silently overwritten.
        """
        location = self.get(location_id)
        if location is None:
            return 0
        drop = set(site_ids)
        keep = [site_id for site_id in location.site_ids if site_id not in drop]
        if len(keep) == len(location.site_ids):
            return 0

        try:
            self._client.update_item(
                TableName=self._table,
                Key={"locationId": {"S": location_id}},
                UpdateExpression="SET siteIds = :keep, updatedAt = :now",
                ConditionExpression="siteIds = :seen",
                ExpressionAttributeValues={
                    ":keep": _site_list(keep),
                    ":seen": _site_list(location.site_ids),
                    ":now": {"S": _now()},
                },
            )
        except self._client.exceptions.ConditionalCheckFailedException as e:
            raise StoreError(
                f"location {location_id} changed while removing sites",
                code=ErrorCode.STORE_UNAVAILABLE,
            ) from e
        except ClientError as e:
            raise StoreError(f"DynamoDB remove sites failed: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e
        return len(location.site_ids) - len(keep)

    def list_with_region(self) -> list[Location]:
        with _store_call("scan locations"):
            items = list(_scan(self._client, TableName=self._table, FilterExpression="attribute_exists(regionId)"))
        return [_location_from_item(item) for item in items]

    def list_without_region(self) -> list[Location]:
        with _store_call("scan locations"):
            items = list(_scan(self._client, TableName=self._table, FilterExpression="attribute_not_exists(regionId)"))
        return [_location_from_item(item) for item in items]

    def list_by_region(self, region_id: str) -> list[Location]:
        with _store_call("query region"):
            items = list(
                _query(
                    self._client,
                    TableName=self._table,
                    IndexName=REGION_INDEX,
                    KeyConditionExpression="regionId = :region",
                    ExpressionAttributeValues={":region": {"S": region_id}},
                )
            )
        return [_location_from_item(item) for item in items]


class DynamoSiteStore(SiteStore):
    def __init__(self, dynamo_client: Any, table_name: str) -> None:
        self._client = dynamo_client
        self._table = table_name

    def get_many(self, site_ids: Iterable[str]) -> list[Site]:
        with _store_call("batch get sites"):
            items = _batch_get(self._client, self._table, "siteId", site_ids)
        return [_site_from_item(item) for item in items]

    def _update_site(self, site_id: str, condition: str, **update_kwargs: Any) -> bool:
        try:
            self._client.update_item(
                TableName=self._table,
                Key={"siteId": {"S": site_id}},
                ConditionExpression=condition,
                **update_kwargs,
            )
        except self._client.exceptions.ConditionalCheckFailedException:
            logger.debug("Skipping site %s: condition %s not met", site_id, condition)
            return False
        except ClientError as e:
            raise StoreError(f"DynamoDB update site {site_id} failed: {e}", code=ErrorCode.STORE_UNAVAILABLE) from e
        return True

    def set_location(self, site_ids: Iterable[str], location_id: str) -> int:
        now = _now()
        updated = 0
        for site_id in dict.fromkeys(site_ids):
            if self._update_site(
                site_id,
                "attribute_exists(siteId)",
                UpdateExpression="SET locationId = :loc, updatedAt = :now",
                ExpressionAttributeValues={":loc": {"S": location_id}, ":now": {"S": now}},
            ):
                updated += 1
        return updated

    def clear_location(self, site_ids: Iterable[str], location_id: str) -> int:
        now = _now()
        updated = 0
        for site_id in dict.fromkeys(site_ids):
            # a site already claimed by another location keeps its new owner
            if self._update_site(
                site_id,
                "locationId = :loc",
                UpdateExpression="REMOVE locationId SET updatedAt = :now",
                ExpressionAttributeValues={":loc": {"S": location_id}, ":now": {"S": now}},
            ):
                updated += 1
        return updated


class DynamoRegionStore(RegionStore):
    def __init__(self, dynamo_client: Any, table_name: str) -> None:
        self._client = dynamo_client
        self._table = table_name

    def get_many(self, region_ids: Iterable[str]) -> list[Region]:
        with _store_call("batch get regions"):
            items = _batch_get(self._client, self._table, "regionId", region_ids)
        return [_region_from_item(item) for item in items]
