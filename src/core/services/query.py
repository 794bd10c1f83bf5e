"""Read-side operations over locations and their sites."""

import logging

from core.errors import EmptyResultError, ErrorCode, NotFoundError, ValidationError
from core.models import (
    Location,
    LocationDetail,
    LocationRef,
    LocationSummary,
    PageRequest,
    SiteSummary,
    parse_request,
)
from core.stores import LocationStore, RegionStore, SiteStore

logger = logging.getLogger(__name__)


def _sort_key(location: Location) -> tuple[str, str]:
    return (location.created_at or "", location.id)


def _summarize(location: Location, state: str | None = None) -> LocationSummary:
    return LocationSummary(
        id=location.id,
        name=location.name,
        pincode=location.pincode,
        state=state,
        total_destinations=len(location.site_ids),
        created_at=location.created_at,
        updated_at=location.updated_at,
    )


class LocationQueryService:
    def __init__(self, locations: LocationStore, sites: SiteStore, regions: RegionStore) -> None:
        self._locations = locations
        self._sites = sites
        self._regions = regions

    def list_locations(self, page: int = 1, limit: int = 10) -> list[LocationSummary]:
        """Page through locations joined to their region, ordered by creation time then id.

        Locations whose region is unset or unknown are left out. An empty page
        raises EmptyResultError.
        """
        request = parse_request(PageRequest, {"page": page, "limit": limit})

        candidates = self._locations.list_with_region()
        region_names = {
            region.id: region.name for region in self._regions.get_many(loc.region_id for loc in candidates if loc.region_id)
        }
        joined = sorted((loc for loc in candidates if loc.region_id in region_names), key=_sort_key)

        skip = request.limit * (request.page - 1)
        page_items = joined[skip : skip + request.limit]
        if not page_items:
            raise EmptyResultError(
                f"no cities on page {request.page} (limit {request.limit}, {len(joined)} total)",
                code=ErrorCode.EMPTY_RESULT,
            )
        return [_summarize(loc, region_names[loc.region_id]) for loc in page_items]

    def list_orphan_locations(self) -> list[LocationSummary]:
        orphans = sorted(self._locations.list_without_region(), key=_sort_key)
        logger.debug("Found %d orphan locations", len(orphans))
        return [_summarize(loc) for loc in orphans]

    def get_location_detail(self, location_id: str | None) -> LocationDetail:
        if not location_id:
            raise ValidationError("id is required", code=ErrorCode.VALIDATION_ERROR)

        location = self._locations.get(location_id)
        if location is None:
            raise NotFoundError(f"location {location_id} not found", code=ErrorCode.LOCATION_NOT_FOUND)

        ordered_ids = list(dict.fromkeys(location.site_ids))
        sites = {site.id: site for site in self._sites.get_many(ordered_ids)}
        destinations = [
            SiteSummary(
                id=site.id,
                name=site.name,
                likes=site.likes,
                created_at=site.created_at,
                updated_at=site.updated_at,
            )
            for site in (sites.get(site_id) for site_id in ordered_ids)
            if site is not None
        ]
        return LocationDetail(
            id=location.id,
            name=location.name,
            pincode=location.pincode,
            region_id=location.region_id,
            destinations=destinations,
            created_at=location.created_at,
            updated_at=location.updated_at,
        )

    def list_locations_by_region(self, region_id: str | None) -> list[LocationRef]:
        if not region_id:
            raise ValidationError("id is required", code=ErrorCode.VALIDATION_ERROR)
        return [LocationRef(id=loc.id, name=loc.name) for loc in self._locations.list_by_region(region_id)]
