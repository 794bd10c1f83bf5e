"""Keeps location → site forward lists and site → location back-references in step.

Writes are sequential and not atomic across tables. For an update the order is
fixed: clear removed sites, write the location, drop desired sites from the
forward list of any other location that owned them, then point every desired
site at it. A site moved between two locations therefore always ends owned by
the location written last, and listed by it alone. Removed sites are only
detached while they still point at the location being edited.
"""

import logging
import uuid
from collections import defaultdict

from core.errors import ConflictError, ErrorCode, NotFoundError
from core.models import AddSiteRequest, Location, UpsertLocationRequest, parse_request
from core.stores import LocationStore, SiteStore

logger = logging.getLogger(__name__)


class LocationReconciler:
    def __init__(self, locations: LocationStore, sites: SiteStore) -> None:
        self._locations = locations
        self._sites = sites

    def upsert_location(
        self,
        name: str,
        pincode: str,
        site_ids: list[str] | None,
        location_id: str | None = None,
    ) -> Location:
        request = parse_request(
            UpsertLocationRequest,
            {"name": name, "pincode": pincode, "site_ids": site_ids, "location_id": location_id},
        )
        desired = list(dict.fromkeys(request.site_ids))

        existing = self._locations.find_by_pincode(request.pincode)
        if existing is not None and existing.id != request.location_id:
            raise ConflictError(
                f"city with {request.pincode} already exists",
                code=ErrorCode.DUPLICATE_PINCODE,
            )

        if request.location_id is None:
            saved = self._locations.insert(
                Location(id=str(uuid.uuid4()), name=request.name, pincode=request.pincode, site_ids=desired)
            )
            logger.info("Created location %s (%s) with %d sites", saved.id, saved.pincode, len(desired))
        else:
            prior = self._locations.get(request.location_id)
            removed = prior.site_set - set(desired) if prior else set()
            if removed:
                cleared = self._sites.clear_location(sorted(removed), request.location_id)
                logger.info("Detached %d of %d sites from location %s", cleared, len(removed), request.location_id)
            saved = self._locations.upsert(request.location_id, request.name, request.pincode, desired)
            logger.info("Updated location %s with %d sites", saved.id, len(desired))

        self._release_from_previous_owners(desired, saved.id)
        linked = self._sites.set_location(desired, saved.id)
        if linked < len(desired):
            logger.info("Location %s: %d of %d site ids did not resolve", saved.id, len(desired) - linked, len(desired))
        return saved

    def add_single_site(self, location_id: str | None, site_id: str | None) -> Location:
        """Append one site to a location and point the site back at it.

        The forward list is appended to, not merged, so adding the same site
        twice leaves a duplicate entry.
        """
        request = parse_request(AddSiteRequest, {"location_id": location_id, "site_id": site_id})

        updated = self._locations.append_site(request.location_id, request.site_id)
        if updated is None:
            raise NotFoundError(f"location {request.location_id} not found", code=ErrorCode.LOCATION_NOT_FOUND)

        self._release_from_previous_owners([request.site_id], request.location_id)
        self._sites.set_location([request.site_id], request.location_id)
        logger.info("Added site %s to location %s", request.site_id, request.location_id)
        return updated

    def _release_from_previous_owners(self, site_ids: list[str], new_owner: str) -> None:
        """Drop sites from the forward list of whichever location owned them before."""
        moved: dict[str, list[str]] = defaultdict(list)
        for site in self._sites.get_many(site_ids):
            if site.location_id and site.location_id != new_owner:
                moved[site.location_id].append(site.id)

        for previous_owner, ids in moved.items():
            removed = self._locations.remove_sites(previous_owner, ids)
            logger.info("Moved %d sites from location %s to %s", removed, previous_owner, new_owner)
