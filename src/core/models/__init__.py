"""
Pydantic models for City Atlas.
"""

from core.models.location import (
    Location,
    LocationDetail,
    LocationRef,
    LocationSummary,
    Region,
    Site,
    SiteSummary,
)
from core.models.requests import AddSiteRequest, PageRequest, UpsertLocationRequest, parse_request

__all__ = [
    "AddSiteRequest",
    "Location",
    "LocationDetail",
    "LocationRef",
    "LocationSummary",
    "PageRequest",
    "Region",
    "Site",
    "SiteSummary",
    "UpsertLocationRequest",
    "parse_request",
]
