"""Pydantic models for locations, sites and the read-side projections."""

from pydantic import BaseModel, Field


class Region(BaseModel):
    id: str
    name: str


class Site(BaseModel):
    id: str
    name: str
    location_id: str | None = None
    likes: int = Field(default=0, ge=0)
    created_at: str | None = None
    updated_at: str | None = None


class Location(BaseModel):
    id: str
    name: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    site_ids: list[str] = []
    region_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def site_set(self) -> set[str]:
        return set(self.site_ids)


class LocationSummary(BaseModel):
    id: str
    name: str
    pincode: str
    state: str | None = None
    total_destinations: int
    created_at: str | None = None
    updated_at: str | None = None


class SiteSummary(BaseModel):
    id: str
    name: str
    likes: int
    created_at: str | None = None
    updated_at: str | None = None


class LocationDetail(BaseModel):
    id: str
    name: str
    pincode: str
    region_id: str | None = None
    destinations: list[SiteSummary]
    created_at: str | None = None
    updated_at: str | None = None


class LocationRef(BaseModel):
    id: str
    name: str
