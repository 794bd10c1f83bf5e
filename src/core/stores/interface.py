from abc import ABC, abstractmethod
from collections.abc import Iterable

from core.models import Location, Region, Site


class LocationStore(ABC):
    @abstractmethod
    def get(self, location_id: str) -> Location | None: ...

    @abstractmethod
    def find_by_pincode(self, pincode: str) -> Location | None: ...

    @abstractmethod
    def insert(self, location: Location) -> Location: ...

    @abstractmethod
    def upsert(self, location_id: str, name: str, pincode: str, site_ids: list[str]) -> Location:
        """Overwrite name, pincode and site list, creating the record if the id is new."""

    @abstractmethod
    def append_site(self, location_id: str, site_id: str) -> Location | None:
        """Append to the site list; returns None if the location does not exist."""

    @abstractmethod
    def remove_sites(self, location_id: str, site_ids: Iterable[str]) -> int:
        """Drop every occurrence of ``site_ids`` from the site list; returns how many entries went."""

    @abstractmethod
    def list_with_region(self) -> list[Location]: ...

    @abstractmethod
    def list_without_region(self) -> list[Location]: ...

    @abstractmethod
    def list_by_region(self, region_id: str) -> list[Location]: ...


class SiteStore(ABC):
    @abstractmethod
    def get_many(self, site_ids: Iterable[str]) -> list[Site]: ...

    @abstractmethod
    def set_location(self, site_ids: Iterable[str], location_id: str) -> int:
        """Point existing sites at ``location_id``; returns how many were updated."""

    @abstractmethod
    def clear_location(self, site_ids: Iterable[str], location_id: str) -> int:
        """Remove the back-reference from sites still owned by ``location_id``; returns how many were updated."""


class RegionStore(ABC):
    @abstractmethod
    def get_many(self, region_ids: Iterable[str]) -> list[Region]: ...
