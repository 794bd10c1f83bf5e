from os import environ

from pydantic import BaseModel, ConfigDict


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    aws_region: str
    dynamodb_endpoint: str | None = None
    locations_table: str
    sites_table: str
    regions_table: str
    environment: str


_cached_config: Config | None = None


def _reset_config() -> None:
    """Reset cached config — for testing only."""
    global _cached_config
    _cached_config = None


def get_config() -> Config:
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    _cached_config = Config(
        aws_region=environ.get("AWS_REGION", "us-east-1"),
        dynamodb_endpoint=environ.get("DYNAMODB_ENDPOINT"),
        locations_table=environ.get("LOCATIONS_TABLE", "Locations"),
        sites_table=environ.get("SITES_TABLE", "Sites"),
        regions_table=environ.get("REGIONS_TABLE", "Regions"),
        environment=environ.get("ENVIRONMENT", "local"),
    )
    return _cached_config
