"""Request models validated before the core services run."""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.errors import ErrorCode, ValidationError

RequestT = TypeVar("RequestT", bound=BaseModel)


class UpsertLocationRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    pincode: str = Field(..., min_length=1)
    site_ids: list[str] = Field(..., min_length=1)
    location_id: str | None = None

    @field_validator("site_ids")
    @classmethod
    def no_blank_site_ids(cls, value: list[str]) -> list[str]:
        if any(not site_id for site_id in value):
            raise ValueError("destination ids must be non-empty")
        return value

    @field_validator("location_id")
    @classmethod
    def blank_id_means_create(cls, value: str | None) -> str | None:
        return value or None


class AddSiteRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    location_id: str = Field(..., min_length=1)
    site_id: str = Field(..., min_length=1)


class PageRequest(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)


def parse_request(model: type[RequestT], data: dict[str, Any]) -> RequestT:
    """Validate raw input into ``model``, raising the core ValidationError on failure."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ValidationError(f"Invalid fields: {fields}", code=ErrorCode.VALIDATION_ERROR) from e
