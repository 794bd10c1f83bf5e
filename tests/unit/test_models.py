import pytest

from core.errors import ValidationError
from core.models import AddSiteRequest, Location, PageRequest, UpsertLocationRequest, parse_request

VALID_UPSERT = dict(name="Mumbai", pincode="400001", site_ids=["S1", "S2"])


# --- UpsertLocationRequest ---


def test_upsert_request_valid():
    request = parse_request(UpsertLocationRequest, VALID_UPSERT)
    assert request.site_ids == ["S1", "S2"]
    assert request.location_id is None


def test_upsert_request_strips_whitespace():
    request = parse_request(UpsertLocationRequest, {**VALID_UPSERT, "name": "  Pune  "})
    assert request.name == "Pune"


@pytest.mark.parametrize("field", ["name", "pincode"])
def test_upsert_request_blank_required_field(field):
    with pytest.raises(ValidationError):
        parse_request(UpsertLocationRequest, {**VALID_UPSERT, field: "   "})


@pytest.mark.parametrize("site_ids", [None, [], "S1", ["S1", ""]])
def test_upsert_request_bad_site_ids(site_ids):
    with pytest.raises(ValidationError):
        parse_request(UpsertLocationRequest, {**VALID_UPSERT, "site_ids": site_ids})


def test_upsert_request_blank_id_means_create():
    request = parse_request(UpsertLocationRequest, {**VALID_UPSERT, "location_id": ""})
    assert request.location_id is None


def test_parse_request_names_failing_fields():
    with pytest.raises(ValidationError, match="pincode"):
        parse_request(UpsertLocationRequest, {"name": "Mumbai", "site_ids": ["S1"]})


# --- AddSiteRequest ---


def test_add_site_request_missing_site():
    with pytest.raises(ValidationError):
        parse_request(AddSiteRequest, {"location_id": "loc-1", "site_id": None})


# --- PageRequest ---


def test_page_request_defaults():
    request = parse_request(PageRequest, {})
    assert (request.page, request.limit) == (1, 10)


def test_page_request_coerces_query_strings():
    request = parse_request(PageRequest, {"page": "3", "limit": "25"})
    assert (request.page, request.limit) == (3, 25)


@pytest.mark.parametrize("params", [{"page": 0}, {"limit": 0}, {"page": "abc"}])
def test_page_request_rejects_out_of_range(params):
    with pytest.raises(ValidationError):
        parse_request(PageRequest, params)


# --- Location ---


def test_location_site_set_ignores_duplicates():
    location = Location(id="loc-1", name="Mumbai", pincode="400001", site_ids=["S1", "S1", "S2"])
    assert location.site_set == {"S1", "S2"}
