"""POST /admin/city/addDestination — attach one destination to a city."""

from typing import Any

from core.clients import get_dynamo_client
from core.config import get_config
from core.errors import CityAtlasError
from core.responses import api_response, error_response, parse_body
from core.services import build_reconciler


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    try:
        body = parse_body(event)
        reconciler = build_reconciler(get_dynamo_client(), get_config())
        location = reconciler.add_single_site(body.get("cityId"), body.get("destinationId"))
    except CityAtlasError as e:
        return error_response(e)

    return api_response(201, location, "City updated successfully")
