"""GET /admin/city/city-listing — paginated cities joined to their state."""

from typing import Any

from core.clients import get_dynamo_client
from core.config import get_config
from core.errors import CityAtlasError
from core.responses import api_response, error_response
from core.services import build_query_service


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    query_params = event.get("queryStringParameters") or {}
    try:
        service = build_query_service(get_dynamo_client(), get_config())
        cities = service.list_locations(
            page=query_params.get("page", 1),
            limit=query_params.get("limit", 10),
        )
    except CityAtlasError as e:
        return error_response(e)

    return api_response(200, cities)
