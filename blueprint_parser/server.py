"""
HTTP API over BlueprintService.

    GET /health               liveness
    GET /blueprints/search    ?search=...&tags=a,b&author=...
    GET /blueprints/details   ?path=/blueprints/slug&includeBlueprint=true

OpenAPI is served by FastAPI at /openapi.json, Swagger UI at /docs.
Errors are returned as {"error": "..."}: 400 for bad parameters, 500 when
the blueprint site could not be reached.
"""

from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from .main import BlueprintService
from .exceptions import FetchError, InvalidRequestError
from .schemas import Blueprint, BlueprintDetails, BlueprintSearchParams, ErrorResponse
from .logger import get_module_logger

logger = get_module_logger("server")

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Bad request"},
    500: {"model": ErrorResponse, "description": "Blueprint site unavailable"},
}


def parse_tags(values: Optional[list[str]]) -> list[str]:
    """Comma-separated tags; the parameter may also repeat. Blanks dropped."""
    if not values:
        return []
    joined = ",".join(values)
    return [tag.strip() for tag in joined.split(",") if tag.strip()]


def parse_optional_boolean(value: Optional[str]) -> bool:
    """Only a case-insensitive "true" counts as true."""
    if not value:
        return False
    return value.strip().lower() == "true"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_service(request: Request) -> BlueprintService:
    return request.app.state.service


def create_app(service: Optional[BlueprintService] = None) -> FastAPI:
    """
    Build the API application.

    Args:
        service: Service to answer requests with (defaults to one built
                 from the environment configuration)
    """
    app = FastAPI(
        title="DSP Blueprint API",
        description="Search and inspect Dyson Sphere Program blueprints",
        version="1.0.0",
    )
    app.state.service = service or BlueprintService()

    @app.get("/health")
    async def health():
        logger.debug("Health check")
        return {"status": "ok"}

    @app.get(
        "/blueprints/search",
        response_model=list[Blueprint],
        responses=ERROR_RESPONSES,
        summary="Search blueprints",
    )
    async def search_blueprints(
        search: Optional[str] = Query(None),
        tags: Optional[list[str]] = Query(None, description="Comma-separated tag list."),
        author: Optional[str] = Query(None),
        service: BlueprintService = Depends(get_service),
    ):
        if not search:
            logger.warning("Missing search query")
            return _error(400, "Query parameter 'search' is required.")

        params = BlueprintSearchParams(search=search, tags=parse_tags(tags), author=author or "")
        logger.info(f"Searching blueprints: {params.search!r} author={params.author!r} tags={len(params.tags)}")

        try:
            return await service.search(params)
        except InvalidRequestError as e:
            return _error(400, e.message)
        except FetchError as e:
            logger.error(f"Search failed: {e.to_response()}")
            return _error(500, "Failed to fetch blueprints.")

    @app.get(
        "/blueprints/details",
        response_model=BlueprintDetails,
        responses=ERROR_RESPONSES,
        summary="Fetch blueprint details",
    )
    async def blueprint_details(
        path: Optional[str] = Query(None, description="Relative blueprint path (e.g. /blueprints/slug)"),
        include_blueprint: Optional[str] = Query(None, alias="includeBlueprint"),
        service: BlueprintService = Depends(get_service),
    ):
        if not path:
            logger.warning("Missing path query")
            return _error(400, "Query parameter 'path' is required.")

        include = parse_optional_boolean(include_blueprint)
        logger.info(f"Fetching blueprint details: {path} (include blueprint: {include})")

        try:
            return await service.fetch_details(path, include_blueprint=include)
        except InvalidRequestError as e:
            logger.warning(f"Rejected details request: {e.message}")
            return _error(400, e.message)
        except FetchError as e:
            logger.error(f"Details fetch failed: {e.to_response()}")
            return _error(500, "Failed to fetch blueprint details.")

    return app
