"""
Happy Thoughts API — Endpoint Index Route
===========================================

What:  GET / lists every API endpoint with its HTTP methods.
How:   Reads the paths of the application's OpenAPI schema, which FastAPI
       builds from every mounted router however it was included. Paths keep
       registration order; methods are upper-cased. Documentation routes
       (/docs, /redoc, /openapi.json) are not part of the schema.
"""

from typing import List

from fastapi import APIRouter, Request

from happy_thoughts.schemas.thought import RouteDescriptor

router = APIRouter(tags=["Index"])

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")


@router.get(
    "/",
    response_model=List[RouteDescriptor],
    summary="List available endpoints",
)
async def list_endpoints(request: Request) -> List[RouteDescriptor]:
    paths = request.app.openapi().get("paths", {})
    return [
        RouteDescriptor(
            path=path,
            methods=[method.upper() for method in operations if method in HTTP_METHODS],
        )
        for path, operations in paths.items()
    ]
