"""
Public Redirects Routes.

Single catch-all route that answers every request with the resolver's
decision.

Key behaviors:
- Every method and path is resolved
- Gone becomes 410 with an empty body
- Redirect becomes its status code with a Location header
- The path is resolved as sent, before percent-decoding
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import RedirectResponse

from site_redirects.api.deps import get_resolver
from site_redirects.components.redirects import (
    GONE_STATUS,
    Gone,
    RedirectResolver,
    ResolveRedirectInput,
    ResolveResult,
    run_resolve,
)

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# --- Helper Functions ---


def request_url(request: Request) -> str:
    """
    Rebuild the request URL from the undecoded path and query string.

    Starlette's ``request.url`` uses the decoded path, where an encoded
    ``%3F`` or ``%23`` would turn into a query or fragment delimiter.
    """
    raw_path: bytes | None = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = request.url.path
    url = f"{request.url.scheme}://{request.url.netloc}{path}"
    query = request.scope.get("query_string", b"").decode("latin-1")
    return f"{url}?{query}" if query else url


def to_response(result: ResolveResult) -> Response:
    """Translate a resolver decision into an HTTP response."""
    if isinstance(result, Gone):
        return Response(status_code=GONE_STATUS)

    return RedirectResponse(url=result.target, status_code=int(result.code))


# --- Routes ---


@router.api_route(
    "/{path:path}",
    methods=ALL_METHODS,
    include_in_schema=False,
)
def handle_redirect(
    path: str,
    request: Request,
    resolver: Annotated[RedirectResolver, Depends(get_resolver)],
) -> Response:
    """Resolve the request URL and answer with Gone or a redirect."""
    output = run_resolve(
        ResolveRedirectInput(url=request_url(request), request=request),
        resolver=resolver,
    )
    response = to_response(output.result)
    response.headers["X-Redirect-Stage"] = output.stage.value
    return response
