"""Contact form API endpoints."""

from typing import Optional

import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

from portfolio_api.api.deps import ContactServiceDep
from portfolio_api.core.exceptions import ContactAPIError, DispatchError
from portfolio_api.core.rate_limit import get_client_key
from portfolio_api.core.sentry import capture_exception
from portfolio_api.schemas.contact import ContactResponse, ErrorResponse
from portfolio_api.services.contact import SUCCESS_MESSAGE

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


def preflight_headers(site_url: Optional[str]) -> dict[str, str]:
    """CORS headers for the contact endpoint, scoped to the site origin."""
    return {
        "Access-Control-Allow-Origin": site_url or "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }


@router.post(
    "",
    response_model=ContactResponse,
    responses={
        400: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def submit_contact_form(request: Request, service: ContactServiceDep):
    """
    Submit the contact form.

    The body is read raw and only parsed after the rate limit check, so
    throttled clients cost no validation work. Spam gets the same 200 as a
    delivered message.
    """
    client_key = get_client_key(request, service.settings.trust_proxy_headers)

    try:
        raw_body = await request.body()
        await service.handle(client_key, raw_body)
    except ContactAPIError:
        raise
    except Exception as e:
        logger.exception("contact_unexpected_error", client=client_key)
        capture_exception(e, extra={"request_path": request.url.path})
        error = DispatchError(reason=str(e))
        return JSONResponse(status_code=error.status_code, content=error.to_content())

    return ContactResponse(success=True, message=SUCCESS_MESSAGE)


@router.options("", status_code=status.HTTP_200_OK)
async def contact_preflight(service: ContactServiceDep) -> Response:
    """Answer CORS preflight for the contact endpoint."""
    return Response(
        status_code=status.HTTP_200_OK,
        headers=preflight_headers(service.settings.site_url),
    )
