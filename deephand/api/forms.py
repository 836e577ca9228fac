"""
Form submission endpoints.

The body is read raw and handed to RequestHandler so that malformed JSON is
answered with the same localized 400 body as any other bad request, instead
of FastAPI's default 422 validation payload. RequestHandler sends email over
blocking HTTP, so it runs in the threadpool, never on the event loop.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..core.handler import RequestHandler

router = APIRouter()


def get_handler(request: Request) -> RequestHandler:
    return request.app.state.handler


async def _submit(form_kind: str, request: Request, handler: RequestHandler) -> JSONResponse:
    raw_body = await request.body()
    status_code, result = await run_in_threadpool(
        handler.handle,
        form_kind,
        raw_body,
        content_type=request.headers.get("content-type"),
    )
    return JSONResponse(status_code=status_code, content=result.to_body())


@router.post("/contact")
async def submit_contact(request: Request, handler: RequestHandler = Depends(get_handler)):
    """Accept a contact inquiry."""
    return await _submit("contact", request, handler)


@router.post("/request-data")
async def submit_data_request(request: Request, handler: RequestHandler = Depends(get_handler)):
    """Accept a data annotation request."""
    return await _submit("request-data", request, handler)


# Older site builds post data requests here
@router.post("/request", include_in_schema=False)
async def submit_data_request_legacy(request: Request, handler: RequestHandler = Depends(get_handler)):
    return await _submit("request-data", request, handler)
