from __future__ import annotations

import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from quotebook.core.errors import QuoteError, ValidationError
from quotebook.domain.filters import parse_filters
from quotebook.services.quote_service import QuoteService

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


def _get_quote_service(request: Request) -> QuoteService:
    svc = getattr(getattr(request.app, "state", None), "quote_service", None)
    if not svc:
        raise RuntimeError("QuoteService not configured")
    return svc


def require_admin(request: Request) -> None:
    """Mutations need X-Admin-Token only when ADMIN_TOKEN is configured."""
    settings = request.app.state.settings
    expected = settings.admin_token
    if not expected:
        return
    supplied = request.headers.get("x-admin-token") or ""
    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        raise QuoteError("Admin token required", "unauthorized", 401)


async def _json_body(request: Request):
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError([{"field": "body", "message": "invalid JSON"}]) from exc


@router.get("")
async def list_quotes(
    request: Request,
    search: Optional[str] = None,
    role: Optional[str] = None,
    time: Optional[str] = None,
):
    svc = _get_quote_service(request)
    filters = None
    if search is not None or role is not None or time is not None:
        filters = parse_filters(search=search, role=role, time=time)
    quotes = await svc.list_quotes(filters)
    return [quote.to_dict() for quote in quotes]


@router.get("/{quote_id}")
async def get_quote(quote_id: str, request: Request):
    quote = await _get_quote_service(request).get_quote(quote_id)
    return quote.to_dict()


@router.post("", dependencies=[Depends(require_admin)])
async def create_quote(request: Request):
    payload = await _json_body(request)
    quote = await _get_quote_service(request).create_quote(payload)
    return JSONResponse(quote.to_dict(), status_code=201)


@router.patch("/{quote_id}", dependencies=[Depends(require_admin)])
async def update_quote(quote_id: str, request: Request):
    payload = await _json_body(request)
    quote = await _get_quote_service(request).update_quote(quote_id, payload)
    return quote.to_dict()


@router.delete("/{quote_id}", dependencies=[Depends(require_admin)])
async def delete_quote(quote_id: str, request: Request):
    await _get_quote_service(request).delete_quote(quote_id)
    return Response(status_code=204)
