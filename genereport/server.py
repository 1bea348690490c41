"""HTTP surface (Starlette)

- POST /api/translate: report text -> plain-language translation
- GET  /api/clinvar?query=: ClinVar variant lookup
- POST /api/literature: PubMed suggested reading
- GET  /health
"""

import json
import logging
from typing import Optional

import uvicorn
from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from genereport.deps import get_lookup_service, get_translate_service
from genereport.models.api import ErrorResponse
from genereport.runtime import setup_logging
from genereport.services.admission import RateLimitResult, get_client_identifier
from genereport.services.knowledge import get_knowledge_base
from genereport.services.lookup_service import LookupService
from genereport.services.translate_service import TranslateService
from genereport.settings import settings, validate_settings

logger = logging.getLogger(__name__)

NO_STORE = {"Cache-Control": "no-store", "Pragma": "no-cache"}
CLINVAR_CACHE = {"Cache-Control": "public, max-age=300"}
LITERATURE_CACHE = {"Cache-Control": "public, max-age=3600, s-maxage=86400, stale-while-revalidate=604800"}


def _client_id(request: Request) -> str:
    return get_client_identifier(request.headers, request.client.host if request.client else None)


def _respond(
    body,
    status: int,
    rate_limit: Optional[RateLimitResult] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    out = dict(headers or {})
    if status >= 400:
        out.update(NO_STORE)
    if rate_limit is not None:
        out.update(rate_limit.headers())
    return JSONResponse(body.model_dump(exclude_none=True), status_code=status, headers=out)


def _invalid_json() -> JSONResponse:
    return _respond(ErrorResponse(error="Invalid JSON in request body", code="invalid_json"), 400)


async def _json_body(request: Request):
    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


def create_app(
    translate_service: TranslateService | None = None,
    lookup_service: LookupService | None = None,
) -> Starlette:
    """Build the ASGI app

    Args:
        translate_service: translate entry point (shared provider if None)
        lookup_service: ClinVar / PubMed entry point (shared provider if None)
    """

    def translator() -> TranslateService:
        return translate_service or get_translate_service()

    def lookups() -> LookupService:
        return lookup_service or get_lookup_service()

    async def translate(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        if payload is None:
            return _invalid_json()
        # Provider calls block; keep them off the event loop
        outcome = await run_in_threadpool(translator().submit_detailed, payload, _client_id(request))
        return _respond(outcome.response, outcome.status, outcome.rate_limit, NO_STORE)

    async def clinvar(request: Request) -> JSONResponse:
        query = request.query_params.get("query")
        if not query:
            return _respond(ErrorResponse(error="Query parameter is required", code="validation_error"), 400)
        outcome = await run_in_threadpool(lookups().clinvar, {"query": query}, _client_id(request))
        return _respond(outcome.response, outcome.status, outcome.rate_limit, CLINVAR_CACHE)

    async def literature(request: Request) -> JSONResponse:
        payload = await _json_body(request)
        if payload is None:
            return _invalid_json()
        outcome = await run_in_threadpool(lookups().literature, payload, _client_id(request))
        return _respond(outcome.response, outcome.status, outcome.rate_limit, LITERATURE_CACHE)

    async def health(_request: Request) -> JSONResponse:
        kb = get_knowledge_base()
        return JSONResponse({
            "status": "ok",
            "server": "genereport",
            "prebuilt_only": settings.effective_prebuilt_only,
            "llm_provider": settings.llm_provider,
            "genes": len(kb.supported_genes()),
        })

    routes = [
        Route("/api/translate", endpoint=translate, methods=["POST"]),
        Route("/api/clinvar", endpoint=clinvar, methods=["GET"]),
        Route("/api/literature", endpoint=literature, methods=["POST"]),
        Route("/health", endpoint=health, methods=["GET"]),
    ]
    return Starlette(debug=settings.app_debug, routes=routes)


def main() -> None:
    setup_logging()
    for key, message in validate_settings().items():
        logger.warning("⚠️ [%s] %s", key, message)

    logger.info("🚀 genereport server starting")
    logger.info(f"🌐 Address: http://{settings.host}:{settings.port} (Health: /health)")
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
