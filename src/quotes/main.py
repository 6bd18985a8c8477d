import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Path, Request, Response
from fastapi.responses import PlainTextResponse

from quotes.config import BACKEND, ERROR_MODE
from quotes.errors import QuoteError, error_kind
from quotes.schemas.quote import CompanyInfo, Quote
from quotes.services.command import run_traced_command
from quotes.services.quote_service import HttpQuoteService, QuoteService
from quotes.services.static import StaticQuoteService

log = logging.getLogger(__name__)

_CLASSIFIED_STATUS = {"not_found": 404, "bad_request": 400, "internal": 500}

router = APIRouter(prefix="/v1")


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def no_cache(response: Response) -> None:
    response.headers["Cache-Control"] = "no-cache"


@router.get("/quotes", response_model=list[Quote])
def get_quotes(
    response: Response,
    q: Optional[str] = None,
    service: QuoteService = Depends(get_quote_service),
):
    """Current quotes for `q=symbol[,symbol...]`; empty list when `q` is missing."""
    log.debug("quotes.request q=%s", q)
    no_cache(response)
    if q is None or not q.strip():
        return []

    if "," in q:
        quotes = service.get_quotes(q)
    else:
        quotes = [service.get_quote(q)]
    log.info("quotes.retrieved q=%s count=%d", q, len(quotes))
    return quotes


@router.get("/company/{name}", response_model=list[CompanyInfo])
def get_companies(
    name: str = Path(..., min_length=1),
    service: QuoteService = Depends(get_quote_service),
):
    """Companies whose name or symbol matches `name`."""
    log.debug("company.request name=%s", name)
    companies = service.get_company_info(name)
    log.info("company.retrieved name=%s count=%d", name, len(companies))
    return companies


@router.get("/springonehystrix", response_class=PlainTextResponse)
def springone_hystrix():
    result = run_traced_command(
        "springone", "springonecommandkey", lambda: "hello_from_springone_hystrix"
    )
    return f"HYSTRIX [{result}]"


def error_response(exc: Exception, error_mode: str) -> PlainTextResponse:
    status = 500
    if error_mode == "classified":
        status = _CLASSIFIED_STATUS[error_kind(exc)]
    log.warning("request.error status=%d error=%s", status, exc, exc_info=exc)
    return PlainTextResponse(f"ERROR: {exc}", status_code=status)


def _build_service() -> QuoteService:
    if BACKEND == "static":
        return StaticQuoteService()
    return HttpQuoteService()


def create_app(
    service: Optional[QuoteService] = None, *, error_mode: str = ERROR_MODE
) -> FastAPI:
    owned = service is None
    service = service if service is not None else _build_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(
            "quotes.startup backend=%s error_mode=%s",
            type(service).__name__,
            error_mode,
        )
        yield
        close = getattr(service, "close", None)
        if owned and close is not None:
            close()

    app = FastAPI(title="Quotes Service", version="1.0.0", lifespan=lifespan)
    app.state.quote_service = service
    app.state.error_mode = error_mode

    @app.exception_handler(QuoteError)
    async def quote_error_handler(request: Request, exc: QuoteError):
        return error_response(exc, request.app.state.error_mode)

    # Starlette re-raises after an Exception handler responds; catch the rest here
    @app.middleware("http")
    async def error_boundary(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(e, request.app.state.error_mode)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(router)
    return app
