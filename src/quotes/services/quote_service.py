import logging
import re
from typing import Any, Optional, Protocol

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from quotes.config import (
    BATCH_POLICY,
    CONNECT_TIMEOUT,
    POOL_TIMEOUT,
    READ_TIMEOUT,
    RETRY_ATTEMPTS,
    UPSTREAM_URL,
    USER_AGENT,
    WRITE_TIMEOUT,
)
from quotes.errors import BadRequestError, SymbolNotFoundException, UpstreamError
from quotes.schemas.quote import (
    SUCCESS,
    SYMBOL_NOT_FOUND,
    TICKER_PATTERN,
    CompanyInfo,
    Quote,
)

log = logging.getLogger(__name__)

_TICKER_RE = re.compile(TICKER_PATTERN)

# upstream PascalCase key -> Quote field
_QUOTE_FIELDS = {
    "Symbol": "symbol",
    "Name": "name",
    "LastPrice": "last_price",
    "Change": "change",
    "ChangePercent": "change_percent",
    "Timestamp": "timestamp",
    "MSDate": "ms_date",
    "MarketCap": "market_cap",
    "Volume": "volume",
    "ChangeYTD": "change_ytd",
    "ChangePercentYTD": "change_percent_ytd",
    "High": "high",
    "Low": "low",
    "Open": "open",
    "Currency": "currency",
}


class QuoteService(Protocol):
    def get_quote(self, symbol: str) -> Quote: ...

    def get_quotes(self, symbols: str) -> list[Quote]: ...

    def get_company_info(self, name: str) -> list[CompanyInfo]: ...


def split_symbols(query: str) -> list[str]:
    """Split a comma-separated query into symbols, dropping blanks, keeping order."""
    return [s.strip() for s in query.split(",") if s.strip()]


def normalize_symbol(symbol: str) -> str:
    sym = symbol.strip().upper()
    if not sym or not _TICKER_RE.match(sym):
        raise BadRequestError(f"Invalid symbol: {symbol!r}")
    return sym


class BaseQuoteService:
    """Batch lookup on top of `get_quote`, honouring the partial-failure policy."""

    def __init__(self, batch_policy: str = BATCH_POLICY):
        self.batch_policy = batch_policy

    def get_quote(self, symbol: str) -> Quote:
        raise NotImplementedError

    def get_quotes(self, symbols: str) -> list[Quote]:
        wanted = split_symbols(symbols)
        if not wanted:
            raise BadRequestError(f"No symbols in query: {symbols!r}")

        quotes: list[Quote] = []
        for sym in wanted:
            try:
                quotes.append(self.get_quote(sym))
            except SymbolNotFoundException as e:
                if self.batch_policy != "best_effort":
                    raise
                log.info("quotes.batch_miss symbol=%s", e.symbol)
                quotes.append(
                    Quote(symbol=e.symbol, status=SYMBOL_NOT_FOUND, message=str(e))
                )
        return quotes


def _feed_client() -> httpx.Client:
    return httpx.Client(
        timeout=httpx.Timeout(
            READ_TIMEOUT, connect=CONNECT_TIMEOUT, write=WRITE_TIMEOUT, pool=POOL_TIMEOUT
        ),
        headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        follow_redirects=True,
    )


def _transient_feed_failure(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.is_server_error
    return isinstance(exc, httpx.RequestError)


@retry(
    retry=retry_if_exception(_transient_feed_failure),
    wait=wait_exponential(multiplier=0.25, min=0.25, max=4),
    stop=stop_after_attempt(RETRY_ATTEMPTS),
    before_sleep=before_sleep_log(log, logging.WARNING),
    reraise=True,
)
def _get_json(client: httpx.Client, url: str, params: dict[str, str]) -> Any:
    resp = client.get(url, params=params)
    resp.raise_for_status()
    return resp.json()


class HttpQuoteService(BaseQuoteService):
    """QuoteService backed by a Markit-on-Demand style JSON quote feed.

    Quote lookups hit ``{base_url}/Quote/json?symbol=SYM`` and company searches
    hit ``{base_url}/Lookup/json?input=NAME``. Transient upstream failures are
    retried; whatever is still failing afterwards surfaces as ``UpstreamError``.
    """

    def __init__(
        self,
        base_url: str = UPSTREAM_URL,
        client: Optional[httpx.Client] = None,
        batch_policy: str = BATCH_POLICY,
    ):
        super().__init__(batch_policy)
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or _feed_client()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpQuoteService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _fetch(self, path: str, params: dict[str, str]) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            return _get_json(self._client, url, params)
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                f"Upstream error: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise UpstreamError(f"Network error: {e}") from e
        except ValueError as e:
            raise UpstreamError(f"Invalid upstream payload from {path}") from e

    def get_quote(self, symbol: str) -> Quote:
        sym = normalize_symbol(symbol)
        log.debug("upstream.quote symbol=%s", sym)
        data = self._fetch("Quote/json", {"symbol": sym})

        if not isinstance(data, dict) or not data.get("Symbol"):
            if isinstance(data, dict) and data.get("Message"):
                log.info("upstream.unknown_symbol symbol=%s message=%s", sym, data["Message"])
            raise SymbolNotFoundException(sym)
        status = data.get("Status")
        if status and status != SUCCESS:
            raise UpstreamError(f"Upstream status for {sym}: {status}")

        fields = {
            field: data[key]
            for key, field in _QUOTE_FIELDS.items()
            if data.get(key) is not None
        }
        if "volume" in fields:
            fields["volume"] = int(fields["volume"])
        return Quote(status=SUCCESS, **fields)

    def get_company_info(self, name: str) -> list[CompanyInfo]:
        fragment = name.strip()
        if not fragment:
            raise BadRequestError("Company name must not be empty")
        log.debug("upstream.lookup input=%s", fragment)
        data = self._fetch("Lookup/json", {"input": fragment})

        if not isinstance(data, list):
            log.warning("upstream.lookup_unexpected input=%s payload=%r", fragment, data)
            return []
        return [
            CompanyInfo(
                symbol=row["Symbol"],
                name=row.get("Name") or row["Symbol"],
                exchange=row.get("Exchange"),
            )
            for row in data
            if isinstance(row, dict) and row.get("Symbol")
        ]
