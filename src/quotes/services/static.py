import logging
from typing import Iterable, Optional

from quotes.config import BATCH_POLICY
from quotes.errors import BadRequestError, SymbolNotFoundException
from quotes.schemas.quote import SUCCESS, CompanyInfo, Quote
from quotes.services.quote_service import BaseQuoteService, normalize_symbol

log = logging.getLogger(__name__)

DEFAULT_QUOTES = (
    Quote(symbol="IBM", name="International Business Machines Corp", last_price=187.42, status=SUCCESS),
    Quote(symbol="AAPL", name="Apple Inc", last_price=228.15, status=SUCCESS),
    Quote(symbol="MSFT", name="Microsoft Corp", last_price=415.3, status=SUCCESS),
    Quote(symbol="GOOG", name="Alphabet Inc", last_price=171.04, status=SUCCESS),
)

DEFAULT_COMPANIES = (
    CompanyInfo(symbol="IBM", name="International Business Machines Corp", exchange="NYSE"),
    CompanyInfo(symbol="AAPL", name="Apple Inc", exchange="NASDAQ"),
    CompanyInfo(symbol="APLE", name="Apple Hospitality REIT Inc", exchange="NYSE"),
    CompanyInfo(symbol="MSFT", name="Microsoft Corp", exchange="NASDAQ"),
    CompanyInfo(symbol="GOOG", name="Alphabet Inc", exchange="NASDAQ"),
)


class StaticQuoteService(BaseQuoteService):
    """In-memory QuoteService over a fixed set of quotes and companies."""

    def __init__(
        self,
        quotes: Optional[Iterable[Quote]] = None,
        companies: Optional[Iterable[CompanyInfo]] = None,
        batch_policy: str = BATCH_POLICY,
    ):
        super().__init__(batch_policy)
        self._quotes = {
            q.symbol.upper(): q for q in (DEFAULT_QUOTES if quotes is None else quotes)
        }
        self._companies = list(DEFAULT_COMPANIES if companies is None else companies)

    def get_quote(self, symbol: str) -> Quote:
        sym = normalize_symbol(symbol)
        quote = self._quotes.get(sym)
        if quote is None:
            raise SymbolNotFoundException(sym)
        return quote

    def get_company_info(self, name: str) -> list[CompanyInfo]:
        fragment = name.strip().lower()
        if not fragment:
            raise BadRequestError("Company name must not be empty")
        matches = [
            c
            for c in self._companies
            if fragment in c.name.lower() or fragment == c.symbol.lower()
        ]
        log.debug("static.lookup input=%s matches=%d", fragment, len(matches))
        return matches
