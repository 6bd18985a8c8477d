import pytest

from quotes.errors import SymbolNotFoundException
from quotes.schemas.quote import SYMBOL_NOT_FOUND, Quote
from quotes.services.static import StaticQuoteService


def test_static_lookup_is_case_insensitive():
    svc = StaticQuoteService()
    assert svc.get_quote("ibm").symbol == "IBM"


def test_static_unknown_symbol():
    svc = StaticQuoteService(quotes=[Quote(symbol="IBM")])
    with pytest.raises(SymbolNotFoundException):
        svc.get_quote("AAPL")


def test_static_best_effort_batch():
    svc = StaticQuoteService(quotes=[Quote(symbol="IBM")], batch_policy="best_effort")
    quotes = svc.get_quotes("IBM,NOPE")
    assert [q.symbol for q in quotes] == ["IBM", "NOPE"]
    assert quotes[1].status == SYMBOL_NOT_FOUND


def test_static_company_search_matches_name_or_symbol():
    svc = StaticQuoteService()
    assert {c.symbol for c in svc.get_company_info("apple")} == {"AAPL", "APLE"}
    assert [c.symbol for c in svc.get_company_info("msft")] == ["MSFT"]
    assert svc.get_company_info("zzzz") == []
