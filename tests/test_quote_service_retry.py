import httpx
import pytest

from quotes.errors import UpstreamError
from quotes.services.quote_service import HttpQuoteService

BASE = "https://feed.example.com/Api/v2"


def test_retry_then_success():
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(502, text="bad gateway")
        return httpx.Response(
            200, json={"Status": "SUCCESS", "Symbol": "IBM", "LastPrice": 187.42}
        )

    svc = HttpQuoteService(
        BASE, client=httpx.Client(transport=httpx.MockTransport(handler))
    )
    q = svc.get_quote("IBM")

    assert calls["n"] == 2
    assert q.last_price == 187.42


def test_network_errors_exhaust_retries():
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    svc = HttpQuoteService(
        BASE, client=httpx.Client(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(UpstreamError) as exc:
        svc.get_company_info("Apple")

    assert calls["n"] == 3
    assert str(exc.value).startswith("Network error")


def test_server_errors_exhaust_retries():
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(503, text="service unavailable")

    svc = HttpQuoteService(
        BASE, client=httpx.Client(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(UpstreamError) as exc:
        svc.get_quote("IBM")

    assert calls["n"] == 3
    assert "503" in str(exc.value)
