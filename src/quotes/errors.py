from typing import Literal

ErrorKind = Literal["not_found", "bad_request", "internal"]


class QuoteError(Exception):
    kind: ErrorKind = "internal"


class SymbolNotFoundException(QuoteError):
    kind: ErrorKind = "not_found"

    def __init__(self, symbol: str, message: str | None = None):
        self.symbol = symbol
        super().__init__(message or f"Symbol not found: {symbol}")


class BadRequestError(QuoteError):
    kind: ErrorKind = "bad_request"


class UpstreamError(QuoteError):
    kind: ErrorKind = "internal"


def error_kind(exc: BaseException) -> ErrorKind:
    if isinstance(exc, QuoteError):
        return exc.kind
    return "internal"
