from pydantic import BaseModel, ConfigDict, Field

TICKER_PATTERN = r"^[A-Z0-9\-\.\^=]+$"

SUCCESS = "SUCCESS"
SYMBOL_NOT_FOUND = "SYMBOL_NOT_FOUND"


class Quote(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str = Field(..., min_length=1, description="Ticker symbol (e.g. IBM)")
    name: str | None = None
    last_price: float | None = Field(default=None, alias="lastPrice")
    change: float | None = None
    change_percent: float | None = Field(default=None, alias="changePercent")
    timestamp: str | None = None
    ms_date: float | None = Field(default=None, alias="msDate")
    market_cap: float | None = Field(default=None, alias="marketCap")
    volume: int | None = None
    change_ytd: float | None = Field(default=None, alias="changeYTD")
    change_percent_ytd: float | None = Field(default=None, alias="changePercentYTD")
    high: float | None = None
    low: float | None = None
    open: float | None = None
    currency: str = "USD"
    status: str | None = Field(
        default=None, description="SUCCESS, or SYMBOL_NOT_FOUND in best-effort batches"
    )
    message: str | None = None


class CompanyInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str
    exchange: str | None = None
