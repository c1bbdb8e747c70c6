from brickdesk.domain.forecast.engine import (
    InventoryForecastEngine,
    StockProjectionSource,
    build_forecast_request,
    evaluate_forecast,
    shortage_for,
)
from brickdesk.domain.forecast.models import ForecastItem, ForecastLine, ForecastReport, ForecastRequest

__all__ = [
    "ForecastItem",
    "ForecastLine",
    "ForecastReport",
    "ForecastRequest",
    "InventoryForecastEngine",
    "StockProjectionSource",
    "build_forecast_request",
    "evaluate_forecast",
    "shortage_for",
]
