"""
Currency service.

Reads the informal USD rate (dólar blue) from dolarapi.com and keeps the
configured USD to ARS rate used for product pricing.
"""

import logging
import time
from datetime import datetime
from decimal import Decimal
from typing import Any

import httpx
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.config import settings
from app.core.fiscal import to_decimal
from app.models.setting import AppSetting, USD_TO_ARS_RATE_KEY


logger = logging.getLogger(__name__)


class DolarBlueCache:
    """In-process cache of the last quote received."""

    def __init__(self):
        self.value: dict[str, Any] | None = None
        self.fetched_at: float = 0.0

    def is_fresh(self, max_age: float) -> bool:
        return self.value is not None and (time.monotonic() - self.fetched_at) < max_age

    def store(self, value: dict[str, Any]) -> None:
        self.value = value
        self.fetched_at = time.monotonic()

    def clear(self) -> None:
        self.value = None
        self.fetched_at = 0.0


dolar_blue_cache = DolarBlueCache()


def _parse_quote(payload: dict[str, Any]) -> dict[str, Any]:
    """Map the dolarapi.com payload, raising ValueError when malformed."""
    try:
        buy = to_decimal(payload["compra"])
        sell = to_decimal(payload["venta"])
    except (KeyError, TypeError, ArithmeticError) as exc:
        raise ValueError(f"Respuesta de cotización inválida: {payload!r}") from exc

    if buy <= 0 or sell <= 0:
        raise ValueError(f"Cotización no positiva: {payload!r}")

    updated_at = None
    raw_date = payload.get("fechaActualizacion")
    if isinstance(raw_date, str):
        try:
            updated_at = datetime.fromisoformat(raw_date.replace("Z", "+00:00"))
        except ValueError:
            logger.debug("Fecha de actualización ilegible: %s", raw_date)
    elif raw_date is not None:
        logger.debug("Fecha de actualización ilegible: %r", raw_date)

    return {"buy": buy, "sell": sell, "updated_at": updated_at}


class CurrencyService:
    """Service for exchange rates."""

    def __init__(
        self,
        db: AsyncSession | None = None,
        http_client: httpx.AsyncClient | None = None,
        cache: DolarBlueCache = dolar_blue_cache,
    ):
        self.db = db
        self.http_client = http_client
        self.cache = cache

    async def _fetch(self) -> dict[str, Any]:
        if self.http_client is not None:
            response = await self.http_client.get(
                settings.DOLAR_BLUE_URL,
                timeout=settings.DOLAR_BLUE_TIMEOUT,
            )
        else:
            async with httpx.AsyncClient(timeout=settings.DOLAR_BLUE_TIMEOUT) as client:
                response = await client.get(settings.DOLAR_BLUE_URL)

        response.raise_for_status()
        return _parse_quote(response.json())

    async def get_dolar_blue(self, refresh: bool = False) -> dict[str, Any]:
        """
        Current dólar blue quote.

        A fresh cached value is returned without calling the API. On any
        failure the last cached value is returned even if stale, and the
        configured fallback when nothing was ever cached.
        """
        if not refresh and self.cache.is_fresh(settings.DOLAR_BLUE_CACHE_SECONDS):
            return {**self.cache.value, "source": "cache"}

        try:
            quote = await self._fetch()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("No se pudo obtener la cotización del dólar blue: %s", exc)
            if self.cache.value is not None:
                return {**self.cache.value, "source": "cache"}
            return {
                "buy": to_decimal(settings.DOLAR_BLUE_FALLBACK_BUY),
                "sell": to_decimal(settings.DOLAR_BLUE_FALLBACK_SELL),
                "updated_at": None,
                "source": "fallback",
            }

        self.cache.store(quote)
        return {**quote, "source": "live"}

    async def get_exchange_rate(self) -> Decimal:
        """Configured USD to ARS rate, the default when never set."""
        result = await self.db.execute(
            select(AppSetting.value).where(AppSetting.key == USD_TO_ARS_RATE_KEY)
        )
        value = result.scalar_one_or_none()
        if value is None:
            return to_decimal(settings.DEFAULT_USD_TO_ARS_RATE)
        return Decimal(value)

    async def set_exchange_rate(self, rate: Decimal) -> Decimal:
        result = await self.db.execute(
            select(AppSetting).where(AppSetting.key == USD_TO_ARS_RATE_KEY)
        )
        setting = result.scalar_one_or_none()

        if setting is None:
            setting = AppSetting(key=USD_TO_ARS_RATE_KEY, value=str(rate))
            self.db.add(setting)
        else:
            setting.value = str(rate)

        await self.db.flush()
        logger.info("Cotización USD/ARS actualizada a %s", rate)
        return rate
