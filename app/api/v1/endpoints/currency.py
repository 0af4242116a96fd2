"""
Currency endpoints.
Dólar blue quote and the configured USD to ARS rate.
"""

from decimal import Decimal
from fastapi import APIRouter, Query

from app.api.deps import DbSession, CurrentUser, ManagerUser, HttpClient
from app.core.config import settings
from app.schemas.currency import (
    DolarBlueResponse,
    ExchangeRateResponse,
    ExchangeRateUpdate,
)
from app.services.currency import CurrencyService


router = APIRouter()


def _rate_response(rate: Decimal) -> ExchangeRateResponse:
    return ExchangeRateResponse(
        usd_to_ars_rate=rate,
        default_markup_percentage=Decimal(str(settings.DEFAULT_MARKUP_PERCENTAGE)),
    )


@router.get(
    "/dolar-blue",
    response_model=DolarBlueResponse,
    summary="Cotización dólar blue",
    description="Cotización de compra y venta; se cachea y usa un valor de respaldo si la fuente falla",
)
async def get_dolar_blue(
    current_user: CurrentUser,
    http_client: HttpClient,
    refresh: bool = Query(False, description="Ignorar el caché"),
) -> DolarBlueResponse:
    service = CurrencyService(http_client=http_client)
    return DolarBlueResponse(**await service.get_dolar_blue(refresh=refresh))


@router.get(
    "/exchange-rate",
    response_model=ExchangeRateResponse,
    summary="Cotización configurada",
)
async def get_exchange_rate(
    current_user: CurrentUser,
    db: DbSession,
) -> ExchangeRateResponse:
    service = CurrencyService(db)
    return _rate_response(await service.get_exchange_rate())


@router.put(
    "/exchange-rate",
    response_model=ExchangeRateResponse,
    summary="Actualizar cotización",
    description="Fija la cotización USD/ARS usada para los precios en dólares",
)
async def update_exchange_rate(
    data: ExchangeRateUpdate,
    current_user: ManagerUser,
    db: DbSession,
) -> ExchangeRateResponse:
    service = CurrencyService(db)
    return _rate_response(await service.set_exchange_rate(data.usd_to_ars_rate))
