"""
Current account (cuenta corriente) endpoints.
"""

from datetime import date
from fastapi import APIRouter, Query, status

from app.api.deps import DbSession, CurrentUser, WriterUser, ManagerUser
from app.schemas.current_account import (
    MovementCreate,
    MovementResponse,
    MovementListResponse,
    AccountStatement,
    RecalculateResponse,
)
from app.schemas.base import page_count
from app.models.current_account import MovementType
from app.services.current_account import CurrentAccountService


router = APIRouter()


@router.get(
    "",
    response_model=MovementListResponse,
    summary="Listar movimientos",
    description="Movimientos de cuenta corriente; filtrando por cliente incluye su saldo actual",
)
async def list_movements(
    current_user: CurrentUser,
    db: DbSession,
    page: int = Query(1, ge=1, description="Número de página"),
    per_page: int = Query(20, ge=1, le=100, description="Elementos por página"),
    customer_id: int | None = Query(None, description="Filtrar por cliente"),
    type: MovementType | None = Query(None, description="debit o credit"),
    from_date: date | None = Query(None, description="Desde fecha"),
    to_date: date | None = Query(None, description="Hasta fecha"),
) -> MovementListResponse:
    service = CurrentAccountService(db)
    skip = (page - 1) * per_page

    movements, total = await service.list(
        skip=skip,
        limit=per_page,
        customer_id=customer_id,
        movement_type=type,
        date_from=from_date,
        date_to=to_date,
    )

    current_balance = None
    if customer_id:
        current_balance = await service.get_balance(customer_id)

    return MovementListResponse(
        items=[MovementResponse.model_validate(m) for m in movements],
        total=total,
        page=page,
        per_page=per_page,
        pages=page_count(total, per_page),
        current_balance=current_balance,
    )


@router.post(
    "",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Registrar movimiento",
    description="Ajuste manual de la cuenta corriente",
)
async def create_movement(
    data: MovementCreate,
    current_user: WriterUser,
    db: DbSession,
) -> MovementResponse:
    service = CurrentAccountService(db)
    movement = await service.create_manual(data)
    return MovementResponse.model_validate(movement)


@router.get(
    "/{customer_id}/statement",
    response_model=AccountStatement,
    summary="Estado de cuenta",
    description="Últimos movimientos del cliente con su saldo",
)
async def get_statement(
    customer_id: int,
    current_user: CurrentUser,
    db: DbSession,
    limit: int = Query(100, ge=1, le=1000, description="Cantidad de movimientos"),
) -> AccountStatement:
    service = CurrentAccountService(db)
    return AccountStatement.model_validate(await service.get_statement(customer_id, limit))


@router.post(
    "/{customer_id}/recalculate",
    response_model=RecalculateResponse,
    summary="Recalcular saldos",
    description="Recalcula los saldos acumulados del cliente en orden cronológico",
)
async def recalculate_balances(
    customer_id: int,
    current_user: ManagerUser,
    db: DbSession,
) -> RecalculateResponse:
    service = CurrentAccountService(db)
    count, balance = await service.recalculate_balances(customer_id)
    return RecalculateResponse(
        customer_id=customer_id,
        movements=count,
        current_balance=balance,
    )
