"""
API v1 router - aggregates all endpoint routers.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    users,
    customers,
    categories,
    products,
    quotes,
    sales,
    afip,
    payments,
    cheques,
    credit_notes,
    current_account,
    currency,
    dashboard,
)

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Autenticación"])
api_router.include_router(auth.setup_router, prefix="/setup", tags=["Configuración inicial"])
api_router.include_router(users.router, prefix="/users", tags=["Usuarios"])
api_router.include_router(customers.router, prefix="/customers", tags=["Clientes"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categorías"])
api_router.include_router(products.router, prefix="/products", tags=["Productos"])
api_router.include_router(quotes.router, prefix="/quotes", tags=["Presupuestos"])
api_router.include_router(sales.router, prefix="/sales", tags=["Ventas"])
api_router.include_router(afip.router, prefix="/afip", tags=["AFIP"])
api_router.include_router(payments.router, prefix="/payments", tags=["Pagos"])
api_router.include_router(cheques.router, prefix="/cheques", tags=["Cheques"])
api_router.include_router(credit_notes.router, prefix="/credit-notes", tags=["Notas de crédito"])
api_router.include_router(current_account.router, prefix="/current-account", tags=["Cuenta corriente"])
api_router.include_router(currency.router, prefix="/currency", tags=["Cotizaciones"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
