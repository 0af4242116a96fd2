"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# SQLAlchemy stores enum member names
ENUMS = {
    'userrole': ('ADMIN', 'MANAGER', 'USER', 'VIEWER'),
    'customertype': ('RESPONSABLE_INSCRIPTO', 'MONOTRIBUTO', 'CONSUMIDOR_FINAL', 'EXENTO'),
    'categorytype': ('MARCA', 'TIPO', 'RUBRO', 'MATERIAL', 'OTRO'),
    'ivatype': ('IVA_21', 'IVA_10_5', 'IVA_27', 'IVA_5', 'IVA_2_5', 'NO_GRAVADO', 'EXENTO'),
    'quotestatus': ('DRAFT', 'SENT', 'ACCEPTED', 'REJECTED', 'EXPIRED', 'CONVERTED'),
    'salestatus': ('DRAFT', 'CONFIRMED', 'DELIVERED', 'CANCELLED'),
    'invoicetype': (
        'FACTURA_A', 'FACTURA_B', 'FACTURA_C',
        'NOTA_DEBITO_A', 'NOTA_DEBITO_B', 'NOTA_DEBITO_C',
        'NOTA_CREDITO_A', 'NOTA_CREDITO_B', 'NOTA_CREDITO_C',
    ),
    'chequestatus': ('PENDING', 'DEPOSITED', 'ENDORSED', 'REJECTED'),
    'paymentmethod': ('CASH', 'CHEQUE', 'TRANSFER', 'QR', 'DEBIT', 'CREDIT', 'OTHER'),
    'paymentstatus': ('COMPLETED', 'PENDING', 'REJECTED', 'CANCELLED'),
    'creditnotestatus': ('DRAFT', 'ISSUED', 'APPLIED', 'VOIDED'),
    'creditnotereason': ('RETURN', 'DISCOUNT', 'PRICE_ADJUSTMENT', 'CANCELLATION', 'OTHER'),
    'movementtype': ('DEBIT', 'CREDIT'),
}


def enum(name: str) -> postgresql.ENUM:
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def money(name: str, nullable: bool = False, **kwargs) -> sa.Column:
    return sa.Column(name, sa.Numeric(precision=12, scale=2), nullable=nullable, **kwargs)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def line_item_columns() -> list[sa.Column]:
    return [
        sa.Column('product_id', sa.Integer(), sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        money('unit_price'),
        sa.Column('discount', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('iva_type', enum('ivatype'), nullable=False),
        money('subtotal'),
        money('iva_amount'),
        money('total_amount'),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    op.create_table(
        'users',
        *timestamps(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('full_name', sa.String(255), nullable=False),
        sa.Column('role', enum('userrole'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'customers',
        *timestamps(),
        sa.Column('business_name', sa.String(255), nullable=False),
        sa.Column('tax_id', sa.String(20), nullable=True),
        sa.Column('customer_type', enum('customertype'), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('whatsapp', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('province', sa.String(100), nullable=True),
        sa.Column('postal_code', sa.String(20), nullable=True),
        money('credit_limit', nullable=True),
        sa.Column('payment_terms', sa.Integer(), nullable=True),
        sa.Column('price_list', sa.String(50), nullable=True),
        sa.Column('discount', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_customers_business_name', 'customers', ['business_name'])
    op.create_index('ix_customers_tax_id', 'customers', ['tax_id'], unique=True)

    op.create_table(
        'categories',
        *timestamps(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('type', enum('categorytype'), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('color', sa.String(20), nullable=True),
        sa.Column('icon', sa.String(50), nullable=True),
        sa.Column('parent_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_categories_slug', 'categories', ['slug'], unique=True)

    op.create_table(
        'products',
        *timestamps(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('internal_code', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('unit', sa.String(30), nullable=False),
        money('cost_usd', nullable=True),
        sa.Column('markup_percentage', sa.Numeric(precision=6, scale=2), nullable=False),
        money('price'),
        sa.Column('iva_type', enum('ivatype'), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('min_stock', sa.Integer(), nullable=False),
        sa.Column('location', sa.String(100), nullable=True),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_internal_code', 'products', ['internal_code'], unique=True)
    op.create_index('ix_products_category_id', 'products', ['category_id'])

    op.create_table(
        'quotes',
        *timestamps(),
        sa.Column('quote_number', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('status', enum('quotestatus'), nullable=False),
        sa.Column('quote_date', sa.Date(), nullable=False),
        sa.Column('valid_until', sa.Date(), nullable=False),
        money('subtotal'),
        money('tax_amount'),
        money('total'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('terms', sa.Text(), nullable=True),
    )
    op.create_index('ix_quotes_quote_number', 'quotes', ['quote_number'], unique=True)
    op.create_index('ix_quotes_customer_id', 'quotes', ['customer_id'])

    op.create_table(
        'quote_items',
        *timestamps(),
        *line_item_columns(),
        sa.Column('quote_id', sa.Integer(), sa.ForeignKey('quotes.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_quote_items_quote_id', 'quote_items', ['quote_id'])

    op.create_table(
        'sales',
        *timestamps(),
        sa.Column('sale_number', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('quote_id', sa.Integer(), sa.ForeignKey('quotes.id', ondelete='SET NULL'), nullable=True),
        sa.Column('status', enum('salestatus'), nullable=False),
        sa.Column('is_white_invoice', sa.Boolean(), nullable=False),
        sa.Column('sale_date', sa.Date(), nullable=False),
        sa.Column('delivery_date', sa.Date(), nullable=True),
        sa.Column('invoice_type', enum('invoicetype'), nullable=False),
        sa.Column('point_of_sale', sa.String(5), nullable=False),
        sa.Column('invoice_number', sa.Integer(), nullable=True),
        sa.Column('full_number', sa.String(30), nullable=True),
        sa.Column('auth_code', sa.String(20), nullable=True),
        sa.Column('auth_code_expiry', sa.Date(), nullable=True),
        money('taxed_amount'),
        money('non_taxed_amount'),
        money('exempt_amount'),
        money('tax_amount'),
        money('gross_income_perception'),
        money('subtotal'),
        money('discount_amount'),
        money('total'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('pdf_path', sa.String(500), nullable=True),
    )
    op.create_index('ix_sales_sale_number', 'sales', ['sale_number'], unique=True)
    op.create_index('ix_sales_customer_id', 'sales', ['customer_id'])

    op.create_table(
        'sale_items',
        *timestamps(),
        *line_item_columns(),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_sale_items_sale_id', 'sale_items', ['sale_id'])

    op.create_table(
        'cheques',
        *timestamps(),
        sa.Column('cheque_number', sa.String(50), nullable=False),
        sa.Column('bank', sa.String(100), nullable=False),
        sa.Column('branch', sa.String(100), nullable=True),
        money('amount'),
        sa.Column('issue_date', sa.Date(), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=False),
        sa.Column('issuer', sa.String(255), nullable=False),
        sa.Column('issuer_cuit', sa.String(20), nullable=True),
        sa.Column('status', enum('chequestatus'), nullable=False),
        sa.Column('deposit_date', sa.Date(), nullable=True),
        sa.Column('deposit_bank', sa.String(100), nullable=True),
        sa.Column('endorsed_date', sa.Date(), nullable=True),
        sa.Column('endorsed_to', sa.String(255), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
    )
    op.create_index('ix_cheques_cheque_number', 'cheques', ['cheque_number'])
    op.create_index('ix_cheques_due_date', 'cheques', ['due_date'])

    op.create_table(
        'payments',
        *timestamps(),
        sa.Column('payment_number', sa.String(20), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id', ondelete='SET NULL'), nullable=True),
        money('amount'),
        sa.Column('method', enum('paymentmethod'), nullable=False),
        sa.Column('status', enum('paymentstatus'), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('reference', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('cheque_id', sa.Integer(), sa.ForeignKey('cheques.id', ondelete='SET NULL'), nullable=True),
        sa.Column('card_brand', sa.String(30), nullable=True),
        sa.Column('last_four_digits', sa.String(4), nullable=True),
        sa.Column('installments', sa.Integer(), nullable=True),
        sa.Column('auth_code', sa.String(50), nullable=True),
        money('fee', nullable=True),
        money('net_amount', nullable=True),
        sa.Column('bank_from', sa.String(100), nullable=True),
        sa.Column('bank_to', sa.String(100), nullable=True),
        sa.Column('cvu', sa.String(30), nullable=True),
        sa.Column('alias', sa.String(50), nullable=True),
    )
    op.create_index('ix_payments_payment_number', 'payments', ['payment_number'], unique=True)
    op.create_index('ix_payments_customer_id', 'payments', ['customer_id'])
    op.create_index('ix_payments_cheque_id', 'payments', ['cheque_id'])

    op.create_table(
        'credit_notes',
        *timestamps(),
        sa.Column('credit_note_number', sa.String(20), nullable=False),
        sa.Column('type', enum('invoicetype'), nullable=False),
        sa.Column('status', enum('creditnotestatus'), nullable=False),
        sa.Column('reason', enum('creditnotereason'), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('issue_date', sa.Date(), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('original_sale_id', sa.Integer(), sa.ForeignKey('sales.id', ondelete='SET NULL'), nullable=True),
        money('subtotal'),
        money('tax_amount'),
        money('total'),
    )
    op.create_index('ix_credit_notes_credit_note_number', 'credit_notes', ['credit_note_number'], unique=True)
    op.create_index('ix_credit_notes_customer_id', 'credit_notes', ['customer_id'])
    op.create_index('ix_credit_notes_original_sale_id', 'credit_notes', ['original_sale_id'])

    op.create_table(
        'credit_note_items',
        *timestamps(),
        *line_item_columns(),
        sa.Column('credit_note_id', sa.Integer(), sa.ForeignKey('credit_notes.id', ondelete='CASCADE'), nullable=False),
    )
    op.create_index('ix_credit_note_items_credit_note_id', 'credit_note_items', ['credit_note_id'])

    op.create_table(
        'current_account_items',
        *timestamps(),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('type', enum('movementtype'), nullable=False),
        sa.Column('concept', sa.String(255), nullable=False),
        money('amount'),
        money('balance'),
        sa.Column('reference', sa.String(50), nullable=True),
        sa.Column('movement_date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('sale_id', sa.Integer(), sa.ForeignKey('sales.id', ondelete='SET NULL'), nullable=True),
        sa.Column('payment_id', sa.Integer(), sa.ForeignKey('payments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('credit_note_id', sa.Integer(), sa.ForeignKey('credit_notes.id', ondelete='SET NULL'), nullable=True),
    )
    op.create_index('ix_current_account_items_customer_id', 'current_account_items', ['customer_id'])

    op.create_table(
        'app_settings',
        *timestamps(),
        sa.Column('key', sa.String(100), nullable=False),
        sa.Column('value', sa.String(255), nullable=False),
    )
    op.create_index('ix_app_settings_key', 'app_settings', ['key'], unique=True)


def downgrade() -> None:
    for table in (
        'app_settings',
        'current_account_items',
        'credit_note_items',
        'credit_notes',
        'payments',
        'cheques',
        'sale_items',
        'sales',
        'quote_items',
        'quotes',
        'products',
        'categories',
        'customers',
        'users',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for name in reversed(list(ENUMS)):
        postgresql.ENUM(name=name).drop(bind, checkfirst=True)
