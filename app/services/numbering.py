"""
Sequential document numbers (V-00000001, P-00000001, PAG-000001...).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute


SALE_PREFIX = "V-"
QUOTE_PREFIX = "P-"
PAYMENT_PREFIX = "PAG-"
CREDIT_NOTE_PREFIX = "NC-"


async def next_number(
    db: AsyncSession,
    column: InstrumentedAttribute,
    prefix: str,
    width: int = 8,
) -> str:
    """
    Return the number following the highest existing one for ``prefix``.

    Numbers are zero padded to ``width`` so the string ordering matches the
    numeric one.
    """
    result = await db.execute(
        select(column)
        .where(column.like(f"{prefix}%"))
        .order_by(column.desc())
        .limit(1)
    )
    last = result.scalar_one_or_none()

    sequence = 1
    if last:
        suffix = last[len(prefix):]
        if suffix.isdigit():
            sequence = int(suffix) + 1

    return f"{prefix}{str(sequence).zfill(width)}"
