"""
Enumerations shared by several models.
"""

from enum import Enum


class CustomerType(str, Enum):
    """Condición frente al IVA del cliente."""
    RESPONSABLE_INSCRIPTO = "responsable_inscripto"
    MONOTRIBUTO = "monotributo"
    CONSUMIDOR_FINAL = "consumidor_final"
    EXENTO = "exento"


class IvaType(str, Enum):
    """IVA aliquot applied to a product or line."""
    IVA_21 = "iva_21"
    IVA_10_5 = "iva_10_5"
    IVA_27 = "iva_27"
    IVA_5 = "iva_5"
    IVA_2_5 = "iva_2_5"
    NO_GRAVADO = "no_gravado"
    EXENTO = "exento"


class InvoiceType(str, Enum):
    """Fiscal voucher types."""
    FACTURA_A = "FACTURA_A"
    FACTURA_B = "FACTURA_B"
    FACTURA_C = "FACTURA_C"
    NOTA_DEBITO_A = "NOTA_DEBITO_A"
    NOTA_DEBITO_B = "NOTA_DEBITO_B"
    NOTA_DEBITO_C = "NOTA_DEBITO_C"
    NOTA_CREDITO_A = "NOTA_CREDITO_A"
    NOTA_CREDITO_B = "NOTA_CREDITO_B"
    NOTA_CREDITO_C = "NOTA_CREDITO_C"
