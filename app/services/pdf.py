"""
PDF Generation Service.
Creates printable sale vouchers using ReportLab.
"""

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.lib.enums import TA_RIGHT

from app.core.config import settings
from app.core.fiscal import IVA_NAMES, invoice_letter
from app.models.sale import Sale


CUSTOMER_TYPE_LABELS = {
    "responsable_inscripto": "Responsable Inscripto",
    "monotributo": "Monotributo",
    "consumidor_final": "Consumidor Final",
    "exento": "Exento",
}


class PDFService:
    """Service for generating sale voucher PDFs."""

    def __init__(self, storage_path: str | None = None):
        self.storage_path = Path(storage_path or settings.PDF_STORAGE_PATH)
        self.storage_path.mkdir(parents=True, exist_ok=True)

        self.primary_color = colors.HexColor("#1E3A8A")
        self.gray_color = colors.HexColor("#6B7280")
        self.light_gray = colors.HexColor("#F3F4F6")
        self.border_color = colors.HexColor("#E5E7EB")

    def _get_styles(self):
        """Get custom paragraph styles."""
        styles = getSampleStyleSheet()

        styles.add(ParagraphStyle(
            name='VoucherTitle',
            parent=styles['Heading1'],
            fontSize=20,
            textColor=self.primary_color,
            spaceAfter=4*mm,
        ))
        styles.add(ParagraphStyle(
            name='Letter',
            parent=styles['Heading1'],
            fontSize=28,
            alignment=1,
        ))
        styles.add(ParagraphStyle(
            name='SectionHeader',
            parent=styles['Heading2'],
            fontSize=12,
            textColor=self.primary_color,
            spaceBefore=4*mm,
            spaceAfter=2*mm,
        ))
        styles.add(ParagraphStyle(
            name='NormalText',
            parent=styles['Normal'],
            fontSize=10,
        ))
        styles.add(ParagraphStyle(
            name='SmallText',
            parent=styles['Normal'],
            fontSize=8,
            textColor=self.gray_color,
        ))
        styles.add(ParagraphStyle(
            name='RightAlign',
            parent=styles['Normal'],
            fontSize=9,
            alignment=TA_RIGHT,
        ))

        return styles

    @staticmethod
    def format_currency(amount: Decimal) -> str:
        """``1234.5`` -> ``$ 1.234,50``."""
        return "$ " + f"{amount:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")

    @staticmethod
    def format_date(value) -> str:
        return value.strftime("%d/%m/%Y")

    def _header(self, sale: Sale, styles) -> Table:
        if sale.is_white_invoice:
            letter = invoice_letter(sale.invoice_type)
            number = sale.full_number or f"{sale.point_of_sale}-{sale.sale_number}"
        else:
            letter = "X"
            number = sale.sale_number

        data = [
            [
                Paragraph(f"<b>{escape(settings.APP_NAME)}</b>", styles['VoucherTitle']),
                Paragraph(f"<b>{letter}</b>", styles['Letter']),
                Paragraph(f"<b>N° {escape(number)}</b>", styles['NormalText']),
            ],
            [
                Paragraph(f"CUIT: {escape(settings.AFIP_CUIT or '-')}", styles['SmallText']),
                "",
                Paragraph(f"Fecha: {self.format_date(sale.sale_date)}", styles['NormalText']),
            ],
        ]
        table = Table(data, colWidths=[85*mm, 20*mm, 65*mm])
        table.setStyle(TableStyle([
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('ALIGN', (2, 0), (2, -1), 'RIGHT'),
            ('BOX', (1, 0), (1, 0), 1, colors.black),
        ]))
        return table

    def _customer_block(self, sale: Sale, styles) -> Paragraph:
        customer = sale.customer
        lines = [f"<b>{escape(customer.business_name)}</b>"]
        lines.append(CUSTOMER_TYPE_LABELS.get(customer.customer_type.value, ""))
        if customer.tax_id:
            lines.append(f"CUIT/CUIL: {escape(customer.tax_id)}")
        if customer.address:
            location = ", ".join(
                escape(part) for part in (customer.address, customer.city, customer.province) if part
            )
            lines.append(location)
        return Paragraph("<br/>".join(lines), styles['NormalText'])

    def _items_table(self, sale: Sale, styles) -> Table:
        data = [["Descripción", "Cant.", "Precio unit.", "Bonif.", "IVA", "Subtotal"]]
        for item in sale.items:
            data.append([
                Paragraph(escape(item.description), styles['NormalText']),
                str(item.quantity),
                self.format_currency(item.unit_price),
                f"{item.discount:g}%",
                IVA_NAMES[item.iva_type],
                self.format_currency(item.subtotal),
            ])

        table = Table(
            data,
            colWidths=[62*mm, 14*mm, 28*mm, 16*mm, 20*mm, 30*mm],
            repeatRows=1,
        )
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), self.primary_color),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
            ('LINEBELOW', (0, 1), (-1, -1), 0.5, self.border_color),
            *[('BACKGROUND', (0, i), (-1, i), self.light_gray)
              for i in range(2, len(data), 2)],
        ]))
        return table

    def _totals_table(self, sale: Sale) -> Table:
        data = []
        if sale.discount_amount > 0:
            data.append(["Bonificaciones", f"- {self.format_currency(sale.discount_amount)}"])
        data.append(["Neto gravado", self.format_currency(sale.taxed_amount)])
        if sale.non_taxed_amount > 0:
            data.append(["No gravado", self.format_currency(sale.non_taxed_amount)])
        if sale.exempt_amount > 0:
            data.append(["Exento", self.format_currency(sale.exempt_amount)])
        data.append(["IVA", self.format_currency(sale.tax_amount)])
        if sale.gross_income_perception > 0:
            data.append(["Percepción IIBB", self.format_currency(sale.gross_income_perception)])
        data.append(["TOTAL", self.format_currency(sale.total)])

        table = Table(data, colWidths=[125*mm, 45*mm])
        table.setStyle(TableStyle([
            ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
            ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('LINEABOVE', (0, -1), (-1, -1), 1, self.primary_color),
            ('BACKGROUND', (0, -1), (-1, -1), self.light_gray),
        ]))
        return table

    async def generate_sale_pdf(self, sale: Sale) -> str:
        """
        Generate the voucher PDF of a sale.

        Invoiced sales print the CAE and its due date; black sales print
        as a non-fiscal "X" document.

        Returns:
            Path to generated PDF file
        """
        styles = self._get_styles()

        filepath = self.storage_path / f"venta_{sale.sale_number}.pdf"
        doc = SimpleDocTemplate(
            str(filepath),
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm,
            title=f"Venta {sale.sale_number}",
        )

        elements = [self._header(sale, styles), Spacer(1, 8*mm)]

        elements.append(Paragraph("CLIENTE", styles['SectionHeader']))
        elements.append(self._customer_block(sale, styles))
        elements.append(Spacer(1, 6*mm))

        elements.append(Paragraph("DETALLE", styles['SectionHeader']))
        elements.append(self._items_table(sale, styles))
        elements.append(Spacer(1, 6*mm))
        elements.append(self._totals_table(sale))
        elements.append(Spacer(1, 8*mm))

        if sale.auth_code:
            expiry = self.format_date(sale.auth_code_expiry) if sale.auth_code_expiry else "-"
            elements.append(Paragraph(
                f"<b>CAE:</b> {escape(sale.auth_code)} &nbsp;&nbsp; "
                f"<b>Vencimiento CAE:</b> {expiry}",
                styles['NormalText'],
            ))
        elif not sale.is_white_invoice:
            elements.append(Paragraph("Documento no válido como factura", styles['NormalText']))

        if sale.notes:
            elements.append(Paragraph("OBSERVACIONES", styles['SectionHeader']))
            elements.append(Paragraph(escape(sale.notes), styles['NormalText']))

        elements.append(Spacer(1, 10*mm))
        elements.append(Paragraph(
            f"<i>Generado el {self.format_date(datetime.now())} por {escape(settings.APP_NAME)}</i>",
            styles['SmallText'],
        ))

        doc.build(elements)

        return str(filepath)
