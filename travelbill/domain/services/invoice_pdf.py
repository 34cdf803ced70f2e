# travelbill/domain/services/invoice_pdf.py
"""
Render a ComputedInvoice as a paginated A4 tax invoice PDF.
Uses ReportLab for PDF generation.

Amounts are printed from the ComputedInvoice as-is; nothing is recomputed.
Long item lists flow onto further pages with the item header repeated.
"""

from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from travelbill.domain.models.billing import ComputedInvoice
from travelbill.domain.models.document import DocumentContext
from travelbill.domain.money import fmt_money

logger = logging.getLogger("invoice_pdf")

_HEADER_BG = colors.Color(0.2, 0.3, 0.5)
_LABEL_BG = colors.Color(0.95, 0.95, 0.95)
_TOTAL_ROW_BG = colors.Color(0.9, 0.95, 1.0)
_GRID_COLOR = colors.Color(0.8, 0.8, 0.8)

RCM_NOTE = (
    "GST ON CASH TO REVERSE CHARGES BASIS WILL BE PAYABLE BY CONSIGNOR OR CONSIGNEE<br/>"
    "RCM AS PER NOTIFICATION NO. 29/2018 CENTRAL TAX RATE ( RATE ) DATED 31ST DEC,2018"
)


def _para(text: str, style: ParagraphStyle, *, upper: bool = False) -> Paragraph:
    """Paragraph that keeps the caller's line breaks."""
    text = text or ""
    if upper:
        text = text.upper()
    lines = [escape(line) for line in text.splitlines()] or [""]
    return Paragraph("<br/>".join(lines), style)


def _styles() -> dict:
    base = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "CompanyTitle",
            parent=base["Heading1"],
            fontSize=16,
            alignment=1,  # center
            spaceAfter=2,
        ),
        "center": ParagraphStyle("Center", parent=base["Normal"], fontSize=9, alignment=1, leading=12),
        "cell": ParagraphStyle("Cell", parent=base["Normal"], fontSize=9, leading=12),
        "bold": ParagraphStyle("Bold", parent=base["Normal"], fontSize=10, leading=13, fontName="Helvetica-Bold"),
        "footer": ParagraphStyle("Footer", parent=base["Normal"], fontSize=8, textColor=colors.grey, alignment=1),
    }


def _page_number(canvas, doc) -> None:
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.setFillColor(colors.grey)
    canvas.drawRightString(A4[0] - 15 * mm, 8 * mm, f"Page {doc.page}")
    canvas.restoreState()


def _grid(extra: list | None = None) -> TableStyle:
    return TableStyle(
        [
            ("GRID", (0, 0), (-1, -1), 0.5, _GRID_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("TOPPADDING", (0, 0), (-1, -1), 5),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
            ("LEFTPADDING", (0, 0), (-1, -1), 6),
            ("RIGHTPADDING", (0, 0), (-1, -1), 6),
        ]
        + (extra or [])
    )


def render_invoice_pdf(invoice: ComputedInvoice, ctx: DocumentContext) -> bytes:
    """
    Args:
        invoice: Output of ``invoice_aggregator.compute``.
        ctx: Supplier / recipient identity and bank details.

    Returns:
        PDF file as bytes.
    """
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Tax Invoice {ctx.invoice_number}",
    )
    st = _styles()
    company = ctx.company
    elements = []

    # Supplier header
    elements.append(_para(company.company_name, st["title"], upper=True))
    if company.proprietor_name:
        elements.append(_para(f"(PROP. {company.proprietor_name})", st["center"], upper=True))
    if company.company_address:
        elements.append(_para(company.company_address, st["center"], upper=True))
    if company.contact_number:
        elements.append(_para(f"MOBILE NO. {company.contact_number}", st["center"]))
    elements.append(Spacer(1, 8))

    # GSTN and invoice details
    header_data = [
        ["SUPPLIER'S GSTN:", ctx.supplier_gstin, "TAX INVOICE NO.:", ctx.invoice_number.upper()],
        ["SUPPLIER'S PAN:", ctx.supplier_pan, "INVOICE DATE:", ctx.invoice_date_text],
    ]
    header_table = Table(header_data, colWidths=[95, 150, 95, 140])
    header_table.setStyle(
        _grid(
            [
                ("BACKGROUND", (0, 0), (0, -1), _LABEL_BG),
                ("BACKGROUND", (2, 0), (2, -1), _LABEL_BG),
                ("TEXTCOLOR", (0, 0), (0, -1), colors.grey),
                ("TEXTCOLOR", (2, 0), (2, -1), colors.grey),
            ]
        )
    )
    elements.append(header_table)
    elements.append(Spacer(1, 8))

    # Recipient, vehicles and project location
    recipient = "TO,\n" + "\n".join(filter(None, [ctx.recipient_name, ctx.recipient_address]))
    party_data = [
        [
            _para("Recipient Name & Address", st["bold"]),
            _para("Vehicles", st["bold"]),
            _para(ctx.vehicle_summary, st["cell"]),
        ],
        [_para(recipient, st["cell"], upper=True), _para("Working Time", st["bold"]), _para(ctx.working_time, st["cell"])],
        ["", _para("Period", st["bold"]), _para(ctx.period, st["cell"])],
        ["", _para("Place of Supply", st["bold"]), _para(ctx.place_of_supply, st["cell"], upper=True)],
        [_para("Project Location", st["bold"]), "", ""],
        [_para("TO,\n" + ctx.project_location, st["cell"], upper=True), "", ""],
    ]
    party_table = Table(party_data, colWidths=[230, 90, 160])
    party_table.setStyle(
        _grid(
            [
                ("SPAN", (0, 1), (0, 3)),
                ("SPAN", (0, 4), (-1, 4)),
                ("SPAN", (0, 5), (-1, 5)),
            ]
        )
    )
    elements.append(party_table)
    elements.append(Spacer(1, 8))

    # Line items + totals, all straight from the ComputedInvoice
    rows = [["Sr. No.", "DESCRIPTION", "HSN\\SAC", "UNIT", "QTY.", "RATE", "TOTAL AMOUNT"]]
    for n, item in enumerate(invoice.items, start=1):
        rows.append([
            str(n),
            _para(item.description, st["cell"]),
            item.hsn_sac,
            item.unit,
            str(item.quantity),
            fmt_money(item.rate),
            fmt_money(item.line_total),
        ])
    first_total_row = len(rows)
    rows.append(["", "", "", "", "", "Sub Total", fmt_money(invoice.subtotal)])
    for component in invoice.tax_breakdown:
        rows.append(["", "", "", "", "", component.name, fmt_money(component.amount)])
    rows.append(["", "", "", "", "", "Total Invoice Value in Rs.", fmt_money(invoice.grand_total)])

    items_table = Table(rows, colWidths=[35, 165, 55, 40, 40, 70, 75], repeatRows=1)
    items_table.setStyle(
        _grid(
            [
                ("BACKGROUND", (0, 0), (-1, 0), _HEADER_BG),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 8),
                ("ALIGN", (4, 1), (-1, -1), "RIGHT"),
                ("SPAN", (0, first_total_row), (4, -1)),
                ("BACKGROUND", (0, -1), (-1, -1), _TOTAL_ROW_BG),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ]
        )
    )
    elements.append(items_table)
    elements.append(Spacer(1, 6))

    words_table = Table([[_para(invoice.grand_total_in_words, st["bold"])]], colWidths=[480])
    words_table.setStyle(_grid())
    elements.append(words_table)
    elements.append(Spacer(1, 6))

    # Reverse-charge note and bank details
    bank = ctx.bank_details
    bank_lines = "<br/>".join(
        escape(line)
        for line in (
            f"BANK NAME : {bank.bank_name.upper()}",
            f"BRANCH : {bank.branch.upper()}",
            f"A/C NO. : {bank.account_number}",
            f"IFSC CODE : {bank.ifsc_code.upper()}",
        )
    )
    footer_data = [
        [Paragraph(RCM_NOTE, st["cell"]), ""],
        [
            Paragraph(f"<b>BANK DETAILS :</b><br/>{bank_lines}", st["cell"]),
            _para(f"FOR, {company.company_name}\n\n\nAUTHORISED SIGNATORY", st["center"], upper=True),
        ],
    ]
    footer_table = Table(footer_data, colWidths=[300, 180])
    footer_table.setStyle(_grid([("SPAN", (0, 0), (-1, 0))]))
    elements.append(footer_table)
    elements.append(Spacer(1, 10))

    elements.append(Paragraph("This is a computer-generated invoice.", st["footer"]))

    doc.build(elements, onFirstPage=_page_number, onLaterPages=_page_number)
    logger.debug("Rendered PDF for invoice %s (%d items)", ctx.invoice_number, len(invoice.items))
    return buf.getvalue()
