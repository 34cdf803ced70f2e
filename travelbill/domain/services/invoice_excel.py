# travelbill/domain/services/invoice_excel.py
"""
Spreadsheet export of a ComputedInvoice (openpyxl, one sheet "Invoice").

``build_invoice_rows`` lays the invoice out as plain rows so callers and
tests can inspect exactly what goes into the workbook; amounts stay Decimal
and come straight from the ComputedInvoice.
"""

from __future__ import annotations

import io
import logging
from decimal import Decimal
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font

from travelbill.domain.models.billing import ComputedInvoice
from travelbill.domain.models.document import DocumentContext

logger = logging.getLogger("invoice_excel")

ITEM_HEADER = ["Sr. No.", "DESCRIPTION", "HSN\\SAC", "UNIT", "QTY.", "RATE", "TOTAL AMOUNT"]
SUBTOTAL_LABEL = "Sub Total"
GRAND_TOTAL_LABEL = "Total Invoice Value in Rs."
LABEL_COL = 5
AMOUNT_COL = 6

_MONEY_FORMAT = "#,##0.00"
_COLUMN_WIDTHS = {"A": 8, "B": 48, "C": 12, "D": 8, "E": 8, "F": 26, "G": 16}


def _total_row(label: str, amount: Decimal) -> list[Any]:
    row: list[Any] = [""] * (AMOUNT_COL + 1)
    row[LABEL_COL] = label
    row[AMOUNT_COL] = amount
    return row


def build_invoice_rows(invoice: ComputedInvoice, ctx: DocumentContext) -> list[list[Any]]:
    company = ctx.company
    rows: list[list[Any]] = [
        [company.company_name.upper()],
        [f"(PROP. {company.proprietor_name.upper()})" if company.proprietor_name else ""],
        [company.company_address.upper()],
        ["MOBILE NO.", company.contact_number],
        [""],
        ["SUPPLIER'S GSTN:", ctx.supplier_gstin],
        ["SUPPLIER'S PAN:", ctx.supplier_pan],
        ["TAX INVOICE NO.:", ctx.invoice_number.upper(), "INVOICE Date:", ctx.invoice_date_text],
        [""],
        ["Recipient Name & Address", "", "Vehicles", ctx.vehicle_summary],
        ["TO,", "", "Working Time", ctx.working_time],
        [ctx.recipient_name.upper(), "", "Period", ctx.period],
        [ctx.recipient_address.upper(), "", "Place of Supply", ctx.place_of_supply.upper()],
        [""],
        ["Project Location"],
        ["TO,"],
        [ctx.project_location.upper()],
        [""],
        list(ITEM_HEADER),
    ]
    for n, item in enumerate(invoice.items, start=1):
        rows.append([n, item.description, item.hsn_sac, item.unit, item.quantity, item.rate, item.line_total])

    rows.append(_total_row(SUBTOTAL_LABEL, invoice.subtotal))
    for component in invoice.tax_breakdown:
        rows.append(_total_row(component.name, component.amount))
    rows.append(_total_row(GRAND_TOTAL_LABEL, invoice.grand_total))
    rows.append([invoice.grand_total_in_words])
    rows.append([""])

    bank = ctx.bank_details
    rows += [
        ["BANK DETAILS :"],
        ["BANK NAME :", bank.bank_name.upper()],
        ["BRANCH :", bank.branch.upper()],
        ["A/C NO. :", bank.account_number],
        ["IFSC CODE :", bank.ifsc_code.upper()],
    ]
    return rows


def render_invoice_xlsx(invoice: ComputedInvoice, ctx: DocumentContext) -> bytes:
    """Write the rows from ``build_invoice_rows`` to an .xlsx workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Invoice"

    header_row = None
    for row in build_invoice_rows(invoice, ctx):
        ws.append(row)
        if row == ITEM_HEADER:
            header_row = ws.max_row

    ws["A1"].font = Font(bold=True, size=14)
    for col, width in _COLUMN_WIDTHS.items():
        ws.column_dimensions[col].width = width

    if header_row is not None:
        for cell in ws[header_row]:
            cell.font = Font(bold=True)
        for row in ws.iter_rows(min_row=header_row + 1, max_row=ws.max_row):
            # Multi-line descriptions keep their line breaks
            row[1].alignment = Alignment(wrap_text=True, vertical="top")
            for cell in row[4:7]:
                if isinstance(cell.value, (int, float, Decimal)) and cell.column > 5:
                    cell.number_format = _MONEY_FORMAT

    buf = io.BytesIO()
    wb.save(buf)
    logger.debug("Rendered XLSX for invoice %s", ctx.invoice_number)
    return buf.getvalue()
