# travelbill/domain/services/invoice_preview.py
"""On-screen invoice preview rendered from ``templates/invoice_preview.html``."""

from __future__ import annotations

from functools import lru_cache

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from travelbill.domain.models.billing import ComputedInvoice
from travelbill.domain.models.document import DocumentContext
from travelbill.domain.money import fmt_money
from travelbill.domain.services.invoice_pdf import RCM_NOTE


@lru_cache(maxsize=1)
def _env() -> Environment:
    env = Environment(
        loader=PackageLoader("travelbill", "templates"),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["money"] = fmt_money
    env.filters["lines"] = lambda text: (text or "").splitlines()
    return env


def render_invoice_html(invoice: ComputedInvoice, ctx: DocumentContext) -> str:
    template = _env().get_template("invoice_preview.html")
    return template.render(
        invoice=invoice,
        ctx=ctx,
        company=ctx.company,
        bank=ctx.bank_details,
        rcm_lines=RCM_NOTE.split("<br/>"),
    )
