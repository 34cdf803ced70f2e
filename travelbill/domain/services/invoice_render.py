# travelbill/domain/services/invoice_render.py
"""
Export dispatch for the three invoice renderers.

Each export is triggered and retried on its own. A renderer failure is
re-raised as RenderError for that artifact only; the ComputedInvoice and
DocumentContext are frozen, so a failed render cannot change them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from travelbill.domain.errors import RenderError
from travelbill.domain.models.billing import ComputedInvoice
from travelbill.domain.models.document import DocumentContext
from travelbill.domain.services.invoice_excel import render_invoice_xlsx
from travelbill.domain.services.invoice_pdf import render_invoice_pdf
from travelbill.domain.services.invoice_preview import render_invoice_html

logger = logging.getLogger("invoice_render")


@dataclass(frozen=True)
class Artifact:
    content: bytes
    media_type: str
    filename: str


@dataclass(frozen=True)
class RendererSpec:
    render: Callable[[ComputedInvoice, DocumentContext], bytes | str]
    media_type: str
    extension: str


RENDERERS: dict[str, RendererSpec] = {
    "html": RendererSpec(render_invoice_html, "text/html; charset=utf-8", "html"),
    "pdf": RendererSpec(render_invoice_pdf, "application/pdf", "pdf"),
    "xlsx": RendererSpec(
        render_invoice_xlsx,
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "xlsx",
    ),
}


def render_artifact(kind: str, invoice: ComputedInvoice, ctx: DocumentContext) -> Artifact:
    """
    Render one artifact.

    Raises:
        ValueError: unknown kind.
        RenderError: the renderer raised.
    """
    spec = RENDERERS.get(kind)
    if spec is None:
        raise ValueError(f"Unknown invoice format {kind!r}; expected one of {sorted(RENDERERS)}")

    try:
        content = spec.render(invoice, ctx)
    except Exception as exc:
        logger.error("Invoice %s: %s render failed", ctx.invoice_number, kind, exc_info=True)
        raise RenderError(kind, str(exc) or type(exc).__name__) from exc

    if isinstance(content, str):
        content = content.encode("utf-8")
    return Artifact(
        content=content,
        media_type=spec.media_type,
        filename=f"invoice-{ctx.invoice_number}.{spec.extension}",
    )


async def render_artifact_async(
    kind: str,
    invoice: ComputedInvoice,
    ctx: DocumentContext,
    *,
    timeout: float | None = None,
) -> Artifact:
    """
    Render in a worker thread so slow rasterisation does not block the loop.

    On timeout the render is abandoned (the caller may retry) and
    RenderError is raised.
    """
    try:
        return await asyncio.wait_for(
            asyncio.to_thread(render_artifact, kind, invoice, ctx),
            timeout=timeout,
        )
    except asyncio.TimeoutError as exc:
        logger.error("Invoice %s: %s render timed out after %ss", ctx.invoice_number, kind, timeout)
        raise RenderError(kind, f"timed out after {timeout}s") from exc
