"""
Serialization of normalized reports into json, html, pdf and docx.

json and html are rendered in memory. pdf and docx are written to a unique
file on scratch storage and returned by path; the caller streams the file
back and then releases it.
"""

from __future__ import annotations

import asyncio
import html
import json
from pathlib import Path
from typing import Any, Dict, Union

from docx import Document
from fpdf import FPDF

from .errors import RenderIOError, UnsupportedFormat
from .schema import NormalizedReport, RenderedArtifact, ReportFormat
from .scratch import ScratchSpace

TRAILER = "Generated by S&C Ltd"

# Points. The page is A4 wide and grows taller with the report, up to the
# 200 inch limit PDF readers accept; past that the font shrinks instead.
PDF_PAGE_WIDTH = 595.28
PDF_MIN_PAGE_HEIGHT = 841.89
PDF_MAX_PAGE_HEIGHT = 14400.0
PDF_MARGIN = 36.0
PDF_FONT = "Courier"
PDF_FONT_SIZE = 10.0
PDF_LINE_HEIGHT = 1.2
# Courier glyphs are 600/1000 em wide.
PDF_CHAR_WIDTH = 0.6

HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>{title}</title>
</head>
<body>
    <pre>{body}</pre>
</body>
</html>
"""


def parse_format(fmt: Union[str, ReportFormat, None]) -> ReportFormat:
    """
    Resolve a format token, raising `UnsupportedFormat` for anything unknown.
    """
    if isinstance(fmt, ReportFormat):
        return fmt
    try:
        return ReportFormat(fmt)
    except ValueError:
        raise UnsupportedFormat(f"Invalid output type: '{fmt}'.") from None


def _pretty(value: Any, ascii_only: bool = False) -> str:
    return json.dumps(value, indent=2, ensure_ascii=ascii_only)


def _title(context_name: str) -> str:
    return f"Validation Report for {context_name}"


def render_json(report: Dict[str, Any]) -> str:
    return json.dumps(report)


def render_html(report: Dict[str, Any], context_name: str) -> str:
    return HTML_TEMPLATE.format(
        title=html.escape(_title(context_name)),
        body=html.escape(_pretty(report)),
    )


def render_pdf(report: Dict[str, Any], context_name: str, path: Path) -> None:
    """
    Write the pretty-printed report as text on a single PDF page.

    One PDF text line per pretty-printed line, in a monospace font. The page
    height follows the line count up to `PDF_MAX_PAGE_HEIGHT`; longer
    reports, and lines wider than the page, get a smaller font instead.
    """
    # Core PDF fonts only cover Latin-1.
    lines = _pretty(report, ascii_only=True).splitlines()
    widest = max(len(line) for line in lines)

    font_size = PDF_FONT_SIZE
    usable_width = PDF_PAGE_WIDTH - 2 * PDF_MARGIN
    if widest * PDF_CHAR_WIDTH * font_size > usable_width:
        font_size = usable_width / (widest * PDF_CHAR_WIDTH)

    height = 2 * PDF_MARGIN + len(lines) * font_size * PDF_LINE_HEIGHT
    if height > PDF_MAX_PAGE_HEIGHT:
        height = PDF_MAX_PAGE_HEIGHT
        font_size = (height - 2 * PDF_MARGIN) / (len(lines) * PDF_LINE_HEIGHT)
    height = max(height, PDF_MIN_PAGE_HEIGHT)
    line_height = font_size * PDF_LINE_HEIGHT

    pdf = FPDF(orientation="P", unit="pt", format=(PDF_PAGE_WIDTH, height))
    pdf.set_auto_page_break(False)
    pdf.set_title(_title(context_name))
    pdf.set_author(TRAILER)
    pdf.add_page()
    pdf.set_font(PDF_FONT, size=font_size)
    for index, line in enumerate(lines):
        pdf.text(PDF_MARGIN, PDF_MARGIN + font_size + index * line_height, line)
    pdf.output(str(path))


def render_docx(report: Dict[str, Any], path: Path) -> None:
    """
    One paragraph per top-level key, in report order, then the trailer.
    """
    document = Document()
    for key, value in report.items():
        paragraph = document.add_paragraph()
        run = paragraph.add_run(f"{key}: {_pretty(value)}")
        run.add_break()
    document.add_paragraph(TRAILER)
    document.save(str(path))


def render(
    report: NormalizedReport,
    fmt: Union[str, ReportFormat],
    context_name: str,
    scratch: ScratchSpace,
) -> RenderedArtifact:
    """
    Render a report in the requested format.

    Parameters
    ----------
    report:
        Normalized report to serialize.
    fmt:
        One of `json`, `html`, `pdf`, `docx`.
    context_name:
        Name of the validated invoice, shown in document titles.
    scratch:
        Where pdf/docx files are materialized.

    Returns
    -------
    RenderedArtifact
        Inline body for json/html, scratch file path for pdf/docx. The file
        is completely written before this returns.
    """
    report_format = parse_format(fmt)
    data = report.to_wire()

    if report_format is ReportFormat.JSON:
        return RenderedArtifact(format=report_format, body=render_json(data))
    if report_format is ReportFormat.HTML:
        return RenderedArtifact(
            format=report_format, body=render_html(data, context_name)
        )

    path = scratch.allocate(report_format.value)
    try:
        if report_format is ReportFormat.PDF:
            render_pdf(data, context_name, path)
        else:
            render_docx(data, path)
    except OSError as exc:
        scratch.release(path)
        raise RenderIOError(
            f"Could not write {report_format.value} report: {exc}"
        ) from exc
    return RenderedArtifact(format=report_format, path=path)


async def render_async(
    report: NormalizedReport,
    fmt: Union[str, ReportFormat],
    context_name: str,
    scratch: ScratchSpace,
) -> RenderedArtifact:
    """
    `render` on a worker thread, so file writes don't hold up the event loop.
    """
    return await asyncio.to_thread(render, report, fmt, context_name, scratch)
