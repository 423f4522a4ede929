# app/services/export_service.py
"""
Report encoders. Every format renders a missing value as "-" and joins
list values with "; ". Rows passed in are never modified.
"""

import csv
import io
import os
import re
import zipfile
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pdfkit
from docx import Document
from docx.enum.section import WD_ORIENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt
from jinja2 import Environment, FileSystemLoader, select_autoescape
from loguru import logger

from app.core.config import settings
from app.core.constants import ALL_SUB_TYPES, CERTIFICATE_FIELD, CERTIFICATE_LINK_LABEL
from app.core.exceptions import CollaboratorError, ValidationError
from app.core.storage import resolve_file_url
from app.models.enums import ExportFormat, ReportStatus
from app.schemas.report import ReportSection

MISSING = "-"
LIST_SEPARATOR = "; "

MEDIA_TYPES = {
    ExportFormat.csv: "text/csv",
    ExportFormat.pdf: "application/pdf",
    ExportFormat.docx: "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# -----------------------------
# Setup Jinja2 Environment
# -----------------------------
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
template_dir = os.path.join(BASE_DIR, "templates", "pdf")

pdf_env = Environment(
    loader=FileSystemLoader(template_dir),
    autoescape=select_autoescape(["html", "xml"]),
)

pdf_options = {
    "page-size": "A4",
    "orientation": "Landscape",
    "margin-top": "12mm",
    "margin-right": "10mm",
    "margin-bottom": "12mm",
    "margin-left": "10mm",
    "encoding": "UTF-8",
    "no-outline": None,
    "enable-local-file-access": None,
}


# -----------------------------
# Cell formatting
# -----------------------------
def format_value(value: Any) -> str:
    if value is None:
        return MISSING
    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value if v is not None and str(v).strip() != ""]
        return LIST_SEPARATOR.join(parts) if parts else MISSING
    text = str(value)
    return text if text.strip() else MISSING


def _certificate_link(value: Any) -> Optional[str]:
    if format_value(value) == MISSING:
        return None
    return resolve_file_url(str(value))


def _headers(fields: List[str], labels: Dict[str, str]) -> List[str]:
    return [labels.get(f, f) for f in fields]


def _slug(text: Optional[str]) -> str:
    return re.sub(r"[^A-Za-z0-9]+", "_", text or "all").strip("_").lower() or "all"


def report_filename(fmt: ExportFormat, sub_type: Optional[str] = None) -> str:
    stamp = datetime.now().strftime("%Y-%m-%d")
    prefix = f"{_slug(sub_type)}_report" if sub_type else "admin_report"
    return f"{prefix}_{stamp}.{ExportFormat(fmt).value}"


# -----------------------------
# CSV
# -----------------------------
def to_csv(fields: List[str], labels: Dict[str, str], rows: Iterable[Dict[str, Any]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(_headers(fields, labels))
    for row in rows:
        writer.writerow([format_value(row.get(f)) for f in fields])
    return buffer.getvalue().encode("utf-8")


# -----------------------------
# PDF
# -----------------------------
def _pdf_configuration():
    if settings.WKHTMLTOPDF_PATH:
        return pdfkit.configuration(wkhtmltopdf=settings.WKHTMLTOPDF_PATH)
    return None


def render_report_html(
    fields: List[str],
    labels: Dict[str, str],
    rows: Iterable[Dict[str, Any]],
    title: str = "Achievement Report",
) -> str:
    table = []
    for row in rows:
        cells = []
        for f in fields:
            if f == CERTIFICATE_FIELD:
                url = _certificate_link(row.get(f))
                cells.append({"text": CERTIFICATE_LINK_LABEL if url else MISSING, "url": url})
            else:
                cells.append({"text": format_value(row.get(f)), "url": None})
        table.append(cells)

    return pdf_env.get_template("report_table.html").render(
        title=title,
        headers=_headers(fields, labels),
        rows=table,
        generated_on=datetime.now().strftime("%d-%m-%Y %H:%M"),
    )


def to_pdf(
    fields: List[str],
    labels: Dict[str, str],
    rows: Iterable[Dict[str, Any]],
    title: str = "Achievement Report",
) -> bytes:
    html_content = render_report_html(fields, labels, rows, title)
    try:
        return pdfkit.from_string(
            html_content, False, options=pdf_options, configuration=_pdf_configuration()
        )
    except OSError as e:
        logger.error(f"PDF export failed: {e}")
        raise CollaboratorError(f"PDF generation failed. Ensure wkhtmltopdf is installed. Error: {e}")


# -----------------------------
# Word
# -----------------------------
def add_hyperlink(paragraph, url, text, color="0000FF", underline=True):
    """
    Places a clickable hyperlink run in a paragraph.
    """
    part = paragraph.part
    r_id = part.relate_to(
        url,
        "http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink",
        is_external=True,
    )

    hyperlink = OxmlElement("w:hyperlink")
    hyperlink.set(qn("r:id"), r_id)

    new_run = OxmlElement("w:r")
    rPr = OxmlElement("w:rPr")

    if color:
        c = OxmlElement("w:color")
        c.set(qn("w:val"), color)
        rPr.append(c)
    if underline:
        u = OxmlElement("w:u")
        u.set(qn("w:val"), "single")
        rPr.append(u)

    new_run.append(rPr)
    text_el = OxmlElement("w:t")
    text_el.text = text
    new_run.append(text_el)
    hyperlink.append(new_run)
    paragraph._p.append(hyperlink)
    return hyperlink


def to_docx(
    fields: List[str],
    labels: Dict[str, str],
    rows: Iterable[Dict[str, Any]],
    title: str = "Achievement Report",
) -> bytes:
    doc = Document()

    style = doc.styles["Normal"]
    style.font.name = "Helvetica"
    style.font.size = Pt(9)

    section = doc.sections[0]
    section.orientation = WD_ORIENT.LANDSCAPE
    section.page_width, section.page_height = section.page_height, section.page_width

    doc.add_heading(title, level=1)
    doc.add_paragraph(f"Generated on {datetime.now().strftime('%d-%m-%Y %H:%M')}")

    table = doc.add_table(rows=1, cols=len(fields))
    table.style = "Table Grid"
    hdr_cells = table.rows[0].cells
    for i, header in enumerate(_headers(fields, labels)):
        hdr_cells[i].text = header
        hdr_cells[i].paragraphs[0].runs[0].font.bold = True

    for row in rows:
        row_cells = table.add_row().cells
        for i, f in enumerate(fields):
            if f == CERTIFICATE_FIELD:
                url = _certificate_link(row.get(f))
                if url:
                    add_hyperlink(row_cells[i].paragraphs[0], url, CERTIFICATE_LINK_LABEL)
                else:
                    row_cells[i].text = MISSING
            else:
                row_cells[i].text = format_value(row.get(f))

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


# -----------------------------
# Dispatch
# -----------------------------
ENCODERS = {
    ExportFormat.csv: to_csv,
    ExportFormat.pdf: to_pdf,
    ExportFormat.docx: to_docx,
}


def combine_sections(sections: List[ReportSection]) -> ReportSection:
    """
    Single table out of a fanned-out report; all sections share their fields.
    Refuses when any section failed so the file is never silently partial.
    """
    failed = [s for s in sections if s.status == ReportStatus.Failed]
    if failed:
        names = ", ".join(s.sub_type or ALL_SUB_TYPES for s in failed)
        logger.warning(f"Export refused: report section(s) failed: {names}")
        raise CollaboratorError(f"Report sections failed ({names}); export would be incomplete")

    if len(sections) == 1:
        return sections[0]

    ready = [s for s in sections if s.status == ReportStatus.Ready]
    first = ready[0] if ready else sections[0]
    rows = [row for s in ready for row in s.rows]
    return ReportSection(
        sub_type=None,
        status=ReportStatus.Ready if rows else ReportStatus.Empty,
        fields=first.fields,
        labels=first.labels,
        rows=rows,
        count=len(rows),
    )


def export_section(section: ReportSection, fmt) -> Tuple[bytes, str, str]:
    """Returns (content, media type, filename) for one report section."""
    try:
        fmt = ExportFormat(fmt)
    except ValueError:
        raise ValidationError(f"Unsupported export format '{fmt}'. Use csv, pdf or docx")

    if not section.rows:
        raise ValidationError("No data to export")

    if fmt == ExportFormat.csv:
        content = to_csv(section.fields, section.labels, section.rows)
    else:
        title = f"{section.sub_type} Report" if section.sub_type else "Achievement Report"
        content = ENCODERS[fmt](section.fields, section.labels, section.rows, title)

    logger.info(f"Exported {len(section.rows)} rows as {fmt.value}")
    return content, MEDIA_TYPES[fmt], report_filename(fmt, section.sub_type)


def export_all(sections: Iterable[ReportSection], fmt) -> bytes:
    """
    One file per sub-type section that has rows, bundled into a ZIP.
    Empty and failed sections are left out.
    """
    buffer = io.BytesIO()
    written = 0
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for section in sections:
            if section.status != ReportStatus.Ready or not section.rows:
                continue
            content, _, filename = export_section(section, fmt)
            archive.writestr(filename, content)
            written += 1

    if not written:
        raise ValidationError("No data to export")

    logger.info(f"Export-all bundled {written} section(s)")
    return buffer.getvalue()
