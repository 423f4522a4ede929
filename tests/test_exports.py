import copy
import csv
import io
import zipfile
from unittest.mock import patch

import pytest
from docx import Document

from app.core.exceptions import CollaboratorError, ValidationError
from app.models.enums import ExportFormat, ReportStatus
from app.schemas.report import ReportSection
from app.services.export_service import (
    combine_sections,
    export_all,
    export_section,
    format_value,
    render_report_html,
    to_csv,
    to_docx,
    to_pdf,
)

FIELDS = ["uce", "Name", "authors", "prize", "certificatePath"]
LABELS = {
    "uce": "UCE/USN",
    "Name": "Name",
    "authors": "Authors",
    "prize": "Prize",
    "certificatePath": "Certificate",
}
ROWS = [
    {
        "uce": "UCE001",
        "Name": "Ravi Kumar",
        "authors": ["A. Rao", "B. Shah"],
        "prize": None,
        "certificatePath": "certificates/ravi.pdf",
    },
    {
        "uce": "UCE002",
        "Name": "Meera, Iyer",
        "authors": [],
        "certificatePath": None,
    },
]


def test_format_value_rules():
    assert format_value(None) == "-"
    assert format_value("") == "-"
    assert format_value([]) == "-"
    assert format_value(["a", None, "b"]) == "a; b"
    assert format_value(0) == "0"
    assert format_value(7.5) == "7.5"


def test_csv_quotes_every_value_and_uses_labels():
    content = to_csv(FIELDS, LABELS, ROWS).decode("utf-8")
    lines = content.strip().split("\n")

    assert lines[0] == '"UCE/USN","Name","Authors","Prize","Certificate"'
    assert lines[1] == '"UCE001","Ravi Kumar","A. Rao; B. Shah","-","certificates/ravi.pdf"'
    assert lines[2] == '"UCE002","Meera, Iyer","-","-","-"'

    parsed = list(csv.reader(io.StringIO(content)))
    assert parsed[2][1] == "Meera, Iyer"


def test_encoders_do_not_mutate_rows():
    snapshot = copy.deepcopy(ROWS)
    to_csv(FIELDS, LABELS, ROWS)
    render_report_html(FIELDS, LABELS, ROWS)
    to_docx(FIELDS, LABELS, ROWS)
    assert ROWS == snapshot


@patch("app.services.export_service.resolve_file_url", lambda path: f"https://files.test/{path}")
def test_pdf_html_renders_headers_placeholders_and_links():
    html = render_report_html(FIELDS, LABELS, ROWS, title="Hackathon Report")

    assert "<thead>" in html
    assert "display: table-header-group" in html
    assert "<th>UCE/USN</th>" in html
    assert '<a href="https://files.test/certificates/ravi.pdf">View Certificate</a>' in html
    assert "A. Rao; B. Shah" in html
    assert html.count("<td>-</td>") == 4


@patch("app.services.export_service.resolve_file_url", lambda path: f"https://files.test/{path}")
def test_pdf_goes_through_pdfkit():
    with patch("app.services.export_service.pdfkit.from_string", return_value=b"%PDF-1.4") as mock_pdf:
        content = to_pdf(FIELDS, LABELS, ROWS)

    assert content == b"%PDF-1.4"
    html = mock_pdf.call_args[0][0]
    assert "View Certificate" in html
    assert mock_pdf.call_args[0][1] is False


def test_pdf_failure_is_a_collaborator_error():
    with patch("app.services.export_service.pdfkit.from_string", side_effect=OSError("wkhtmltopdf missing")):
        with pytest.raises(CollaboratorError):
            to_pdf(FIELDS, LABELS, ROWS)


@patch("app.services.export_service.resolve_file_url", lambda path: f"https://files.test/{path}")
def test_docx_table_has_bold_header_placeholders_and_hyperlink():
    doc = Document(io.BytesIO(to_docx(FIELDS, LABELS, ROWS)))
    table = doc.tables[0]

    header = table.rows[0].cells
    assert [c.text for c in header] == ["UCE/USN", "Name", "Authors", "Prize", "Certificate"]
    assert header[0].paragraphs[0].runs[0].font.bold is True

    first, second = table.rows[1].cells, table.rows[2].cells
    assert first[2].text == "A. Rao; B. Shah"
    assert first[3].text == "-"
    assert [c.text for c in second[2:]] == ["-", "-", "-"]

    links = first[4]._tc.xpath(".//w:hyperlink")
    assert len(links) == 1
    assert "View Certificate" in links[0].xpath("string(.)")
    rels = [r.target_ref for r in doc.part.rels.values() if r.is_external]
    assert "https://files.test/certificates/ravi.pdf" in rels


def test_missing_values_render_the_same_in_every_format():
    rows = [{"uce": "UCE9", "prize": None, "authors": []}]
    fields = ["uce", "prize", "authors"]

    csv_cells = to_csv(fields, LABELS, rows).decode().strip().split("\n")[1]
    assert csv_cells == '"UCE9","-","-"'

    html = render_report_html(fields, LABELS, rows)
    assert html.count("<td>-</td>") == 2

    doc = Document(io.BytesIO(to_docx(fields, LABELS, rows)))
    assert [c.text for c in doc.tables[0].rows[1].cells] == ["UCE9", "-", "-"]


def _section(sub_type, rows, status=ReportStatus.Ready):
    return ReportSection(
        sub_type=sub_type,
        status=status,
        fields=["uce", "Name"],
        labels={"uce": "UCE/USN", "Name": "Name"},
        rows=rows,
        count=len(rows),
    )


def test_export_section_returns_media_type_and_filename():
    content, media_type, filename = export_section(_section("Hackathon", ROWS), "csv")

    assert media_type == "text/csv"
    assert filename.startswith("hackathon_report_") and filename.endswith(".csv")
    assert content.startswith(b'"UCE/USN","Name"')


def test_export_section_refuses_empty_and_unknown_format():
    with pytest.raises(ValidationError):
        export_section(_section("Hackathon", []), ExportFormat.csv)
    with pytest.raises(ValidationError):
        export_section(_section("Hackathon", ROWS), "xlsx")


def test_export_all_zips_one_file_per_non_empty_section():
    sections = [
        _section("Hackathon", [{"uce": "UCE1", "Name": "A"}]),
        _section("Workshop", [], status=ReportStatus.Empty),
        _section("Seminar/Webinar", [{"uce": "UCE2", "Name": "B"}]),
        _section("Other", [], status=ReportStatus.Failed),
    ]

    archive = zipfile.ZipFile(io.BytesIO(export_all(sections, "csv")))
    names = sorted(archive.namelist())

    assert len(names) == 2
    assert names[0].startswith("hackathon_report_")
    assert names[1].startswith("seminar_webinar_report_")
    assert b"UCE2" in archive.read(names[1])


def test_export_all_with_nothing_to_export():
    with pytest.raises(ValidationError):
        export_all([_section("Workshop", [], status=ReportStatus.Empty)], "csv")


def test_combine_sections_merges_ready_rows():
    combined = combine_sections([
        _section("Hackathon", [{"uce": "UCE1"}]),
        _section("Workshop", [], status=ReportStatus.Empty),
        _section("Other", [{"uce": "UCE3"}]),
    ])
    assert combined.count == 2
    assert combined.fields == ["uce", "Name"]
    assert [r["uce"] for r in combined.rows] == ["UCE1", "UCE3"]


def test_combine_sections_refuses_when_a_section_failed():
    with pytest.raises(CollaboratorError) as exc:
        combine_sections([
            _section("Hackathon", [{"uce": "UCE1"}]),
            _section("Workshop", [], status=ReportStatus.Failed),
            _section("Other", [], status=ReportStatus.Failed),
        ])
    assert "Workshop, Other" in exc.value.message
