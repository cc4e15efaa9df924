# export.py - PDF export and printing of the entries table

import os
import sys
import shutil
import logging
import tempfile
import subprocess
from datetime import datetime
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import SimpleDocTemplate, LongTable, TableStyle, Paragraph, Spacer
from config import CONFIG

# Set up logging
logger = logging.getLogger('LP.export')

REPORT_TITLE = "Liqui-Planner Report"


class ExportError(Exception):
    """Raised when the PDF cannot be written or the printer rejects the job."""


def pdf_headers():
    return ["Title", f"Amount ({CONFIG['CURRENCY']})", "Kind", "Month"]

def amount_cell(amount):
    """Amount without the currency suffix, which the column header already carries."""
    return str(amount).removesuffix(f" {CONFIG['CURRENCY']}")

def _pdf_styles():
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "PDFTitle",
        parent=styles["Normal"],
        fontSize=18,
        textColor=colors.HexColor("#1A1A2E"),
        spaceAfter=4,
        fontName="Helvetica-Bold",
        alignment=TA_CENTER,
    )
    subtitle_style = ParagraphStyle(
        "PDFSubtitle",
        parent=styles["Normal"],
        fontSize=9,
        textColor=colors.HexColor("#8A8A9A"),
        spaceAfter=2,
        alignment=TA_CENTER,
    )
    return title_style, subtitle_style

def export_to_pdf(rows, filepath):
    """
    Write the visible table rows to a PDF document.

    Args:
        rows: table rows as (id, title, amount, kind, month); the id is not exported
        filepath: destination .pdf path

    Raises:
        ExportError: if the file cannot be written
    """
    title_s, subtitle_s = _pdf_styles()
    story = [
        Paragraph(REPORT_TITLE, title_s),
        Paragraph(f"Generated: {datetime.now().strftime('%d/%m/%Y %H:%M')}", subtitle_s),
        Spacer(1, 0.5*cm),
    ]

    data = [pdf_headers()]
    for row in rows:
        title, amount, kind, month = row[1:5]
        data.append([str(title), amount_cell(amount), str(kind), str(month)])

    table = LongTable(data, colWidths=[6.5*cm, 3.5*cm, 3*cm, 3.5*cm], repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E0E0E0")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("GRID", (0, 0), (-1, -1), 0.3, colors.HexColor("#A0A0A0")),
        ("PADDING", (0, 0), (-1, -1), 4),
        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
    ]))
    story.append(table)

    doc = SimpleDocTemplate(
        filepath, pagesize=A4,
        leftMargin=1.5*cm, rightMargin=1.5*cm,
        topMargin=2*cm, bottomMargin=2*cm,
        title=REPORT_TITLE,
    )
    try:
        doc.build(story)
    except OSError as e:
        raise ExportError(f"Unable to write PDF to {filepath}: {e}") from e
    logger.info(f"PDF saved to {filepath} ({len(rows)} rows)")
    return filepath

def send_to_printer(filepath):
    """Hand a document to the platform print pipeline."""
    if sys.platform.startswith("win"):
        try:
            os.startfile(filepath, "print")
        except OSError as e:
            raise ExportError(f"Printing failed: {e}") from e
        return

    command = shutil.which("lp") or shutil.which("lpr")
    if command is None:
        raise ExportError("No print command (lp or lpr) found")
    try:
        subprocess.run([command, filepath], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, OSError) as e:
        details = getattr(e, "stderr", "") or str(e)
        raise ExportError(f"Printing failed: {details.strip()}") from e
    logger.info(f"Sent {filepath} to printer via {command}")

def print_table(rows):
    """Render the rows to a temporary PDF and print it."""
    fd, filepath = tempfile.mkstemp(prefix="liquiplanner_", suffix=".pdf")
    os.close(fd)
    try:
        export_to_pdf(rows, filepath)
        send_to_printer(filepath)
    finally:
        # lp/lpr spool a copy; the Windows print verb still reads the file after startfile returns
        if not sys.platform.startswith("win") and os.path.exists(filepath):
            os.remove(filepath)
    return filepath
