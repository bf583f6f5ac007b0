import io
import logging
import re
from typing import Dict, List

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Inches, Pt

from .models import ThesisRecord

logger = logging.getLogger(__name__)

_ENTRY_START = re.compile(r"^\s*@", re.MULTILINE)
_BIB_FIELD = re.compile(r"(\w+)\s*=\s*[{\"](.*?)[}\"]\s*,?\s*$", re.MULTILINE)
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def xml_safe(text: str) -> str:
    """Drops control characters that cannot appear in the document XML."""
    return _XML_ILLEGAL.sub("", text)


def split_bibtex_entries(bibliography: str) -> List[str]:
    starts = [m.start() for m in _ENTRY_START.finditer(bibliography)]
    bounds = zip(starts, starts[1:] + [len(bibliography)])
    return [bibliography[start:end].strip() for start, end in bounds]


def bibtex_fields(entry: str) -> Dict[str, str]:
    return {name.lower(): value.strip("{} ") for name, value in _BIB_FIELD.findall(entry)}


def format_reference(entry: str) -> str:
    """
    A plain-text reference line for one BibTeX entry:
    ``Author (Year). Title.`` using whichever of those fields are present,
    or the raw entry when none are.
    """
    fields = bibtex_fields(entry)
    parts = []
    if fields.get("author"):
        parts.append(fields["author"].replace(" and ", ", "))
    if fields.get("year"):
        parts.append(f"({fields['year']}).")
    if fields.get("title"):
        parts.append(f"{fields['title']}.")
    return " ".join(parts) if parts else entry


def create_thesis_document(data: ThesisRecord) -> bytes:
    """
    Builds a Word document from the thesis record and returns its bytes.
    Nothing is written to disk; the caller streams the result as a download.
    """
    try:
        doc = Document()

        # --- Basic Setup ---
        style = doc.styles["Normal"]
        style.font.name = "Times New Roman"
        style.font.size = Pt(12)
        style.paragraph_format.line_spacing = 1.5

        # --- Title Page ---
        doc.add_heading(xml_safe(data.title), level=0).alignment = WD_ALIGN_PARAGRAPH.CENTER
        doc.add_paragraph()
        for line in (
            "A thesis submitted in partial fulfillment of the requirements for the degree of",
            data.degree_program,
            f"By: {data.author}",
            f"Under the supervision of: {data.supervisor}",
            data.institution,
            data.year,
        ):
            doc.add_paragraph(xml_safe(line)).alignment = WD_ALIGN_PARAGRAPH.CENTER
        doc.add_page_break()

        # --- Chapters ---
        for chapter in data.chapters:
            logger.info(f"Adding chapter: {chapter.title}")
            doc.add_heading(xml_safe(chapter.title), level=1)
            for para_text in chapter.content.split("\n"):
                if para_text.strip():
                    doc.add_paragraph(xml_safe(para_text.strip()))
            doc.add_paragraph()

        # --- References (hanging indent) ---
        entries = split_bibtex_entries(data.bibliography)
        if entries:
            logger.info(f"Adding References section with {len(entries)} entries")
            doc.add_heading("References", level=1)
            for entry in entries:
                p = doc.add_paragraph(style="List Paragraph")
                p.paragraph_format.left_indent = Inches(0.5)
                p.paragraph_format.first_line_indent = Inches(-0.5)
                p.add_run(xml_safe(format_reference(entry)))

        buffer = io.BytesIO()
        doc.save(buffer)
        return buffer.getvalue()

    except Exception as e:
        logger.error(f"Error generating Word document for '{data.title}': {e}", exc_info=True)
        raise
