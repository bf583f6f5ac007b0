import io

import docx
import pytest

from thesisgen.docx_export import (
    bibtex_fields,
    create_thesis_document,
    format_reference,
    split_bibtex_entries,
    xml_safe,
)
from thesisgen.models import Chapter, ThesisRecord


def read_back(content: bytes):
    return docx.Document(io.BytesIO(content))


class TestCreateThesisDocument:
    def test_returns_docx_bytes(self, record):
        content = create_thesis_document(record)
        assert content[:2] == b"PK"

    def test_headings_follow_record(self, record):
        document = read_back(create_thesis_document(record))
        headings = [p.text for p in document.paragraphs if p.style.name.startswith("Heading")]
        assert headings == [c.title for c in record.chapters] + ["References"]
        assert [p.text for p in document.paragraphs if p.style.name == "Title"] == [record.title]

    def test_title_page_lines(self, record):
        texts = [p.text for p in read_back(create_thesis_document(record)).paragraphs]
        assert "By: John Doe" in texts
        assert "Under the supervision of: Dr. Jane Smith" in texts
        assert "University of Technology" in texts

    def test_one_paragraph_per_non_empty_line(self):
        record = ThesisRecord(title="T", chapters=[Chapter(title="Only", content="first\n\n  second  \n")])
        texts = [p.text for p in read_back(create_thesis_document(record)).paragraphs]
        start = texts.index("Only")
        assert texts[start + 1:start + 3] == ["first", "second"]

    def test_references_are_formatted(self, record):
        texts = [p.text for p in read_back(create_thesis_document(record)).paragraphs]
        assert "Smith, Jane, Johnson, Bob (2023). Machine Learning for Renewable Energy: A Comprehensive Review." in texts

    def test_control_characters_are_dropped(self):
        record = ThesisRecord(
            title="Form feed\x0c title",
            author="Nul\x00 Author",
            chapters=[Chapter(title="Vertical\x0btab", content="tab\x0bhere")],
            bibliography="@misc{k,\n  title={Bell\x07 Title}\n}",
        )
        texts = [p.text for p in read_back(create_thesis_document(record)).paragraphs]
        assert "Form feed title" in texts
        assert "By: Nul Author" in texts
        assert "Verticaltab" in texts
        assert "tabhere" in texts
        assert "Bell Title." in texts

    def test_no_references_section_without_bibliography(self):
        document = read_back(create_thesis_document(ThesisRecord(title="T")))
        assert "References" not in [p.text for p in document.paragraphs]


class TestBibtexHelpers:
    def test_split_entries(self, record):
        entries = split_bibtex_entries(record.bibliography)
        assert len(entries) == 2
        assert entries[0].startswith("@article{smith2023ml")
        assert entries[1].startswith("@inproceedings{doe2022solar")

    def test_split_empty(self):
        assert split_bibtex_entries("") == []

    def test_fields(self):
        fields = bibtex_fields('@book{k,\n  Title = {A Book},\n  year = "1999"\n}')
        assert fields == {"title": "A Book", "year": "1999"}

    @pytest.mark.parametrize(
        "entry, expected",
        [
            ("@misc{k,\n  title={Only Title}\n}", "Only Title."),
            ("@misc{k,\n  author={Ada Lovelace},\n  year={1843}\n}", "Ada Lovelace (1843)."),
            ("@misc{k}", "@misc{k}"),
        ],
    )
    def test_format_reference(self, entry, expected):
        assert format_reference(entry) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("plain", "plain"),
        ("a\x00b\x08c\x0bd\x0ce\x1ff", "abcdef"),
        ("keeps\ttab\nnewline\r", "keeps\ttab\nnewline\r"),
    ],
)
def test_xml_safe(text, expected):
    assert xml_safe(text) == expected
