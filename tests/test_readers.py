"""Tests for the annotation format readers."""

import dataclasses
import io
from pathlib import Path

import pandas as pd
import pytest
import xlwt
from openpyxl import Workbook

from annotrain.errors import FormatError
from annotrain.readers import (
    CellKind,
    CellValue,
    CorpusBuilder,
    DelimitedTextReader,
    SpreadsheetReader,
    WorkbookReader,
)


def write_ods(path: Path, rows: list) -> Path:
    """Write rows to the first sheet of an ODS document."""
    pd.DataFrame(rows).to_excel(path, header=False, index=False, engine="odf")
    return path


def write_xlsx(path: Path, rows: list) -> Path:
    """Write rows cell by cell so the cell types are kept."""
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return path


def write_xls(path: Path, rows: list) -> Path:
    """Write rows to a legacy Excel workbook, skipping None cells."""
    wb = xlwt.Workbook()
    ws = wb.add_sheet("Sheet1")
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value is not None:
                ws.write(r, c, value)
    wb.save(str(path))
    return path


def read_tsv(text: str, capture_tags: bool = False):
    reader = DelimitedTextReader(capture_tags=capture_tags)
    return reader.read(io.BytesIO(text.encode("utf-8")))


def as_pairs(corpus) -> list:
    return [[(t.text, t.label) for t in doc] for doc in corpus]


class TestCellValue:
    """Tests for cell classification."""

    def test_kinds(self):
        """Test that pandas cell values map to the closed set of kinds."""
        assert CellValue.from_raw("word").kind is CellKind.TEXT
        assert CellValue.from_raw("").kind is CellKind.EMPTY
        assert CellValue.from_raw(None).kind is CellKind.EMPTY
        assert CellValue.from_raw(float("nan")).kind is CellKind.EMPTY
        assert CellValue.from_raw(42).kind is CellKind.NUMBER
        assert CellValue.from_raw(2.5).kind is CellKind.NUMBER
        assert CellValue.from_raw(True).kind is CellKind.OTHER
        assert CellValue.from_raw(pd.Timestamp("2020-01-01")).kind is CellKind.OTHER

    def test_word_conversion(self):
        """Test that only text and numbers yield a word."""
        assert CellValue.from_raw("Stockholm").as_word() == "Stockholm"
        assert CellValue.from_raw(1999).as_word() == "1999"
        assert CellValue.from_raw(1999.0).as_word() == "1999"
        assert CellValue.from_raw(0.5).as_word() == "0.5"
        assert CellValue.from_raw(True).as_word() == ""
        assert CellValue.from_raw(pd.Timestamp("2020-01-01")).as_word() == ""

    def test_text_conversion(self):
        """Test that any cell reads as text."""
        assert CellValue.from_raw(True).as_text() == "True"
        assert CellValue.from_raw(7.0).as_text() == "7"
        assert CellValue.from_raw(None).as_text() == ""


class TestCorpusBuilder:
    """Tests for the shared segmentation rule."""

    def test_trailing_flush(self):
        """Test that rows up to end of input form one document."""
        builder = CorpusBuilder()
        for word in ["a", "b", "c"]:
            builder.add_row(word, "O")
        corpus = builder.build()

        assert len(corpus) == 1
        assert corpus[0].words == ["a", "b", "c"]

    def test_boundary_splits_documents(self):
        """Test that an empty word splits the surrounding rows."""
        builder = CorpusBuilder()
        builder.add_row("a", "O")
        builder.add_row("", "")
        builder.add_row("b", "O")
        corpus = builder.build()

        assert [doc.words for doc in corpus] == [["a"], ["b"]]

    def test_no_empty_documents(self):
        """Test that leading, repeated and trailing boundaries add nothing."""
        builder = CorpusBuilder()
        builder.add_row("", "")
        builder.add_row("a", "O")
        builder.add_row("", "")
        builder.add_row("", "")
        builder.add_row("b", "O")
        builder.add_row("", "")
        corpus = builder.build()

        assert len(corpus) == 2
        assert all(len(doc) > 0 for doc in corpus)
        assert builder.boundaries == 4

    def test_corpus_is_immutable(self):
        """Test that the built corpus cannot be changed afterwards."""
        builder = CorpusBuilder()
        builder.add_row("a", "O")
        corpus = builder.build()

        assert isinstance(corpus.documents, tuple)
        with pytest.raises(dataclasses.FrozenInstanceError):
            corpus.documents = ()

    def test_tags_need_capture_enabled(self):
        """Test that tags are only kept when capture is on and non-empty."""
        off = CorpusBuilder(capture_tags=False)
        off.add_row("a", "O", "NN")
        assert off.build()[0][0].pos_tag is None

        on = CorpusBuilder(capture_tags=True)
        on.add_row("a", "O", "NN")
        on.add_row("b", "O", "")
        on.add_row("c", "O", None)
        doc = on.build()[0]
        assert [t.pos_tag for t in doc] == ["NN", None, None]


class TestDelimitedTextReader:
    """Tests for the TSV reader."""

    def test_tagged_example(self):
        """Test the reference example with tag capture on."""
        corpus = read_tsv("word\tO\tNN\nblank\tO\n\nend\tO", capture_tags=True)

        assert len(corpus) == 2
        first, second = corpus
        assert first.words == ["word", "blank"]
        assert first[0].pos_tag == "NN"
        assert first[0].label == "O"
        assert first[1].pos_tag is None
        assert second.words == ["end"]

    def test_tags_ignored_without_capture(self):
        """Test that the third field is dropped when capture is off."""
        corpus = read_tsv("word\tO\tNN\n")
        assert corpus[0][0].pos_tag is None

    def test_empty_first_field_is_boundary(self):
        """Test that a line starting with a tab ends the document."""
        corpus = read_tsv("a\tO\n\tO\nb\tB-LOC\n")
        assert as_pairs(corpus) == [[("a", "O")], [("b", "B-LOC")]]

    def test_consecutive_blank_lines(self):
        """Test that blank lines in a row do not create empty documents."""
        corpus = read_tsv("a\tO\n\n\n\nb\tO\n\n")
        assert [doc.words for doc in corpus] == [["a"], ["b"]]

    def test_windows_line_endings(self):
        """Test that CRLF terminators are not part of the fields."""
        corpus = read_tsv("a\tO\r\nb\tPER\r\n\r\nc\tO\r\n")
        assert as_pairs(corpus) == [[("a", "O"), ("b", "PER")], [("c", "O")]]

    def test_missing_label_is_error(self):
        """Test that a token line without label fails."""
        with pytest.raises(FormatError, match="Line 2"):
            read_tsv("a\tO\nbroken\n")

    def test_all_blank_input(self):
        """Test that blank input gives an empty corpus."""
        assert read_tsv("\n\n\n").is_empty
        assert read_tsv("").is_empty

    def test_byte_order_mark(self):
        """Test that a leading BOM is not part of the first word."""
        reader = DelimitedTextReader()
        corpus = reader.read(io.BytesIO(b"\xef\xbb\xbfword\tO\nnext\tO\n"))

        assert corpus[0].words == ["word", "next"]

    def test_invalid_encoding(self):
        """Test that undecodable bytes are a format error."""
        reader = DelimitedTextReader()
        with pytest.raises(FormatError):
            reader.read(io.BytesIO(b"caf\xe9\tO\n"))

    def test_stream_left_open(self):
        """Test that the caller keeps ownership of the stream."""
        stream = io.BytesIO(b"a\tO\n")
        DelimitedTextReader().read(stream)
        assert not stream.closed


class TestSpreadsheetReader:
    """Tests for the ODS reader."""

    def test_reference_example(self, tmp_path):
        """Test the five row example with one blank row."""
        path = write_ods(
            tmp_path / "annotated.ods",
            [["the", "O"], ["cat", "O"], ["sat", "O"], ["", ""], ["down", "O"]],
        )
        with open(path, "rb") as f:
            corpus = SpreadsheetReader().read(f)

        assert [doc.words for doc in corpus] == [["the", "cat", "sat"], ["down"]]
        assert all(label == "O" for doc in corpus for label in doc.labels)

    def test_tag_column(self, tmp_path):
        """Test that the third column becomes the POS tag when enabled."""
        rows = [["Anna", "PER", "PM"], ["sover", "O", ""], ["", "", ""], ["Ja", "O", "IN"]]
        path = write_ods(tmp_path / "tagged.ods", rows)

        corpus = SpreadsheetReader(capture_tags=True).read(io.BytesIO(path.read_bytes()))
        assert [[t.pos_tag for t in doc] for doc in corpus] == [["PM", None], ["IN"]]

        corpus = SpreadsheetReader(capture_tags=False).read(io.BytesIO(path.read_bytes()))
        assert all(t.pos_tag is None for doc in corpus for t in doc)

    def test_numbers_read_as_text(self, tmp_path):
        """Test that numeric cells become their decimal text."""
        path = write_ods(tmp_path / "numbers.ods", [["in", "O"], [1999, "DATE"]])
        corpus = SpreadsheetReader().read(io.BytesIO(path.read_bytes()))

        assert corpus[0].words == ["in", "1999"]

    def test_single_column_is_error(self, tmp_path):
        """Test that a sheet without a label column fails."""
        path = write_ods(tmp_path / "words.ods", [["a"], ["b"]])
        with pytest.raises(FormatError, match="label column"):
            SpreadsheetReader().read(io.BytesIO(path.read_bytes()))

    def test_not_a_spreadsheet(self):
        """Test that garbage input is a format error."""
        with pytest.raises(FormatError):
            SpreadsheetReader().read(io.BytesIO(b"this is not a zip package"))


class TestWorkbookReader:
    """Tests for the Excel reader."""

    def test_xlsx_segmentation(self, tmp_path):
        """Test segmentation with typed cells in the word column."""
        path = write_xlsx(
            tmp_path / "annotated.xlsx",
            [
                ["the", "O"],
                [42, "NUM"],
                [3.5, "NUM"],
                [True, "X"],
                [None, None],
                ["end", None],
            ],
        )
        with open(path, "rb") as f:
            corpus = WorkbookReader("xlsx").read(f)

        assert as_pairs(corpus) == [
            [("the", "O"), ("42", "NUM"), ("3.5", "NUM")],
            [("end", "")],
        ]

    def test_label_and_tag_read_as_text(self, tmp_path):
        """Test that label and tag cells are text whatever their type."""
        path = write_xlsx(tmp_path / "typed.xlsx", [["a", 1, 2], ["b", "O", None]])
        corpus = WorkbookReader("xlsx", capture_tags=True).read(io.BytesIO(path.read_bytes()))

        doc = corpus[0]
        assert doc[0].label == "1"
        assert doc[0].pos_tag == "2"
        assert doc[1].pos_tag is None

    def test_text_cells_kept_verbatim(self, tmp_path):
        """Test that numeric looking text and NA markers stay words."""
        path = write_xlsx(tmp_path / "text.xlsx", [["007", "O"], ["NA", "O"], ["null", "O"]])
        corpus = WorkbookReader("xlsx").read(io.BytesIO(path.read_bytes()))

        assert corpus[0].words == ["007", "NA", "null"]

    def test_only_first_sheet(self, tmp_path):
        """Test that further sheets are ignored."""
        wb = Workbook()
        wb.active.append(["first", "O"])
        wb.create_sheet("second").append(["second", "O"])
        path = tmp_path / "sheets.xlsx"
        wb.save(path)

        corpus = WorkbookReader("xlsx").read(io.BytesIO(path.read_bytes()))
        assert [doc.words for doc in corpus] == [["first"]]

    def test_xls_segmentation(self, tmp_path):
        """Test the legacy format end to end, including tags and numbers."""
        path = write_xls(
            tmp_path / "annotated.xls",
            [["the", "O"], [42, "NUM"], [None, None], ["end", "O", "NN"]],
        )
        with open(path, "rb") as f:
            corpus = WorkbookReader("xls", capture_tags=True).read(f)

        assert [doc.words for doc in corpus] == [["the", "42"], ["end"]]
        assert corpus[0].labels == ["O", "NUM"]
        assert [t.pos_tag for t in corpus[0]] == [None, None]
        assert corpus[1][0].pos_tag == "NN"

    def test_xls_trailing_rows(self, tmp_path):
        """Test that rows up to the end of the sheet form one document."""
        path = write_xls(tmp_path / "single.xls", [["a", "O"], ["b", "O"], ["c", "O"]])
        corpus = WorkbookReader("xls").read(io.BytesIO(path.read_bytes()))

        assert [doc.words for doc in corpus] == [["a", "b", "c"]]

    def test_engine_per_variant(self, monkeypatch):
        """Test that the decoder follows the declared variant."""
        engines = []

        def fake_read_excel(stream, **kwargs):
            engines.append(kwargs["engine"])
            return pd.DataFrame([["a", "O"]])

        monkeypatch.setattr(pd, "read_excel", fake_read_excel)
        WorkbookReader("xls").read(io.BytesIO(b""))
        WorkbookReader("xlsx").read(io.BytesIO(b""))

        assert engines == ["xlrd", "openpyxl"]

    def test_unknown_variant(self):
        """Test that only xlsx and xls are accepted."""
        with pytest.raises(ValueError):
            WorkbookReader("csv")

    def test_unreadable_workbook_fails_fast(self):
        """Test that a workbook that cannot be opened is an error."""
        with pytest.raises(FormatError):
            WorkbookReader("xlsx").read(io.BytesIO(b"not a workbook"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
