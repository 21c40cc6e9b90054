"""Readers turning annotated documents into a corpus."""

from .base import CellKind, CellValue, CorpusBuilder, FormatReader
from .delimited_reader import DelimitedTextReader
from .dispatch import READER_REGISTRY, InputSource, create_reader, read_corpus, resolve_source
from .spreadsheet_reader import SpreadsheetReader
from .workbook_reader import WorkbookReader

__all__ = [
    "CellKind",
    "CellValue",
    "CorpusBuilder",
    "FormatReader",
    "DelimitedTextReader",
    "SpreadsheetReader",
    "WorkbookReader",
    "READER_REGISTRY",
    "InputSource",
    "create_reader",
    "read_corpus",
    "resolve_source",
]
