"""Base classes shared by the annotation format readers."""

import logging
import numbers
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional

import pandas as pd

from ..errors import FormatError
from ..models import Corpus, Document, Token

logger = logging.getLogger(__name__)


class CellKind(Enum):
    """Closed set of cell types a spreadsheet row can hand us."""

    TEXT = "text"
    NUMBER = "number"
    EMPTY = "empty"
    OTHER = "other"


def format_number(value) -> str:
    """Render a numeric cell as decimal text (integral values drop the '.0')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CellValue:
    """A single decoded cell."""

    kind: CellKind
    value: object = None

    @classmethod
    def from_raw(cls, raw) -> "CellValue":
        """Classify a value as produced by pandas' spreadsheet readers."""
        if raw is None:
            return cls(CellKind.EMPTY)
        if isinstance(raw, str):
            return cls(CellKind.TEXT, raw) if raw else cls(CellKind.EMPTY)
        # bool is an int subclass
        if isinstance(raw, bool):
            return cls(CellKind.OTHER, raw)
        if isinstance(raw, numbers.Number):
            if pd.isna(raw):
                return cls(CellKind.EMPTY)
            return cls(CellKind.NUMBER, raw)
        if pd.isna(raw):
            return cls(CellKind.EMPTY)
        return cls(CellKind.OTHER, raw)

    def as_word(self) -> str:
        """
        Text of a word cell.

        Only text and numeric cells carry a word; anything else reads as
        empty and therefore marks a document boundary.
        """
        if self.kind is CellKind.TEXT:
            return self.value
        if self.kind is CellKind.NUMBER:
            return format_number(self.value)
        return ""

    def as_text(self) -> str:
        """Text of the cell whatever its type."""
        if self.kind is CellKind.EMPTY:
            return ""
        if self.kind is CellKind.NUMBER:
            return format_number(self.value)
        return str(self.value)


class CorpusBuilder:
    """
    Accumulates rows into documents.

    A row with an empty word closes the current document. Documents are only
    kept when they hold at least one token.
    """

    def __init__(self, capture_tags: bool = False):
        """
        Initialize the builder.

        Args:
            capture_tags: Whether the third column is recorded as POS tag.
        """
        self.capture_tags = capture_tags
        self.rows_read = 0
        self.boundaries = 0
        self._documents: list[Document] = []
        self._current: list[Token] = []

    def add_row(self, word: str, label: str, tag: Optional[str] = None) -> None:
        """Add one source row."""
        self.rows_read += 1
        if not word:
            self.boundaries += 1
            self.close_document()
            return

        pos_tag = tag if (self.capture_tags and tag) else None
        self._current.append(Token(text=word, label=label, pos_tag=pos_tag))

    def close_document(self) -> None:
        """End the current document, keeping it only if non-empty."""
        if self._current:
            self._documents.append(Document(tuple(self._current)))
        self._current = []

    def build(self) -> Corpus:
        """Flush the trailing document and return the corpus."""
        self.close_document()
        logger.debug(
            f"Read {self.rows_read} rows ({self.boundaries} boundaries) "
            f"into {len(self._documents)} documents"
        )
        return Corpus(documents=tuple(self._documents))


class FormatReader(ABC):
    """
    Abstract base class for annotation readers.

    Implementations turn a binary stream into a Corpus using the shared
    boundary rule of `CorpusBuilder`.
    """

    def __init__(self, capture_tags: bool = False):
        """
        Initialize the reader.

        Args:
            capture_tags: Record the third column as POS tag when non-empty.
        """
        self.capture_tags = capture_tags

    @abstractmethod
    def read(self, stream: BinaryIO) -> Corpus:
        """
        Read a corpus from a stream.

        Args:
            stream: Binary stream over the source document.

        Returns:
            The extracted Corpus.

        Raises:
            FormatError: If the document or one of its rows is malformed.
        """
        pass

    def _builder(self) -> CorpusBuilder:
        return CorpusBuilder(capture_tags=self.capture_tags)

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(capture_tags={self.capture_tags})"


def read_first_sheet(stream: BinaryIO, engine: str) -> pd.DataFrame:
    """
    Load the first sheet of a spreadsheet without a header row.

    NA detection is disabled so that words like "NA" or "null" survive and
    blank cells come back as empty strings. Columns stay ``object`` so text
    cells such as "007" are not turned into numbers.

    Raises:
        FormatError: If the document cannot be opened or decoded.
    """
    try:
        return pd.read_excel(
            stream,
            sheet_name=0,
            header=None,
            engine=engine,
            dtype=object,
            na_filter=False,
        )
    except ImportError:
        raise
    except Exception as e:
        raise FormatError(f"Error while reading spreadsheet document: {e}") from e
