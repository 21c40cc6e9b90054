"""Input source resolution and reader dispatch."""

import base64
import binascii
import io
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator, Optional

from ..config import TrainingOptions
from ..errors import SourceUnavailableError
from ..models import Corpus
from .base import FormatReader
from .delimited_reader import DelimitedTextReader
from .spreadsheet_reader import SpreadsheetReader
from .workbook_reader import WorkbookReader

logger = logging.getLogger(__name__)

# Format tag -> (reader class, constructor arguments)
READER_REGISTRY = {
    "ods": (SpreadsheetReader, {}),
    "xlsx": (WorkbookReader, {"variant": "xlsx"}),
    "xls": (WorkbookReader, {"variant": "xls"}),
    "tsv": (DelimitedTextReader, {}),
}


def create_reader(input_format: str, capture_tags: bool = False) -> FormatReader:
    """
    Create the reader registered for a format tag.

    Args:
        input_format: One of the keys of READER_REGISTRY.
        capture_tags: Record the third column as POS tag.

    Raises:
        ValueError: If no reader is registered for the tag.
    """
    if input_format not in READER_REGISTRY:
        raise ValueError(f"Unknown input format: {input_format}")
    reader_class, kwargs = READER_REGISTRY[input_format]
    return reader_class(capture_tags=capture_tags, **kwargs)


@dataclass(frozen=True)
class InputSource:
    """Either an uploaded payload held in memory or a local file."""

    payload: Optional[bytes] = None
    path: Optional[Path] = None

    @classmethod
    def from_base64(cls, encoded: str) -> "InputSource":
        """Build a source from a base64 encoded upload."""
        try:
            return cls(payload=base64.b64decode(encoded, validate=True))
        except (binascii.Error, ValueError) as e:
            raise SourceUnavailableError(f"Uploaded document is not valid base64: {e}") from e

    @property
    def description(self) -> str:
        if self.payload is not None:
            return f"uploaded document ({len(self.payload)} bytes)"
        return str(self.path)

    @contextmanager
    def open_stream(self) -> Iterator[BinaryIO]:
        """
        Open the source as a binary stream, closed on exit.

        Raises:
            SourceUnavailableError: If the local file cannot be opened.
        """
        if self.payload is not None:
            with io.BytesIO(self.payload) as stream:
                yield stream
            return

        if self.path is None:
            raise SourceUnavailableError("No input document given")
        try:
            stream = open(self.path, "rb")
        except OSError as e:
            raise SourceUnavailableError(
                f"Cannot open input document {self.path}: {e}"
            ) from e
        with stream:
            yield stream


def resolve_source(
    options: TrainingOptions, upload: Optional[InputSource] = None
) -> InputSource:
    """
    Pick the document to read.

    An uploaded payload wins over ``localFilePath``; without either the
    configured default working document is used.
    """
    if upload is not None and upload.payload is not None:
        return upload
    if options.local_file_path is not None:
        return InputSource(path=options.local_file_path)
    logger.info(f"No input given, using default document {options.default_source_path}")
    return InputSource(path=options.default_source_path)


def read_corpus(options: TrainingOptions, upload: Optional[InputSource] = None) -> Corpus:
    """
    Extract the corpus described by the options.

    Args:
        options: Training options (format, tag capture, source location).
        upload: Optional uploaded document.

    Returns:
        The extracted Corpus, possibly empty.
    """
    source = resolve_source(options, upload)
    reader = create_reader(options.input_format, capture_tags=options.capture_tags)
    logger.info(f"Reading {options.input_format} annotations from {source.description}")

    with source.open_stream() as stream:
        corpus = reader.read(stream)

    logger.info(
        f"Extracted {len(corpus)} documents with {corpus.num_tokens} tokens"
    )
    return corpus
