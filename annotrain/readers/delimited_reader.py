"""Reader for tab separated annotation files (.tsv)."""

import io
import logging
from typing import BinaryIO

from ..errors import FormatError
from ..models import Corpus
from .base import FormatReader

logger = logging.getLogger(__name__)


class DelimitedTextReader(FormatReader):
    """
    Reads one token per line: word, label and an optional tag, tab separated.

    A line whose first field is empty, including a blank line, ends the
    current document.
    """

    separator = "\t"
    # Tolerates the byte order mark spreadsheet tools write
    encoding = "utf-8-sig"

    def read(self, stream: BinaryIO) -> Corpus:
        builder = self._builder()
        text = io.TextIOWrapper(stream, encoding=self.encoding)
        try:
            for line_num, line in enumerate(text, start=1):
                self._add_line(builder, line.rstrip("\r\n"), line_num)
        except UnicodeDecodeError as e:
            raise FormatError(f"Input is not valid UTF-8 text: {e}") from e
        finally:
            # Leave the underlying stream to its owner
            text.detach()

        return builder.build()

    def _add_line(self, builder, line: str, line_num: int) -> None:
        cells = line.split(self.separator)
        if not cells[0]:
            builder.add_row("", "")
            return

        if len(cells) < 2:
            raise FormatError(
                f"Line {line_num} has no label column: {line!r}"
            )
        tag = cells[2] if len(cells) > 2 else None
        builder.add_row(cells[0], cells[1], tag)
