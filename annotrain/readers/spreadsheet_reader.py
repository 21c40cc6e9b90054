"""Reader for OpenDocument spreadsheets (.ods)."""

import logging
from typing import BinaryIO

from ..errors import FormatError
from ..models import Corpus
from .base import CellValue, FormatReader, read_first_sheet

logger = logging.getLogger(__name__)


class SpreadsheetReader(FormatReader):
    """
    Reads annotations from the first sheet of an ODS package.

    Column 0 holds the word, column 1 the label and the optional column 2
    a POS tag. Every cell is taken in its text form. Further sheets are
    ignored.
    """

    engine = "odf"

    def read(self, stream: BinaryIO) -> Corpus:
        sheet = read_first_sheet(stream, self.engine)
        num_rows, num_cols = sheet.shape
        logger.debug(f"ODS sheet has {num_rows} rows and {num_cols} columns")

        if num_rows and num_cols < 2:
            raise FormatError(
                f"Spreadsheet needs a word and a label column, found {num_cols} column(s)"
            )

        has_tags = num_cols > 2
        builder = self._builder()
        for row in sheet.itertuples(index=False, name=None):
            word = CellValue.from_raw(row[0]).as_text()
            label = CellValue.from_raw(row[1]).as_text()
            tag = CellValue.from_raw(row[2]).as_text() if has_tags else None
            builder.add_row(word, label, tag)

        return builder.build()
