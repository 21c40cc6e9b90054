"""Reader for Excel workbooks (.xlsx and legacy .xls)."""

import logging
from typing import BinaryIO, Literal

from ..models import Corpus
from .base import CellValue, FormatReader, read_first_sheet

logger = logging.getLogger(__name__)

WorkbookVariant = Literal["xlsx", "xls"]


class WorkbookReader(FormatReader):
    """
    Reads annotations from the first sheet of an Excel workbook.

    The word column is type aware: text cells are used as is, numeric
    cells become their decimal text and any other cell type counts as
    empty (a document boundary). Label and tag columns are always read as
    text. A row without a label column gets an empty label; labels are
    only checked at training time.
    """

    # Decoder per workbook variant
    ENGINES = {
        "xlsx": "openpyxl",
        "xls": "xlrd",
    }

    def __init__(self, variant: WorkbookVariant = "xlsx", capture_tags: bool = False):
        """
        Initialize the reader.

        Args:
            variant: "xlsx" for XML workbooks, "xls" for binary workbooks.
            capture_tags: Record the third column as POS tag when non-empty.
        """
        super().__init__(capture_tags=capture_tags)
        if variant not in self.ENGINES:
            raise ValueError(f"Unknown workbook variant: {variant}")
        self.variant = variant

    @property
    def engine(self) -> str:
        return self.ENGINES[self.variant]

    def read(self, stream: BinaryIO) -> Corpus:
        sheet = read_first_sheet(stream, self.engine)
        num_rows, num_cols = sheet.shape
        logger.debug(
            f"{self.variant.upper()} sheet has {num_rows} rows and {num_cols} columns"
        )

        builder = self._builder()
        for row in sheet.itertuples(index=False, name=None):
            word = CellValue.from_raw(row[0]).as_word() if num_cols > 0 else ""
            label = CellValue.from_raw(row[1]).as_text() if num_cols > 1 else ""
            tag = CellValue.from_raw(row[2]).as_text() if num_cols > 2 else None
            builder.add_row(word, label, tag)

        return builder.build()

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"{self.__class__.__name__}(variant={self.variant!r}, "
            f"capture_tags={self.capture_tags})"
        )
