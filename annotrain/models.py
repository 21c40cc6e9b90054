"""Data models for the training pipeline."""

from dataclasses import dataclass
from typing import Iterator, Optional


@dataclass(frozen=True)
class Token:
    """One annotated word with its gold label."""

    text: str
    label: str
    pos_tag: Optional[str] = None  # Only set when tag capture is enabled


@dataclass(frozen=True)
class Document:
    """An ordered run of tokens between two boundary rows."""

    tokens: tuple[Token, ...]

    def __len__(self) -> int:
        """Return the number of tokens."""
        return len(self.tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self.tokens)

    def __getitem__(self, index: int) -> Token:
        return self.tokens[index]

    @property
    def words(self) -> list[str]:
        return [token.text for token in self.tokens]

    @property
    def labels(self) -> list[str]:
        return [token.label for token in self.tokens]


@dataclass(frozen=True)
class Corpus:
    """
    Documents extracted from one source, in extraction order.

    Empty documents are never stored; see `CorpusBuilder`.
    """

    documents: tuple[Document, ...] = ()

    def __len__(self) -> int:
        """Return the number of documents."""
        return len(self.documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self.documents)

    def __getitem__(self, index: int) -> Document:
        return self.documents[index]

    @property
    def is_empty(self) -> bool:
        return not self.documents

    @property
    def num_tokens(self) -> int:
        """Return the total number of tokens across all documents."""
        return sum(len(doc) for doc in self.documents)

    @property
    def labels(self) -> set[str]:
        """Return the set of labels seen in the corpus."""
        return {token.label for doc in self.documents for token in doc}

    def summary(self) -> dict:
        """Summarize the corpus for logging and the inspect command."""
        return {
            "documents": len(self),
            "tokens": self.num_tokens,
            "labels": sorted(self.labels),
        }
