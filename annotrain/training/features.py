"""
Training configuration and token feature extraction.

The feature switches follow the flag names of the CRF tagger family that
the annotation spreadsheets were designed for. They are fixed for every
training run; only the background symbol can be chosen by the caller.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from ..models import Document

DEFAULT_BACKGROUND_SYMBOL = "O"

FEATURE_FLAGS = {
    "useClassFeature": "true",
    "useWord": "true",
    "useNGrams": "true",
    "noMidNGrams": "true",
    "useDisjunctive": "true",
    "maxNGramLeng": "6",
    "usePrev": "true",
    "useNext": "true",
    "useSequences": "true",
    "usePrevSequences": "true",
    "maxLeft": "1",
    "useTypeSeqs": "true",
    "useTypeSeqs2": "true",
    "useTypeySequences": "true",
    "wordShape": "chris2useLC",
}

# Words looked at on each side for disjunctive features
DISJUNCTION_WIDTH = 4

# Characters kept verbatim at each end of a long word's shape
SHAPE_BOUNDARY = 2

START = "<S>"
END = "</S>"


@dataclass(frozen=True)
class TrainingConfig:
    """Feature switches plus the background symbol for one training call."""

    background_symbol: str = DEFAULT_BACKGROUND_SYMBOL
    flags: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType(dict(FEATURE_FLAGS))
    )

    def enabled(self, name: str) -> bool:
        return self.flags.get(name) == "true"

    @property
    def max_ngram_length(self) -> int:
        return int(self.flags.get("maxNGramLeng", 0))

    @property
    def max_left(self) -> int:
        return int(self.flags.get("maxLeft", 1))

    @property
    def word_shape(self) -> str:
        return self.flags.get("wordShape", "none")

    def as_properties(self) -> dict[str, str]:
        """Return all settings as a flat name/value mapping."""
        return {**self.flags, "backgroundSymbol": self.background_symbol}


def build_training_config(background_symbol: str = None) -> TrainingConfig:
    """Build the fixed training configuration."""
    return TrainingConfig(background_symbol=background_symbol or DEFAULT_BACKGROUND_SYMBOL)


def _char_class(ch: str) -> str:
    if ch.isupper():
        return "X"
    if ch.islower():
        return "x"
    if ch.isdigit():
        return "d"
    return ch


def word_shape(word: str) -> str:
    """
    Compute a compact word shape.

    Short words map every character to its class (X, x, d or the character
    itself). Longer words keep the classes of the first and last two
    characters and the sorted set of classes in between, so "Stockholm"
    becomes "Xxxxx" and "B52s" becomes "Xddx".
    """
    if len(word) <= SHAPE_BOUNDARY * 2:
        return "".join(_char_class(ch) for ch in word)

    start = "".join(_char_class(ch) for ch in word[:SHAPE_BOUNDARY])
    end = "".join(_char_class(ch) for ch in word[-SHAPE_BOUNDARY:])
    middle = "".join(sorted({_char_class(ch) for ch in word[SHAPE_BOUNDARY:-SHAPE_BOUNDARY]}))
    return f"{start}{middle}{end}"


def char_ngrams(word: str, max_length: int, include_mid: bool = False) -> list[str]:
    """
    Character n-grams of the word padded with '<' and '>'.

    Without ``include_mid`` only n-grams touching either end are returned,
    i.e. prefixes and suffixes.
    """
    padded = f"<{word}>"
    grams = []
    for n in range(2, max_length + 1):
        for i in range(len(padded) - n + 1):
            gram = padded[i:i + n]
            if include_mid or gram.startswith("<") or gram.endswith(">"):
                grams.append(gram)
    return grams


def token_features(document: Document, index: int, config: TrainingConfig, shapes: list[str] = None) -> dict:
    """
    Features of one token in its document context.

    Args:
        document: The document holding the token.
        index: Position of the token.
        config: Training configuration selecting the features.
        shapes: Precomputed word shapes for the document.

    Returns:
        A crfsuite feature dict.
    """
    words = document.words
    word = words[index]
    if shapes is None and config.word_shape != "none":
        shapes = [word_shape(w) for w in words]

    feats = {}
    if config.enabled("useClassFeature"):
        feats["bias"] = 1.0
    if config.enabled("useWord"):
        feats["word"] = word

    if config.enabled("useNGrams"):
        grams = char_ngrams(
            word,
            config.max_ngram_length,
            include_mid=not config.enabled("noMidNGrams"),
        )
        for gram in grams:
            feats[f"ngram:{gram}"] = 1.0

    if config.enabled("usePrev"):
        feats["prev_word"] = words[index - 1] if index > 0 else START
    if config.enabled("useNext"):
        feats["next_word"] = words[index + 1] if index + 1 < len(words) else END

    if config.enabled("useDisjunctive"):
        for offset in range(1, DISJUNCTION_WIDTH + 1):
            if index - offset >= 0:
                feats[f"disj_left:{words[index - offset]}"] = 1.0
            if index + offset < len(words):
                feats[f"disj_right:{words[index + offset]}"] = 1.0

    if shapes is not None:
        shape = shapes[index]
        prev_shape = shapes[index - 1] if index > 0 else START
        next_shape = shapes[index + 1] if index + 1 < len(shapes) else END
        feats["shape"] = shape
        if config.enabled("useTypeSeqs"):
            feats["prev_shape|shape"] = f"{prev_shape}|{shape}"
            feats["shape|next_shape"] = f"{shape}|{next_shape}"
        if config.enabled("useTypeSeqs2"):
            feats["prev_shape|shape|next_shape"] = f"{prev_shape}|{shape}|{next_shape}"
        if config.enabled("useTypeySequences"):
            feats["prev_shape"] = prev_shape
            feats["next_shape"] = next_shape

    pos_tag = document[index].pos_tag
    if pos_tag:
        feats["tag"] = pos_tag

    return feats


def document_features(document: Document, config: TrainingConfig) -> list[dict]:
    """Features for every token of a document."""
    shapes = None
    if config.word_shape != "none":
        shapes = [word_shape(w) for w in document.words]
    return [token_features(document, i, config, shapes) for i in range(len(document))]


def document_labels(document: Document, config: TrainingConfig) -> list[str]:
    """Gold labels of a document; unlabeled tokens get the background symbol."""
    return [label or config.background_symbol for label in document.labels]
