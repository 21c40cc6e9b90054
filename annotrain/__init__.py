"""annotrain - Train CRF taggers from annotated spreadsheets and TSV files."""

__version__ = "0.1.0"

from .config import TrainingOptions
from .errors import (
    AnnotrainError,
    CorpusValidationError,
    FormatError,
    OptionError,
    SerializationError,
    SourceUnavailableError,
    TrainerError,
)
from .models import Corpus, Document, Token
from .pipeline import TrainingPipeline, train_classifier
from .serializer import ModelSerializer, load_model

__all__ = [
    "TrainingOptions",
    "AnnotrainError",
    "CorpusValidationError",
    "FormatError",
    "OptionError",
    "SerializationError",
    "SourceUnavailableError",
    "TrainerError",
    "Corpus",
    "Document",
    "Token",
    "TrainingPipeline",
    "train_classifier",
    "ModelSerializer",
    "load_model",
]
