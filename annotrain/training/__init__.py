"""Training configuration, features and trainers."""

from .features import (
    DEFAULT_BACKGROUND_SYMBOL,
    FEATURE_FLAGS,
    TrainingConfig,
    build_training_config,
    document_features,
    document_labels,
    word_shape,
)
from .trainer import ClassifierTrainer, CRFSuiteTrainer, load_trainer

__all__ = [
    "DEFAULT_BACKGROUND_SYMBOL",
    "FEATURE_FLAGS",
    "TrainingConfig",
    "build_training_config",
    "document_features",
    "document_labels",
    "word_shape",
    "ClassifierTrainer",
    "CRFSuiteTrainer",
    "load_trainer",
]
