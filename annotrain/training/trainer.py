"""Classifier trainers."""

import importlib
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import sklearn_crfsuite
from tqdm import tqdm

from ..errors import OptionError
from ..models import Corpus
from .features import TrainingConfig, document_features, document_labels

logger = logging.getLogger(__name__)


class ClassifierTrainer(ABC):
    """
    Abstract base class for sequence classifier trainers.

    A trainer consumes a corpus and the training configuration and returns
    a picklable model object.
    """

    @abstractmethod
    def train(self, corpus: Corpus, config: TrainingConfig) -> Any:
        """
        Train a model.

        Args:
            corpus: Non-empty corpus of labeled documents.
            config: Fixed training configuration.

        Returns:
            The trained model.
        """
        pass

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}()"


class CRFSuiteTrainer(ClassifierTrainer):
    """
    Trains a linear-chain CRF with crfsuite.

    The label sequence switches of the configuration map onto crfsuite's
    first-order transition features, so ``maxLeft`` must be 1.
    """

    def __init__(
        self,
        algorithm: str = "lbfgs",
        c1: float = 0.1,
        c2: float = 0.1,
        max_iterations: Optional[int] = 100,
        show_progress: bool = True,
    ):
        """
        Initialize the trainer.

        Args:
            algorithm: crfsuite training algorithm.
            c1: L1 regularization coefficient.
            c2: L2 regularization coefficient.
            max_iterations: Iteration cap, None for the algorithm default.
            show_progress: Show a progress bar during feature extraction.
        """
        self.algorithm = algorithm
        self.c1 = c1
        self.c2 = c2
        self.max_iterations = max_iterations
        self.show_progress = show_progress

    def train(self, corpus: Corpus, config: TrainingConfig) -> sklearn_crfsuite.CRF:
        if config.max_left != 1:
            raise ValueError(f"crfsuite only supports maxLeft=1, got {config.max_left}")

        X = []
        y = []
        for document in tqdm(
            corpus, desc="Extracting features", disable=not self.show_progress
        ):
            X.append(document_features(document, config))
            y.append(document_labels(document, config))

        crf = sklearn_crfsuite.CRF(
            algorithm=self.algorithm,
            c1=self.c1,
            c2=self.c2,
            max_iterations=self.max_iterations,
            all_possible_transitions=config.enabled("useSequences"),
        )
        logger.info(
            f"Training CRF on {len(X)} documents ({self.algorithm}, "
            f"c1={self.c1}, c2={self.c2}, max_iterations={self.max_iterations})"
        )
        crf.fit(X, y)
        logger.info(f"Trained CRF with labels: {', '.join(crf.classes_)}")
        return crf

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(algorithm={self.algorithm!r}, c1={self.c1}, c2={self.c2})"


def load_trainer(classifier: Optional[str] = None) -> ClassifierTrainer:
    """
    Instantiate a trainer.

    Args:
        classifier: Dotted path ``package.module.ClassName`` of a
            ClassifierTrainer subclass, or None for the crfsuite trainer.

    Raises:
        OptionError: If the class cannot be imported or is not a trainer.
    """
    if not classifier:
        return CRFSuiteTrainer()

    module_name, _, class_name = classifier.rpartition(".")
    if not module_name:
        raise OptionError(f"Classifier must be a dotted class path: {classifier}")
    try:
        module = importlib.import_module(module_name)
        trainer_class = getattr(module, class_name)
    except (ImportError, AttributeError) as e:
        raise OptionError(f"Cannot load classifier {classifier}: {e}") from e

    if not (isinstance(trainer_class, type) and issubclass(trainer_class, ClassifierTrainer)):
        raise OptionError(f"{classifier} is not a ClassifierTrainer")

    logger.info(f"Using classifier {classifier}")
    return trainer_class()
