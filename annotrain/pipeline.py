"""Main pipeline orchestrator for training a tagger from annotations."""

import logging
from pathlib import Path
from typing import Optional, Union

from .config import Parameters, TrainingOptions
from .errors import AnnotrainError, CorpusValidationError, SerializationError, TrainerError
from .models import Corpus
from .readers import InputSource, read_corpus
from .serializer import ModelSerializer
from .training import ClassifierTrainer, build_training_config, load_trainer

logger = logging.getLogger(__name__)


class TrainingPipeline:
    """
    Main pipeline for training a sequence classifier.

    Orchestrates reading the annotated document, validating the corpus,
    training the classifier and serializing the model.
    """

    def __init__(
        self,
        options: TrainingOptions,
        trainer: Optional[ClassifierTrainer] = None,
        serializer: Optional[ModelSerializer] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            options: Options for this run.
            trainer: Trainer to use; defaults to the one named by
                ``options.classifier``.
            serializer: Model serializer; defaults to one honoring
                ``options.gzip_output``.
        """
        self.options = options
        self.trainer = trainer or load_trainer(options.classifier)
        self.serializer = serializer or ModelSerializer(gzip_output=options.gzip_output)

    def extract(self, upload: Optional[InputSource] = None) -> Corpus:
        """
        Read and validate the training corpus.

        Raises:
            CorpusValidationError: If no document was extracted.
        """
        corpus = read_corpus(self.options, upload)
        if corpus.is_empty:
            logger.error("No annotated text extracted from the document")
            raise CorpusValidationError("No training data extracted from the document")
        return corpus

    def run(self, upload: Optional[InputSource] = None) -> bytes:
        """
        Execute the full pipeline.

        Args:
            upload: Uploaded document; without it ``localFilePath`` or the
                default document is read.

        Returns:
            The serialized model.
        """
        logger.info("Starting training pipeline")

        # Step 1: Extract corpus
        corpus = self.extract(upload)
        summary = corpus.summary()
        logger.info(
            f"Corpus has {summary['documents']} documents, {summary['tokens']} tokens, "
            f"labels: {', '.join(summary['labels'])}"
        )

        # Step 2: Train
        config = build_training_config(self.options.background_symbol)
        logger.info(f"Training with {self.trainer} (background symbol {config.background_symbol!r})")
        try:
            model = self.trainer.train(corpus, config)
        except AnnotrainError:
            raise
        except Exception as e:
            raise TrainerError(f"Training failed: {e}") from e

        # Step 3: Serialize
        data = self.serializer.to_bytes(model)
        logger.info(
            f"Pipeline complete. Serialized model is {len(data)} bytes "
            f"({'gzip' if self.serializer.gzip_output else 'raw'})"
        )
        return data


def train_classifier(
    parameters: Parameters = (),
    upload: Optional[Union[bytes, InputSource]] = None,
    output_path: Optional[Union[str, Path]] = None,
    **extra,
) -> bytes:
    """
    Convenience function to run the training pipeline.

    Args:
        parameters: Option name/value pairs (``inputFormat``, ``tagCol``, ...).
        upload: Uploaded document bytes.
        output_path: Also write the model to this file when given.
        **extra: Further TrainingOptions fields, e.g. ``classifier``.

    Returns:
        The serialized model.
    """
    options = TrainingOptions.from_parameters(parameters, **extra)
    if isinstance(upload, bytes):
        upload = InputSource(payload=upload)

    data = TrainingPipeline(options).run(upload)
    if output_path is not None:
        write_artifact(data, output_path)
    return data


def write_artifact(data: bytes, output_path: Union[str, Path]) -> Path:
    """Write a serialized model to a file."""
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as e:
        raise SerializationError(f"Unable to write model to {output_path}: {e}") from e
    logger.info(f"Model written to {output_path}")
    return output_path
