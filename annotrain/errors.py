"""Exceptions raised by the training pipeline."""


class AnnotrainError(Exception):
    """Base class for all pipeline errors."""


class OptionError(AnnotrainError, ValueError):
    """An option value could not be parsed."""


class SourceUnavailableError(AnnotrainError, OSError):
    """The input path or uploaded payload is missing or unreadable."""


class FormatError(AnnotrainError, ValueError):
    """A row, cell or workbook could not be read."""


class CorpusValidationError(AnnotrainError, ValueError):
    """The extracted corpus cannot be trained on."""


class TrainerError(AnnotrainError):
    """The classifier trainer failed."""


class SerializationError(AnnotrainError, OSError):
    """Writing or compressing the model artifact failed."""
