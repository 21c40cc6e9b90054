"""Configuration management for the training pipeline."""

import logging
from pathlib import Path
from typing import Iterable, Literal, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import OptionError

logger = logging.getLogger(__name__)

InputFormat = Literal["ods", "xlsx", "xls", "tsv"]

# Shared working document with annotations waiting to be trained on
DEFAULT_SOURCE_PATH = Path("data/pending/user-annotated.ods")

COMPRESSION_SUFFIX = "gz"

# Option name -> TrainingOptions field
OPTION_FIELDS = {
    "inputFormat": "input_format",
    "outputFormat": "gzip_output",
    "backgroundSymbol": "background_symbol",
    "localFilePath": "local_file_path",
    "wordCol": "word_col",
    "answerCol": "answer_col",
    "tagCol": "tag_col",
}

Parameters = Union[Mapping[str, object], Iterable[tuple[str, object]]]


class TrainingOptions(BaseModel):
    """
    Options for one training run.

    Built once from a flat list of name/value options and never mutated.
    Note that POS tag capture is switched on by ``tag_col`` being a valid
    column index rather than by a dedicated flag.
    """

    model_config = ConfigDict(frozen=True)

    input_format: InputFormat = "ods"
    gzip_output: bool = True
    background_symbol: str = Field(default="O", min_length=1)
    local_file_path: Optional[Path] = None
    word_col: int = 0
    answer_col: int = 1
    tag_col: int = -1
    classifier: Optional[str] = Field(
        default=None,
        description="Dotted path of an alternative ClassifierTrainer class",
    )
    default_source_path: Path = DEFAULT_SOURCE_PATH

    @field_validator("input_format", mode="before")
    @classmethod
    def normalize_format(cls, v):
        """Accept format tags regardless of case and padding."""
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("gzip_output", mode="before")
    @classmethod
    def parse_output_format(cls, v):
        """Map an outputFormat value such as 'ser.gz' to the gzip switch."""
        if isinstance(v, str):
            return v.endswith(COMPRESSION_SUFFIX)
        return v

    @field_validator("local_file_path", "default_source_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None or v == "":
            return None
        return Path(v) if isinstance(v, str) else v

    @property
    def capture_tags(self) -> bool:
        return self.tag_col >= 0

    @classmethod
    def from_parameters(cls, parameters: Parameters = (), **extra) -> "TrainingOptions":
        """
        Build options from name/value pairs.

        Later pairs win over earlier ones. Unknown names are ignored.

        Args:
            parameters: A mapping or an iterable of (name, value) pairs using
                the option names (``inputFormat``, ``tagCol``, ...).
            **extra: Field values that are not part of the option list, such
                as ``classifier`` or ``default_source_path``.

        Raises:
            OptionError: If a recognized option has an unusable value.
        """
        if isinstance(parameters, Mapping):
            parameters = parameters.items()

        values = {}
        for name, value in parameters:
            field_name = OPTION_FIELDS.get(name)
            if field_name is None:
                logger.debug(f"Ignoring unknown option: {name}")
                continue
            values[field_name] = value
        values.update({k: v for k, v in extra.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise OptionError(f"Invalid training options: {e}") from e

    @classmethod
    def from_yaml(
        cls, path: Union[str, Path], parameters: Parameters = ()
    ) -> "TrainingOptions":
        """
        Load options from a YAML file.

        The file holds a ``parameters`` section (mapping, or list of
        ``{name, value}`` entries) plus optional ``classifier`` and
        ``default_source_path`` keys. ``parameters`` given here are applied
        after the ones from the file.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise OptionError(f"Config file {path} must contain a mapping")

        file_parameters = data.get("parameters") or {}
        if isinstance(file_parameters, list):
            pairs = [(entry["name"], entry["value"]) for entry in file_parameters]
        else:
            pairs = list(file_parameters.items())

        if isinstance(parameters, Mapping):
            parameters = parameters.items()
        pairs.extend(parameters)

        return cls.from_parameters(
            pairs,
            classifier=data.get("classifier"),
            default_source_path=data.get("default_source_path"),
        )

    def to_parameters(self) -> dict[str, str]:
        """Return the option list form of these options."""
        params = {
            "inputFormat": self.input_format,
            "outputFormat": "ser.gz" if self.gzip_output else "ser",
            "backgroundSymbol": self.background_symbol,
            "wordCol": str(self.word_col),
            "answerCol": str(self.answer_col),
            "tagCol": str(self.tag_col),
        }
        if self.local_file_path is not None:
            params["localFilePath"] = str(self.local_file_path)
        return params

    def to_yaml(self, path: Union[str, Path]) -> None:
        """Save options to a YAML file."""
        data = {
            "parameters": self.to_parameters(),
            "default_source_path": str(self.default_source_path),
        }
        if self.classifier:
            data["classifier"] = self.classifier
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False)
