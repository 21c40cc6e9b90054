"""Serialization of trained models."""

import gzip
import io
import logging
import pickle
from pathlib import Path
from typing import Any, BinaryIO, Union

from .errors import SerializationError

logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"


class ModelSerializer:
    """
    Writes a trained model as a pickle, optionally gzip compressed.

    The compressed form is a single gzip member wrapping the pickle stream.
    """

    def __init__(self, gzip_output: bool = True):
        """
        Initialize the serializer.

        Args:
            gzip_output: Compress the pickle stream with gzip.
        """
        self.gzip_output = gzip_output

    def write(self, model: Any, sink: BinaryIO) -> None:
        """
        Write a model to a binary sink.

        Raises:
            SerializationError: If pickling or compression fails.
        """
        try:
            if self.gzip_output:
                with gzip.GzipFile(fileobj=sink, mode="wb") as gz:
                    pickle.dump(model, gz, protocol=pickle.HIGHEST_PROTOCOL)
            else:
                pickle.dump(model, sink, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError, OSError) as e:
            kind = "gzipped serialized" if self.gzip_output else "serialized"
            raise SerializationError(f"Unable to write {kind} classifier: {e}") from e

    def to_bytes(self, model: Any) -> bytes:
        """Serialize a model into memory."""
        with io.BytesIO() as buffer:
            self.write(model, buffer)
            data = buffer.getvalue()
        logger.debug(f"Serialized model to {len(data)} bytes (gzip={self.gzip_output})")
        return data


def load_model(data: Union[bytes, BinaryIO, str, Path]) -> Any:
    """
    Load a model written by ModelSerializer.

    Gzip compression is detected from the stream header. Only load
    artifacts from trusted sources, they are pickles.
    """
    if isinstance(data, (str, Path)):
        with open(data, "rb") as f:
            return load_model(f.read())
    if not isinstance(data, bytes):
        data = data.read()

    if data[:2] == GZIP_MAGIC:
        data = gzip.decompress(data)
    return pickle.loads(data)
