"""
Input Manager
Reads source files into DataSequence objects.
"""
import logging
import os

from bytefield import config
from bytefield.model.state import DataSequence

# Get module logger
logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Raised when a source file cannot be read."""


class DataLoader:
    @staticmethod
    def load_file(filepath: str, encoding: str = config.DEFAULT_ENCODING) -> DataSequence:
        """
        Read a text file into a sequence of code points.

        Bytes that cannot be decoded are replaced with U+FFFD rather than
        aborting the load. Line endings are kept as they are in the file,
        so a CRLF line break yields two values.

        Raises:
            DataLoadError: If the file cannot be opened or read.
        """
        logger.info(f"Loading data from: {filepath}")
        try:
            with open(filepath, "r", encoding=encoding, errors="replace", newline="") as f:
                text = f.read()
        except (OSError, LookupError) as e:
            logger.error(f"Failed to read '{filepath}': {e}")
            raise DataLoadError(f"Error reading file '{filepath}'.") from e

        sequence = DataSequence.from_text(text, source=os.path.basename(filepath))
        logger.info(f"Loaded {len(sequence)} values from '{sequence.source}'.")
        return sequence

    @staticmethod
    def load_binary(filepath: str) -> DataSequence:
        """
        Read any file as raw bytes, one value per byte.

        Raises:
            DataLoadError: If the file cannot be opened or read.
        """
        logger.info(f"Loading binary data from: {filepath}")
        try:
            with open(filepath, "rb") as f:
                raw = f.read()
        except OSError as e:
            logger.error(f"Failed to read '{filepath}': {e}")
            raise DataLoadError(f"Error reading file '{filepath}'.") from e

        sequence = DataSequence.from_bytes(raw, source=os.path.basename(filepath))
        logger.info(f"Loaded {len(sequence)} bytes from '{sequence.source}'.")
        return sequence
