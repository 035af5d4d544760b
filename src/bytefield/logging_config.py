"""
Logging Configuration
Sets up the global logger for the application.
"""
import logging
import sys
from typing import Optional, Union


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configures the root logger for the 'bytefield' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG) or its name (e.g. "DEBUG").
        log_file: Optional path to save logs to a file.

    Raises:
        ValueError: If `level` is a name logging does not know.
    """
    # 1. Resolve the level (names come from the command line)
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        level = resolved

    # 2. Get the logger for our package
    logger = logging.getLogger("bytefield")
    logger.setLevel(level)

    # 3. Drop handlers from an earlier call
    if logger.hasHandlers():
        logger.handlers.clear()

    # 4. Console Handler (stdout)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # 5. File Handler (Optional)
    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized.")
