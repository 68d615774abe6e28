import sys
from loguru import logger
import os


def setup_logging(debug_mode: bool = True, log_dir: str = "logs"):
    """
    Configures Loguru logger.
    """
    logger.remove()

    level = "DEBUG" if debug_mode else "INFO"
    logger.add(sys.stderr, level=level, format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>")

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        logger.add(os.path.join(log_dir, "mediadb_{time}.log"), rotation="10 MB", retention="1 week", level="DEBUG")

    logger.info(f"Logging initialized (level={level})")
