import logging
import os
from dotenv import load_dotenv


def configure_logging() -> None:
    """
    Centralized logging configuration. Call once, before any pipeline runs,
    so every module logs with the same format.
    """
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),  # INFO to reduce noise, or DEBUG for full detail
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
