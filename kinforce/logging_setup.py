"""Logging configuration for the application entry points."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    root.setLevel(level.upper())
    # NiceGUI's uvicorn access log drowns out the simulation debug output
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
