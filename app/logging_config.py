"""Process-wide logging setup."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)
    # main() runs uvicorn with log_config=None so its loggers propagate here.
    logging.getLogger("uvicorn.access").setLevel(level.upper())
