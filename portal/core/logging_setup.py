import logging
import sys

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_LEVEL_MAP = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger once for the API process.

    Unknown level names fall back to INFO. Safe to call repeatedly;
    the stream handler is only attached the first time.
    """
    root = logging.getLogger()
    root.setLevel(_LEVEL_MAP.get(str(level).strip().upper(), logging.INFO))

    if any(getattr(h, "name", None) == "portal" for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name("portal")
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
