import logging
import sys


def setup_logging(debug: bool = False) -> None:
    # stdout is reserved for model replies
    level = logging.DEBUG if debug else logging.WARNING
    handler = logging.StreamHandler(sys.stderr)
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%H:%M:%S"

    logging.basicConfig(level=level, handlers=[handler], format=fmt, datefmt=datefmt)
