import logging, json, sys, time, os


def _env_level():
    # Unknown names fall back to INFO.
    name = os.getenv("KEYSET_LOG_LEVEL", "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name="keyset", level=None, to_file=None):
    """Structured JSON logger shared by all keyset_core components.

    level and to_file fall back to KEYSET_LOG_LEVEL / KEYSET_LOG_FILE.
    """
    logger = logging.getLogger(name)
    if level is None:
        level = _env_level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC timestamps
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        to_file = to_file or os.getenv("KEYSET_LOG_FILE")
        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
