import logging


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a console handler.

    The level is always applied. The handler is only added when the root
    logger has none yet, so calling it from every create_app() (tests build
    several apps) is safe.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
