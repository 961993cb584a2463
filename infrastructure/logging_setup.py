import logging
import sys

_NOISY_LOGGERS = ("pymongo", "httpx", "httpcore", "sqlalchemy.engine")


def setup_logging(level: str | int = "info") -> None:
    """
    Configura el logger raíz con un único handler a stderr.

    Llamar UNA vez, al arrancar el proceso.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Evita handlers duplicados si se llama más de una vez (p.ej. con reload).
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
