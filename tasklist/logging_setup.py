import logging
import sys

# сторонние библиотеки пишут в консоль только предупреждения и ошибки
_QUIET_LOGGERS = ("sqlalchemy.engine", "passlib", "uvicorn.access")


def setup_logging(level: str = "INFO") -> None:
    """
    Настройка логирования процесса: один консольный обработчик
    с единым форматом. Вызывается один раз при старте.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
