import logging
import sys

# atributos que todo LogRecord já tem; o resto veio de `extra=`
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "extra"}


class SafeExtraFormatter(logging.Formatter):
    """
    Formatter que junta tudo que veio via `extra=` num único dict `extra`,
    então toda linha sai no mesmo formato, com ou sem contexto.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.extra = {
            k: v for k, v in vars(record).items() if k not in _RESERVED
        }
        return super().format(record)


def setup_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stdout)

    formatter = SafeExtraFormatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s | %(extra)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()
    root.addHandler(handler)

    # httpx loga cada request em INFO; o cover fetch deixaria isso barulhento
    logging.getLogger("httpx").setLevel(logging.WARNING)
