"""Log line format with structured extras."""

import logging

from nowplaying.core.logging import SafeExtraFormatter


def _format(**extra) -> str:
    formatter = SafeExtraFormatter(fmt="%(name)s | %(message)s | %(extra)s")
    logger = logging.getLogger("cover.cache")
    record = logger.makeRecord("cover.cache", logging.INFO, __file__, 1, "cover_cached", (), None, extra=extra or None)
    return formatter.format(record)


def test_extra_fields_are_rendered():
    assert _format(url="https://i.scdn.co/x", bytes=12) == (
        "cover.cache | cover_cached | {'url': 'https://i.scdn.co/x', 'bytes': 12}"
    )


def test_missing_extra_renders_empty_dict():
    assert _format() == "cover.cache | cover_cached | {}"
