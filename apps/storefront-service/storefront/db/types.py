"""Custom SQLAlchemy types used by the persistence layer."""
from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy.types import Text, TypeDecorator

logger = logging.getLogger(__name__)


class JSONEncoded(TypeDecorator):
    """Store JSON documents as text.

    Content columns (page widgets, popup targets, review keywords) were
    historically written by hand and may hold malformed JSON. Reads never
    raise: undecodable values come back as ``empty`` (a fresh copy) so callers
    can treat the column as always well-formed.
    """

    cache_ok = True
    impl = Text

    def __init__(self, empty: Any = None) -> None:
        super().__init__()
        self._empty = empty

    def _empty_value(self):
        if isinstance(self._empty, (list, dict)):
            return type(self._empty)()
        return self._empty

    def process_bind_param(self, value, dialect):  # type: ignore[override]
        if value is None:
            return None
        if isinstance(value, str):
            # Pre-serialized JSON from legacy imports is stored untouched
            return value
        return json.dumps(value)

    def process_result_value(self, value, dialect):  # type: ignore[override]
        if value is None or value == "":
            return self._empty_value()
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            logger.warning("json_column_decode_failed: value=%r", value[:80] if isinstance(value, str) else value)
            return self._empty_value()

    def copy(self, **kwargs):  # type: ignore[override]
        return JSONEncoded(empty=self._empty)


class JSONList(JSONEncoded):
    """JSON column whose decoded value is always a list."""

    cache_ok = True

    def __init__(self) -> None:
        super().__init__(empty=[])

    def process_result_value(self, value, dialect):  # type: ignore[override]
        decoded = super().process_result_value(value, dialect)
        if not isinstance(decoded, list):
            return []
        return decoded

    def copy(self, **kwargs):  # type: ignore[override]
        return JSONList()
