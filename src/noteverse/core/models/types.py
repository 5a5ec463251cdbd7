"""Custom SQLAlchemy types for NoteVerse models with cross-DB support."""

import json
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import String, Text, TypeDecorator


class FileRefListType(TypeDecorator):
    """
    Store a note's attachment list ({name, url, type, size} dicts):

    - On PostgreSQL: uses JSONB
    - On SQLite (and others): stores JSON text in a TEXT column

    Always returns List[dict], never None, so the model layer can iterate freely.
    """

    cache_ok = True
    impl = Text  # placeholder, real impl decided per-dialect

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import JSONB

            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[List[Any]], dialect):
        items = [self._to_dict(item) for item in (value or [])]
        if dialect.name == "postgresql":
            return items
        return json.dumps(items)

    def process_result_value(self, value, dialect) -> List[Dict[str, Any]]:
        if value is None:
            return []
        if isinstance(value, str):
            value = json.loads(value)
        return [dict(item) for item in value]

    @staticmethod
    def _to_dict(item: Any) -> Dict[str, Any]:
        # Accept pydantic models as well as plain dicts
        if hasattr(item, "model_dump"):
            return item.model_dump()
        return dict(item)


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing hex string form on other DBs (e.g., SQLite)
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
