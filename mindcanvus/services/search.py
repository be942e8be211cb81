"""Case-insensitive regular-expression filters shared by post and user search."""
from __future__ import annotations

import re
from typing import Any

from fastapi import HTTPException, status
from sqlalchemy import or_
from sqlalchemy.sql.elements import ColumnElement


def validate_pattern(term: str) -> str:
    """Return ``term`` stripped, or 400 when it is not a valid regular expression."""

    text = (term or "").strip()
    try:
        re.compile(text)
    except re.error as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid search pattern") from exc
    return text


def regex_any(columns: list[Any], pattern: str) -> ColumnElement[bool]:
    return or_(*(column.regexp_match(pattern, flags="i") for column in columns))


__all__ = ["validate_pattern", "regex_any"]
