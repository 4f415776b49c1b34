# shared field helpers for record schemas

from datetime import date
from typing import Optional

from pydantic import BaseModel

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def check_calendar_date(value: Optional[str]) -> Optional[str]:
    """reject well-formed strings that are not real dates, e.g. 2024-02-30"""
    if value is None:
        return value
    try:
        date.fromisoformat(value)
    except ValueError:
        raise ValueError("Date must be a valid calendar date in YYYY-MM-DD format")
    return value


def empty_list_if_none(value):
    """list fields are never null on the wire"""
    return [] if value is None else value


class MessageResponse(BaseModel):
    message: str
