import uuid
from dataclasses import dataclass, field

import pandas as pd


FIELDS = ("baseUrl", "source", "medium", "campaign", "term", "content")
COLUMNS = ("id",) + FIELDS + ("selected",)


class ValidationError(Exception):
    """Raised when row data (persisted or pasted) does not fit the schema."""


def new_row_id() -> str:
    return uuid.uuid4().hex


def coerce_field_value(value) -> str:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


@dataclass
class Row:
    id: str
    fields: dict = field(default_factory=dict)
    selected: bool = False

    def __post_init__(self):
        self.fields = {name: coerce_field_value(self.fields.get(name)) for name in FIELDS}

    @classmethod
    def blank(cls, row_id: str | None = None) -> "Row":
        return cls(id=row_id or new_row_id())

    @classmethod
    def from_mapping(cls, data) -> "Row":
        """Build a row from a stored mapping.

        Accepts both the nested ``{"id", "fields", "selected"}`` form written by
        persistence and a flat mapping with the field names at the top level.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Row must be a mapping, got {type(data).__name__}")
        row_id = data.get("id")
        if not isinstance(row_id, str) or not row_id:
            raise ValidationError("Row id missing")
        values = data.get("fields", data)
        if not isinstance(values, dict):
            raise ValidationError(f"Row {row_id} fields must be a mapping")
        for name in FIELDS:
            v = values.get(name, "")
            if v is not None and not isinstance(v, (str, int, float)):
                raise ValidationError(f"Row {row_id} field '{name}' is not text")
        return cls(id=row_id, fields=dict(values), selected=bool(data.get("selected", False)))

    def to_mapping(self) -> dict:
        return {"id": self.id, "fields": dict(self.fields), "selected": self.selected}

    def flat(self) -> dict:
        return {"id": self.id, **self.fields, "selected": self.selected}


def default_rows(count: int = 1) -> list[Row]:
    return [Row.blank() for _ in range(max(1, count))]
