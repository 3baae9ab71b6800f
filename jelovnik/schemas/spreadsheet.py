from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from jelovnik.schemas.menu import MenuItemSchema
from jelovnik.services.spreadsheet import CommitResult, ImportResult, ItemDifference, RowError


class RowErrorSchema(BaseModel):
    row: int
    field: str
    message: str

    @classmethod
    def from_error(cls, error: RowError) -> "RowErrorSchema":
        return cls(row=error.row, field=error.field, message=error.message)


class FieldChangeSchema(BaseModel):
    old: Any = None
    new: Any = None


class ItemDifferenceSchema(BaseModel):
    external_id: str
    changes: dict[str, FieldChangeSchema]

    @classmethod
    def from_difference(cls, diff: ItemDifference) -> "ItemDifferenceSchema":
        return cls(
            external_id=diff.external_id,
            changes={
                key.value: FieldChangeSchema(old=_plain(change.old), new=_plain(change.new))
                for key, change in diff.changes.items()
            },
        )


def _plain(value: Any) -> Any:
    # Decimal prices are reported as numbers
    if value is not None and not isinstance(value, (str, int, float, bool)):
        return float(value)
    return value


class ImportPreviewResponse(BaseModel):
    """POST /api/v1/admin/spreadsheet/preview — what a commit of this file would do."""

    errors: list[RowErrorSchema] = Field(default_factory=list)
    items: list[MenuItemSchema] = Field(default_factory=list)
    differences: list[ItemDifferenceSchema] = Field(default_factory=list)

    @classmethod
    def build(cls, result: ImportResult, differences: list[ItemDifference]) -> "ImportPreviewResponse":
        return cls(
            errors=[RowErrorSchema.from_error(e) for e in result.errors],
            items=result.items,
            differences=[ItemDifferenceSchema.from_difference(d) for d in differences],
        )


class CommitResponse(BaseModel):
    committed: bool
    message: str
    updated: list[MenuItemSchema] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: CommitResult) -> "CommitResponse":
        return cls(committed=result.committed, message=result.message, updated=result.updated)
