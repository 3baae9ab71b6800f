"""
Spreadsheet round-trip for bulk menu editing.

export_workbook: items -> .xlsx bytes (one header row, one row per item).
parse_workbook:  edited .xlsx bytes + baseline -> typed items and per-row validation errors.
compute_differences: per-field diff of parsed items against the baseline.
commit_import: writes only the changed items, as one batch.
"""
from __future__ import annotations

import io
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from jelovnik.config import get_settings
from jelovnik.repositories.menu_repo import StoreError
from jelovnik.schemas.menu import NUMERIC_FIELDS, MenuField, MenuItemSchema, get_field, set_field

logger = logging.getLogger(__name__)

SHEET_NAME = "Menu Items"
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Two numbers closer than this are the same value (rounding noise from the sheet).
NUMERIC_TOLERANCE = Decimal("0.001")
CURRENCY_RE = re.compile(r"[€$\s ]")

MISSING_ID_MESSAGE = "ID artikla (external_id) je obavezan"
FILE_FORMAT_MESSAGE = "Neispravan format datoteke. Molimo koristite ispravan XLSX format."
FIX_ERRORS_MESSAGE = "Molimo ispravite greške u datoteci prije spremanja."
NO_CHANGES_MESSAGE = "Nema promjena za spremiti. Molimo napravite izmjene u datoteci."
STORE_FAILED_MESSAGE = "Greška pri ažuriranju baze podataka. Molimo pokušajte ponovno."


class ColumnKind(str, Enum):
    STRING = "string"
    NUMBER = "number"


@dataclass(frozen=True)
class SpreadsheetColumn:
    field: MenuField
    header: str
    required: bool
    kind: ColumnKind


COLUMNS: tuple[SpreadsheetColumn, ...] = (
    SpreadsheetColumn(MenuField.EXTERNAL_ID, "ID", True, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.COLLECTION, "Kategorija", True, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.PRODUCT_NAME, "Naziv (HR)", True, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.PRICE, "Cijena (€)", True, ColumnKind.NUMBER),
    SpreadsheetColumn(MenuField.PRODUCT_NAME_EN, "Naziv (EN)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.PRODUCT_NAME_DE, "Naziv (DE)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.PRODUCT_NAME_TR, "Naziv (TR)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.DESCRIPTION_HR, "Opis (HR)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.DESCRIPTION_EN, "Opis (EN)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.DESCRIPTION_DE, "Opis (DE)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.DESCRIPTION_TR, "Opis (TR)", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.COLLECTION_ORDER, "Redoslijed", False, ColumnKind.NUMBER),
    SpreadsheetColumn(MenuField.SIZE, "Veličina", False, ColumnKind.STRING),
    SpreadsheetColumn(MenuField.IMAGE, "URL slike", False, ColumnKind.STRING),
)
HEADERS = [col.header for col in COLUMNS]
COLUMN_BY_HEADER = {col.header: col for col in COLUMNS}
ID_HEADER = COLUMNS[0].header


class SpreadsheetExportError(Exception):
    pass


class SpreadsheetFormatError(Exception):
    pass


class CommitRejected(Exception):
    def __init__(self, message: str, errors: Optional[list["RowError"]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


@dataclass(frozen=True)
class RowError:
    row: int
    field: str
    message: str


@dataclass
class ImportResult:
    items: list[MenuItemSchema] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class FieldChange:
    old: Any
    new: Any


@dataclass
class ItemDifference:
    external_id: str
    changes: dict[MenuField, FieldChange]


@dataclass
class CommitResult:
    committed: bool
    message: str
    updated: list[MenuItemSchema] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{get_settings().export_filename_prefix}-{today.isoformat()}.xlsx"


def _export_value(item: MenuItemSchema, col: SpreadsheetColumn) -> Any:
    value = get_field(item, col.field)
    if value is None:
        return None
    if col.field is MenuField.PRICE:
        return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
    return value


def _style_sheet(ws, row_count: int) -> None:
    header_fill = PatternFill("solid", fgColor="C41E3A")
    stripe_fill = PatternFill("solid", fgColor="F9FAFB")
    header_side = Side(style="thin", color="000000")
    cell_side = Side(style="thin", color="E5E7EB")

    for idx, col in enumerate(COLUMNS, start=1):
        letter = get_column_letter(idx)
        ws.column_dimensions[letter].width = 40 if col.field.value.startswith("description") else 20
        header = ws.cell(row=1, column=idx)
        header.font = Font(bold=True, color="FFFFFF")
        header.fill = header_fill
        header.alignment = Alignment(horizontal="center", vertical="center")
        header.border = Border(top=header_side, bottom=header_side, left=header_side, right=header_side)

        for row in range(2, row_count + 2):
            cell = ws.cell(row=row, column=idx)
            cell.border = Border(top=cell_side, bottom=cell_side, left=cell_side, right=cell_side)
            if row % 2 == 1:
                cell.fill = stripe_fill
            if col.field is MenuField.PRICE:
                cell.number_format = '#,##0.00 "€"'
            elif col.kind is ColumnKind.NUMBER:
                cell.number_format = "#,##0"

    ws.auto_filter.ref = f"A1:{get_column_letter(len(COLUMNS))}1"
    ws.freeze_panes = "A2"


def export_workbook(items: Iterable[MenuItemSchema]) -> bytes:
    """Render items as an .xlsx workbook. Raises SpreadsheetExportError on any failure."""
    try:
        rows = [{col.header: _export_value(item, col) for col in COLUMNS} for item in items]
        df = pd.DataFrame(rows, columns=HEADERS)
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            _style_sheet(writer.sheets[SHEET_NAME], len(df))
        return buffer.getvalue()
    except Exception as e:
        logger.exception("spreadsheet_export_failed")
        raise SpreadsheetExportError(f"Došlo je do greške pri generiranju Excel datoteke: {e}") from e


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def read_rows(content: bytes) -> list[dict[str, Any]]:
    """First sheet as header -> value dicts (positional columns, header row skipped if present)."""
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, header=None, dtype=object, engine="openpyxl")
    except Exception as e:
        raise SpreadsheetFormatError(FILE_FORMAT_MESSAGE) from e

    df = df.iloc[:, : len(HEADERS)]
    headers = HEADERS[: df.shape[1]]
    rows = [
        {header: (None if _is_blank(value) else value) for header, value in zip(headers, values)}
        for values in df.itertuples(index=False, name=None)
    ]
    rows = [row for row in rows if any(value is not None for value in row.values())]
    if rows and _is_header_row(rows[0]):
        rows = rows[1:]
    return rows


def _is_header_row(row: dict[str, Any]) -> bool:
    present = {header: value for header, value in row.items() if value is not None}
    return bool(present) and all(str(value).strip() == header for header, value in present.items())


def parse_number(value: Any) -> Optional[Decimal]:
    """'8,50 €' -> 8.50, '1.234,5' -> 1234.5, '1,234.5' -> 1234.5; None when not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return Decimal(str(value))

    text = CURRENCY_RE.sub("", str(value))
    if "," in text and "." in text:
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def round_price(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def round_order(value: Any) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _coerce_number(col: SpreadsheetColumn, raw: Any) -> tuple[Any, Optional[str]]:
    number = parse_number(raw)
    if number is None:
        return None, f'Polje "{col.header}" mora biti broj'
    if number < 0 and col.field in NUMERIC_FIELDS:
        return None, f'Polje "{col.header}" ne može biti negativno'
    if col.field is MenuField.PRICE:
        return round_price(number), None
    if col.field is MenuField.COLLECTION_ORDER:
        return round_order(number), None
    return number, None


def _cell_text(raw: Any) -> str:
    if isinstance(raw, float) and raw.is_integer():
        raw = int(raw)
    return str(raw).strip()


def parse_rows(rows: list[dict[str, Any]], baseline: Iterable[MenuItemSchema]) -> ImportResult:
    existing = {item.external_id: item for item in baseline}
    result = ImportResult()

    for index, row in enumerate(rows, start=1):
        raw_id = row.get(ID_HEADER)
        external_id = "" if raw_id is None else _cell_text(raw_id)
        if not external_id:
            result.errors.append(RowError(index, ID_HEADER, MISSING_ID_MESSAGE))
            continue
        base = existing.get(external_id)
        if base is None:
            result.errors.append(RowError(index, ID_HEADER, f'Artikl s ID-om "{external_id}" ne postoji u bazi'))
            continue

        item = base.model_copy(deep=True)
        row_errors: list[RowError] = []
        for header, raw in row.items():
            col = COLUMN_BY_HEADER.get(header)
            if col is None or raw is None or col.field is MenuField.EXTERNAL_ID:
                continue
            if col.kind is ColumnKind.NUMBER:
                value, error = _coerce_number(col, raw)
                if error:
                    row_errors.append(RowError(index, header, error))
                    continue
            else:
                value = _cell_text(raw)
                if not value:
                    continue
            set_field(item, col.field, value)

        if row_errors:
            result.errors.extend(row_errors)
        else:
            result.items.append(item)

    return result


def parse_workbook(content: bytes, baseline: Iterable[MenuItemSchema]) -> ImportResult:
    """Parse an uploaded workbook; an unreadable file becomes a single row-0 error."""
    try:
        rows = read_rows(content)
    except SpreadsheetFormatError as e:
        logger.warning("spreadsheet_unreadable", extra={"error": str(e.__cause__)})
        return ImportResult(errors=[RowError(0, "file", FILE_FORMAT_MESSAGE)])
    return parse_rows(rows, baseline)


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------


def _as_decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal(0)


def _as_text(value: Any) -> str:
    # Import trims cells, so stored padding alone is not a change
    return "" if value is None else str(value).strip()


def field_changed(field_key: MenuField, old: Any, new: Any) -> bool:
    if field_key in NUMERIC_FIELDS:
        return not abs(_as_decimal(old) - _as_decimal(new)) < NUMERIC_TOLERANCE
    return _as_text(old) != _as_text(new)


def compute_differences(baseline: Iterable[MenuItemSchema], parsed: Iterable[MenuItemSchema]) -> list[ItemDifference]:
    existing = {item.external_id: item for item in baseline}
    differences: list[ItemDifference] = []
    for item in parsed:
        original = existing.get(item.external_id)
        if original is None:
            continue
        changes = {
            field_key: FieldChange(old=get_field(original, field_key), new=get_field(item, field_key))
            for field_key in MenuField
            if field_changed(field_key, get_field(original, field_key), get_field(item, field_key))
        }
        if changes:
            differences.append(ItemDifference(external_id=item.external_id, changes=changes))
    return differences


# ---------------------------------------------------------------------------
# Commit
# ---------------------------------------------------------------------------


def normalize_for_store(item: MenuItemSchema) -> MenuItemSchema:
    return item.model_copy(
        update={"price": round_price(item.price), "collection_order": round_order(item.collection_order)}
    )


async def commit_import(
    result: ImportResult,
    differences: list[ItemDifference],
    write_batch: Callable[[list[MenuItemSchema]], Awaitable[list[MenuItemSchema]]],
) -> CommitResult:
    """Write the changed subset of result.items through write_batch.

    Raises CommitRejected while validation errors remain; returns a no-op result when
    nothing changed. A store failure is reported once for the whole batch.
    """
    if result.errors:
        raise CommitRejected(FIX_ERRORS_MESSAGE, result.errors)
    if not differences:
        return CommitResult(committed=False, message=NO_CHANGES_MESSAGE)

    changed_ids = {diff.external_id for diff in differences}
    to_update = [normalize_for_store(item) for item in result.items if item.external_id in changed_ids]
    try:
        updated = await write_batch(to_update)
    except StoreError as e:
        logger.error("spreadsheet_commit_failed", extra={"error": e.message, "changed_count": len(to_update)})
        raise StoreError(STORE_FAILED_MESSAGE) from e
    logger.info("spreadsheet_commit", extra={"changed_count": len(updated)})
    return CommitResult(committed=True, message=f"Ažurirano artikala: {len(updated)}", updated=updated)
