"""
Spreadsheet import/export for BOQ and breakdown items.

Columns are named after the entity attributes. Imports are per-row:
a bad row is reported and skipped, the others are still applied.
"""

import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from django.db import DatabaseError, transaction
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill

from domain.boq.hierarchy import ORDER_CODE, build_tree, flatten
from domain.shared.value_objects import BOQCode, Percentage

logger = logging.getLogger(__name__)

BOQ_COLUMNS = [
    'code', 'description', 'descriptionAr', 'quantity', 'unit', 'unitAr',
    'unitRate', 'totalAmount', 'level',
]
BREAKDOWN_COLUMNS = [
    'boqItemCode', 'keyword', 'keywordAr', 'description', 'descriptionAr',
    'percentage', 'value', 'quantity', 'isLeaf', 'parentKeyword',
]

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

_TRUE_VALUES = {'true', 'yes', 'y', '1', 'x'}


class RowError(ValueError):
    def __init__(self, column: str, message: str):
        super().__init__(message)
        self.column = column
        self.message = message


@dataclass(frozen=True)
class ExcelImportError:
    row: int
    column: str
    message: str

    def to_dict(self) -> dict:
        return {
            'row': self.row,
            'column': self.column,
            'message': self.message,
        }


@dataclass
class ImportSummary:
    created: int = 0
    updated: int = 0
    errors: List[ExcelImportError] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'created': self.created,
            'updated': self.updated,
            'errors': [error.to_dict() for error in self.errors],
        }


# =============================================================================
# CELL HELPERS
# =============================================================================

def _to_str(v: Any) -> str:
    if v is None:
        return ''
    return str(v).strip()


def _to_decimal(v: Any, column: str, default: Decimal = Decimal('0')) -> Decimal:
    if v is None or _to_str(v) == '':
        return default
    if isinstance(v, Decimal):
        return v
    try:
        return Decimal(_to_str(v).replace(',', ''))
    except InvalidOperation:
        raise RowError(column, f'"{v}" is not a number')


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return _to_str(v).lower() in _TRUE_VALUES


def _write_sheet(ws, columns: List[str], rows: List[list]) -> None:
    header_font = Font(bold=True, color='FFFFFF')
    header_fill = PatternFill('solid', fgColor='1F4E78')
    for col, header in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center')

    for row_idx, values in enumerate(rows, 2):
        for col, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col, value=value)

    # Auto-width columns
    for column in ws.columns:
        width = max(len(_to_str(cell.value)) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(width + 2, 80)
    ws.freeze_panes = 'A2'


def _read_rows(file_obj, columns: List[str]) -> List[tuple]:
    """(excel_row, {column: value}) for every non-empty data row."""
    wb = load_workbook(filename=file_obj, read_only=True, data_only=True)
    ws = wb.active
    rows = ws.iter_rows(values_only=True)
    header = next(rows, None) or ()
    lookup = {name.lower(): name for name in columns}
    positions = {}
    for idx, title in enumerate(header):
        key = lookup.get(_to_str(title).lower())
        if key:
            positions[key] = idx

    missing = [name for name in columns[:1] if name not in positions]
    if missing:
        raise RowError(missing[0], f'Column "{missing[0]}" not found in the header row')

    result = []
    for excel_row, values in enumerate(rows, start=2):
        values = list(values or ())
        record = {
            name: values[idx] if idx < len(values) else None
            for name, idx in positions.items()
        }
        if all(_to_str(v) == '' for v in record.values()):
            continue
        result.append((excel_row, record))
    wb.close()
    return result


def workbook_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


# =============================================================================
# BOQ
# =============================================================================

def export_boq_workbook() -> Workbook:
    """All BOQ items in code order, one row each."""
    from infrastructure.persistence.models import BOQItem

    rows_by_id = {row.id: row for row in BOQItem.objects.all()}
    ordered = flatten(build_tree([row.to_entity() for row in rows_by_id.values()], ORDER_CODE))

    wb = Workbook()
    ws = wb.active
    ws.title = 'BOQ'
    _write_sheet(ws, BOQ_COLUMNS, [
        [
            node.code,
            node.description,
            node.description_ar,
            float(node.quantity),
            node.unit,
            node.unit_ar,
            float(node.unit_rate),
            float(node.boq_amount),
            node.level,
        ]
        for node in ordered
    ])
    return wb


def _boq_sort_key(entry):
    try:
        return BOQCode(_to_str(entry[1].get('code'))).sort_key
    except ValueError:
        return ()


def import_boq_workbook(file_obj, actor=None) -> ImportSummary:
    """
    Create or update BOQ items from a workbook.

    Rows are applied in code order so that a parent (`1.2` for `1.2.3`)
    exists before its children. An existing code is updated in place.
    """
    from infrastructure.persistence.models import BOQItem

    summary = ImportSummary()
    try:
        rows = _read_rows(file_obj, BOQ_COLUMNS)
    except RowError as exc:
        summary.errors.append(ExcelImportError(row=1, column=exc.column, message=exc.message))
        return summary

    user = getattr(actor, 'user', None)
    by_code: Dict[str, BOQItem] = {}

    for excel_row, record in sorted(rows, key=_boq_sort_key):
        try:
            code = _to_str(record.get('code'))
            if not code:
                raise RowError('code', 'Code is required')
            description = _to_str(record.get('description'))
            if not description:
                raise RowError('description', 'Description is required')
            quantity = _to_decimal(record.get('quantity'), 'quantity')
            unit_rate = _to_decimal(record.get('unitRate'), 'unitRate')
            total = record.get('totalAmount')
            total_amount = _to_decimal(total, 'totalAmount') if _to_str(total) else quantity * unit_rate

            parent = None
            parent_code = BOQCode(code).parent_code
            if parent_code is not None:
                parent = by_code.get(parent_code.value) or BOQItem.objects.filter(code=parent_code.value).first()

            values = {
                'description': description,
                'description_ar': _to_str(record.get('descriptionAr')),
                'quantity': quantity,
                'unit': _to_str(record.get('unit')),
                'unit_ar': _to_str(record.get('unitAr')),
                'unit_rate': unit_rate,
                'total_amount': total_amount,
                'parent': parent,
            }

            with transaction.atomic():
                item = BOQItem.objects.filter(code=code).first()
                if item is None:
                    item = BOQItem(code=code, created_by=user, **values)
                    item.updated_by = user
                    item.save()
                    summary.created += 1
                else:
                    for name, value in values.items():
                        setattr(item, name, value)
                    item.updated_by = user
                    item.save()
                    summary.updated += 1
            by_code[code] = item
        except RowError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column=exc.column, message=exc.message))
        except ValueError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column='', message=str(exc)))
        except DatabaseError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column='', message=str(exc)))

    logger.info(
        "BOQ import: %d created, %d updated, %d errors",
        summary.created, summary.updated, len(summary.errors),
    )
    return summary


# =============================================================================
# BREAKDOWN
# =============================================================================

def export_breakdown_workbook() -> Workbook:
    from infrastructure.persistence.models import BreakdownItem

    items = (
        BreakdownItem.objects
        .select_related('boq_item', 'parent_breakdown')
        .order_by('boq_item__code', 'created_at')
    )
    wb = Workbook()
    ws = wb.active
    ws.title = 'Breakdown'
    _write_sheet(ws, BREAKDOWN_COLUMNS, [
        [
            item.boq_item.code,
            item.keyword,
            item.keyword_ar,
            item.description,
            item.description_ar,
            float(item.percentage),
            float(item.value),
            float(item.quantity),
            item.is_leaf,
            item.parent_breakdown.keyword if item.parent_breakdown else '',
        ]
        for item in items
    ])
    return wb


def _parents_first(rows):
    """
    Order breakdown rows so every parent row comes before its sub-items.

    Rows are keyed by (boqItemCode, keyword). Depth counts the parent
    links that resolve within the sheet; a parent that is not in the
    sheet is expected to exist already. Rows in a keyword cycle keep the
    depth reached before the loop and fail on lookup.
    """
    parent_of = {}
    for _, record in rows:
        key = (_to_str(record.get('boqItemCode')), _to_str(record.get('keyword')))
        parent_of.setdefault(key, _to_str(record.get('parentKeyword')))

    def depth(record):
        boq_code = _to_str(record.get('boqItemCode'))
        parent_keyword = _to_str(record.get('parentKeyword'))
        seen = set()
        level = 0
        while parent_keyword and parent_keyword not in seen:
            seen.add(parent_keyword)
            level += 1
            parent_keyword = parent_of.get((boq_code, parent_keyword))
        return level

    return sorted(rows, key=lambda entry: depth(entry[1]))


def import_breakdown_workbook(file_obj, actor=None) -> ImportSummary:
    """
    Create or update breakdown items from a workbook.

    The owning BOQ item is looked up by `boqItemCode`, the parent by
    keyword within the same BOQ item. Percentages above 1 are read as
    whole percentages (20 -> 0.20).
    """
    from infrastructure.persistence.models import BOQItem, BreakdownItem

    summary = ImportSummary()
    try:
        rows = _read_rows(file_obj, BREAKDOWN_COLUMNS)
    except RowError as exc:
        summary.errors.append(ExcelImportError(row=1, column=exc.column, message=exc.message))
        return summary

    user = getattr(actor, 'user', None)
    boq_cache: Dict[str, Optional[BOQItem]] = {}

    ordered = _parents_first(rows)

    for excel_row, record in ordered:
        try:
            boq_code = _to_str(record.get('boqItemCode'))
            if not boq_code:
                raise RowError('boqItemCode', 'BOQ item code is required')
            if boq_code not in boq_cache:
                boq_cache[boq_code] = BOQItem.objects.filter(code=boq_code).first()
            boq_item = boq_cache[boq_code]
            if boq_item is None:
                raise RowError('boqItemCode', f'BOQ item "{boq_code}" not found')

            keyword = _to_str(record.get('keyword'))
            if not keyword:
                raise RowError('keyword', 'Keyword is required')

            try:
                percentage = Percentage.from_input(
                    _to_decimal(record.get('percentage'), 'percentage')
                ).fraction
            except ValueError as exc:
                if isinstance(exc, RowError):
                    raise
                raise RowError('percentage', 'Percentage must be between 0 and 100')

            parent = None
            parent_keyword = _to_str(record.get('parentKeyword'))
            if parent_keyword:
                parent = BreakdownItem.objects.filter(
                    boq_item=boq_item, keyword=parent_keyword
                ).order_by('created_at').first()
                if parent is None:
                    raise RowError('parentKeyword', f'Parent breakdown item "{parent_keyword}" not found')

            values = {
                'keyword_ar': _to_str(record.get('keywordAr')),
                'description': _to_str(record.get('description')),
                'description_ar': _to_str(record.get('descriptionAr')),
                'percentage': percentage,
                'value': _to_decimal(record.get('value'), 'value'),
                'quantity': _to_decimal(record.get('quantity'), 'quantity'),
                'is_leaf': _to_bool(record.get('isLeaf')),
            }

            with transaction.atomic():
                item = BreakdownItem.objects.filter(
                    boq_item=boq_item, keyword=keyword, parent_breakdown=parent
                ).first()
                if item is None:
                    BreakdownItem.objects.create(
                        boq_item=boq_item,
                        parent_breakdown=parent,
                        keyword=keyword,
                        created_by=user,
                        updated_by=user,
                        **values,
                    )
                    summary.created += 1
                else:
                    for name, value in values.items():
                        setattr(item, name, value)
                    item.updated_by = user
                    item.save()
                    summary.updated += 1
        except RowError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column=exc.column, message=exc.message))
        except ValueError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column='', message=str(exc)))
        except DatabaseError as exc:
            summary.errors.append(ExcelImportError(row=excel_row, column='', message=str(exc)))

    summary.errors.sort(key=lambda error: error.row)
    logger.info(
        "Breakdown import: %d created, %d updated, %d errors",
        summary.created, summary.updated, len(summary.errors),
    )
    return summary
