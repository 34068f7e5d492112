import io
from decimal import Decimal

import pytest
from openpyxl import Workbook, load_workbook

from application.services import spreadsheets
from infrastructure.persistence.models import BOQItem, BreakdownItem

pytestmark = pytest.mark.django_db


def workbook_file(columns, rows):
    wb = Workbook()
    ws = wb.active
    ws.append(columns)
    for row in rows:
        ws.append(row)
    return io.BytesIO(spreadsheets.workbook_bytes(wb))


def test_boq_import_resolves_parents_from_codes():
    upload = workbook_file(
        ['code', 'description', 'quantity', 'unit', 'unitRate'],
        [
            ['1.1.1', 'Trenching', 20, 'm', 15],
            ['1', 'Civil works', 0, '', 0],
            ['1.1', 'Earthworks', 0, '', 0],
        ],
    )

    summary = spreadsheets.import_boq_workbook(upload)

    assert summary.created == 3
    assert summary.errors == []
    trench = BOQItem.objects.get(code='1.1.1')
    assert trench.parent.code == '1.1'
    assert trench.parent.parent.code == '1'
    assert trench.level == 2
    assert trench.total_amount == Decimal('300')


def test_boq_import_reports_bad_rows_and_keeps_good_ones():
    upload = workbook_file(
        ['code', 'description', 'quantity', 'unitRate'],
        [
            ['1', 'Civil works', 0, 0],
            ['2', '', 1, 1],
            ['3', 'Electrical', 'lots', 1],
        ],
    )

    summary = spreadsheets.import_boq_workbook(upload)

    assert summary.created == 1
    assert [(e.row, e.column) for e in summary.errors] == [(3, 'description'), (4, 'quantity')]


def test_boq_import_needs_code_column():
    upload = workbook_file(['description'], [['Civil works']])

    summary = spreadsheets.import_boq_workbook(upload)

    assert summary.created == 0
    assert summary.errors[0].column == 'code'


def test_breakdown_import_reads_whole_percentages(make_boq_item):
    make_boq_item('1.1', quantity='100', unit_rate='50')
    upload = workbook_file(
        ['boqItemCode', 'keyword', 'percentage', 'isLeaf', 'parentKeyword'],
        [
            ['1.1', 'Excavation', 20, 'yes', 'Installation'],
            ['1.1', 'Installation', 0, 'no', ''],
            ['1.1', 'Laying', 0.1, True, 'Installation'],
            ['9.9', 'Ghost', 10, True, ''],
        ],
    )

    summary = spreadsheets.import_breakdown_workbook(upload)

    assert summary.created == 3
    assert [(e.column, e.message) for e in summary.errors] == [('boqItemCode', 'BOQ item "9.9" not found')]
    excavation = BreakdownItem.objects.get(keyword='Excavation')
    assert excavation.percentage == Decimal('0.2')
    assert excavation.parent_breakdown.keyword == 'Installation'
    assert excavation.is_selectable
    assert excavation.unit_rate == Decimal('50')
    assert BreakdownItem.objects.get(keyword='Laying').percentage == Decimal('0.1')



def test_breakdown_import_resolves_nested_parents_listed_late(make_boq_item):
    make_boq_item('1.1', quantity='100', unit_rate='50')
    upload = workbook_file(
        ['boqItemCode', 'keyword', 'percentage', 'isLeaf', 'parentKeyword'],
        [
            ['1.1', 'Top', 0, False, ''],
            ['1.1', 'Leaf', 25, True, 'Mid'],
            ['1.1', 'Mid', 0, False, 'Top'],
        ],
    )

    summary = spreadsheets.import_breakdown_workbook(upload)

    assert summary.errors == []
    assert summary.created == 3
    leaf = BreakdownItem.objects.get(keyword='Leaf')
    assert leaf.parent_breakdown.keyword == 'Mid'
    assert leaf.parent_breakdown.parent_breakdown.keyword == 'Top'

def test_breakdown_percentage_out_of_range(make_boq_item):
    make_boq_item('1.1')
    upload = workbook_file(['boqItemCode', 'keyword', 'percentage'], [['1.1', 'Too much', 250]])

    summary = spreadsheets.import_breakdown_workbook(upload)

    assert summary.created == 0
    assert summary.errors[0].column == 'percentage'


def test_boq_export_is_in_code_order(make_boq_item):
    root = make_boq_item('1', quantity='0')
    make_boq_item('1.10', parent=root)
    make_boq_item('1.9', parent=root)

    wb = load_workbook(io.BytesIO(spreadsheets.workbook_bytes(spreadsheets.export_boq_workbook())))
    rows = list(wb.active.iter_rows(values_only=True))

    assert list(rows[0]) == spreadsheets.BOQ_COLUMNS
    assert [row[0] for row in rows[1:]] == ['1', '1.9', '1.10']


def test_export_task_writes_under_media_root(make_boq_item, settings):
    from application.tasks.boq_tasks import export_boq_to_excel

    make_boq_item('1')

    result = export_boq_to_excel.delay().get()

    assert result['filename'].startswith('BOQ_')
    assert result['download_url'].startswith(f"{settings.MEDIA_URL}exports/boq/")
    assert load_workbook(result['filepath']).active.max_row == 2
