from datetime import date

from domain.wir.numbering import (
    base_wir_number,
    format_wir_number,
    next_wir_number,
    parse_sequence,
    revision_wir_number,
)


def test_format_and_parse():
    number = format_wir_number(date(2025, 3, 7), 42)
    assert number == 'WIR-07-03-2025-000042'
    assert parse_sequence(number) == 42
    assert parse_sequence('WIR-07-03-2025-000042-R2') == 42
    assert parse_sequence('legacy-17') is None


def test_sequence_is_global_across_dates():
    existing = [
        'WIR-01-01-2025-000011',
        'WIR-15-02-2025-000012-R1',
        'WIR-20-02-2025-000009',
        'something-else',
    ]
    assert next_wir_number(existing, date(2025, 3, 1)) == 'WIR-01-03-2025-000013'


def test_first_number():
    assert next_wir_number([], date(2025, 1, 2)) == 'WIR-02-01-2025-000001'


def test_revision_numbers_replace_existing_suffix():
    assert base_wir_number('WIR-01-01-2025-000001-R3') == 'WIR-01-01-2025-000001'
    assert revision_wir_number('WIR-01-01-2025-000001', 1) == 'WIR-01-01-2025-000001-R1'
    assert revision_wir_number('WIR-01-01-2025-000001-R1', 2) == 'WIR-01-01-2025-000001-R2'
