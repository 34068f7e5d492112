"""
WIR Domain - Numbering Sequencer.

Numbers look like WIR-DD-MM-YYYY-NNNNNN. The date is the creation day,
but the six-digit sequence is global: it continues from the highest
suffix ever issued and never resets with the date.
"""

from __future__ import annotations
import re
from datetime import date
from typing import Iterable, Optional


WIR_PREFIX = "WIR-"
SEQUENCE_WIDTH = 6

WIR_NUMBER_RE = re.compile(
    r'^WIR-(?P<day>\d{2})-(?P<month>\d{2})-(?P<year>\d{4})-(?P<seq>\d{%d,})(?:-R(?P<rev>\d+))?$'
    % SEQUENCE_WIDTH
)
REVISION_SUFFIX_RE = re.compile(r'-R\d+$')


def format_wir_number(day: date, sequence: int) -> str:
    return f"{WIR_PREFIX}{day:%d-%m-%Y}-{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(wir_number: str) -> Optional[int]:
    """Sequence part of a WIR number, or None when it does not follow the format."""
    match = WIR_NUMBER_RE.match(wir_number or "")
    if not match:
        return None
    return int(match.group('seq'))


def next_sequence(existing: Iterable[str]) -> int:
    sequences = [seq for seq in (parse_sequence(number) for number in existing) if seq is not None]
    return max(sequences, default=0) + 1


def next_wir_number(existing: Iterable[str], today: date) -> str:
    """Next number for `today`, one past the highest sequence seen on any date."""
    return format_wir_number(today, next_sequence(existing))


def base_wir_number(wir_number: str) -> str:
    """Strip a trailing revision suffix (-R{n})."""
    return REVISION_SUFFIX_RE.sub('', wir_number or '')


def revision_wir_number(wir_number: str, revision_number: int) -> str:
    return f"{base_wir_number(wir_number)}-R{revision_number}"
