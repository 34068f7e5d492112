"""
Persistence Models Package.

All Django ORM models for the WIR tracking system.
"""

# Base mixins
from .base import (
    TimeStampedMixin,
    AuditMixin,
    BaseModel,
    BaseModelWithHistory,
)

# Bill of Quantities
from .boq import (
    BOQItem,
    BreakdownItem,
)

# Rosters
from .staff import (
    Contractor,
    Engineer,
)

# Files
from .attachments import Attachment

# Work Inspection Requests
from .wir import (
    WIR,
    WIRStatusChoices,
    WIRResultChoices,
)

# Audit
from .audit import AuditLog

__all__ = [
    # Base
    'TimeStampedMixin',
    'AuditMixin',
    'BaseModel',
    'BaseModelWithHistory',
    # BOQ
    'BOQItem',
    'BreakdownItem',
    # Staff
    'Contractor',
    'Engineer',
    # Files
    'Attachment',
    # WIR
    'WIR',
    'WIRStatusChoices',
    'WIRResultChoices',
    # Audit
    'AuditLog',
]
