"""
WIR ORM Models.

Work Inspection Requests and their revision chain.
"""

from decimal import Decimal

from django.db import models

from domain.shared.value_objects import WIRResult, WIRStatus
from domain.wir.entities import WIR as WIREntity

from .base import BaseModelWithHistory


class WIRStatusChoices(models.TextChoices):
    SUBMITTED = WIRStatus.SUBMITTED.value, 'Submitted'
    COMPLETED = WIRStatus.COMPLETED.value, 'Completed'


class WIRResultChoices(models.TextChoices):
    APPROVED = WIRResult.APPROVED.value, 'A - Approved'
    CONDITIONAL = WIRResult.CONDITIONAL.value, 'B - Approved with conditions'
    REJECTED = WIRResult.REJECTED.value, 'C - Rejected'


class WIR(BaseModelWithHistory):
    """
    Work Inspection Request.

    Created as `submitted` without a result; submitting the result moves
    it to `completed`. A rejected WIR may be superseded by a revision
    that points back to it through `parent_wir` and to the first WIR of
    the chain through `original_wir`.
    """

    feed_table = 'wirs'

    wir_number = models.CharField(
        max_length=50,
        unique=True,
        verbose_name="WIR number"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Description"
    )
    description_ar = models.TextField(
        blank=True,
        verbose_name="Description (Arabic)"
    )

    # Dates
    submittal_date = models.DateField(
        verbose_name="Submittal date"
    )
    received_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Received date"
    )
    start_on_site_date = models.DateField(
        null=True,
        blank=True,
        verbose_name="Start on site"
    )

    # Status
    status = models.CharField(
        max_length=20,
        choices=WIRStatusChoices.choices,
        default=WIRStatusChoices.SUBMITTED,
        db_index=True,
        verbose_name="Status"
    )
    result = models.CharField(
        max_length=1,
        choices=WIRResultChoices.choices,
        null=True,
        blank=True,
        db_index=True,
        verbose_name="Result"
    )
    status_conditions = models.TextField(
        blank=True,
        verbose_name="Conditions"
    )

    # People
    contractor = models.ForeignKey(
        'persistence.Contractor',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='wirs',
        verbose_name="Contractor"
    )
    engineer = models.ForeignKey(
        'persistence.Engineer',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='wirs',
        verbose_name="Engineer"
    )

    # Location
    region = models.CharField(max_length=100, blank=True, verbose_name="Region")
    zone = models.CharField(max_length=100, blank=True, verbose_name="Zone")
    road = models.CharField(max_length=200, blank=True, verbose_name="Road")
    line = models.CharField(max_length=100, blank=True, verbose_name="Line")
    manhole_from = models.CharField(max_length=50, blank=True, verbose_name="Manhole from")
    manhole_to = models.CharField(max_length=50, blank=True, verbose_name="Manhole to")
    length_of_line = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        null=True,
        blank=True,
        verbose_name="Length of line"
    )
    diameter_of_line = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name="Diameter of line"
    )
    line_no = models.CharField(max_length=50, blank=True, verbose_name="Line no.")

    # Money
    value = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name="Value"
    )
    linked_boq_items = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Linked BOQ items"
    )
    selected_breakdown_items = models.JSONField(
        default=list,
        blank=True,
        verbose_name="Selected breakdown items"
    )
    calculated_amount = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name="Calculated amount"
    )
    calculation_equation = models.TextField(
        blank=True,
        verbose_name="Calculation equation"
    )

    attachments = models.ManyToManyField(
        'persistence.Attachment',
        blank=True,
        related_name='wirs',
        verbose_name="Attachments"
    )

    # Revision chain
    parent_wir = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='revisions',
        verbose_name="Parent WIR"
    )
    original_wir = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='chain_revisions',
        verbose_name="Original WIR"
    )
    revision_number = models.PositiveIntegerField(
        default=0,
        verbose_name="Revision number"
    )

    class Meta:
        db_table = 'wirs'
        verbose_name = 'WIR'
        verbose_name_plural = 'WIRs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'result'], name='wirs_status_0b6f52_idx'),
            models.Index(fields=['received_date'], name='wirs_receive_5d8a41_idx'),
        ]

    def __str__(self):
        return self.wir_number

    def to_entity(self) -> WIREntity:
        return WIREntity(
            id=self.id,
            created_at=self.created_at,
            wir_number=self.wir_number,
            status=WIRStatus(self.status),
            result=WIRResult(self.result) if self.result else None,
            value=self.value,
            submittal_date=self.submittal_date,
            received_date=self.received_date,
            linked_boq_items=list(self.linked_boq_items or []),
            selected_breakdown_items=list(self.selected_breakdown_items or []),
            calculated_amount=self.calculated_amount,
            calculation_equation=self.calculation_equation,
            parent_wir_id=self.parent_wir_id,
            original_wir_id=self.original_wir_id,
            revision_number=self.revision_number,
        )
