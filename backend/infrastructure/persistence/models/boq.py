"""
BOQ (Bill of Quantities) ORM Models.

Models for the priced work-item tree and the breakdown rules attached to it.
"""

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from domain.boq.entities import BOQItem as BOQItemEntity
from domain.boq.entities import BreakdownItem as BreakdownItemEntity
from domain.shared.value_objects import BOQCode

from .base import BaseModelWithHistory


class BOQItem(BaseModelWithHistory):
    """
    Single item in the Bill of Quantities.

    The tree is stored through `parent`; `level` is derived from the
    dotted `code` on every save. Deleting an item cascades to its
    children and to the breakdown items that reference it.
    """

    feed_table = 'boq_items'

    code = models.CharField(
        max_length=100,
        db_index=True,
        verbose_name="Code"
    )
    description = models.TextField(
        verbose_name="Description"
    )
    description_ar = models.TextField(
        blank=True,
        verbose_name="Description (Arabic)"
    )

    # Quantity and pricing
    quantity = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name="Quantity"
    )
    unit = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Unit"
    )
    unit_ar = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Unit (Arabic)"
    )
    unit_rate = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name="Unit rate"
    )
    total_amount = models.DecimalField(
        max_digits=20,
        decimal_places=4,
        null=True,
        blank=True,
        verbose_name="Total amount"
    )

    # Hierarchy
    parent = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        verbose_name="Parent item"
    )
    level = models.PositiveSmallIntegerField(
        default=0,
        verbose_name="Level"
    )

    class Meta:
        db_table = 'boq_items'
        verbose_name = 'BOQ item'
        verbose_name_plural = 'BOQ items'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['parent', 'created_at'], name='boq_items_parent__7c1f0e_idx'),
        ]

    def __str__(self):
        return f"{self.code} {self.description[:50]}"

    def save(self, *args, **kwargs):
        self.level = BOQCode(self.code).level if self.code else 0
        if self.total_amount is None:
            self.total_amount = (self.quantity or Decimal('0')) * (self.unit_rate or Decimal('0'))
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'level', 'total_amount'}
        super().save(*args, **kwargs)

    def to_entity(self) -> BOQItemEntity:
        return BOQItemEntity(
            id=self.id,
            created_at=self.created_at,
            code=self.code,
            description=self.description,
            description_ar=self.description_ar,
            quantity=self.quantity,
            unit=self.unit,
            unit_ar=self.unit_ar,
            unit_rate=self.unit_rate,
            total_amount=self.total_amount,
            parent_id=self.parent_id,
        )


class BreakdownItem(BaseModelWithHistory):
    """
    Percentage/value rule attached to one BOQ item.

    `unit_rate` is a copy of the owning BOQ item's rate; it is taken on
    creation and kept current by the rate propagation sync.
    """

    feed_table = 'breakdown_items'

    boq_item = models.ForeignKey(
        BOQItem,
        on_delete=models.CASCADE,
        related_name='breakdown_items',
        verbose_name="BOQ item"
    )
    parent_breakdown = models.ForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='sub_items',
        verbose_name="Parent breakdown item"
    )

    # Identification
    keyword = models.CharField(
        max_length=200,
        verbose_name="Keyword"
    )
    keyword_ar = models.CharField(
        max_length=200,
        blank=True,
        verbose_name="Keyword (Arabic)"
    )
    description = models.TextField(
        blank=True,
        verbose_name="Description"
    )
    description_ar = models.TextField(
        blank=True,
        verbose_name="Description (Arabic)"
    )

    # Stored as a fraction: 0.20 == 20%
    percentage = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        default=Decimal('0'),
        validators=[
            MinValueValidator(Decimal('0')),
            MaxValueValidator(Decimal('1')),
        ],
        verbose_name="Percentage"
    )
    value = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name="Value"
    )
    unit_rate = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name="Unit rate (copy of BOQ item)"
    )
    quantity = models.DecimalField(
        max_digits=18,
        decimal_places=4,
        default=Decimal('0'),
        verbose_name="Quantity"
    )
    is_leaf = models.BooleanField(
        default=False,
        verbose_name="Leaf sub-item"
    )

    class Meta:
        db_table = 'breakdown_items'
        verbose_name = 'Breakdown item'
        verbose_name_plural = 'Breakdown items'
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['boq_item', 'is_leaf'], name='breakdown_i_boq_ite_3e9a2d_idx'),
        ]

    def __str__(self):
        return f"{self.keyword} ({self.percentage})"

    @property
    def is_selectable(self):
        return self.is_leaf and self.parent_breakdown_id is not None

    def save(self, *args, **kwargs):
        if self._state.adding and self.boq_item_id:
            self.unit_rate = self.boq_item.unit_rate
        super().save(*args, **kwargs)

    def to_entity(self) -> BreakdownItemEntity:
        return BreakdownItemEntity(
            id=self.id,
            created_at=self.created_at,
            boq_item_id=self.boq_item_id,
            keyword=self.keyword,
            keyword_ar=self.keyword_ar,
            description=self.description,
            description_ar=self.description_ar,
            percentage=self.percentage,
            value=self.value,
            parent_breakdown_id=self.parent_breakdown_id,
            unit_rate=self.unit_rate,
            quantity=self.quantity,
            is_leaf=self.is_leaf,
        )
