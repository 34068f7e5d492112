"""
Staff ORM Models.

Contractor and engineer rosters referenced by WIRs.
"""

from django.db import models

from .base import BaseModel


class Contractor(BaseModel):
    """Contractor executing the inspected work."""

    feed_table = 'contractors'

    name = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name="Name"
    )
    company = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Company"
    )
    email = models.EmailField(
        blank=True,
        verbose_name="Email"
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Phone"
    )

    class Meta:
        db_table = 'contractors'
        verbose_name = 'Contractor'
        verbose_name_plural = 'Contractors'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.company})" if self.company else self.name


class Engineer(BaseModel):
    """Engineer inspecting the work."""

    feed_table = 'engineers'

    name = models.CharField(
        max_length=255,
        db_index=True,
        verbose_name="Name"
    )
    department = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Department"
    )
    email = models.EmailField(
        blank=True,
        verbose_name="Email"
    )
    phone = models.CharField(
        max_length=50,
        blank=True,
        verbose_name="Phone"
    )
    specialization = models.CharField(
        max_length=255,
        blank=True,
        verbose_name="Specialization"
    )

    class Meta:
        db_table = 'engineers'
        verbose_name = 'Engineer'
        verbose_name_plural = 'Engineers'
        ordering = ['name']

    def __str__(self):
        return self.name
