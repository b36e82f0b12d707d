"""
Location model: Where stock is kept.
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from storeroom.models.enums import LocationKind


class LocationQuerySet(models.QuerySet):

    def active(self):
        return self.filter(is_active=True)

    def default_for_department(self, department_id):
        """
        Default fulfillment location for a department.

        Falls back to the global default (no department) when the
        department has no default of its own.
        """
        qs = self.active().filter(is_default=True)
        location = qs.filter(department_id=department_id).first()
        if location is None:
            location = qs.filter(department_id__isnull=True).first()
        return location


class Location(models.Model):
    """
    Physical place where stock exists.

    Locations are stable entities created during setup. A department may own
    several locations but at most one is its default, used to fulfill the
    department's requisitions.

    Examples:
        Location.objects.create(code='CENTRAL', name='Central Store', kind=LocationKind.WAREHOUSE, is_default=True)
        Location.objects.create(code='HR-01', name='HR cabinet', kind=LocationKind.DEPARTMENT, department_id=3)
    """

    code = models.CharField(
        unique=True,
        max_length=50,
        verbose_name=_('Code'),
        help_text=_('Unique identifier, stored upper-case (e.g. CENTRAL, HR-01)'),
    )
    name = models.CharField(
        max_length=100,
        verbose_name=_('Name'),
    )
    kind = models.CharField(
        max_length=20,
        choices=LocationKind.choices,
        default=LocationKind.WAREHOUSE,
        verbose_name=_('Kind'),
    )
    department_id = models.PositiveIntegerField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Department'),
        help_text=_('Owning department. Empty = shared by everyone.'),
    )
    is_default = models.BooleanField(
        default=False,
        verbose_name=_('Default location'),
        help_text=_('Fulfills requisitions of its department (or of everyone, when no department).'),
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name=_('Active'),
    )
    metadata = models.JSONField(
        default=dict,
        blank=True,
        verbose_name=_('Metadata'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = LocationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Location')
        verbose_name_plural = _('Locations')
        ordering = ['code']
        constraints = [
            models.UniqueConstraint(
                fields=['department_id'],
                condition=Q(is_default=True),
                name='unique_default_location_per_department',
            ),
            models.UniqueConstraint(
                fields=['is_default'],
                condition=Q(is_default=True, department_id__isnull=True),
                name='unique_global_default_location',
            ),
        ]

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.code} ({self.name})"
