"""
DocumentSequence model: per-year counters for human-readable numbers.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DocumentSequence(models.Model):
    """
    Last number issued for a (prefix, year) pair.

    Rows are locked with select_for_update() while a number is issued, so
    two concurrent requisitions never get the same number.
    """

    prefix = models.CharField(max_length=10, verbose_name=_('Prefix'))
    year = models.PositiveSmallIntegerField(verbose_name=_('Year'))
    last_number = models.PositiveIntegerField(default=0, verbose_name=_('Last number'))

    class Meta:
        verbose_name = _('Document sequence')
        verbose_name_plural = _('Document sequences')
        constraints = [
            models.UniqueConstraint(
                fields=['prefix', 'year'],
                name='unique_document_sequence',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.prefix}-{self.year}: {self.last_number}"
