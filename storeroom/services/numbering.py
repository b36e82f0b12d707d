"""
Document numbering: PREFIX-YYYY-NNNN, one counter per prefix and year.
"""

from django.db import transaction
from django.utils import timezone

from storeroom.models.sequence import DocumentSequence


def next_document_number(prefix: str, width: int = 4, year: int | None = None) -> str:
    """
    Issue the next number for prefix in the given year (default: current).

    The counter row is locked until the surrounding transaction ends, so
    numbers are unique and gap-free among committed documents.
    """
    year = year or timezone.localdate().year

    with transaction.atomic():
        sequence, _ = DocumentSequence.objects.get_or_create(prefix=prefix, year=year)
        sequence = DocumentSequence.objects.select_for_update().get(pk=sequence.pk)
        sequence.last_number += 1
        sequence.save(update_fields=['last_number'])

    return f"{prefix}-{year}-{sequence.last_number:0{width}d}"
