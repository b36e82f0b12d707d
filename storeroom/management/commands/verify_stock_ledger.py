"""
Management command to check stock records against the movement ledger.

Every record's quantity must equal the sum of its movement deltas.

Usage:
    python manage.py verify_stock_ledger
    python manage.py verify_stock_ledger --item 7
"""

import logging

from django.core.management.base import BaseCommand, CommandError
from django.db.models import IntegerField, Sum
from django.db.models.functions import Coalesce

from storeroom.models import StockRecord

logger = logging.getLogger('storeroom')


class Command(BaseCommand):
    """Verify stock ledger command."""

    help = 'Compares each stock record quantity with the sum of its movements'

    def add_arguments(self, parser):
        parser.add_argument(
            '--item',
            type=int,
            help='Only check records of this item id',
        )

    def handle(self, *args, **options):
        records = StockRecord.objects.select_related('location').annotate(
            ledger=Coalesce(Sum('movements__delta'), 0, output_field=IntegerField()),
        )
        if options['item'] is not None:
            records = records.filter(item_id=options['item'])

        checked = 0
        mismatches = 0
        for record in records:
            checked += 1
            if record.ledger != record.quantity:
                mismatches += 1
                logger.warning(
                    "stock.ledger_mismatch",
                    extra={
                        "item_id": record.item_id,
                        "location_id": record.location_id,
                        "quantity": record.quantity,
                        "ledger": record.ledger,
                    },
                )
                self.stdout.write(
                    f'item {record.item_id} @ {record.location.code}: '
                    f'quantity={record.quantity} ledger={record.ledger}'
                )

        if mismatches:
            raise CommandError(f'{mismatches} of {checked} record(s) disagree with the ledger')

        self.stdout.write(self.style.SUCCESS(f'{checked} record(s) match the ledger'))
