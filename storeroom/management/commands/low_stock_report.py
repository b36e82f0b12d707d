"""
Management command to list items below their reorder level.

Usage:
    python manage.py low_stock_report
"""

from django.core.management.base import BaseCommand

from storeroom import stock


class Command(BaseCommand):
    """Low stock report command."""

    help = 'Lists items whose total stock is below the reorder level'

    def handle(self, *args, **options):
        low = stock.low_stock()
        if not low:
            self.stdout.write(self.style.SUCCESS('No items below reorder level'))
            return

        for entry in low:
            item = entry.item
            self.stdout.write(
                f'{item.code:<16} {item.name:<32} '
                f'{entry.total_quantity:>6} / {item.reorder_level:<6} {item.uom} '
                f'(short {entry.shortfall})'
            )
        self.stdout.write(self.style.WARNING(f'{len(low)} item(s) below reorder level'))
