"""Release escrowed seller funds for orders delivered long enough ago.

Meant to run from cron. Orders already released, or without a credited
payment, are skipped.

Usage:
  python manage.py release_escrow
  python manage.py release_escrow --days 3 --dry-run
"""

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand
from django.utils import timezone

from orders.models import Order
from finance.services import release_due_escrow


class Command(BaseCommand):
    help = 'Release pending seller funds for delivered orders past the escrow period.'

    def add_arguments(self, parser):
        parser.add_argument('--days', type=int, default=None, help='Escrow period in days (defaults to ESCROW_AUTO_RELEASE_DAYS).')
        parser.add_argument('--dry-run', action='store_true', help='List the orders that would be released without touching wallets.')

    def handle(self, *args, **options):
        days = options['days']
        if days is None:
            days = settings.ESCROW_AUTO_RELEASE_DAYS

        if options['dry_run']:
            cutoff = timezone.now() - timedelta(days=days)
            due = Order.objects.filter(
                status='delivered',
                payment_status='completed',
                funds_released=False,
                delivered_at__lte=cutoff,
            )
            for order in due:
                self.stdout.write(f'{order.order_number}  seller={order.seller_id}  delivered={order.delivered_at:%Y-%m-%d}')
            self.stdout.write(self.style.NOTICE(f'{due.count()} order(s) due for release (dry run).'))
            return

        released = release_due_escrow(days=days)
        for order in released:
            self.stdout.write(f'Released {order.order_number}')
        self.stdout.write(self.style.SUCCESS(f'Released funds for {len(released)} order(s).'))
