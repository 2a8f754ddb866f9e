"""
Management command to close group orders whose deadline has passed.

Group orders are also closed when someone touches them after the deadline;
this command closes the ones nobody touched. Run it from cron, or keep it
running with --loop.

Usage:
    python manage.py close_expired_group_orders
    python manage.py close_expired_group_orders --dry-run
    python manage.py close_expired_group_orders --loop --interval 60
"""

import time

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import close_old_connections
import structlog

from apps.group_orders.services import find_expired_group_orders, sweep_expired_group_orders

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    help = 'Fulfil or expire open group orders past their deadline'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the group orders that would be closed without changing them',
        )
        parser.add_argument(
            '--loop',
            action='store_true',
            help='Keep sweeping until interrupted',
        )
        parser.add_argument(
            '--interval',
            type=int,
            default=settings.GROUP_ORDERS['SWEEP_INTERVAL_SECONDS'],
            help='Seconds between sweeps with --loop',
        )
        parser.add_argument(
            '--batch-size',
            type=int,
            default=settings.GROUP_ORDERS['SWEEP_BATCH_SIZE'],
            help='Maximum group orders closed per sweep',
        )

    def handle(self, *args, **options):
        if options['dry_run']:
            self._report_pending(options['batch_size'])
            return

        if not options['loop']:
            self._sweep(options['batch_size'])
            return

        logger.info("group_order_sweeper_started", interval=options['interval'])
        try:
            while True:
                close_old_connections()
                self._sweep(options['batch_size'])
                time.sleep(options['interval'])
        except KeyboardInterrupt:
            logger.info("group_order_sweeper_stopped")

    def _report_pending(self, batch_size):
        expired = list(find_expired_group_orders(limit=batch_size).select_related('product'))
        if not expired:
            self.stdout.write(self.style.SUCCESS('No expired group orders. All good!'))
            return

        self.stdout.write(f'\nFound {len(expired)} expired group order(s):\n')
        for group_order in expired:
            self.stdout.write(
                f'  - {group_order.id} | {group_order.product.name} | '
                f'{group_order.current_quantity}/{group_order.target_quantity} | '
                f'expired {group_order.expires_at:%Y-%m-%d %H:%M}'
            )
        self.stdout.write(self.style.WARNING('\n--dry-run mode: No changes made.'))

    def _sweep(self, batch_size):
        result = sweep_expired_group_orders(batch_size=batch_size)
        self.stdout.write(
            self.style.SUCCESS(
                f'Closed {result.closed} group order(s): '
                f'{len(result.fulfilled)} fulfilled, {len(result.expired)} expired, '
                f'{len(result.skipped)} skipped'
            )
        )
