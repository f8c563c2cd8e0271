"""
Management command to close the active weekly period.

Usage:
    python manage.py close_period
    python manage.py close_period --period <uuid>
    python manage.py close_period --period <uuid> --retry

Meant to run from cron after the Friday boundary. Exits with an error if the
period is already closed. ``--retry`` creates the settlements a closed period
is missing after a partial failure.
"""

from django.core.management.base import BaseCommand, CommandError

from apps.common.exceptions import DomainError
from apps.settlements.services import close_period, regenerate_settlements


class Command(BaseCommand):
    help = 'Close a weekly period and generate shop and rider settlements'

    def add_arguments(self, parser):
        parser.add_argument(
            '--period',
            dest='period_id',
            help='Period id to close (defaults to the active period)',
        )
        parser.add_argument(
            '--retry',
            action='store_true',
            help='Create missing settlements for an already closed period',
        )

    def handle(self, *args, **options):
        period_id = options.get('period_id')
        if options['retry'] and not period_id:
            raise CommandError('--retry needs --period')

        try:
            if options['retry']:
                result = regenerate_settlements(period_id=period_id)
            else:
                result = close_period(period_id=period_id)
        except DomainError as e:
            raise CommandError(f'{e.code}: {e}')

        summary = result.admin_summary
        if result.next_period:
            self.stdout.write(
                f'Closed {result.period.start_date} - {result.period.end_date}; '
                f'next period starts {result.next_period.start_date}'
            )
        else:
            self.stdout.write(
                f'Regenerated {result.period.start_date} - {result.period.end_date}'
            )
        self.stdout.write(f'  Shop settlements:  {len(result.shop_settlements)}')
        self.stdout.write(f'  Rider settlements: {len(result.rider_settlements)}')
        self.stdout.write(f'  Admin net revenue: {summary["admin_net_revenue"]} EGP')

        for warning in result.warnings:
            self.stdout.write(self.style.WARNING(
                f'  Open order {warning["order_number"]} ({warning["status"]}) excluded'
            ))
        for failure in result.failures:
            self.stdout.write(self.style.ERROR(f'  Failed: {failure}'))

        if result.failures:
            self.stdout.write(self.style.WARNING('Period closed with failures; rerun with --retry.'))
        else:
            self.stdout.write(self.style.SUCCESS('Period closed.'))
