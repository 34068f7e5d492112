from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = (
        "Copies each BOQ item's unit rate onto its breakdown items. "
        "Only BOQ items with stale copies are touched unless --boq-item is given. "
        "Safe to run repeatedly."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            '--boq-item',
            dest='boq_item',
            help='Sync a single BOQ item by id.',
        )

    def handle(self, *args, **options):
        from application.services.rate_sync import propagate_unit_rate, reconcile_all_unit_rates
        from domain.shared.exceptions import EntityNotFoundException

        if options.get('boq_item'):
            try:
                results = [propagate_unit_rate(options['boq_item'])]
            except EntityNotFoundException as exc:
                raise CommandError(exc.message)
        else:
            results = reconcile_all_unit_rates()

        if not results:
            self.stdout.write(self.style.SUCCESS('All breakdown rates are current; nothing to do.'))
            return

        for result in results:
            style = self.style.SUCCESS if result.is_complete else self.style.WARNING
            self.stdout.write(style(f'BOQ {result.boq_item_id}: {result.message}'))
            for failed_id in result.failed_ids:
                self.stdout.write(self.style.ERROR(f'  failed: {failed_id}'))

        failed = sum(result.failed for result in results)
        if failed:
            raise CommandError(f'{failed} breakdown items could not be updated')
