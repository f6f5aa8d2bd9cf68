from django.core.management.base import BaseCommand, CommandError

from apps.leasing.models import Brand
from apps.leasing.services.masters import MasterCatalog


class Command(BaseCommand):
    help = 'Link vehicle colors/options without a master to their brand master catalog'

    def add_arguments(self, parser):
        parser.add_argument('--brand', help='Only this brand (slug)')

    def handle(self, *args, **options):
        brand = None
        if options['brand']:
            try:
                brand = Brand.objects.get(slug=options['brand'])
            except Brand.DoesNotExist:
                raise CommandError(f"Brand '{options['brand']}' does not exist")

        stats = MasterCatalog.link_masters(brand)
        self.stdout.write(self.style.SUCCESS(
            f"Linked {stats['colors_linked']} colors and {stats['options_linked']} options, "
            f"created {stats['masters_created']} masters"
        ))
