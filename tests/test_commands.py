import pytest
from django.core.management import CommandError, call_command

from apps.leasing.models import Brand, Color, MasterColor, Option, Trim, TrimOption, Vehicle

pytestmark = pytest.mark.django_db


class TestSeedCatalog:

    def test_creates_sample_catalog(self):
        call_command('seed_catalog')

        assert Brand.objects.count() == 2
        sonata = Vehicle.objects.get(name='쏘나타')
        assert sonata.trims.count() == 2
        assert sonata.colors.filter(master__isnull=True).count() == 0
        assert sonata.starting_payment == 430000

    def test_higher_trim_includes_first_option(self):
        call_command('seed_catalog')

        trim = Trim.objects.get(vehicle__name='쏘나타', name='익스클루시브')
        included = TrimOption.objects.get(trim=trim, option__name='선루프')
        assert included.effective_price == 0

    def test_idempotent(self):
        call_command('seed_catalog')
        call_command('seed_catalog')

        assert Vehicle.objects.count() == 2
        assert Color.objects.count() == 6


class TestLinkMasterCatalog:

    def test_links_all_brands(self, vehicle, make_color, make_option):
        make_color(vehicle, 'White')
        make_option(vehicle, 'Sunroof')

        call_command('link_master_catalog')

        assert not Color.objects.filter(master__isnull=True).exists()
        assert not Option.objects.filter(master__isnull=True).exists()

    def test_limited_to_brand(self, vehicle, other_brand, make_vehicle, make_color):
        make_color(vehicle, 'White')
        kia = make_vehicle('K5', brand=other_brand)
        make_color(kia, 'White')

        call_command('link_master_catalog', brand=other_brand.slug)

        assert MasterColor.objects.get().brand == other_brand
        assert Color.objects.get(vehicle=vehicle).master is None

    def test_unknown_brand(self, db):
        with pytest.raises(CommandError):
            call_command('link_master_catalog', brand='nope')
