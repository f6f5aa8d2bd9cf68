import pytest

from apps.leasing.admin import VehicleResource
from apps.leasing.models import Brand, Trim, TrimOption

pytestmark = pytest.mark.django_db


class TestBrand:

    def test_slug_generated(self):
        brand = Brand.objects.create(name_kr='현대', name_en='Hyundai')
        assert brand.slug == 'hyundai'

    def test_slug_unique(self):
        Brand.objects.create(name_kr='현대', name_en='Hyundai')
        second = Brand.objects.create(name_kr='현대 상용', name_en='Hyundai')
        assert second.slug != 'hyundai'
        assert second.slug.startswith('hyundai')


class TestVehicle:

    def test_rent_prices_normalized_on_save(self, make_vehicle):
        vehicle = make_vehicle(rent_prices={
            'rentPrice60_0': '450,000', 'rentPrice48_0': 0, 'rentPrice36_0': None, 'note': 1,
        })
        vehicle.refresh_from_db()
        assert vehicle.rent_prices == {'rentPrice60_0': 450000}

    def test_get_rent_price(self, vehicle):
        assert vehicle.get_rent_price(60, 0) == 450000
        assert vehicle.get_rent_price(60, 30) is None

    def test_starting_payment_falls_back_to_cheapest_cell(self, make_vehicle):
        vehicle = make_vehicle(rent_prices={'rentPrice48_30': 390000, 'rentPrice36_0': 520000})
        assert vehicle.starting_payment == 390000

    def test_history_recorded(self, vehicle):
        vehicle.base_price = 31000000
        vehicle.save()
        assert vehicle.history.count() == 2
        assert vehicle.history.earliest().base_price == 30000000


class TestTrimOption:

    def test_effective_price(self, configured):
        trim = configured['trim']
        sunroof, camera = configured['options']
        override = TrimOption.objects.get(trim=trim, option=sunroof)
        override.price_override = 150000
        override.save()
        included = TrimOption.objects.get(trim=trim, option=camera)
        included.is_included = True
        included.price_override = 150000
        included.save()

        assert override.effective_price == 150000
        assert included.effective_price == 0

    def test_trim_ordering(self, configured):
        assert list(Trim.objects.filter(vehicle=configured['vehicle'])) == [
            configured['base_trim'], configured['trim']
        ]


class TestVehicleResource:

    def test_export_has_column_per_cell(self, make_vehicle):
        make_vehicle(rent_prices={'rentPrice60_0': 450000})
        make_vehicle('그랜저', rent_prices={'rentPrice36_30': 610000})

        dataset = VehicleResource().export()

        assert 'rentPrice60_0' in dataset.headers
        assert 'rentPrice36_30' in dataset.headers
        assert 'brand' in dataset.headers
