"""Tests for importing catalog items between vehicles."""

import pytest
from django.db.models import QuerySet

from apps.leasing.exceptions import NotFound
from apps.leasing.models import (
    EXTERIOR,
    INTERIOR,
    Color,
    MasterOption,
    Option,
    Trim,
    TrimColor,
    Vehicle,
)
from apps.leasing.services.importer import ImportReconciler

pytestmark = pytest.mark.django_db


@pytest.fixture
def vehicles(make_vehicle):
    return make_vehicle('X'), make_vehicle('Y'), make_vehicle('Z')


class TestImportOptions:

    def test_sunroof_taken_from_first_source(self, vehicles, make_option):
        x, y, z = vehicles
        from_x = make_option(x, 'Sunroof', price=500000)
        make_option(y, 'sunroof', price=700000)

        result = ImportReconciler.import_from(z.pk, [x.pk, y.pk], import_colors=False)

        created = Option.objects.filter(vehicle=z)
        assert created.count() == 1
        assert created.get().price == from_x.price
        assert result.options.imported == 1
        assert result.options.skipped == 1
        assert result.options.skipped_names == ['sunroof']

    def test_existing_destination_name_skipped(self, vehicles, make_option):
        x, _, z = vehicles
        make_option(z, ' SUNROOF ', price=100000)
        make_option(x, 'Sunroof', price=500000)
        make_option(x, 'HUD', price=300000)

        result = ImportReconciler.import_from(z.pk, [x.pk])

        assert sorted(Option.objects.filter(vehicle=z).values_list('name', flat=True)) == [' SUNROOF ', 'HUD']
        assert result.options.imported == 1
        assert result.options.skipped == 1

    def test_cumulative_dedup_regardless_of_order(self, vehicles, make_option):
        x, y, z = vehicles
        for vehicle in (x, y):
            make_option(vehicle, 'Sunroof')
            make_option(vehicle, 'HUD')
        make_option(y, 'Heated seats')

        ImportReconciler.import_from(z.pk, [y.pk, x.pk, y.pk])

        names = [name.lower() for name in Option.objects.filter(vehicle=z).values_list('name', flat=True)]
        assert len(names) == len(set(names)) == 3

    def test_master_copied_within_brand(self, vehicles, make_option, master_option):
        x, _, z = vehicles
        master = master_option('Sunroof')
        make_option(x, 'Sunroof', master=master)

        ImportReconciler.import_from(z.pk, [x.pk])

        assert Option.objects.get(vehicle=z).master_id == master.pk

    def test_cross_brand_master_found_or_created(self, vehicles, make_vehicle, make_option, master_option, other_brand):
        _, _, z = vehicles
        foreign_master = master_option('Sunroof', target_brand=other_brand, category='exterior')
        foreign_vehicle = make_vehicle('K5', brand=other_brand)
        make_option(foreign_vehicle, 'Sunroof', master=foreign_master)

        ImportReconciler.import_from(z.pk, [foreign_vehicle.pk])

        imported = Option.objects.get(vehicle=z)
        assert imported.master.brand_id == z.brand_id
        assert imported.master.name == 'Sunroof'
        assert MasterOption.objects.filter(brand=z.brand, name='Sunroof').count() == 1

    def test_sort_order_appended(self, vehicles, make_option):
        x, _, z = vehicles
        make_option(z, 'HUD', sort_order=5)
        make_option(x, 'Sunroof', sort_order=0)

        ImportReconciler.import_from(z.pk, [x.pk])

        assert Option.objects.get(vehicle=z, name='Sunroof').sort_order == 6


class TestImportColors:

    def test_colors_deduplicated_per_type(self, vehicles, make_color):
        x, _, z = vehicles
        make_color(z, 'Black', EXTERIOR)
        make_color(x, 'black', EXTERIOR)
        make_color(x, 'Black', INTERIOR)

        result = ImportReconciler.import_from(z.pk, [x.pk], import_options=False)

        assert result.colors.imported == 1
        assert result.colors.skipped_names == ['black (외장)']
        assert Color.objects.filter(vehicle=z, color_type=INTERIOR, name='Black').exists()

    def test_clone_keeps_fields(self, vehicles, make_color):
        x, _, z = vehicles
        make_color(x, 'Red', EXTERIOR, price=80000, hex_code='#aa0000', is_available=False)

        ImportReconciler.import_from(z.pk, [x.pk])

        color = Color.objects.get(vehicle=z)
        assert (color.price, color.hex_code, color.is_available) == (80000, '#aa0000', False)


class TestImportTrims:

    def test_trims_cloned_without_eligibility(self, vehicles, make_color):
        x, _, z = vehicles
        trim = Trim.objects.create(vehicle=x, name='Premium', price=1000000)
        TrimColor.objects.create(trim=trim, color=make_color(x, 'White'))

        result = ImportReconciler.import_from(
            z.pk, [x.pk], import_colors=False, import_options=False, import_trims=True
        )

        cloned = Trim.objects.get(vehicle=z)
        assert cloned.name == 'Premium'
        assert cloned.price == 1000000
        assert cloned.trim_colors.count() == 0
        assert result.trims.imported == 1

    def test_trims_not_imported_by_default(self, vehicles):
        x, _, z = vehicles
        Trim.objects.create(vehicle=x, name='Premium')
        ImportReconciler.import_from(z.pk, [x.pk])
        assert not Trim.objects.filter(vehicle=z).exists()


class TestImportResult:

    def test_skipped_preview_truncated(self, vehicles, make_option, settings):
        settings.LEASING = {'IMPORT_SKIPPED_PREVIEW': 2}
        x, _, z = vehicles
        for name in ('A', 'B', 'C', 'D'):
            make_option(z, name)
            make_option(x, name)

        data = ImportReconciler.import_from(z.pk, [x.pk]).as_dict()

        assert data['options']['skipped'] == 4
        assert data['options']['skipped_names'] == ['A', 'B']
        assert data['options']['skipped_omitted'] == 2
        assert '옵션 0개 추가 (4개 중복)' in data['message']

    def test_destination_dropped_from_sources(self, vehicles, make_option):
        x, _, z = vehicles
        make_option(z, 'HUD')
        result = ImportReconciler.import_from(z.pk, [z.pk, x.pk, x.pk])
        assert result.source_ids == [x.pk]
        assert result.options.skipped == 0


class TestImportErrors:

    def test_unknown_destination(self, vehicles):
        x, _, _ = vehicles
        with pytest.raises(NotFound):
            ImportReconciler.import_from(999999, [x.pk])

    def test_unknown_source_writes_nothing(self, vehicles, make_option):
        x, _, z = vehicles
        make_option(x, 'Sunroof')
        with pytest.raises(NotFound):
            ImportReconciler.import_from(z.pk, [x.pk, 999999])
        assert not Option.objects.filter(vehicle=z).exists()


class TestImportLocking:

    def test_destination_row_locked(self, vehicles, make_option, monkeypatch):
        x, y, z = vehicles
        make_option(x, 'Sunroof')
        locked = []
        select_for_update = QuerySet.select_for_update

        def record(queryset, *args, **kwargs):
            locked.append(queryset.model)
            return select_for_update(queryset, *args, **kwargs)

        monkeypatch.setattr(QuerySet, 'select_for_update', record)
        ImportReconciler.import_from(z.pk, [x.pk])

        assert Vehicle in locked
