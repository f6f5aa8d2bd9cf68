"""Tests for guarded deletes and trim eligibility edits."""

import pytest
from django.db.models import RestrictedError

from apps.leasing.exceptions import IneligibleSelection, NotFound, ReferentialIntegrityViolation
from apps.leasing.models import (
    EXTERIOR,
    Color,
    MasterColor,
    MasterOption,
    Option,
    Trim,
    TrimColor,
    TrimOption,
)
from apps.leasing.services.integrity import CatalogIntegrity

pytestmark = pytest.mark.django_db


class TestDeleteMaster:

    def test_referenced_master_kept(self, vehicle, make_color, master_color):
        master = master_color('White')
        make_color(vehicle, 'White', master=master)
        with pytest.raises(ReferentialIntegrityViolation) as excinfo:
            CatalogIntegrity.delete_master('color', master.pk)
        assert excinfo.value.details['vehicle_count'] == 1
        assert MasterColor.objects.filter(pk=master.pk).exists()

    def test_unreferenced_master_deleted(self, master_option):
        master = master_option('HUD')
        CatalogIntegrity.delete_master('option', master.pk)
        assert not MasterOption.objects.filter(pk=master.pk).exists()

    def test_count_checked_at_delete_time(self, vehicle, make_option, master_option):
        master = master_option('HUD')
        assert master.get_vehicle_count() == 0
        make_option(vehicle, 'HUD', master=master)
        with pytest.raises(ReferentialIntegrityViolation):
            CatalogIntegrity.delete_master('option', master.pk)

    def test_unknown_master(self, db):
        with pytest.raises(NotFound):
            CatalogIntegrity.delete_master('color', 999999)

    def test_storage_backstop(self, vehicle, make_color, master_color):
        master = master_color('White')
        make_color(vehicle, 'White', master=master)
        with pytest.raises(RestrictedError):
            master.delete()


class TestDeleteItem:

    def test_item_on_trim_kept(self, configured):
        color = configured['exterior']
        with pytest.raises(ReferentialIntegrityViolation) as excinfo:
            CatalogIntegrity.delete_item('color', color.pk)
        assert excinfo.value.details['trims'] == ['프리미엄']
        assert Color.objects.filter(pk=color.pk).exists()

    def test_item_removed_from_trims_first(self, configured):
        option = configured['options'][0]
        TrimOption.objects.filter(option=option).delete()
        CatalogIntegrity.delete_item('option', option.pk)
        assert not Option.objects.filter(pk=option.pk).exists()

    def test_storage_backstop(self, configured):
        with pytest.raises(RestrictedError):
            configured['interior'].delete()

    def test_vehicle_delete_cascades(self, configured):
        vehicle = configured['vehicle']
        vehicle.delete()
        assert not Trim.objects.exists()
        assert not Color.objects.exists()
        assert not TrimColor.objects.exists()


class TestTrimEligibility:

    def test_set_trim_colors_replaces(self, configured, make_color):
        trim = configured['trim']
        new_color = make_color(configured['vehicle'], '레드', EXTERIOR)
        CatalogIntegrity.set_trim_colors(trim, [new_color.pk])
        assert list(trim.trim_colors.values_list('color_id', flat=True)) == [new_color.pk]

    def test_set_trim_colors_rejects_foreign(self, configured, make_vehicle, make_color):
        trim = configured['trim']
        foreign = make_color(make_vehicle('그랜저'), '레드', EXTERIOR)
        with pytest.raises(IneligibleSelection):
            CatalogIntegrity.set_trim_colors(trim, [configured['exterior'].pk, foreign.pk])
        assert trim.trim_colors.count() == 2

    def test_set_trim_colors_unknown(self, configured):
        with pytest.raises(NotFound):
            CatalogIntegrity.set_trim_colors(configured['trim'], [999999])

    def test_set_trim_options(self, configured):
        trim = configured['trim']
        sunroof, camera = configured['options']
        CatalogIntegrity.set_trim_options(trim, [
            {'option_id': sunroof.pk, 'is_included': True},
            {'option_id': camera.pk, 'price_override': 150000},
        ])
        settings = {entry.option_id: entry for entry in trim.trim_options.all()}
        assert settings[sunroof.pk].is_included is True
        assert settings[sunroof.pk].effective_price == 0
        assert settings[camera.pk].price_override == 150000
        assert settings[camera.pk].effective_price == 150000

    def test_set_trim_options_empty(self, configured):
        CatalogIntegrity.set_trim_options(configured['trim'], [])
        assert configured['trim'].trim_options.count() == 0

    def test_join_record_rejects_other_vehicle(self, configured, make_vehicle, make_color):
        foreign = make_color(make_vehicle('그랜저'), '레드', EXTERIOR)
        with pytest.raises(IneligibleSelection):
            TrimColor.objects.create(trim=configured['trim'], color=foreign)
