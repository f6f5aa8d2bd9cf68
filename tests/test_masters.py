"""Tests for implicit master catalog maintenance."""

import pytest

from apps.leasing.exceptions import DuplicateName
from apps.leasing.models import EXTERIOR, INTERIOR, Color, MasterColor, MasterOption
from apps.leasing.services.masters import MasterCatalog

pytestmark = pytest.mark.django_db


class TestAddColor:

    def test_creates_master_on_first_use(self, vehicle):
        color, created = MasterCatalog.add_color(vehicle, EXTERIOR, ' Pearl White ', '#fafafa', 80000)
        assert created is True
        assert color.name == 'Pearl White'
        assert color.master.name == 'Pearl White'
        assert color.master.brand_id == vehicle.brand_id

    def test_reuses_master_case_insensitively(self, vehicle, make_vehicle, master_color):
        master = master_color('Pearl White')
        color, _ = MasterCatalog.add_color(make_vehicle('그랜저'), EXTERIOR, 'pearl white')
        assert color.master_id == master.pk
        assert MasterColor.objects.count() == 1

    def test_same_name_updates_existing_row(self, vehicle):
        first, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'Black', price=0)
        second, created = MasterCatalog.add_color(vehicle, EXTERIOR, 'BLACK', price=50000)
        assert created is False
        assert second.pk == first.pk
        assert Color.objects.get(pk=first.pk).price == 50000

    def test_same_name_other_type_is_separate(self, vehicle):
        MasterCatalog.add_color(vehicle, EXTERIOR, 'Black')
        MasterCatalog.add_color(vehicle, INTERIOR, 'Black')
        assert vehicle.colors.count() == 2
        assert MasterColor.objects.count() == 2

    def test_rejects_blank_name(self, vehicle):
        with pytest.raises(ValueError):
            MasterCatalog.add_color(vehicle, EXTERIOR, '   ')

    def test_rejects_unknown_type(self, vehicle):
        with pytest.raises(ValueError):
            MasterCatalog.add_color(vehicle, 'ROOF', 'Black')


class TestAddOption:

    def test_creates_and_links(self, vehicle):
        option, created = MasterCatalog.add_option(vehicle, 'HUD', 1000000, category='convenience')
        assert created is True
        assert option.master.category == 'convenience'
        assert option.sort_order == 0

    def test_appends_sort_order(self, vehicle):
        MasterCatalog.add_option(vehicle, 'HUD')
        option, _ = MasterCatalog.add_option(vehicle, 'Sunroof')
        assert option.sort_order == 1


class TestLinkMasters:

    def test_links_unlinked_items(self, vehicle, make_vehicle, make_color, make_option, master_option):
        existing = master_option('Sunroof')
        make_option(vehicle, 'sunroof')
        make_color(vehicle, 'White', EXTERIOR)
        make_color(make_vehicle('그랜저'), 'white', EXTERIOR)

        stats = MasterCatalog.link_masters()

        assert stats == {'colors_linked': 2, 'options_linked': 1, 'masters_created': 1}
        assert vehicle.options.get().master_id == existing.pk
        assert MasterColor.objects.count() == 1
        assert not Color.objects.filter(master__isnull=True).exists()

    def test_limited_to_brand(self, vehicle, make_vehicle, make_option, other_brand):
        make_option(vehicle, 'HUD')
        make_option(make_vehicle('K5', brand=other_brand), 'HUD')

        stats = MasterCatalog.link_masters(other_brand)

        assert stats['options_linked'] == 1
        assert MasterOption.objects.get().brand_id == other_brand.pk
        assert vehicle.options.get().master_id is None


class TestRename:

    def test_rename_color_moves_to_master_of_new_name(self, vehicle):
        color, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        old_master = color.master

        color = MasterCatalog.rename_color(color, ' Pearl White ')

        assert color.name == 'Pearl White'
        assert color.master.name == 'Pearl White'
        assert color.master.pk != old_master.pk
        assert MasterColor.objects.filter(pk=old_master.pk).exists()

    def test_rename_color_rejects_sibling_name(self, vehicle):
        white, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        MasterCatalog.add_color(vehicle, EXTERIOR, 'Black')

        with pytest.raises(DuplicateName):
            MasterCatalog.rename_color(white, 'BLACK')

        white.refresh_from_db()
        assert white.name == 'White'

    def test_rename_color_allows_name_used_by_other_type(self, vehicle):
        white, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        MasterCatalog.add_color(vehicle, INTERIOR, 'Black')

        assert MasterCatalog.rename_color(white, 'Black').name == 'Black'

    def test_rename_color_case_change_of_own_name(self, vehicle):
        white, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        assert MasterCatalog.rename_color(white, 'WHITE').name == 'WHITE'

    def test_rename_option_rejects_sibling_name(self, vehicle):
        hud, _ = MasterCatalog.add_option(vehicle, 'HUD')
        MasterCatalog.add_option(vehicle, 'Sunroof')

        with pytest.raises(DuplicateName):
            MasterCatalog.rename_option(hud, ' sunroof')

    def test_rename_rejects_blank(self, vehicle):
        hud, _ = MasterCatalog.add_option(vehicle, 'HUD')
        with pytest.raises(ValueError):
            MasterCatalog.rename_option(hud, '  ')


class TestRelinkVehicle:

    def test_relinks_to_new_brand(self, vehicle, other_brand, master_color):
        kia_white = master_color('White', target_brand=other_brand)
        color, _ = MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        option, _ = MasterCatalog.add_option(vehicle, 'Sunroof')
        hyundai_white = color.master

        vehicle.brand = other_brand
        vehicle.save()
        stats = MasterCatalog.relink_vehicle(vehicle)

        color.refresh_from_db()
        option.refresh_from_db()
        assert stats == {'colors_linked': 1, 'options_linked': 1, 'masters_created': 1}
        assert color.master == kia_white
        assert option.master.brand == other_brand
        assert MasterColor.objects.filter(pk=hyundai_white.pk).exists()

    def test_nothing_to_do_on_same_brand(self, vehicle):
        MasterCatalog.add_color(vehicle, EXTERIOR, 'White')
        stats = MasterCatalog.relink_vehicle(vehicle)
        assert stats['colors_linked'] == 0
