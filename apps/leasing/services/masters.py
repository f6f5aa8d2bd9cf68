"""
Implicit maintenance of the brand-scoped master catalog.

Vehicle-scoped colors and options are added through here so that each one
is linked to its brand's master of the same name, creating the master the
first time a name shows up under a brand.
"""

import logging
from typing import Dict, Optional, Tuple

from django.db import transaction
from django.db.models import Max

from apps.leasing.exceptions import DuplicateName
from apps.leasing.models import (
    COLOR_TYPE_CHOICES,
    Brand,
    Color,
    MasterColor,
    MasterOption,
    Option,
    Vehicle,
)

logger = logging.getLogger(__name__)

COLOR_TYPES = {value for value, _label in COLOR_TYPE_CHOICES}


def name_key(name: str) -> str:
    """Case-insensitive identity of a catalog name; surrounding whitespace ignored."""
    return (name or '').strip().lower()


def next_sort_order(queryset) -> int:
    current = queryset.aggregate(value=Max('sort_order'))['value']
    return 0 if current is None else current + 1


class MasterCatalog:

    @staticmethod
    def _find(queryset, name):
        match = queryset.filter(name__iexact=name.strip()).first()
        if match is not None:
            return match
        # Stored names may carry stray whitespace
        key = name_key(name)
        for candidate in queryset:
            if name_key(candidate.name) == key:
                return candidate
        return None

    @staticmethod
    def master_color(
        brand: Brand,
        color_type: str,
        name: str,
        hex_code: str = ''
    ) -> Tuple[MasterColor, bool]:
        """Find the brand's master color by type and name, or create it."""
        queryset = MasterColor.objects.filter(brand=brand, color_type=color_type)
        master = MasterCatalog._find(queryset, name)
        if master is not None:
            return master, False
        master = MasterColor.objects.create(
            brand=brand,
            color_type=color_type,
            name=name.strip(),
            hex_code=hex_code or '',
            sort_order=next_sort_order(queryset),
        )
        logger.info("Created master color '%s' for brand %s", master.name, brand.pk)
        return master, True

    @staticmethod
    def master_option(
        brand: Brand,
        name: str,
        description: str = '',
        category: str = ''
    ) -> Tuple[MasterOption, bool]:
        """Find the brand's master option by name, or create it."""
        queryset = MasterOption.objects.filter(brand=brand)
        master = MasterCatalog._find(queryset, name)
        if master is not None:
            return master, False
        master = MasterOption.objects.create(
            brand=brand,
            name=name.strip(),
            description=description or '',
            category=category or '',
            sort_order=next_sort_order(queryset),
        )
        logger.info("Created master option '%s' for brand %s", master.name, brand.pk)
        return master, True

    @staticmethod
    @transaction.atomic
    def add_color(
        vehicle: Vehicle,
        color_type: str,
        name: str,
        hex_code: str = '',
        price: int = 0,
        is_available: bool = True
    ) -> Tuple[Color, bool]:
        """
        Add a color to a vehicle, or update the one with the same name.

        Returns:
            (color, created)
        """
        if color_type not in COLOR_TYPES:
            raise ValueError(f"Unknown color type '{color_type}'")
        name = (name or '').strip()
        if not name:
            raise ValueError('Color name is required')

        master, _ = MasterCatalog.master_color(vehicle.brand, color_type, name, hex_code)
        existing = MasterCatalog._find(
            Color.objects.filter(vehicle=vehicle, color_type=color_type), name
        )
        if existing is not None:
            existing.hex_code = hex_code or existing.hex_code
            existing.price = price
            existing.is_available = is_available
            if existing.master_id is None:
                existing.master = master
            existing.save()
            return existing, False

        color = Color.objects.create(
            vehicle=vehicle,
            master=master,
            color_type=color_type,
            name=name,
            hex_code=hex_code or master.hex_code,
            price=price,
            is_available=is_available,
            sort_order=next_sort_order(vehicle.colors.all()),
        )
        return color, True

    @staticmethod
    @transaction.atomic
    def add_option(
        vehicle: Vehicle,
        name: str,
        price: int = 0,
        description: str = '',
        category: str = '',
        is_available: bool = True
    ) -> Tuple[Option, bool]:
        """Option counterpart of add_color."""
        name = (name or '').strip()
        if not name:
            raise ValueError('Option name is required')

        master, _ = MasterCatalog.master_option(vehicle.brand, name, description, category)
        existing = MasterCatalog._find(Option.objects.filter(vehicle=vehicle), name)
        if existing is not None:
            existing.price = price
            existing.description = description or existing.description
            existing.category = category or existing.category
            existing.is_available = is_available
            if existing.master_id is None:
                existing.master = master
            existing.save()
            return existing, False

        option = Option.objects.create(
            vehicle=vehicle,
            master=master,
            name=name,
            description=description or master.description,
            category=category or master.category,
            price=price,
            is_available=is_available,
            sort_order=next_sort_order(vehicle.options.all()),
        )
        return option, True

    @staticmethod
    def _check_free_name(queryset, name, label):
        clash = MasterCatalog._find(queryset, name)
        if clash is not None:
            raise DuplicateName(
                f"This vehicle already has {label} '{clash.name}'",
                existing_id=clash.pk,
            )

    @staticmethod
    @transaction.atomic
    def rename_color(color: Color, name: str) -> Color:
        """
        Rename a vehicle color and move it to the brand master of the new name.

        Raises:
            ValueError: blank name
            DuplicateName: another color of the same vehicle and type has the name
        """
        name = (name or '').strip()
        if not name:
            raise ValueError('Color name is required')
        color = Color.objects.select_for_update().select_related('vehicle__brand').get(pk=color.pk)
        if name == color.name:
            return color

        siblings = Color.objects.filter(
            vehicle=color.vehicle_id, color_type=color.color_type
        ).exclude(pk=color.pk)
        MasterCatalog._check_free_name(siblings, name, 'a color')

        master, _ = MasterCatalog.master_color(
            color.vehicle.brand, color.color_type, name, color.hex_code
        )
        color.name = name
        color.master = master
        color.save(update_fields=['name', 'master'])
        logger.info("Renamed color %s to '%s'", color.pk, name)
        return color

    @staticmethod
    @transaction.atomic
    def rename_option(option: Option, name: str) -> Option:
        """Option counterpart of rename_color."""
        name = (name or '').strip()
        if not name:
            raise ValueError('Option name is required')
        option = Option.objects.select_for_update().select_related('vehicle__brand').get(pk=option.pk)
        if name == option.name:
            return option

        siblings = Option.objects.filter(vehicle=option.vehicle_id).exclude(pk=option.pk)
        MasterCatalog._check_free_name(siblings, name, 'an option')

        master, _ = MasterCatalog.master_option(
            option.vehicle.brand, name, option.description, option.category
        )
        option.name = name
        option.master = master
        option.save(update_fields=['name', 'master'])
        logger.info("Renamed option %s to '%s'", option.pk, name)
        return option

    @staticmethod
    def _link(colors, options) -> Dict[str, int]:
        stats = {'colors_linked': 0, 'options_linked': 0, 'masters_created': 0}

        for color in colors:
            master, created = MasterCatalog.master_color(
                color.vehicle.brand, color.color_type, color.name, color.hex_code
            )
            color.master = master
            color.save(update_fields=['master'])
            stats['colors_linked'] += 1
            stats['masters_created'] += int(created)

        for option in options:
            master, created = MasterCatalog.master_option(
                option.vehicle.brand, option.name, option.description, option.category
            )
            option.master = master
            option.save(update_fields=['master'])
            stats['options_linked'] += 1
            stats['masters_created'] += int(created)

        return stats

    @staticmethod
    @transaction.atomic
    def link_masters(brand: Optional[Brand] = None) -> Dict[str, int]:
        """
        Attach every unlinked vehicle-scoped color/option to its brand master.

        Masters are created where the brand has none of that name yet.
        """
        colors = Color.objects.filter(master__isnull=True).select_related('vehicle__brand')
        options = Option.objects.filter(master__isnull=True).select_related('vehicle__brand')
        if brand is not None:
            colors = colors.filter(vehicle__brand=brand)
            options = options.filter(vehicle__brand=brand)

        stats = MasterCatalog._link(colors, options)
        logger.info(
            "Linked %s colors and %s options (%s masters created)",
            stats['colors_linked'], stats['options_linked'], stats['masters_created'],
        )
        return stats

    @staticmethod
    @transaction.atomic
    def relink_vehicle(vehicle: Vehicle) -> Dict[str, int]:
        """
        Point a vehicle's colors/options at masters of the vehicle's current brand.

        Used after a vehicle moves to another brand; items linked to a master
        of any other brand are re-linked by name, creating masters as needed.
        """
        colors = (
            Color.objects.filter(vehicle=vehicle, master__isnull=False)
            .exclude(master__brand=vehicle.brand_id)
            .select_related('vehicle__brand')
        )
        options = (
            Option.objects.filter(vehicle=vehicle, master__isnull=False)
            .exclude(master__brand=vehicle.brand_id)
            .select_related('vehicle__brand')
        )

        stats = MasterCatalog._link(colors, options)
        logger.info(
            "Re-linked vehicle %s to brand %s: %s colors, %s options (%s masters created)",
            vehicle.pk, vehicle.brand_id,
            stats['colors_linked'], stats['options_linked'], stats['masters_created'],
        )
        return stats
