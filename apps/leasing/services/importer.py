"""
Copying colors, options and trims from other vehicles into one vehicle.

Names are deduplicated case-insensitively against the destination and
against everything the same batch already introduced.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import List, Sequence

from django.db import transaction

from apps.leasing.conf import get_setting
from apps.leasing.exceptions import NotFound
from apps.leasing.models import Color, Option, Trim, Vehicle
from apps.leasing.services.masters import MasterCatalog, name_key, next_sort_order

logger = logging.getLogger(__name__)


@dataclass
class CategoryImportResult:
    imported: int = 0
    skipped: int = 0
    skipped_names: List[str] = field(default_factory=list)

    def record_skip(self, label):
        self.skipped += 1
        self.skipped_names.append(label)

    def as_dict(self, preview=None):
        if preview is None:
            preview = get_setting('IMPORT_SKIPPED_PREVIEW')
        return {
            'imported': self.imported,
            'skipped': self.skipped,
            'skipped_names': self.skipped_names[:preview],
            'skipped_omitted': max(len(self.skipped_names) - preview, 0),
        }


@dataclass
class ImportResult:
    destination_id: int
    source_ids: List[int]
    colors: CategoryImportResult = field(default_factory=CategoryImportResult)
    options: CategoryImportResult = field(default_factory=CategoryImportResult)
    trims: CategoryImportResult = field(default_factory=CategoryImportResult)

    @property
    def imported_total(self):
        return self.colors.imported + self.options.imported + self.trims.imported

    @property
    def message(self):
        return (
            f'가져오기 완료: 색상 {self.colors.imported}개 추가 ({self.colors.skipped}개 중복), '
            f'옵션 {self.options.imported}개 추가 ({self.options.skipped}개 중복), '
            f'트림 {self.trims.imported}개 추가 ({self.trims.skipped}개 중복)'
        )

    def as_dict(self):
        data = asdict(self)
        for category in ('colors', 'options', 'trims'):
            data[category] = getattr(self, category).as_dict()
        data['message'] = self.message
        return data


class ImportReconciler:

    @staticmethod
    def _load(destination_id, source_ids):
        try:
            destination = Vehicle.objects.select_for_update().get(pk=destination_id)
        except Vehicle.DoesNotExist:
            raise NotFound(f'Vehicle {destination_id} not found', vehicle_id=destination_id)

        ordered_ids = [
            pk for pk in dict.fromkeys(source_ids) if pk != destination.pk
        ]
        found = Vehicle.objects.in_bulk(ordered_ids)
        missing = [pk for pk in ordered_ids if pk not in found]
        if missing:
            raise NotFound(f'Source vehicles {missing} not found', vehicle_ids=missing)
        return destination, [found[pk] for pk in ordered_ids]

    @staticmethod
    def _import_colors(destination, sources, result):
        seen = {
            (color.color_type, name_key(color.name))
            for color in destination.colors.all()
        }
        sort_order = next_sort_order(destination.colors.all())

        for source in sources:
            for color in source.colors.select_related('master').order_by('sort_order', 'pk'):
                key = (color.color_type, name_key(color.name))
                if key in seen:
                    result.record_skip(f'{color.name} ({color.get_color_type_display()})')
                    continue

                master = color.master
                if master is not None and master.brand_id != destination.brand_id:
                    master, _ = MasterCatalog.master_color(
                        destination.brand, master.color_type, master.name, master.hex_code
                    )

                Color.objects.create(
                    vehicle=destination,
                    master=master,
                    color_type=color.color_type,
                    name=color.name,
                    hex_code=color.hex_code,
                    price=color.price,
                    is_available=color.is_available,
                    sort_order=sort_order,
                )
                sort_order += 1
                seen.add(key)
                result.imported += 1

    @staticmethod
    def _import_options(destination, sources, result):
        seen = {name_key(option.name) for option in destination.options.all()}
        sort_order = next_sort_order(destination.options.all())

        for source in sources:
            for option in source.options.select_related('master').order_by('sort_order', 'pk'):
                key = name_key(option.name)
                if key in seen:
                    result.record_skip(option.name)
                    continue

                master = option.master
                if master is not None and master.brand_id != destination.brand_id:
                    master, _ = MasterCatalog.master_option(
                        destination.brand, master.name, master.description, master.category
                    )

                Option.objects.create(
                    vehicle=destination,
                    master=master,
                    name=option.name,
                    description=option.description,
                    category=option.category,
                    price=option.price,
                    is_available=option.is_available,
                    sort_order=sort_order,
                )
                sort_order += 1
                seen.add(key)
                result.imported += 1

    @staticmethod
    def _import_trims(destination, sources, result):
        # Eligibility sets are not copied: they point at the source's own items
        seen = {name_key(trim.name) for trim in destination.trims.all()}
        sort_order = next_sort_order(destination.trims.all())

        for source in sources:
            for trim in source.trims.order_by('sort_order', 'pk'):
                key = name_key(trim.name)
                if key in seen:
                    result.record_skip(trim.name)
                    continue

                Trim.objects.create(
                    vehicle=destination,
                    name=trim.name,
                    description=trim.description,
                    price=trim.price,
                    sort_order=sort_order,
                )
                sort_order += 1
                seen.add(key)
                result.imported += 1

    @staticmethod
    @transaction.atomic
    def import_from(
        destination_id: int,
        source_ids: Sequence[int],
        import_colors: bool = True,
        import_options: bool = True,
        import_trims: bool = False
    ) -> ImportResult:
        """
        Import items from source vehicles into the destination vehicle.

        Sources are processed in the given order; the first source to
        introduce a name wins and later ones are reported as skipped.

        Args:
            destination_id: Vehicle receiving the items
            source_ids: Vehicles to copy from (duplicates and the destination
                itself are ignored)
            import_colors: Copy exterior/interior colors
            import_options: Copy options
            import_trims: Copy trims, without their eligibility sets

        Returns:
            ImportResult with imported/skipped counts per category

        Raises:
            NotFound: destination or a source vehicle does not exist
        """
        destination, sources = ImportReconciler._load(destination_id, source_ids)
        result = ImportResult(
            destination_id=destination.pk,
            source_ids=[source.pk for source in sources],
        )

        if import_colors:
            ImportReconciler._import_colors(destination, sources, result.colors)
        if import_options:
            ImportReconciler._import_options(destination, sources, result.options)
        if import_trims:
            ImportReconciler._import_trims(destination, sources, result.trims)

        logger.info(
            "Imported into vehicle %s from %s: colors %s/%s, options %s/%s, trims %s/%s "
            "(imported/skipped)",
            destination.pk, result.source_ids,
            result.colors.imported, result.colors.skipped,
            result.options.imported, result.options.skipped,
            result.trims.imported, result.trims.skipped,
        )
        return result

