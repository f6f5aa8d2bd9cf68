"""
Merging duplicate master catalog entries of one brand.

Only the master pointer of vehicle-scoped rows changes. Their identity,
price and trim eligibility stay as they are.
"""

import logging
from dataclasses import asdict, dataclass
from typing import List, Sequence

from django.db import DatabaseError, transaction

from apps.leasing.exceptions import MergeConflict
from apps.leasing.models import Color, MasterColor, MasterOption, Option

logger = logging.getLogger(__name__)

COLOR = 'color'
OPTION = 'option'

KINDS = {
    COLOR: (MasterColor, Color),
    OPTION: (MasterOption, Option),
}


@dataclass
class MergeResult:
    kind: str
    target_id: int
    merged_ids: List[int]
    rewritten_count: int
    deleted_count: int
    target_vehicle_count: int

    def as_dict(self):
        return asdict(self)


class CatalogMerger:

    @staticmethod
    def _models(kind):
        try:
            return KINDS[kind]
        except KeyError:
            raise ValueError(f"Unknown merge kind '{kind}', expected one of {sorted(KINDS)}")

    @staticmethod
    def _lock(master_model, brand, target_id, source_ids):
        """Lock target and sources, checking they still exist within the brand."""
        wanted = [target_id] + list(source_ids)
        masters = {
            master.pk: master
            for master in master_model.objects.select_for_update().filter(pk__in=wanted)
        }

        missing = [pk for pk in wanted if pk not in masters]
        if missing:
            raise MergeConflict(
                f'{master_model.__name__} {missing} no longer exist',
                missing_ids=missing,
            )

        foreign = [pk for pk in wanted if masters[pk].brand_id != brand.pk]
        if foreign:
            raise MergeConflict(
                f'{master_model.__name__} {foreign} do not belong to brand {brand.pk}',
                foreign_ids=foreign,
            )

        target = masters[target_id]
        if master_model is MasterColor:
            mismatched = [
                pk for pk in source_ids
                if masters[pk].color_type != target.color_type
            ]
            if mismatched:
                raise MergeConflict(
                    f'Colors {mismatched} are not {target.get_color_type_display()} colors',
                    mismatched_ids=mismatched,
                )
        return target

    @staticmethod
    def _delete_sources(master_model, source_ids):
        _, per_model = master_model.objects.filter(pk__in=source_ids).delete()
        return per_model.get(master_model._meta.label, 0)

    @staticmethod
    def merge(brand, kind: str, target_id: int, source_ids: Sequence[int]) -> MergeResult:
        """
        Merge source masters into the target master.

        Args:
            brand: Brand owning every master involved
            kind: 'color' or 'option'
            target_id: Surviving master
            source_ids: Masters to fold into the target and delete

        Returns:
            MergeResult with the number of rewritten vehicle-scoped rows,
            deleted masters and the target's vehicle count after the merge

        Raises:
            ValueError: no sources given, or the target is among them
            MergeConflict: a master is missing, belongs to another brand or
                (for colors) has a different type, or the database refused a
                step. Nothing is applied in that case.
        """
        master_model, item_model = CatalogMerger._models(kind)

        source_ids = list(dict.fromkeys(source_ids))
        if not source_ids:
            raise ValueError('At least one source id is required')
        if target_id in source_ids:
            raise ValueError('Target id cannot be one of the source ids')

        try:
            with transaction.atomic():
                target = CatalogMerger._lock(master_model, brand, target_id, source_ids)

                rewritten = item_model.objects.filter(
                    master_id__in=source_ids
                ).update(master=target)

                deleted = CatalogMerger._delete_sources(master_model, source_ids)

                result = MergeResult(
                    kind=kind,
                    target_id=target.pk,
                    merged_ids=source_ids,
                    rewritten_count=rewritten,
                    deleted_count=deleted,
                    target_vehicle_count=target.get_vehicle_count(),
                )
        except DatabaseError as exc:
            logger.warning(
                "Merge of %s %s into %s failed: %s", kind, source_ids, target_id, exc
            )
            raise MergeConflict(f'Merge failed and was rolled back: {exc}') from exc

        logger.info(
            "Merged %s %s into %s (brand %s): %s rows rewritten, %s masters deleted",
            kind, source_ids, target_id, brand.pk, rewritten, deleted,
        )
        return result
