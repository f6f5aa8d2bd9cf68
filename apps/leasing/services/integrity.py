"""
Guarded deletes and trim eligibility replacement.

"Still referenced" checks run inside the deleting transaction against
locked rows, never against a count the caller saw earlier.
"""

import logging
from typing import Iterable, List, Mapping

from django.db import transaction

from apps.leasing.exceptions import (
    IneligibleSelection,
    NotFound,
    ReferentialIntegrityViolation,
)
from apps.leasing.models import (
    Color,
    MasterColor,
    MasterOption,
    Option,
    Trim,
    TrimColor,
    TrimOption,
)

logger = logging.getLogger(__name__)

MASTER_MODELS = {
    'color': MasterColor,
    'option': MasterOption,
}

ITEM_MODELS = {
    'color': Color,
    'option': Option,
}


def _model_for(models, kind):
    try:
        return models[kind]
    except KeyError:
        raise ValueError(f"Unknown kind '{kind}', expected one of {sorted(models)}")


def _locked(model, pk):
    try:
        return model.objects.select_for_update().get(pk=pk)
    except model.DoesNotExist:
        raise NotFound(f'{model.__name__} {pk} not found', id=pk)


class CatalogIntegrity:

    @staticmethod
    @transaction.atomic
    def delete_master(kind: str, master_id: int) -> None:
        """
        Delete a master color/option that no vehicle references.

        Raises:
            NotFound: unknown id
            ReferentialIntegrityViolation: vehicles still use the master
        """
        model = _model_for(MASTER_MODELS, kind)
        master = _locked(model, master_id)

        vehicle_count = master.get_vehicle_count()
        if vehicle_count:
            logger.warning(
                "Refused to delete %s %s: used by %s vehicles", kind, master_id, vehicle_count
            )
            raise ReferentialIntegrityViolation(
                f"'{master.name}' is used by {vehicle_count} vehicles",
                vehicle_count=vehicle_count,
            )
        master.delete()
        logger.info("Deleted master %s %s", kind, master_id)

    @staticmethod
    @transaction.atomic
    def delete_item(kind: str, item_id: int) -> None:
        """
        Delete a vehicle-scoped color/option not listed by any trim.

        Raises:
            NotFound: unknown id
            ReferentialIntegrityViolation: a trim still lists the item
        """
        model = _model_for(ITEM_MODELS, kind)
        item = _locked(model, item_id)

        trim_names = list(item.trims.values_list('name', flat=True))
        if trim_names:
            logger.warning(
                "Refused to delete %s %s: listed by trims %s", kind, item_id, trim_names
            )
            raise ReferentialIntegrityViolation(
                f"'{item.name}' is still available on trims: {', '.join(trim_names)}",
                trims=trim_names,
            )
        item.delete()
        logger.info("Deleted %s %s", kind, item_id)

    @staticmethod
    def _resolve_items(model, trim, ids):
        ids = list(dict.fromkeys(ids))
        items = model.objects.in_bulk(ids)
        missing = [pk for pk in ids if pk not in items]
        if missing:
            raise NotFound(f'{model.__name__} {missing} not found', ids=missing)
        foreign = [pk for pk in ids if items[pk].vehicle_id != trim.vehicle_id]
        if foreign:
            raise IneligibleSelection(
                f'{model.__name__} {foreign} do not belong to the vehicle of trim {trim.pk}',
                ids=foreign,
            )
        return [items[pk] for pk in ids]

    @staticmethod
    @transaction.atomic
    def set_trim_colors(trim: Trim, color_ids: Iterable[int]) -> List[TrimColor]:
        """Replace the colors a trim allows."""
        colors = CatalogIntegrity._resolve_items(Color, trim, color_ids)
        TrimColor.objects.filter(trim=trim).delete()
        return [TrimColor.objects.create(trim=trim, color=color) for color in colors]

    @staticmethod
    @transaction.atomic
    def set_trim_options(trim: Trim, settings: Iterable[Mapping]) -> List[TrimOption]:
        """
        Replace the options a trim allows.

        Args:
            trim: Trim being edited
            settings: Dicts with ``option_id`` and optional ``is_included``
                and ``price_override`` (None inherits the option's price)
        """
        settings = list(settings)
        by_id = {entry['option_id']: entry for entry in settings}
        options = CatalogIntegrity._resolve_items(Option, trim, [entry['option_id'] for entry in settings])

        TrimOption.objects.filter(trim=trim).delete()
        return [
            TrimOption.objects.create(
                trim=trim,
                option=option,
                is_included=bool(by_id[option.pk].get('is_included', False)),
                price_override=by_id[option.pk].get('price_override'),
            )
            for option in options
        ]
