"""
Quote calculation for a trim/color/option selection.

Read-only: nothing here writes to the database.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Optional

from apps.leasing.conf import get_setting
from apps.leasing.exceptions import IneligibleSelection, NotFound
from apps.leasing.models import EXTERIOR, INTERIOR, Color, Option, Trim, Vehicle
from apps.leasing.services.price_matrix import PriceMatrixResolver

logger = logging.getLogger(__name__)


@dataclass
class PriceBreakdown:
    base_price: int
    trim_price: int
    exterior_color_price: int
    interior_color_price: int
    options_price: int
    total_price: int
    period: int
    deposit_ratio: int
    deposit: int
    monthly_payment: Optional[int]
    consult_required: bool
    has_additional_cost: bool

    def as_dict(self):
        return asdict(self)


class ConfigurationAggregator:
    """
    Combines a vehicle selection into a total price and payment summary.
    """

    @staticmethod
    def _check_color(vehicle, color, expected_type, slot):
        if color is None:
            return
        if color.vehicle_id != vehicle.pk:
            raise IneligibleSelection(
                f'Color {color.pk} does not belong to vehicle {vehicle.pk}',
                color_id=color.pk,
            )
        if color.color_type != expected_type:
            raise IneligibleSelection(
                f'Color {color.pk} is not an {expected_type.lower()} color',
                color_id=color.pk,
                slot=slot,
            )

    @staticmethod
    def price(
        vehicle: Vehicle,
        trim: Optional[Trim] = None,
        exterior_color: Optional[Color] = None,
        interior_color: Optional[Color] = None,
        options: Iterable[Option] = (),
        period: Optional[int] = None,
        deposit_ratio: int = 0
    ) -> PriceBreakdown:
        """
        Price a selection.

        Args:
            vehicle: Vehicle being configured
            trim: Selected trim; when given, every color and option must be
                eligible for it
            exterior_color: Color of type EXTERIOR
            interior_color: Color of type INTERIOR
            options: Selected options (duplicates are counted once)
            period: Contract length in months
            deposit_ratio: Deposit as a percentage of the total price

        Returns:
            PriceBreakdown; ``monthly_payment`` is None with
            ``consult_required`` set when the price matrix has no cell for
            (period, deposit_ratio).

        Raises:
            IneligibleSelection: if an item belongs to another vehicle, a
                color sits in the wrong slot, or the trim does not allow it.
        """
        if period is None:
            period = get_setting('DEFAULT_RENT_PERIOD')

        unique_options = list({option.pk: option for option in options}.values())

        if trim is not None and trim.vehicle_id != vehicle.pk:
            raise IneligibleSelection(
                f'Trim {trim.pk} does not belong to vehicle {vehicle.pk}',
                trim_id=trim.pk,
            )
        ConfigurationAggregator._check_color(vehicle, exterior_color, EXTERIOR, 'exterior')
        ConfigurationAggregator._check_color(vehicle, interior_color, INTERIOR, 'interior')
        for option in unique_options:
            if option.vehicle_id != vehicle.pk:
                raise IneligibleSelection(
                    f'Option {option.pk} does not belong to vehicle {vehicle.pk}',
                    option_id=option.pk,
                )

        trim_settings = {}
        if trim is not None:
            eligible_colors = set(trim.trim_colors.values_list('color_id', flat=True))
            for color in (exterior_color, interior_color):
                if color is not None and color.pk not in eligible_colors:
                    raise IneligibleSelection(
                        f'Color {color.pk} is not available for trim {trim.pk}',
                        color_id=color.pk,
                        trim_id=trim.pk,
                    )
            trim_settings = {
                setting.option_id: setting
                for setting in trim.trim_options.select_related('option')
            }
            for option in unique_options:
                if option.pk not in trim_settings:
                    raise IneligibleSelection(
                        f'Option {option.pk} is not available for trim {trim.pk}',
                        option_id=option.pk,
                        trim_id=trim.pk,
                    )

        option_prices = []
        for option in unique_options:
            setting = trim_settings.get(option.pk)
            option_prices.append(setting.effective_price if setting else option.price)

        trim_price = trim.price if trim else 0
        exterior_price = exterior_color.price if exterior_color else 0
        interior_price = interior_color.price if interior_color else 0
        options_price = sum(option_prices)
        total = vehicle.base_price + trim_price + exterior_price + interior_price + options_price

        monthly = PriceMatrixResolver.resolve(vehicle.rent_prices, period, deposit_ratio)
        if monthly is None:
            logger.debug(
                "No rent price for vehicle %s at %sm/%s%%", vehicle.pk, period, deposit_ratio
            )

        has_additional_cost = (
            (trim is not None and trim_price > vehicle.cheapest_trim_price)
            or exterior_price > 0
            or interior_price > 0
            or any(price > 0 for price in option_prices)
        )

        return PriceBreakdown(
            base_price=vehicle.base_price,
            trim_price=trim_price,
            exterior_color_price=exterior_price,
            interior_color_price=interior_price,
            options_price=options_price,
            total_price=total,
            period=int(period),
            deposit_ratio=int(deposit_ratio),
            deposit=total * int(deposit_ratio) // 100,
            monthly_payment=monthly,
            consult_required=monthly is None,
            has_additional_cost=has_additional_cost,
        )

    @staticmethod
    def _get(model, pk, label):
        if pk is None:
            return None
        try:
            return model.objects.get(pk=pk)
        except model.DoesNotExist:
            raise NotFound(f'{label} {pk} not found', **{f'{label}_id': pk})

    @staticmethod
    def price_selection(vehicle_id: int, selection: Dict) -> PriceBreakdown:
        """
        Resolve a selection of ids and price it.

        ``selection`` keys: trim_id, exterior_color_id, interior_color_id,
        option_ids, period, deposit_ratio. Unknown ids raise NotFound.
        """
        vehicle = ConfigurationAggregator._get(Vehicle, vehicle_id, 'vehicle')
        if vehicle is None:
            raise NotFound('vehicle id is required')

        option_ids = list(dict.fromkeys(selection.get('option_ids') or []))
        options = Option.objects.in_bulk(option_ids)
        missing = [pk for pk in option_ids if pk not in options]
        if missing:
            raise NotFound(f'option {missing[0]} not found', option_ids=missing)

        return ConfigurationAggregator.price(
            vehicle,
            trim=ConfigurationAggregator._get(Trim, selection.get('trim_id'), 'trim'),
            exterior_color=ConfigurationAggregator._get(
                Color, selection.get('exterior_color_id'), 'color'
            ),
            interior_color=ConfigurationAggregator._get(
                Color, selection.get('interior_color_id'), 'color'
            ),
            options=[options[pk] for pk in option_ids],
            period=selection.get('period'),
            deposit_ratio=selection.get('deposit_ratio') or 0,
        )

    @staticmethod
    def _cheapest(colors: List[Color], color_type: str) -> Optional[Color]:
        candidates = [color for color in colors if color.color_type == color_type]
        if not candidates:
            return None
        return min(candidates, key=lambda color: (color.price, color.sort_order, color.pk))

    @staticmethod
    def default_selection(vehicle: Vehicle, trim: Optional[Trim] = None) -> Dict:
        """
        Selection the quote page starts from.

        First trim by sort order, the free (or cheapest) eligible exterior and
        interior colors, and every option the trim includes by default.
        """
        if trim is None:
            trim = vehicle.trims.first()
        elif trim.vehicle_id != vehicle.pk:
            raise IneligibleSelection(
                f'Trim {trim.pk} does not belong to vehicle {vehicle.pk}',
                trim_id=trim.pk,
            )

        if trim is not None:
            colors = list(trim.colors.filter(is_available=True))
            option_ids = list(
                trim.trim_options.filter(is_included=True)
                .order_by('option__sort_order', 'option__name')
                .values_list('option_id', flat=True)
            )
        else:
            colors = list(vehicle.colors.filter(is_available=True))
            option_ids = []

        exterior = ConfigurationAggregator._cheapest(colors, EXTERIOR)
        interior = ConfigurationAggregator._cheapest(colors, INTERIOR)

        period = get_setting('DEFAULT_RENT_PERIOD')
        ratios = PriceMatrixResolver.available_deposit_ratios(vehicle.rent_prices, period)

        return {
            'trim_id': trim.pk if trim else None,
            'exterior_color_id': exterior.pk if exterior else None,
            'interior_color_id': interior.pk if interior else None,
            'option_ids': option_ids,
            'period': period,
            'deposit_ratio': ratios[0] if ratios else 0,
        }
