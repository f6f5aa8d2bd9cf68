"""
Monthly payment lookup against a vehicle's sparse price matrix.

A matrix maps cell names of the form ``rentPrice{period}_{depositRatio}``
(e.g. ``rentPrice60_0``, ``rentPrice48_30``) to a positive integer monthly
payment. Missing or non-positive cells mean "no price, consult required".
Deposit ratios are never assumed: whatever cells exist are consulted.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from apps.leasing.conf import get_setting

CELL_PREFIX = 'rentPrice'
CELL_PATTERN = re.compile(r'^rentPrice(\d+)_(\d+)$')

STARTING_PERIOD = 60
STARTING_DEPOSIT_RATIO = 0


class PriceMatrixResolver:
    """
    Stateless queries over a price matrix.
    Every method is pure and safe to call concurrently.
    """

    @staticmethod
    def cell_name(period: int, deposit_ratio: int) -> str:
        return f'{CELL_PREFIX}{int(period)}_{int(deposit_ratio)}'

    @staticmethod
    def parse_cell_name(name: str) -> Optional[Tuple[int, int]]:
        """Return (period, deposit_ratio) for a cell name, or None if malformed."""
        match = CELL_PATTERN.match(name or '')
        if not match:
            return None
        return int(match.group(1)), int(match.group(2))

    @staticmethod
    def _usable(value: Any) -> Optional[int]:
        """Coerce a raw cell value to a positive int, or None."""
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            value = value.strip().replace(',', '')
            if not value:
                return None
        try:
            amount = int(value)
        except (TypeError, ValueError):
            return None
        if isinstance(value, float) and value != amount:
            return None
        return amount if amount > 0 else None

    @staticmethod
    def normalize(matrix: Optional[Mapping[str, Any]]) -> Dict[str, int]:
        """
        Clean a raw matrix for storage.

        Drops malformed cell names and absent/non-positive values, and
        coerces integer-like values (``"450,000"``, ``450000.0``) to int.
        """
        cleaned = {}
        for name, value in (matrix or {}).items():
            cell = PriceMatrixResolver.parse_cell_name(name)
            amount = PriceMatrixResolver._usable(value)
            if cell is None or amount is None:
                continue
            cleaned[PriceMatrixResolver.cell_name(*cell)] = amount
        return cleaned

    @staticmethod
    def resolve(
        matrix: Optional[Mapping[str, Any]],
        period: int,
        deposit_ratio: int
    ) -> Optional[int]:
        """
        Exact lookup of the (period, deposit_ratio) cell.

        Returns the monthly payment, or None when the cell is absent or
        non-positive. Never approximates from neighbouring cells.
        """
        if not matrix:
            return None
        name = PriceMatrixResolver.cell_name(period, deposit_ratio)
        return PriceMatrixResolver._usable(matrix.get(name))

    @staticmethod
    def cells(matrix: Optional[Mapping[str, Any]]) -> Dict[Tuple[int, int], int]:
        """Map every usable cell to its (period, deposit_ratio) key."""
        return {
            PriceMatrixResolver.parse_cell_name(name): amount
            for name, amount in PriceMatrixResolver.normalize(matrix).items()
        }

    @staticmethod
    def available_deposit_ratios(
        matrix: Optional[Mapping[str, Any]],
        period: int
    ) -> List[int]:
        """Deposit ratios with a usable price for the period, ascending."""
        return sorted(
            ratio for (cell_period, ratio) in PriceMatrixResolver.cells(matrix)
            if cell_period == int(period)
        )

    @staticmethod
    def is_period_usable(matrix: Optional[Mapping[str, Any]], period: int) -> bool:
        return bool(PriceMatrixResolver.available_deposit_ratios(matrix, period))

    @staticmethod
    def available_periods(
        matrix: Optional[Mapping[str, Any]],
        periods: Optional[List[int]] = None
    ) -> List[int]:
        """Supported contract periods that have at least one usable price."""
        if periods is None:
            periods = get_setting('RENT_PERIODS')
        return [
            period for period in sorted(periods)
            if PriceMatrixResolver.is_period_usable(matrix, period)
        ]

    @staticmethod
    def starting_payment(matrix: Optional[Mapping[str, Any]]) -> Optional[int]:
        """
        The "from" price shown on listing cards.

        Uses the 60-month / 0% deposit cell and falls back to the lowest
        usable cell when that one is missing.
        """
        amount = PriceMatrixResolver.resolve(
            matrix, STARTING_PERIOD, STARTING_DEPOSIT_RATIO
        )
        if amount is not None:
            return amount
        cells = PriceMatrixResolver.cells(matrix)
        return min(cells.values()) if cells else None
