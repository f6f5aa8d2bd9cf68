"""
Advisory near-duplicate detection for master catalog entries.
"""

import re
from typing import Dict, Iterable, List, Mapping, Tuple

from apps.leasing.models import COLOR_TYPE_CHOICES, MasterColor, MasterOption

WHITESPACE = re.compile(r'\s+')


class SimilarityDetector:

    @staticmethod
    def normalize(name: str) -> str:
        """Remove all whitespace and lowercase."""
        return WHITESPACE.sub('', name or '').lower()

    @staticmethod
    def is_similar(first: str, second: str) -> bool:
        """
        Compare two already-normalized names.

        Similar when one contains the other, or when their lengths differ by
        at most 2 and they share a prefix of ``min(len) - 1`` characters.
        """
        if not first or not second:
            return False
        if first in second or second in first:
            return True
        if abs(len(first) - len(second)) > 2:
            return False
        prefix = min(len(first), len(second)) - 1
        return first[:prefix] == second[:prefix]

    @staticmethod
    def find_similar_pairs(items: Iterable[Mapping]) -> List[Tuple[int, int]]:
        """
        Flag likely-duplicate pairs.

        Args:
            items: Dicts with ``id`` and ``name`` keys

        Returns:
            List of (id, id) tuples, each unordered pair once, in input order.
            Items whose name is blank after normalization are ignored.
        """
        normalized = [
            (item['id'], SimilarityDetector.normalize(item['name']))
            for item in items
        ]
        normalized = [(pk, name) for pk, name in normalized if name]

        pairs = []
        for index, (first_id, first_name) in enumerate(normalized):
            for second_id, second_name in normalized[index + 1:]:
                if first_id == second_id:
                    continue
                if SimilarityDetector.is_similar(first_name, second_name):
                    pairs.append((first_id, second_id))
        return pairs

    @staticmethod
    def for_brand(brand) -> Dict[str, List[Tuple[int, int]]]:
        """
        Similar master pairs of a brand.

        Colors are only compared within the same type, so an exterior and an
        interior color are never proposed together.
        """
        color_pairs = []
        for color_type, _label in COLOR_TYPE_CHOICES:
            masters = MasterColor.objects.filter(
                brand=brand, color_type=color_type
            ).values('id', 'name')
            color_pairs.extend(SimilarityDetector.find_similar_pairs(masters))

        options = MasterOption.objects.filter(brand=brand).values('id', 'name')
        return {
            'colors': color_pairs,
            'options': SimilarityDetector.find_similar_pairs(options),
        }
