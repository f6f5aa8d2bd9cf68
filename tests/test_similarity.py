"""Tests for near-duplicate detection."""

import pytest

from apps.leasing.models import EXTERIOR, INTERIOR
from apps.leasing.services.similarity import SimilarityDetector


def _items(*names):
    return [{'id': index + 1, 'name': name} for index, name in enumerate(names)]


class TestFindSimilarPairs:

    def test_whitespace_and_case_variants(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('Pearl White', 'pearl white '))
        assert pairs == [(1, 2)]

    def test_substring(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('선루프', '파노라마 선루프'))
        assert pairs == [(1, 2)]

    def test_shared_prefix_with_small_length_difference(self):
        # "techpackage1" vs "techpackage2": equal length, shared prefix of 11
        pairs = SimilarityDetector.find_similar_pairs(_items('Tech Package 1', 'Tech Package 2'))
        assert pairs == [(1, 2)]

    def test_length_difference_over_two(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('Black', 'Blue Metallic'))
        assert pairs == []

    def test_different_prefix(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('Gray', 'Grey'))
        assert pairs == []

    def test_never_pairs_item_with_itself(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('White'))
        assert pairs == []

    def test_each_pair_reported_once_in_input_order(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('HUD', 'Sunroof', 'hud'))
        assert pairs == [(1, 3)]

    def test_blank_names_ignored(self):
        pairs = SimilarityDetector.find_similar_pairs(_items('   ', 'White', ''))
        assert pairs == []

    def test_symmetric(self):
        forward = SimilarityDetector.find_similar_pairs(_items('Snow White', 'Snow White Pearl'))
        backward = SimilarityDetector.find_similar_pairs(
            [{'id': 2, 'name': 'Snow White Pearl'}, {'id': 1, 'name': 'Snow White'}]
        )
        assert {frozenset(pair) for pair in forward} == {frozenset(pair) for pair in backward}


@pytest.mark.django_db
class TestForBrand:

    def test_colors_grouped_by_type(self, master_color, master_option):
        exterior = master_color('Black', EXTERIOR)
        interior = master_color('Black ', INTERIOR)
        exterior_twin = master_color('black', EXTERIOR)
        first = master_option('Sunroof')
        second = master_option('Sun roof')

        pairs = SimilarityDetector.for_brand(exterior.brand)

        assert [set(pair) for pair in pairs['colors']] == [{exterior.pk, exterior_twin.pk}]
        assert interior.pk not in {pk for pair in pairs['colors'] for pk in pair}
        assert [set(pair) for pair in pairs['options']] == [{first.pk, second.pk}]

    def test_other_brands_ignored(self, master_color, other_brand):
        mine = master_color('White')
        master_color('White', target_brand=other_brand)
        assert SimilarityDetector.for_brand(mine.brand)['colors'] == []
