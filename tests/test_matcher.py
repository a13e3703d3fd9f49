# Tests for fuzzy product matching

import pytest
from orderline.catalog import CatalogItem
from orderline.product_matcher import (
    fuzzy_match,
    levenshtein_distance,
    similarity,
    similarity_threshold,
)


def make_catalog(*names):
    return [CatalogItem(id=f"item-{i}", name=name) for i, name in enumerate(names)]


class TestLevenshtein:
    """Test edit distance helpers"""

    def test_known_distances(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("flaw", "lawn") == 2
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3

    def test_identical_strings(self):
        """Twins have distance 0 and similarity 1"""
        assert levenshtein_distance("cucumber", "cucumber") == 0
        assert similarity("cucumber", "cucumber") == 1.0

    def test_empty_strings(self):
        assert similarity("", "") == 0.0

    def test_threshold_by_length(self):
        assert similarity_threshold(8) == 0.4
        assert similarity_threshold(7) == 0.5


class TestFuzzyMatch:
    """Test tiered catalog matching"""

    def setup_method(self):
        self.catalog = make_catalog(
            "Coca-Cola Can",
            "Coke",
            "Bell Pepper Red",
            "Cucumber",
            "Tomatoes",
            "Mozzarella Cheese",
        )

    def test_exact_match_wins(self):
        """An exact normalized name beats earlier partial candidates"""
        assert fuzzy_match("coke", self.catalog).name == "Coke"
        assert fuzzy_match("2 cans of Coke", self.catalog) is not None

    def test_exact_ignores_units_and_plurals(self):
        assert fuzzy_match("Cucumbers", self.catalog).name == "Cucumber"
        assert fuzzy_match("coca cola", self.catalog).name == "Coca-Cola Can"

    def test_word_overlap(self):
        """All search words present in the item, in any order"""
        assert fuzzy_match("red bell pepper", self.catalog).name == "Bell Pepper Red"
        assert fuzzy_match("cheese", self.catalog).name == "Mozzarella Cheese"

    def test_word_overlap_item_subset(self):
        """All item words present in the search"""
        assert fuzzy_match("fresh cucumber slices", self.catalog).name == "Cucumber"

    def test_substring(self):
        """One name contained in the other once spaces are removed"""
        assert fuzzy_match("Tomato", self.catalog).name == "Tomatoes"
        assert fuzzy_match("mozza", self.catalog).name == "Mozzarella Cheese"

    def test_levenshtein_typo(self):
        """A typo is caught by the edit-distance tier"""
        assert fuzzy_match("cucmber", self.catalog).name == "Cucumber"
        assert fuzzy_match("mozarela chese", self.catalog).name == "Mozzarella Cheese"

    def test_not_found(self):
        assert fuzzy_match("xyz123notfound", self.catalog) is None

    def test_empty_catalog(self):
        assert fuzzy_match("xyz123notfound", []) is None
        assert fuzzy_match("coke", []) is None

    def test_empty_search(self):
        """A search that normalizes to nothing matches nothing"""
        assert fuzzy_match("the", self.catalog) is None
        assert fuzzy_match("", self.catalog) is None

    def test_empty_item_names_never_match(self):
        """Items whose names normalize to nothing are skipped"""
        catalog = make_catalog("Pack", "Cucumber")
        assert fuzzy_match("cucumber", catalog).name == "Cucumber"
        assert fuzzy_match("dragonfruit", catalog) is None

        catalog = make_catalog("Pack", "Coca Cola Zero")
        assert fuzzy_match("coca cola", catalog).name == "Coca Cola Zero"

    def test_long_threshold_boundary_accepted(self):
        """Similarity of exactly 0.4 on a 10 character pair is accepted"""
        catalog = make_catalog("abcdefghij")
        assert similarity("abcdxyzuvw", "abcdefghij") == 0.4
        assert fuzzy_match("abcdxyzuvw", catalog).name == "abcdefghij"

    def test_long_threshold_below_rejected(self):
        """Similarity below 0.4 is rejected"""
        catalog = make_catalog("abcdefghij")
        assert similarity("abcxyzuvwq", "abcdefghij") < 0.4
        assert fuzzy_match("abcxyzuvwq", catalog) is None

    def test_short_threshold(self):
        """Pairs shorter than 8 characters need 0.5"""
        catalog = make_catalog("abcdef")
        assert fuzzy_match("abcxyz", catalog).name == "abcdef"
        catalog = make_catalog("abcdefg")
        assert 0.4 < similarity("abcxyzw", "abcdefg") < 0.5
        assert fuzzy_match("abcxyzw", catalog) is None

    def test_tie_keeps_first(self):
        """Equal similarity keeps the earlier catalog entry"""
        catalog = make_catalog("abcdxx", "abcdyy")
        assert fuzzy_match("abcdzz", catalog).name == "abcdxx"

    def test_best_similarity_wins(self):
        """A closer later item replaces an earlier weaker one"""
        catalog = make_catalog("abcdxx", "abcdez")
        assert fuzzy_match("abcdef", catalog).name == "abcdez"

    def test_catalog_not_mutated(self):
        before = list(self.catalog)
        fuzzy_match("cucmber", self.catalog)
        assert self.catalog == before


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
