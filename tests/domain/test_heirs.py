"""
Tests for Heir and the HeirForest arena.

Covers:
- Heir attribute validation and coercion
- Relationship slot metadata
- Forest construction, insertion, removal and queries
- Deep nesting (iterative traversal)
"""

import pytest

from succession_kernel.domain.heirs import Heir, HeirForest, Relationship
from succession_kernel.exceptions import (
    AmbiguousRelationshipError,
    DuplicateHeirError,
    HeirError,
    HeirNotFoundError,
    InvalidHeirError,
)
from tests.heir_builders import deceased, living


class TestHeirValidation:
    def test_string_relationship_is_coerced(self):
        heir = Heir(heir_id="c1", name="Ana", relationship="CHILD")
        assert heir.relationship is Relationship.CHILD

    def test_unknown_relationship_rejected(self):
        with pytest.raises(InvalidHeirError, match="unknown relationship"):
            Heir(heir_id="x", name="X", relationship="COUSIN")

    def test_empty_id_rejected(self):
        with pytest.raises(InvalidHeirError, match="non-empty"):
            Heir(heir_id="  ", name="X", relationship=Relationship.CHILD)

    def test_deceased_cannot_accept(self):
        with pytest.raises(InvalidHeirError, match="deceased"):
            Heir(heir_id="c1", name="X", relationship=Relationship.CHILD, is_alive=False)

    def test_separate_half_only_for_spouse(self):
        with pytest.raises(InvalidHeirError, match="separate half"):
            Heir(
                heir_id="c1", name="X", relationship=Relationship.CHILD,
                request_separate_half=True,
            )

    def test_separate_half_requires_accepting_spouse(self):
        with pytest.raises(InvalidHeirError):
            Heir(
                heir_id="s", name="S", relationship=Relationship.SPOUSE,
                accepts_inheritance=False, request_separate_half=True,
            )

    def test_descendants_list_becomes_tuple(self):
        heir = Heir(
            heir_id="c1", name="X", relationship=Relationship.CHILD,
            descendants=[living("g1", Relationship.CHILD)],
        )
        assert isinstance(heir.descendants, tuple)

    def test_is_active(self):
        assert living("a", Relationship.CHILD).is_active
        assert not deceased("b", Relationship.CHILD).is_active

    def test_heir_error_hierarchy(self):
        with pytest.raises(HeirError):
            Heir(heir_id="", name="X", relationship=Relationship.CHILD)


class TestRelationshipSlots:
    def test_children_unlimited(self):
        assert Relationship.CHILD.max_top_level is None

    def test_two_parents(self):
        assert Relationship.PARENT.max_top_level == 2

    def test_single_slots(self):
        assert Relationship.SPOUSE.max_top_level == 1
        assert Relationship.MGM_F.max_top_level == 1

    def test_spouse_has_no_descendant_line(self):
        assert not Relationship.SPOUSE.can_have_descendants
        assert Relationship.PATERNAL_GRANDMOTHER.can_have_descendants


class TestHeirForest:
    def setup_method(self):
        self.forest = HeirForest.of([
            living("spouse", Relationship.SPOUSE),
            deceased(
                "c1", Relationship.CHILD,
                living("g1", Relationship.CHILD),
                deceased("g2", Relationship.CHILD, living("gg1", Relationship.CHILD)),
            ),
            living("c2", Relationship.CHILD),
        ])

    def test_len_and_contains(self):
        assert len(self.forest) == 6
        assert "gg1" in self.forest
        assert "nobody" not in self.forest

    def test_ids_are_pre_order(self):
        assert self.forest.ids() == ["spouse", "c1", "g1", "g2", "gg1", "c2"]

    def test_roots(self):
        assert [h.heir_id for h in self.forest.roots()] == ["spouse", "c1", "c2"]

    def test_children_and_parent(self):
        assert [h.heir_id for h in self.forest.children("c1")] == ["g1", "g2"]
        assert self.forest.parent_of("gg1").heir_id == "g2"
        assert self.forest.parent_of("c1") is None

    def test_stored_records_have_no_nested_descendants(self):
        assert self.forest.get("c1").descendants == ()

    def test_top_level_filters_by_relationship(self):
        assert [h.heir_id for h in self.forest.top_level(Relationship.CHILD)] == ["c1", "c2"]
        assert self.forest.find_top_level(Relationship.PARENT) is None

    def test_of_returns_existing_forest(self):
        assert HeirForest.of(self.forest) is self.forest

    def test_to_heirs_round_trips_structure(self):
        rebuilt = HeirForest.of(self.forest.to_heirs())
        assert rebuilt.ids() == self.forest.ids()
        assert rebuilt.parent_of("gg1").heir_id == "g2"

    def test_add_descendant(self):
        self.forest.add_descendant("c2", living("g3", Relationship.CHILD))
        assert [h.heir_id for h in self.forest.children("c2")] == ["g3"]
        assert self.forest.parent_of("g3").heir_id == "c2"

    def test_add_descendant_to_spouse_rejected(self):
        with pytest.raises(InvalidHeirError, match="cannot have descendants"):
            self.forest.add_descendant("spouse", living("x", Relationship.CHILD))

    def test_nested_spouse_descendants_rejected(self):
        before = self.forest.ids()
        with pytest.raises(InvalidHeirError, match="cannot have descendants"):
            self.forest.add_heir(
                living("spouse2", Relationship.SPOUSE, living("x", Relationship.CHILD)),
            )
        assert self.forest.ids() == before

    def test_of_rejects_spouse_with_descendants(self):
        with pytest.raises(InvalidHeirError):
            HeirForest.of([
                living("s", Relationship.SPOUSE, living("x", Relationship.CHILD)),
            ])

    def test_add_descendant_unknown_parent(self):
        with pytest.raises(HeirNotFoundError):
            self.forest.add_descendant("ghost", living("x", Relationship.CHILD))

    def test_duplicate_id_rejected_atomically(self):
        before = self.forest.ids()
        with pytest.raises(DuplicateHeirError):
            self.forest.add_heir(
                living("c3", Relationship.CHILD, living("new", Relationship.CHILD),
                       living("g1", Relationship.CHILD)),
            )
        assert self.forest.ids() == before

    def test_duplicate_inside_one_subtree_rejected(self):
        forest = HeirForest()
        with pytest.raises(DuplicateHeirError):
            forest.add_heir(living("a", Relationship.CHILD, living("a", Relationship.CHILD)))
        assert len(forest) == 0

    def test_remove_subtree(self):
        removed = self.forest.remove_heir("c1")
        assert removed == ("c1", "g1", "g2", "gg1")
        assert self.forest.ids() == ["spouse", "c2"]

    def test_remove_nested_heir(self):
        self.forest.remove_heir("g2")
        assert [h.heir_id for h in self.forest.children("c1")] == ["g1"]
        assert "gg1" not in self.forest

    def test_remove_unknown(self):
        with pytest.raises(HeirNotFoundError):
            self.forest.remove_heir("ghost")

    def test_iteration_matches_flatten(self):
        assert [h.heir_id for h in self.forest] == self.forest.ids()


class TestSuccessionValidation:
    def test_two_spouses_ambiguous(self):
        forest = HeirForest.of([
            living("s1", Relationship.SPOUSE),
            living("s2", Relationship.SPOUSE),
        ])
        with pytest.raises(AmbiguousRelationshipError) as exc_info:
            forest.validate_for_succession()
        assert exc_info.value.limit == 1
        assert exc_info.value.count == 2

    def test_three_parents_ambiguous(self):
        forest = HeirForest.of([living(f"p{i}", Relationship.PARENT) for i in range(3)])
        with pytest.raises(AmbiguousRelationshipError):
            forest.validate_for_succession()

    def test_many_children_allowed(self):
        forest = HeirForest.of([living(f"c{i}", Relationship.CHILD) for i in range(12)])
        forest.validate_for_succession()


class TestDeepNesting:
    def test_deep_chain_does_not_recurse(self):
        depth = 5000
        forest = HeirForest()
        forest.add_heir(deceased("n0", Relationship.CHILD))
        for i in range(1, depth):
            forest.add_descendant(
                f"n{i - 1}",
                deceased(f"n{i}", Relationship.CHILD),
            )
        assert len(forest) == depth
        assert forest.ids()[-1] == f"n{depth - 1}"
        removed = forest.remove_heir("n0")
        assert len(removed) == depth
        assert len(forest) == 0
