"""
Heirs -- Heir value object and the HeirForest arena.

Responsibility:
    Models the people entered for a succession calculation. Top-level
    heirs carry a kinship ``Relationship`` to the decedent; nesting under
    an heir encodes that heir's own children and exists only for the
    right of representation (a deceased heir's share passing down).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Engines read the forest; the presentation layer mutates it through
    the structural operations below between calculations.

Invariants enforced:
    - An heir who is not alive cannot accept the inheritance.
    - Only a living, accepting spouse may request the separate half.
    - Heir ids are unique across the whole forest, nested levels included.
    - Each record is reachable through exactly one parent (or is a root).

Failure modes:
    - InvalidHeirError on contradictory heir attributes.
    - DuplicateHeirError when an id is inserted twice.
    - HeirNotFoundError for structural operations on unknown ids.
    - AmbiguousRelationshipError from ``validate_for_succession`` when more
      top-level heirs hold a relationship than there are legal slots.

Usage:
    forest = HeirForest.of([
        Heir("s1", "Ana", Relationship.SPOUSE),
        Heir("c1", "Marko", Relationship.CHILD, is_alive=False, accepts_inheritance=False),
    ])
    forest.add_descendant("c1", Heir("g1", "Ivo", Relationship.CHILD))
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from succession_kernel.exceptions import (
    AmbiguousRelationshipError,
    DuplicateHeirError,
    HeirNotFoundError,
    InvalidHeirError,
)


class Relationship(str, Enum):
    """Kinship of a top-level heir to the decedent."""

    SPOUSE = "SPOUSE"
    CHILD = "CHILD"
    PARENT = "PARENT"
    # Grandparents
    PATERNAL_GRANDFATHER = "PATERNAL_GRANDFATHER"
    PATERNAL_GRANDMOTHER = "PATERNAL_GRANDMOTHER"
    MATERNAL_GRANDFATHER = "MATERNAL_GRANDFATHER"
    MATERNAL_GRANDMOTHER = "MATERNAL_GRANDMOTHER"
    # Great-grandparents, paternal side
    PGF_F = "PGF_F"  # Father's father's father
    PGF_M = "PGF_M"  # Father's father's mother
    PGM_F = "PGM_F"  # Father's mother's father
    PGM_M = "PGM_M"  # Father's mother's mother
    # Great-grandparents, maternal side
    MGF_F = "MGF_F"  # Mother's father's father
    MGF_M = "MGF_M"  # Mother's father's mother
    MGM_F = "MGM_F"  # Mother's mother's father
    MGM_M = "MGM_M"  # Mother's mother's mother

    @property
    def can_have_descendants(self) -> bool:
        """Every relationship except the spouse has a representation line."""
        return self is not Relationship.SPOUSE

    @property
    def max_top_level(self) -> int | None:
        """How many top-level heirs may hold this relationship (None = any)."""
        if self is Relationship.CHILD:
            return None
        if self is Relationship.PARENT:
            return 2
        return 1


@dataclass(frozen=True, slots=True)
class Heir:
    """
    A person entered for the calculation.

    Contract:
        Identity is ``heir_id``; ``name`` is display-only and never used
        in calculation. ``descendants`` lists this heir's own children in
        entry order.

    Guarantees:
        - Immutable; ``descendants`` is always a tuple.
        - ``relationship`` is always a Relationship (strings are coerced).
        - Attribute combinations are legally consistent (see module doc).
    """

    heir_id: str
    name: str
    relationship: Relationship
    is_alive: bool = True
    accepts_inheritance: bool = True
    request_separate_half: bool = False
    descendants: tuple[Heir, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.heir_id, str) or not self.heir_id.strip():
            raise InvalidHeirError(str(self.heir_id), "id must be a non-empty string")

        if not isinstance(self.relationship, Relationship):
            try:
                object.__setattr__(self, "relationship", Relationship(self.relationship))
            except ValueError as e:
                raise InvalidHeirError(
                    self.heir_id, f"unknown relationship {self.relationship!r}"
                ) from e

        if not isinstance(self.descendants, tuple):
            object.__setattr__(self, "descendants", tuple(self.descendants))

        if not self.is_alive and self.accepts_inheritance:
            raise InvalidHeirError(self.heir_id, "a deceased heir cannot accept")

        if self.request_separate_half and not (
            self.relationship is Relationship.SPOUSE and self.is_active
        ):
            raise InvalidHeirError(
                self.heir_id,
                "only a living, accepting spouse may request the separate half",
            )

    @property
    def is_active(self) -> bool:
        """Eligible to receive a share directly."""
        return self.is_alive and self.accepts_inheritance


class HeirForest:
    """
    Arena of heir records addressed by id.

    Contract:
        Records are stored flat with parent pointers and ordered child-id
        lists; nested ``Heir.descendants`` are unpacked on insertion and
        rebuilt by ``to_heirs``. Records returned by ``get``/``flatten``
        carry an empty ``descendants`` tuple -- use ``children`` to walk.

    Guarantees:
        - All traversals are iterative (explicit stacks), so nesting depth
          is bounded only by memory.
        - Insertions are atomic: a duplicate id anywhere in the inserted
          subtree, or a spouse carrying descendants, leaves the forest
          unchanged.

    Non-goals:
        - Does NOT interpret relationships; engines do that.
        - Engines never mutate a forest they are given.
    """

    def __init__(self) -> None:
        self._records: dict[str, Heir] = {}
        self._children: dict[str, list[str]] = {}
        self._parents: dict[str, str | None] = {}
        self._roots: list[str] = []

    @classmethod
    def of(cls, heirs: HeirForest | Iterable[Heir]) -> HeirForest:
        """Build a forest from nested heirs; an existing forest is returned as-is."""
        if isinstance(heirs, HeirForest):
            return heirs
        forest = cls()
        for heir in heirs:
            forest.add_heir(heir)
        return forest

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------

    def add_heir(self, heir: Heir) -> None:
        """Add a top-level heir (with any nested descendants)."""
        self._insert(heir, parent_id=None)

    def add_descendant(self, parent_id: str, descendant: Heir) -> None:
        """Attach ``descendant`` as the last child of ``parent_id``."""
        parent = self.get(parent_id)
        if not parent.relationship.can_have_descendants:
            raise InvalidHeirError(
                parent_id, f"{parent.relationship.value} cannot have descendants"
            )
        self._insert(descendant, parent_id=parent_id)

    def remove_heir(self, heir_id: str) -> tuple[str, ...]:
        """
        Remove an heir and its whole subtree.

        Returns:
            The removed ids, pre-order.
        """
        if heir_id not in self._records:
            raise HeirNotFoundError(heir_id)

        removed = tuple(self._walk_ids([heir_id]))
        parent_id = self._parents[heir_id]
        if parent_id is None:
            self._roots.remove(heir_id)
        else:
            self._children[parent_id].remove(heir_id)

        for rid in removed:
            del self._records[rid]
            del self._children[rid]
            del self._parents[rid]
        return removed

    def _insert(self, heir: Heir, parent_id: str | None) -> None:
        seen: set[str] = set()
        nested: list[Heir] = [heir]
        while nested:
            current = nested.pop()
            if current.heir_id in self._records or current.heir_id in seen:
                raise DuplicateHeirError(current.heir_id)
            seen.add(current.heir_id)
            if current.descendants and not current.relationship.can_have_descendants:
                raise InvalidHeirError(
                    current.heir_id,
                    f"{current.relationship.value} cannot have descendants",
                )
            nested.extend(current.descendants)

        pending: list[tuple[Heir, str | None]] = [(heir, parent_id)]
        while pending:
            current, pid = pending.pop()
            hid = current.heir_id
            self._records[hid] = replace(current, descendants=())
            self._children[hid] = []
            self._parents[hid] = pid
            if pid is None:
                self._roots.append(hid)
            else:
                self._children[pid].append(hid)
            pending.extend((child, hid) for child in reversed(current.descendants))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, heir_id: str) -> Heir:
        try:
            return self._records[heir_id]
        except KeyError:
            raise HeirNotFoundError(heir_id) from None

    def children(self, heir_id: str) -> tuple[Heir, ...]:
        if heir_id not in self._children:
            raise HeirNotFoundError(heir_id)
        return tuple(self._records[c] for c in self._children[heir_id])

    def parent_of(self, heir_id: str) -> Heir | None:
        if heir_id not in self._parents:
            raise HeirNotFoundError(heir_id)
        pid = self._parents[heir_id]
        return None if pid is None else self._records[pid]

    def roots(self) -> tuple[Heir, ...]:
        return tuple(self._records[r] for r in self._roots)

    def top_level(self, relationship: Relationship) -> tuple[Heir, ...]:
        return tuple(h for h in self.roots() if h.relationship is relationship)

    def find_top_level(self, relationship: Relationship) -> Heir | None:
        matches = self.top_level(relationship)
        return matches[0] if matches else None

    def ids(self) -> list[str]:
        """All heir ids, pre-order."""
        return list(self._walk_ids(self._roots))

    def flatten(self) -> list[Heir]:
        """All heirs, pre-order (each parent before its descendants)."""
        return [self._records[hid] for hid in self._walk_ids(self._roots)]

    def to_heirs(self) -> tuple[Heir, ...]:
        """Rebuild the nested ``Heir`` snapshot."""
        built: dict[str, Heir] = {}
        for hid in reversed(self.ids()):
            built[hid] = replace(
                self._records[hid],
                descendants=tuple(built[c] for c in self._children[hid]),
            )
        return tuple(built[r] for r in self._roots)

    def validate_for_succession(self) -> None:
        """Reject top-level slot overflows (two spouses, three parents, ...)."""
        counts = Counter(h.relationship for h in self.roots())
        for relationship, count in counts.items():
            limit = relationship.max_top_level
            if limit is not None and count > limit:
                raise AmbiguousRelationshipError(relationship.value, count, limit)

    def _walk_ids(self, start: list[str]) -> Iterator[str]:
        stack = list(reversed(start))
        while stack:
            hid = stack.pop()
            yield hid
            stack.extend(reversed(self._children[hid]))

    def __contains__(self, heir_id: object) -> bool:
        return heir_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Heir]:
        return iter(self.flatten())
