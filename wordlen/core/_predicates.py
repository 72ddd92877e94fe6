"""
Predicate and formula AST nodes

A predicate is an equation, an inequation or some other string predicate
(contains, ...), each holding a left and a right side given as concatenations
of basic terms. A formula is a conjunction of predicates.
"""

from enum import Enum
from typing import Iterator, List, Optional, Sequence, Set, Tuple
from wordlen.core._terms import Term

Concat = Tuple[Term, ...]


class PredicateType(Enum):
    """Kind of a predicate"""
    EQUATION = 0
    INEQUATION = 1
    OTHER = 2


class Predicate:
    """Word (in)equation: t1 ++ ... ++ tn = s1 ++ ... ++ sm"""

    LEFT = 0
    RIGHT = 1

    def __init__(self, type: PredicateType, left: Sequence[Term] = (),
                 right: Sequence[Term] = ()):
        self.type = type
        self.left: Concat = tuple(left)
        self.right: Concat = tuple(right)

    @classmethod
    def equation(cls, left: Sequence[Term], right: Sequence[Term]) -> 'Predicate':
        return cls(PredicateType.EQUATION, left, right)

    @classmethod
    def inequation(cls, left: Sequence[Term], right: Sequence[Term]) -> 'Predicate':
        return cls(PredicateType.INEQUATION, left, right)

    def is_equation(self) -> bool:
        return self.type is PredicateType.EQUATION

    def is_inequation(self) -> bool:
        return self.type is PredicateType.INEQUATION

    def is_eq_or_ineq(self) -> bool:
        return self.is_equation() or self.is_inequation()

    @property
    def params(self) -> Tuple[Concat, Concat]:
        return (self.left, self.right)

    def get_side(self, side: int) -> Concat:
        """Return the left (0) or right (1) side"""
        if side == self.LEFT:
            return self.left
        if side == self.RIGHT:
            return self.right
        raise ValueError(f"Predicate has no side {side}")

    def get_vars(self) -> Set[str]:
        """Names of variables occurring on either side"""
        return self.get_side_vars(self.LEFT) | self.get_side_vars(self.RIGHT)

    def get_side_vars(self, side: int) -> Set[str]:
        return {t.name for t in self.get_side(side) if t.is_variable()}

    def mult_occurr_var_side(self, side: int) -> bool:
        """True if some variable occurs more than once on the given side"""
        names = [t.name for t in self.get_side(side) if t.is_variable()]
        return len(names) != len(set(names))

    def switched_sides(self) -> 'Predicate':
        return Predicate(self.type, self.right, self.left)

    def replace(self, find: Sequence[Term], replacement: Sequence[Term]) -> Optional['Predicate']:
        """
        Replace every occurrence of the term sequence `find` on both sides.

        Returns:
            The rewritten predicate, or None if `find` does not occur
        """
        find = tuple(find)
        if not find:
            raise ValueError("Cannot replace an empty term sequence")

        left, hit_left = _replace_in_side(self.left, find, tuple(replacement))
        right, hit_right = _replace_in_side(self.right, find, tuple(replacement))
        if not (hit_left or hit_right):
            return None
        return Predicate(self.type, left, right)

    def __str__(self) -> str:
        op = {PredicateType.EQUATION: "=", PredicateType.INEQUATION: "!="}.get(self.type, "?")
        return f"{_side_str(self.left)} {op} {_side_str(self.right)}"

    def __repr__(self):
        return f"Predicate({self})"

    def __eq__(self, other):
        return (isinstance(other, Predicate) and
                self.type is other.type and
                self.left == other.left and
                self.right == other.right)

    def __hash__(self):
        return hash((self.type, self.left, self.right))


def _side_str(side: Concat) -> str:
    if not side:
        return "eps"
    return " ++ ".join(str(t) for t in side)


def _replace_in_side(side: Concat, find: Concat, replacement: Concat) -> Tuple[Concat, bool]:
    out: List[Term] = []
    hit = False
    i = 0
    while i < len(side):
        if side[i:i + len(find)] == find:
            out.extend(replacement)
            i += len(find)
            hit = True
        else:
            out.append(side[i])
            i += 1
    return tuple(out), hit


class Formula:
    """Conjunction of predicates"""

    def __init__(self, predicates: Sequence[Predicate] = ()):
        self.predicates: List[Predicate] = list(predicates)

    def add_predicate(self, predicate: Predicate):
        self.predicates.append(predicate)

    def get_predicates(self) -> List[Predicate]:
        return self.predicates

    def get_vars(self) -> Set[str]:
        """Names of variables occurring in any predicate"""
        result: Set[str] = set()
        for pred in self.predicates:
            result |= pred.get_vars()
        return result

    def copy(self) -> 'Formula':
        return Formula(self.predicates)

    def __iter__(self) -> Iterator[Predicate]:
        return iter(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)

    def __str__(self) -> str:
        if not self.predicates:
            return "true"
        return " & ".join(str(p) for p in self.predicates)

    def __eq__(self, other):
        return isinstance(other, Formula) and self.predicates == other.predicates
