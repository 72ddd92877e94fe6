"""
Variable constraints

A VarConstraint gathers every equation defining one string variable v
(v = t1 ++ ... ++ tn) and produces the length formula describing it:

- |v| is the sum of the lengths of the terms of each defining side
- each term t of a side starts where the previous one ends; the begin
  position of t inside the word of v is the integer variable B!t!IN!v
- literals reachable from different sides of v must occupy positions that
  agree on the characters they share (see align_literals)

Literal occurrences are replaced by fresh aliases so that two occurrences of
the same value get separate positions; `conversion` maps each alias back to
its literal.
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
from wordlen.core.ast import (
    Term, Predicate, Concat,
    LenNode, LenVar, LenConst, LenPlus, LenTrue,
    LenEq, LenLeq, LenNot, LenAnd, LenOr,
    length_of
)
from wordlen.procedure.names import FreshNames


def begin_of(of: str, frm: str) -> LenVar:
    """Begin position of term `of` inside the word of variable `frm`

    Identifiers never contain '!' and fresh names only as '!<digit>', so
    the '!IN!' separator cannot occur inside either part.
    """
    return LenVar(f"B!{of}!IN!{frm}")


def _overlaps(first: str, second: str, n: int) -> bool:
    """Check that `first` starting |second| - n characters after the start
    of `second` agrees with it on every shared position.

    For n <= |second| the first n characters of `first` are compared with the
    last n characters of `second` (banana, ababa, n=2: [ba]nana, aba[ba]).
    Larger n means `first` starts before `second`.
    """
    s1, s2 = 0, len(second) - n
    if s2 < 0:
        s1 -= s2
        n += s2
        s2 = 0
    n = min(n, len(first) - s1)
    return first[s1:s1 + n] == second[s2:s2 + n]


class ParseState(Enum):
    """Resolution state of a pooled variable"""
    UNVISITED = 0
    IN_PROGRESS = 1
    DONE = 2


class _Frame:
    """Position of the traversal inside one VarConstraint"""

    def __init__(self, constraint: 'VarConstraint'):
        self.constraint = constraint
        self.side = 0
        self.pos = 0
        self.lits_in_side: List[str] = []


class VarConstraint:
    """Defining equations of one variable and the literals inside its word"""

    def __init__(self, name: str):
        self.name = name
        self.constr_eqs: List[Concat] = []
        self.owned_lits: List[str] = []
        self.lits: List[str] = []
        self.alignments: List[Tuple[str, str]] = []
        self.state = ParseState.UNVISITED

    def _check_side(self, side: Concat) -> bool:
        return len(side) == 1 and side[0].name == self.name

    def _emplace(self, side: Concat, conversion: Dict[str, Term], names: FreshNames):
        aliased = []
        for t in side:
            if t.is_literal():
                alias = names.fresh("lit")
                conversion[alias] = t
                self.owned_lits.append(alias)
                aliased.append(Term.lit(alias))
            else:
                aliased.append(t)
        self.constr_eqs.append(tuple(aliased))

    def add(self, pred: Predicate, conversion: Dict[str, Term], names: FreshNames) -> bool:
        """Record the side of `pred` opposite to this variable

        Returns:
            True if one side of `pred` is exactly this variable, False if both
            sides were recorded (synthetic grouping of an equation without a
            bare variable side)
        """
        if self._check_side(pred.left):
            self._emplace(pred.right, conversion, names)
            return True
        if self._check_side(pred.right):
            self._emplace(pred.left, conversion, names)
            return True

        self._emplace(pred.right, conversion, names)
        self._emplace(pred.left, conversion, names)
        return False

    def _merge_side(self, lits_in_side: List[str]):
        for l1 in self.lits:
            for l2 in lits_in_side:
                self.alignments.append((l1, l2))
        self.lits.extend(lits_in_side)

    def parse(self, pool: Dict[str, 'VarConstraint']) -> bool:
        """Collect the literals reachable from this variable

        Pooled variables used in defining sides are resolved first (depth
        first, with an explicit stack). Literals of a side are paired with
        every literal collected from the earlier sides.

        Returns:
            False if the variables depend on each other cyclically
        """
        if self.state is ParseState.DONE:
            return True
        if self.state is ParseState.IN_PROGRESS:
            return False

        self.state = ParseState.IN_PROGRESS
        stack = [_Frame(self)]
        while stack:
            frame = stack[-1]
            vc = frame.constraint

            if frame.side == len(vc.constr_eqs):
                vc.state = ParseState.DONE
                stack.pop()
                continue

            side = vc.constr_eqs[frame.side]
            if frame.pos == len(side):
                vc._merge_side(frame.lits_in_side)
                frame.side += 1
                frame.pos = 0
                frame.lits_in_side = []
                continue

            term = side[frame.pos]
            if term.is_literal():
                frame.lits_in_side.append(term.name)
            elif term.is_variable() and term.name in pool:
                nested = pool[term.name]
                if nested.state is ParseState.IN_PROGRESS:
                    return False
                if nested.state is ParseState.UNVISITED:
                    nested.state = ParseState.IN_PROGRESS
                    stack.append(_Frame(nested))
                    # Revisit this term once the nested variable is done
                    continue
                frame.lits_in_side.extend(nested.lits)
            frame.pos += 1

        return True

    # ------------------------------------------------------------------
    # Length formula
    # ------------------------------------------------------------------

    def align_literals(self, l1: str, l2: str, conversion: Dict[str, Term]) -> LenNode:
        """All admissible relative positions of two literals inside this variable

        Args:
            l1, l2: Literal aliases
            conversion: Alias to literal map

        Returns:
            Disjunction: l1 entirely before l2, l2 entirely before l1, or one
            of the overlaps on which both literals agree
        """
        v1 = conversion[l1].name
        v2 = conversion[l2].name
        b1 = begin_of(l1, self.name)
        b2 = begin_of(l2, self.name)

        if len(v1) == 1 and len(v2) == 1:
            if v1 == v2:
                return LenTrue()
            return LenNot(LenEq(b1, b2))

        align: List[LenNode] = [
            LenLeq(LenPlus(b1, LenConst(len(v1))), b2),
            LenLeq(LenPlus(b2, LenConst(len(v2))), b1),
        ]
        for n in range(1, len(v1) + len(v2)):
            if _overlaps(v1, v2, n):
                # b(l1) = b(l2) + |l2| - n
                align.append(LenEq(LenPlus(b1, LenConst(n)),
                                   LenPlus(b2, LenConst(len(v2)))))
        return LenOr(*align)

    def generate_side_eq(self, side: Sequence[Term], conversion: Dict[str, Term]) -> LenNode:
        """|v| = 0, |v| = |t| or |v| = |t1| + ... + |tn|"""
        lengths = [length_of(t, conversion) for t in side]
        if not lengths:
            right: LenNode = LenConst(0)
        elif len(lengths) == 1:
            right = lengths[0]
        else:
            right = LenPlus(*lengths)
        return LenEq(LenVar(self.name), right)

    def generate_begin(self, term: Term, previous: Optional[Term],
                       conversion: Dict[str, Term], precise: bool = True) -> LenNode:
        """`term` starts where `previous` ends (at 0 when there is none)"""
        if previous is None:
            end_of_previous: LenNode = LenConst(0)
        else:
            end_of_previous = LenPlus(begin_of(previous.name, self.name),
                                      length_of(previous, conversion))
        if precise:
            return LenEq(end_of_previous, begin_of(term.name, self.name))
        return LenLeq(end_of_previous, begin_of(term.name, self.name))

    def generate_begin_through(self, lit: str, via: str) -> LenNode:
        """Position of `lit` in this variable through the nested variable `via`"""
        return LenEq(begin_of(lit, self.name),
                     LenPlus(begin_of(lit, via), begin_of(via, self.name)))

    def get_lengths(self, pool: Dict[str, 'VarConstraint'], conversion: Dict[str, Term]) -> LenNode:
        form: List[LenNode] = []

        for l1, l2 in self.alignments:
            form.append(self.align_literals(l1, l2, conversion))

        # e.g. x = u ++ v ++ w gives |x| = |u| + |v| + |w|
        for side in self.constr_eqs:
            form.append(self.generate_side_eq(side, conversion))

        for side in self.constr_eqs:
            previous: Optional[Term] = None
            for t in side:
                form.append(self.generate_begin(t, previous, conversion))
                if t.is_variable() and t.name in pool:
                    for lit in pool[t.name].lits:
                        form.append(self.generate_begin_through(lit, t.name))
                previous = t

        return LenAnd(*form)

    def __str__(self) -> str:
        sides = " = ".join(" ".join(str(t) for t in side) or "eps" for side in self.constr_eqs)
        return (f"{self.name} := {sides} "
                f"[owns: {' '.join(self.owned_lits)}; reaches: {' '.join(self.lits)}]")
