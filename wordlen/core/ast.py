"""
Abstract Syntax Tree for word equation problems

This module re-exports the term, predicate and length formula nodes from
their thematic submodules so that everything can be imported from
wordlen.core.ast.
"""

# Re-export terms
from wordlen.core._terms import Term, TermType

# Re-export predicates and formulas
from wordlen.core._predicates import Concat, Predicate, PredicateType, Formula

# Re-export length formulas
from wordlen.core._lenformula import (
    LenNode, LenVar, LenConst, LenPlus, LenTimes,
    LenTrue, LenFalse, LenEq, LenLeq, LenNot, LenAnd, LenOr,
    length_of
)

__all__ = [
    # Terms
    "Term", "TermType",
    # Predicates
    "Concat", "Predicate", "PredicateType", "Formula",
    # Length formulas
    "LenNode", "LenVar", "LenConst", "LenPlus", "LenTimes",
    "LenTrue", "LenFalse", "LenEq", "LenLeq", "LenNot", "LenAnd", "LenOr",
    "length_of",
]
