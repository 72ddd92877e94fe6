"""
Length-Based Decision Procedure for Word Equations

A Python library for deciding conjunctions of word equations with regular
constraints by reducing them to linear integer arithmetic over lengths,
solved with Z3.

The library is organized into logical modules:
- core: terms, predicates, length formula AST and parser
- automata: finite automata, regex compiler and language constraints
- preprocessing: formula normalization
- procedure: the length decision procedure
- encoding: Z3 encoding of length formulas
- checking: satisfiability checking
"""

# Core abstractions
from wordlen.core.ast import (
    Term, TermType, Predicate, PredicateType, Formula,
    LenNode, LenVar, LenConst, LenPlus, LenTimes,
    LenTrue, LenFalse, LenEq, LenLeq, LenNot, LenAnd, LenOr
)
from wordlen.core.parser import parse
from wordlen.core._lexer import ParseError

# Language constraints
from wordlen.automata import Automaton, LanguageStore, parse_regex, RegexParseError

# Decision procedure
from wordlen.procedure import (
    LengthDecisionProcedure, LengthResult, Status, Precision, compute
)

# Main checker
from wordlen.checking.checker import StringChecker, CheckResult

__version__ = "0.1.0"
__all__ = [
    # Terms, predicates and length formulas
    "Term", "TermType", "Predicate", "PredicateType", "Formula",
    "LenNode", "LenVar", "LenConst", "LenPlus", "LenTimes",
    "LenTrue", "LenFalse", "LenEq", "LenLeq", "LenNot", "LenAnd", "LenOr",
    # Parser
    "parse", "ParseError",
    # Language constraints
    "Automaton", "LanguageStore", "parse_regex", "RegexParseError",
    # Procedure and checker
    "LengthDecisionProcedure", "LengthResult", "Status", "Precision", "compute",
    "StringChecker", "CheckResult",
]
