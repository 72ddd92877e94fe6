"""
Satisfiability checking of word equations.

This module chains the length decision procedure with Z3 to decide
conjunctions of word (in)equations with regular constraints.
"""

from wordlen.checking.checker import StringChecker, CheckResult
