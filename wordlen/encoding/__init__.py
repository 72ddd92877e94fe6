"""
Z3 SMT encoding for length formulas.

This module handles the translation from the length formulas produced by
the decision procedure to Z3 integer arithmetic constraints.
"""

from wordlen.encoding.encoder import LenFormulaEncoder
