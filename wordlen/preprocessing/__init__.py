"""
Formula preprocessing and normalization.

This module provides the rewriting steps that simplify word equations
and their language constraints before length reasoning.
"""

from wordlen.preprocessing.equality import UnionFind
from wordlen.preprocessing.formula_preprocess import FormulaPreprocessor, DEFAULT_UNDERAPPROX_WINDOW
