"""
Core abstractions for word equation problems.

This module contains the fundamental building blocks:
- Abstract Syntax Tree (AST) definitions for terms, predicates and
  length formulas
- Parser for converting strings to AST (wordlen.core.parser)
"""

from wordlen.core.ast import *
