"""
Length-based decision procedure for word equations.

This module contains:
- Fresh name generation for literal aliases and synthetic pool keys
- Variable constraints (pooling, literal alignment, begin positions)
- The decision procedure orchestrating a run
"""

from wordlen.procedure.names import FreshNames
from wordlen.procedure.var_constraint import VarConstraint, ParseState, begin_of
from wordlen.procedure.length_procedure import (
    LengthDecisionProcedure, LengthResult, Stage, Status, Precision, compute
)
