"""
Z3 Encoder for Length Formulas

Every integer variable of a length formula (string lengths, begin positions,
period multipliers) becomes a Z3 Int constant of the same name.
"""

import z3
from typing import Dict
from wordlen.core.ast import (
    LenNode, LenVar, LenConst, LenPlus, LenTimes,
    LenTrue, LenFalse, LenEq, LenLeq, LenNot, LenAnd, LenOr
)


class LenFormulaEncoder:
    """Encodes length formulas into Z3 constraints"""

    def __init__(self):
        # Variable cache
        self.var_cache: Dict[str, z3.ArithRef] = {}

    def get_or_create_var(self, name: str) -> z3.ArithRef:
        """Get or create the Z3 integer variable for a given name"""
        if name not in self.var_cache:
            self.var_cache[name] = z3.Int(name)
        return self.var_cache[name]

    def encode_term(self, node: LenNode) -> z3.ArithRef:
        """Encode an integer-valued node"""
        if isinstance(node, LenVar):
            return self.get_or_create_var(node.name)
        elif isinstance(node, LenConst):
            return z3.IntVal(node.value)
        elif isinstance(node, LenPlus):
            if not node.args:
                return z3.IntVal(0)
            return z3.Sum([self.encode_term(a) for a in node.args])
        elif isinstance(node, LenTimes):
            return z3.IntVal(node.coef) * self.encode_term(node.arg)
        raise ValueError(f"Not an integer term: {node}")

    def encode(self, node: LenNode) -> z3.BoolRef:
        """Encode a boolean length formula

        Raises:
            ValueError: If an integer term is used where a formula is expected
        """
        if isinstance(node, LenTrue):
            return z3.BoolVal(True)
        elif isinstance(node, LenFalse):
            return z3.BoolVal(False)
        elif isinstance(node, LenEq):
            return self.encode_term(node.left) == self.encode_term(node.right)
        elif isinstance(node, LenLeq):
            return self.encode_term(node.left) <= self.encode_term(node.right)
        elif isinstance(node, LenNot):
            return z3.Not(self.encode(node.arg))
        elif isinstance(node, LenAnd):
            if not node.args:
                return z3.BoolVal(True)
            return z3.And([self.encode(a) for a in node.args])
        elif isinstance(node, LenOr):
            if not node.args:
                return z3.BoolVal(False)
            return z3.Or([self.encode(a) for a in node.args])
        raise ValueError(f"Not a formula: {node}")
