"""
Length formula AST nodes

Defines the linear integer arithmetic formulas produced by the length
decision procedure:
- Integer leaves (length/position variables, constants)
- Arithmetic terms (sum, constant multiple)
- Atoms (=, <=) and boolean connectives (and, or, not, true, false)

Nodes are immutable and compared structurally, so subtrees may be shared.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Set, Tuple
from wordlen.core._terms import Term


class LenNode(ABC):
    """Base class for length formula nodes"""

    @abstractmethod
    def __str__(self) -> str:
        pass

    @abstractmethod
    def free_vars(self) -> Set[str]:
        """Return the set of integer variable names"""
        pass

    @abstractmethod
    def _key(self) -> Tuple:
        pass

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def __repr__(self):
        return f"{type(self).__name__}({self})"


class LenVar(LenNode):
    """Integer variable: the length of a string variable or a begin position"""

    def __init__(self, name: str):
        self.name = name

    def __str__(self) -> str:
        return self.name

    def free_vars(self) -> Set[str]:
        return {self.name}

    def _key(self) -> Tuple:
        return (self.name,)


class LenConst(LenNode):
    """Integer constant"""

    def __init__(self, value: int):
        self.value = value

    def __str__(self) -> str:
        return str(self.value)

    def free_vars(self) -> Set[str]:
        return set()

    def _key(self) -> Tuple:
        return (self.value,)


class _NaryNode(LenNode):
    """Node with an ordered tuple of children"""

    symbol = "?"

    def __init__(self, *args: LenNode):
        self.args: Tuple[LenNode, ...] = tuple(args)

    def __str__(self) -> str:
        return "(" + f" {self.symbol} ".join(str(a) for a in self.args) + ")"

    def free_vars(self) -> Set[str]:
        result: Set[str] = set()
        for a in self.args:
            result |= a.free_vars()
        return result

    def _key(self) -> Tuple:
        return self.args


class LenPlus(_NaryNode):
    """Sum: t1 + ... + tn"""
    symbol = "+"


class LenTimes(LenNode):
    """Constant multiple: c * t"""

    def __init__(self, coef: int, arg: LenNode):
        self.coef = coef
        self.arg = arg

    def __str__(self) -> str:
        return f"{self.coef}*{self.arg}"

    def free_vars(self) -> Set[str]:
        return self.arg.free_vars()

    def _key(self) -> Tuple:
        return (self.coef, self.arg)


class LenTrue(LenNode):
    """Boolean true"""

    def __str__(self) -> str:
        return "true"

    def free_vars(self) -> Set[str]:
        return set()

    def _key(self) -> Tuple:
        return ()


class LenFalse(LenNode):
    """Boolean false"""

    def __str__(self) -> str:
        return "false"

    def free_vars(self) -> Set[str]:
        return set()

    def _key(self) -> Tuple:
        return ()


class _BinaryAtom(LenNode):
    symbol = "?"

    def __init__(self, left: LenNode, right: LenNode):
        self.left = left
        self.right = right

    def __str__(self) -> str:
        return f"{self.left} {self.symbol} {self.right}"

    def free_vars(self) -> Set[str]:
        return self.left.free_vars() | self.right.free_vars()

    def _key(self) -> Tuple:
        return (self.left, self.right)


class LenEq(_BinaryAtom):
    """Equality: t1 = t2"""
    symbol = "="


class LenLeq(_BinaryAtom):
    """Less than or equal: t1 <= t2"""
    symbol = "<="


class LenNot(LenNode):
    """Negation: !f"""

    def __init__(self, arg: LenNode):
        self.arg = arg

    def __str__(self) -> str:
        return f"!({self.arg})"

    def free_vars(self) -> Set[str]:
        return self.arg.free_vars()

    def _key(self) -> Tuple:
        return (self.arg,)


class LenAnd(_NaryNode):
    """Conjunction; the empty conjunction is true"""
    symbol = "&"

    def __str__(self) -> str:
        if not self.args:
            return "true"
        return super().__str__()


class LenOr(_NaryNode):
    """Disjunction; the empty disjunction is false"""
    symbol = "|"

    def __str__(self) -> str:
        if not self.args:
            return "false"
        return super().__str__()


def length_of(term: Term, conversion: Optional[Dict[str, Term]] = None) -> LenNode:
    """Length of a basic term

    Literal aliases are resolved through `conversion` (alias -> literal) so
    that the length is the one of the original value.
    """
    if term.is_literal():
        value = term.name
        if conversion is not None and term.name in conversion:
            value = conversion[term.name].name
        return LenConst(len(value))
    return LenVar(term.name)
