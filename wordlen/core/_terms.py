"""
Basic term AST nodes

Defines the terms that appear on the sides of word equations:
- String variables
- String literals
- Length, substring and index-of terms (carried opaquely by name)
"""

from enum import Enum


class TermType(Enum):
    """Kind of a basic term"""
    VARIABLE = 0
    LITERAL = 1
    LENGTH = 2
    SUBSTRING = 3
    INDEX_OF = 4


class Term:
    """Tagged string term: x, "ab", ...

    Variables are identified by their name. A literal's name is its value,
    or a fresh alias once the length procedure has aliased the occurrence.
    """

    def __init__(self, type: TermType, name: str = ""):
        self.type = type
        self.name = name

    @classmethod
    def var(cls, name: str) -> 'Term':
        return cls(TermType.VARIABLE, name)

    @classmethod
    def lit(cls, value: str) -> 'Term':
        return cls(TermType.LITERAL, value)

    def is_variable(self) -> bool:
        return self.type is TermType.VARIABLE

    def is_literal(self) -> bool:
        return self.type is TermType.LITERAL

    def __str__(self) -> str:
        if self.type is TermType.VARIABLE:
            return self.name
        if self.type is TermType.LITERAL:
            return f'"{self.name}"'
        return f"{self.type.name.lower()}({self.name})"

    def __repr__(self):
        return f"Term({self.type.name}, {self.name!r})"

    def __eq__(self, other):
        return (isinstance(other, Term) and
                self.type is other.type and
                self.name == other.name)

    def __hash__(self):
        return hash((self.type, self.name))

    def __lt__(self, other: 'Term') -> bool:
        return (self.type.value, self.name) < (other.type.value, other.name)
