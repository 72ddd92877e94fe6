"""
Parser for word equation problems

A small parser turning text into a conjunction of predicates together with
the regular constraints on its variables.

Syntax:
    - x = y ++ "ab" ++ z: word equation (sides are concatenations)
    - x != "c": word inequation
    - eps: the empty side
    - x matches /a*b/: regular membership constraint
    - !(x matches /a/): negated membership constraint
    - atoms are separated by &, ; or newlines; # starts a comment
"""

from typing import List, Optional, Tuple
from wordlen.core._terms import Term
from wordlen.core._predicates import Predicate, PredicateType, Formula
from wordlen.core._lexer import Lexer, Token, ParseError
from wordlen.automata.regex_parser import parse_regex, RegexParseError
from wordlen.automata.store import LanguageStore

SEPARATORS = ('AND', 'SEMI', 'NEWLINE')


class Parser:
    """Parser for word equation problems"""

    def __init__(self, text: str):
        self.lexer = Lexer(text)
        self.tokens = self.lexer.tokens
        self.pos = 0

    def current_token(self) -> Optional[Token]:
        """Get the current token"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def peek_token(self, offset: int = 1) -> Optional[Token]:
        if self.pos + offset < len(self.tokens):
            return self.tokens[self.pos + offset]
        return None

    def advance(self):
        """Move to the next token"""
        self.pos += 1

    def expect(self, token_type: str) -> Token:
        """Expect a specific token type"""
        token = self.current_token()
        if token is None:
            raise ParseError(f"Expected {token_type}, got EOF")
        if token.type != token_type:
            raise ParseError(f"Expected {token_type}, got {token.type} at position {token.pos}")
        self.advance()
        return token

    def parse(self) -> Tuple[Formula, LanguageStore]:
        """Parse a whole problem"""
        formula = Formula()
        store = LanguageStore()

        self._skip_separators()
        while self.current_token() is not None:
            self.parse_atom(formula, store)
            token = self.current_token()
            if token is not None and token.type not in SEPARATORS:
                raise ParseError(f"Expected separator, got {token.type} at position {token.pos}")
            self._skip_separators()

        return formula, store

    def _skip_separators(self):
        while self.current_token() is not None and self.current_token().type in SEPARATORS:
            self.advance()

    def parse_atom(self, formula: Formula, store: LanguageStore):
        """Parse one predicate or membership constraint"""
        token = self.current_token()

        if token.type == 'NOT':
            self.advance()
            self.expect('LPAREN')
            name, language = self.parse_membership()
            self.expect('RPAREN')
            store.restrict(name, language.complement())
            return

        nxt = self.peek_token()
        if token.type == 'IDENT' and nxt is not None and nxt.type == 'MATCHES':
            name, language = self.parse_membership()
            store.restrict(name, language)
            return

        left = self.parse_side()
        token = self.current_token()
        if token is None or token.type not in ('EQ', 'NEQ'):
            raise ParseError(f"Expected '=' or '!=' at position {token.pos if token else 'EOF'}")
        self.advance()
        right = self.parse_side()

        kind = PredicateType.EQUATION if token.type == 'EQ' else PredicateType.INEQUATION
        formula.add_predicate(Predicate(kind, left, right))

    def parse_membership(self):
        """Parse: x matches /regex/"""
        name = self.expect('IDENT').value
        self.expect('MATCHES')
        regex_token = self.expect('REGEX')
        # Remove slashes from /pattern/
        pattern = regex_token.value[1:-1]
        try:
            language = parse_regex(pattern)
        except RegexParseError as e:
            raise ParseError(f"Invalid regex at position {regex_token.pos}: {e}")
        return name, language

    def parse_side(self) -> List[Term]:
        """Parse a concatenation of terms, or eps"""
        token = self.current_token()
        if token is not None and token.type == 'EPS':
            self.advance()
            return []

        terms = [self.parse_term()]
        while self.current_token() and self.current_token().type == 'CONCAT':
            self.advance()
            terms.append(self.parse_term())
        return terms

    def parse_term(self) -> Term:
        token = self.current_token()
        if token is None:
            raise ParseError("Unexpected end of input")

        if token.type == 'IDENT':
            self.advance()
            return Term.var(token.value)

        if token.type == 'STRING':
            self.advance()
            # Remove quotes and handle escape sequences
            value = token.value[1:-1]
            value = value.replace('\\n', '\n').replace('\\t', '\t').replace('\\"', '"').replace('\\\\', '\\')
            return Term.lit(value)

        raise ParseError(f"Unexpected token {token.type} at position {token.pos}")


def parse(text: str) -> Tuple[Formula, LanguageStore]:
    """Parse a problem into its predicates and language constraints"""
    return Parser(text).parse()
