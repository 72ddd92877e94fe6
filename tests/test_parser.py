"""
Tests for the lexer and parser (wordlen/core/_lexer.py, wordlen/core/parser.py)
"""

import pytest
from wordlen.core.ast import Term, Predicate, PredicateType
from wordlen.core.parser import parse
from wordlen.core._lexer import Lexer, ParseError


class TestLexer:
    """Test tokenization"""

    def test_token_types(self):
        """Test tokens of a typical problem"""
        tokens = Lexer('x = y ++ "ab" & x != z; w matches /a*/').tokens
        assert [t.type for t in tokens] == [
            'IDENT', 'EQ', 'IDENT', 'CONCAT', 'STRING', 'AND',
            'IDENT', 'NEQ', 'IDENT', 'SEMI', 'IDENT', 'MATCHES', 'REGEX'
        ]

    def test_neq_is_not_split(self):
        """'!=' is one token, '!' alone is negation"""
        assert [t.type for t in Lexer('!= !').tokens] == ['NEQ', 'NOT']

    def test_comments_skipped(self):
        """Comments and whitespace produce no tokens"""
        tokens = Lexer('x = y # trailing comment').tokens
        assert [t.value for t in tokens] == ['x', '=', 'y']

    def test_invalid_character(self):
        """Test error on an unknown character"""
        with pytest.raises(ParseError):
            Lexer('x = y @ z')


class TestParser:
    """Test parsing problems"""

    def test_equation(self):
        """Test a single word equation"""
        formula, store = parse('x = y ++ "ab" ++ z')
        assert formula.get_predicates() == [
            Predicate.equation([Term.var("x")],
                               [Term.var("y"), Term.lit("ab"), Term.var("z")])
        ]
        assert len(store) == 0

    def test_inequation(self):
        """Test a word inequation"""
        formula, _ = parse('x != "c"')
        pred = formula.get_predicates()[0]
        assert pred.type is PredicateType.INEQUATION
        assert pred.right == (Term.lit("c"),)

    def test_eps(self):
        """eps denotes the empty side"""
        formula, _ = parse('x ++ y = eps')
        pred = formula.get_predicates()[0]
        assert pred.left == (Term.var("x"), Term.var("y"))
        assert pred.right == ()

    def test_separators(self):
        """Atoms may be separated by &, ; and newlines"""
        formula, _ = parse('x = y & y = z; z = "a"\n\nw = x\n')
        assert len(formula) == 4

    def test_string_escapes(self):
        """Test escape sequences in literals"""
        formula, _ = parse(r'x = "a\"b\\c"')
        assert formula.get_predicates()[0].right == (Term.lit('a"b\\c'),)

    def test_membership(self):
        """Membership constraints go to the language store"""
        formula, store = parse('x = y & x matches /ab*/')
        assert len(formula) == 1
        assert "x" in store
        assert store["x"].accepts("abbb")
        assert not store["x"].accepts("ba")

    def test_negated_membership(self):
        """Negated membership stores the complement"""
        _, store = parse('!(x matches /a/)')
        assert not store["x"].accepts("a")
        assert store["x"].accepts("")
        assert store["x"].accepts("b")

    def test_memberships_intersect(self):
        """Several constraints on one variable are intersected"""
        _, store = parse('x matches /a*/ & x matches /aa|aaa|b/')
        assert store["x"].accepts("aa")
        assert store["x"].accepts("aaa")
        assert not store["x"].accepts("b")
        assert not store["x"].accepts("a")

    def test_missing_operator(self):
        """Test error when '=' is missing"""
        with pytest.raises(ParseError):
            parse('x y')

    def test_invalid_regex(self):
        """Regex errors are reported as parse errors"""
        with pytest.raises(ParseError):
            parse('x matches /(a/')

    def test_missing_separator(self):
        """Test error on two atoms without a separator"""
        with pytest.raises(ParseError):
            parse('x = y z = w')
