"""
Tests for finite automata (wordlen/automata/automaton.py)
"""

import pytest
from wordlen.automata.automaton import Automaton, Nfa, OTHER
from wordlen.automata.regex_parser import parse_regex


class TestConstructors:
    """Test basic languages"""

    def test_empty_and_sigma_star(self):
        """Test the empty and the universal language"""
        assert Automaton.empty().is_empty()
        assert not Automaton.empty().accepts("")
        assert Automaton.sigma_star().is_universal()
        assert Automaton.sigma_star().accepts("anything")

    def test_from_word(self):
        """Test single-word languages"""
        aut = Automaton.from_word("abc")
        assert aut.accepts("abc")
        assert not aut.accepts("ab")
        assert not aut.accepts("abcc")
        assert aut.is_singleton()
        assert aut.single_word() == "abc"

    def test_epsilon(self):
        """Test the language of the empty word"""
        aut = Automaton.epsilon()
        assert aut.accepts("")
        assert not aut.accepts("a")
        assert aut.is_epsilon()

    def test_sigma_range(self):
        """Test languages given by a length interval"""
        bounded = Automaton.sigma_range(1, 2)
        assert [bounded.accepts("x" * n) for n in range(4)] == [False, True, True, False]
        unbounded = Automaton.sigma_range(2)
        assert [unbounded.accepts("x" * n) for n in range(5)] == [False, False, True, True, True]
        assert Automaton.sigma_range(3, 1).is_empty()


class TestOperations:
    """Test boolean operations and concatenation"""

    def test_complement(self):
        """Test complement"""
        aut = parse_regex("a*").complement()
        assert not aut.accepts("aa")
        assert aut.accepts("ab")
        assert aut.accepts("c")

    def test_intersect_different_alphabets(self):
        """Automata over different characters are combined correctly"""
        aut = parse_regex("a*b*").intersect(parse_regex("[^c]{2}"))
        assert aut.accepts("ab")
        assert aut.accepts("aa")
        assert not aut.accepts("ba")
        assert not aut.accepts("a")

    def test_union(self):
        """Test union"""
        aut = parse_regex("a").union(parse_regex("bb"))
        assert aut.accepts("a") and aut.accepts("bb")
        assert not aut.accepts("b")

    def test_concatenate(self):
        """Test concatenation"""
        aut = parse_regex("a+").concatenate(Automaton.from_word("b")).concatenate(parse_regex("c?"))
        assert aut.accepts("ab")
        assert aut.accepts("aaabc")
        assert not aut.accepts("b")
        assert not aut.accepts("abcc")

    def test_is_equivalent(self):
        """Test language equality"""
        assert parse_regex("(a|b)*").is_equivalent(parse_regex("[ab]*"))
        assert not parse_regex("a*").is_equivalent(parse_regex("a+"))

    def test_nfa_determinize(self):
        """Test the subset construction"""
        nfa = Nfa()
        s0, s1, s2 = nfa.add_state(), nfa.add_state(), nfa.add_state()
        nfa.add_transition(s0, "a", s0)
        nfa.add_transition(s0, "a", s1)
        nfa.add_epsilon(s1, s2)
        nfa.initial = {s0}
        nfa.finals = {s2}
        aut = nfa.determinize({"a"})
        assert aut.accepts("a")
        assert aut.accepts("aaa")
        assert not aut.accepts("")
        assert not aut.accepts("b")


class TestMinimize:
    """Test minimization"""

    def test_same_language(self):
        """Minimization keeps the language"""
        aut = parse_regex("a(b|c)*")
        aut = aut.union(parse_regex("ab*"))
        minimal = aut.minimize()
        assert minimal.is_equivalent(aut)
        assert minimal.num_states() <= aut.num_states()

    def test_drops_redundant_characters(self):
        """Characters behaving like OTHER are removed from the alphabet"""
        aut = parse_regex("[ab]*").union(parse_regex(".*")).minimize()
        assert aut.alphabet == frozenset()
        assert aut.num_states() == 1
        assert aut.delta == [{OTHER: 0}]


class TestQueries:
    """Test language queries"""

    def test_finite(self):
        """Test finiteness (bounded word length)"""
        assert parse_regex("ab|c").is_finite()
        assert Automaton.empty().is_finite()
        assert not parse_regex("ab*").is_finite()

    def test_co_finite(self):
        """Test co-finiteness"""
        assert parse_regex("a").complement().is_co_finite()
        assert Automaton.sigma_star().is_co_finite()
        assert not parse_regex("a*").is_co_finite()

    def test_singleton(self):
        """Test singleton detection"""
        assert parse_regex("ab").is_singleton()
        assert not parse_regex("a|b").is_singleton()
        assert not parse_regex(".").is_singleton()
        assert not Automaton.empty().is_singleton()
        assert parse_regex("ab").single_word() == "ab"
        assert parse_regex("a|b").single_word() is None

    def test_count_words(self):
        """Word counts saturate at the cap"""
        assert parse_regex("a|b").count_words(cap=5) == 2
        assert parse_regex("a|b|c").count_words() == 2
        assert Automaton.empty().count_words() == 0

    def test_max_word_length(self):
        """Test the longest word of a finite language"""
        assert parse_regex("a|bcd|ef").max_word_length() == 3
        assert Automaton.empty().max_word_length() == -1
        with pytest.raises(ValueError):
            parse_regex("a*").max_word_length()

    def test_length_only(self):
        """Test languages determined by word lengths"""
        assert parse_regex("..(...)*").is_length_only()
        assert Automaton.sigma_range(2, 5).is_length_only()
        assert Automaton.empty().is_length_only()
        assert not parse_regex("a*").is_length_only()
        assert not parse_regex("ab").is_length_only()

    def test_word_lengths(self):
        """Test the lasso of accepted lengths"""
        tail, period, accepting = parse_regex("a(bb)*").word_lengths()
        lengths = [n for n in range(12)
                   if accepting[n if n < tail else tail + (n - tail) % period]]
        assert lengths == [1, 3, 5, 7, 9, 11]

        tail, period, accepting = Automaton.from_word("abc").word_lengths()
        accepted = [n for n in range(tail + period) if accepting[n]]
        assert accepted == [3]
