"""
Tests for formula preprocessing (wordlen/preprocessing/formula_preprocess.py)
"""

from wordlen.core.ast import Term, Predicate, Formula, LenVar, LenEq, LenAnd, LenConst
from wordlen.automata.automaton import Automaton
from wordlen.automata.regex_parser import parse_regex
from wordlen.automata.store import LanguageStore
from wordlen.preprocessing.formula_preprocess import FormulaPreprocessor


y1 = Term.var("y_1")
x1 = Term.var("x_1")
x2 = Term.var("x_2")
x3 = Term.var("x_3")
x4 = Term.var("x_4")
a = Term.lit("a")
b = Term.lit("b")


def eq(left, right):
    return Predicate.equation(left, right)


def neq(left, right):
    return Predicate.inequation(left, right)


def _prep(*predicates, store=None):
    return FormulaPreprocessor(Formula(predicates), store or LanguageStore())


class TestRemoveTrivial:
    """Test removal of trivial equations"""

    def test_identical_sides(self):
        """Equations s = s are dropped"""
        prep = _prep(eq([x1, a], [x1, a]), eq([x1], [x2]))
        prep.remove_trivial()
        assert prep.get_modified_formula().get_predicates() == [eq([x1], [x2])]

    def test_empty_literals(self):
        """Empty literals are removed from sides"""
        prep = _prep(eq([x1, Term.lit("")], [x2]), eq([Term.lit("")], []))
        prep.remove_trivial()
        assert prep.get_modified_formula().get_predicates() == [eq([x1], [x2])]

    def test_duplicates(self):
        """Repeated predicates are kept once"""
        eq1 = eq([a, x3, x4], [b, x1, x2])
        eq3 = eq([x1], [x3])
        prep = _prep(eq1, eq3, eq1)
        assert prep.get_modified_formula().get_predicates() == [eq1, eq3]


class TestReduceDisequalities:
    """Test singleton substitution and inequation reduction"""

    def test_singleton_becomes_literal(self):
        """A variable with a one-word language is replaced by the word"""
        store = LanguageStore({"x_1": parse_regex("ab")})
        prep = _prep(eq([x2], [x1, b]), store=store)
        prep.reduce_disequalities()
        assert prep.get_modified_formula().get_predicates() == [eq([x2], [Term.lit("ab"), b])]

    def test_different_words(self):
        """An inequation between different words holds"""
        store = LanguageStore({"x_1": parse_regex("a")})
        prep = _prep(neq([x1], [b]), eq([x2], [x1]), store=store)
        prep.reduce_disequalities()
        assert prep.get_modified_formula().get_predicates() == [eq([x2], [a])]

    def test_disjoint_languages(self):
        """An inequation whose sides cannot be equal is dropped"""
        store = LanguageStore({"x_1": parse_regex("a+"), "x_2": parse_regex("b+")})
        prep = _prep(neq([x1], [x2]), store=store)
        prep.reduce_disequalities()
        assert len(prep.get_modified_formula()) == 0

    def test_kept_inequation(self):
        """An inequation that may fail is kept"""
        prep = _prep(neq([x1], [b]))
        prep.reduce_disequalities()
        assert prep.get_modified_formula().get_predicates() == [neq([x1], [b])]

    def test_same_word_is_contradiction(self):
        """An inequation between equal words is unsatisfiable"""
        store = LanguageStore({"x_1": parse_regex("ab")})
        prep = _prep(neq([x1], [a, b]), store=store)
        prep.reduce_disequalities()
        assert prep.contains_unsat_eqs_or_diseqs()


class TestUnderapprox:
    """Test under-approximation of co-finite languages"""

    def test_replaces_co_finite(self):
        """A co-finite language becomes a window of lengths"""
        store = LanguageStore({"x_1": parse_regex("a|bb").complement()})
        prep = FormulaPreprocessor(Formula([eq([x1], [x2, a])]), store, underapprox_window=3)
        assert prep.underapprox_languages()
        aut = prep.get_store()["x_1"]
        assert aut.is_equivalent(Automaton.sigma_range(3, 6))
        # Still a subset of the original language
        assert aut.intersect(store["x_1"].complement()).is_empty()
        assert prep.get_store().underapproximated == {"x_1"}
        assert not store.underapproximated

    def test_universal_untouched(self):
        """Sigma* is not replaced"""
        prep = _prep(eq([x1], [x2, a]))
        assert not prep.underapprox_languages()
        assert "x_1" not in prep.get_store()

    def test_input_store_unchanged(self):
        """The preprocessor works on a copy of the store"""
        language = parse_regex("a").complement()
        store = LanguageStore({"x_1": language})
        prep = _prep(eq([x1], [x2]), store=store)
        prep.underapprox_languages()
        assert store["x_1"] is language


class TestPropagateEps:
    """Test propagation of empty variables"""

    def test_empty_side(self):
        """Variables of a side equal to eps are erased"""
        prep = _prep(eq([x1, x2], []), eq([x3], [x1, a, x2]))
        prep.propagate_eps()
        assert prep.get_modified_formula().get_predicates() == [eq([x3], [a])]
        assert prep.get_store().is_epsilon("x_1")
        assert prep.get_store().is_epsilon("x_2")

    def test_epsilon_language(self):
        """A variable whose language is {eps} is erased"""
        store = LanguageStore({"x_1": Automaton.epsilon()})
        prep = _prep(eq([x2], [x1, b]), store=store)
        prep.propagate_eps()
        assert prep.get_modified_formula().get_predicates() == [eq([x2], [b])]

    def test_transitive(self):
        """Erasing one variable can force others to be empty"""
        prep = _prep(eq([x1], []), eq([x1], [x2, x3]))
        prep.propagate_eps()
        assert len(prep.get_modified_formula()) == 0
        assert prep.get_store().is_epsilon("x_3")

    def test_literal_against_eps(self):
        """eps equal to a non-empty literal is a contradiction"""
        prep = _prep(eq([x1, a], []))
        prep.propagate_eps()
        assert prep.contains_unsat_eqs_or_diseqs()


class TestPropagateVariables:
    """Test merging of variables equated by x = y"""

    def test_propagate(self):
        """Variables are replaced by their representative"""
        prep = _prep(eq([a, x3, x4], [b, x1, x2]), eq([x1], [x2]), eq([x1], [x3]))
        prep.propagate_variables()
        assert prep.get_modified_formula().get_predicates() == [eq([a, x1, x4], [b, x1, x1])]

    def test_records_lengths(self):
        """The lengths of merged variables are kept equal"""
        prep = _prep(eq([x2], [x1]), eq([x3], [x2, a]))
        prep.propagate_variables()
        assert prep.get_modified_formula().get_predicates() == [eq([x3], [x1, a])]
        assert LenEq(LenVar("x_2"), LenVar("x_1")) in prep.len_formula

    def test_languages_intersected(self):
        """The representative gets the intersection of both languages"""
        store = LanguageStore({"x_1": parse_regex("a*"), "x_2": parse_regex("a{2}|b")})
        prep = _prep(eq([x1], [x2]), eq([x3], [x2, b]), store=store)
        prep.propagate_variables()
        assert prep.get_store()["x_1"].is_equivalent(parse_regex("aa"))

    def test_underapproximation_shared(self):
        """Both merged variables count as under-approximated"""
        store = LanguageStore()
        store.underapproximate("x_2", Automaton.sigma_range(2, 4))
        prep = _prep(eq([x1], [x2]), eq([x3], [x2, b]), store=store)
        prep.propagate_variables()
        assert prep.get_store().underapproximated == {"x_1", "x_2"}

    def test_length_sensitive_vars(self):
        """The representative inherits length sensitivity"""
        prep = FormulaPreprocessor(Formula([eq([x1], [x2])]), LanguageStore(), len_vars={"x_2"})
        prep.propagate_variables()
        assert "x_1" in prep.get_len_variables()


class TestGenerateIdentities:
    """Test generation of identities"""

    def test_identities(self):
        """Common prefixes and suffixes are cancelled"""
        eq1 = eq([y1, a, x1], [y1, x1, x1])
        eq2 = eq([x1, b], [x2, b])
        prep = _prep(eq1, eq2)
        prep.generate_identities()
        assert set(prep.get_modified_formula().get_predicates()) == {
            eq1, eq2, eq([a], [x1]), eq([x1], [x2])
        }

    def test_no_duplicate_identity(self):
        """An identity already present is not added again"""
        prep = _prep(eq([x1, b], [x2, b]), eq([x2], [x1]))
        prep.generate_identities()
        assert len(prep.get_modified_formula()) == 2


class TestContradictions:
    """Test detection of contradictory predicates"""

    def test_different_words(self):
        """Test equation between different words"""
        assert _prep(eq([a], [b])).contains_unsat_eqs_or_diseqs()

    def test_prefix_mismatch(self):
        """Test equation whose sides start with different literals"""
        assert _prep(eq([a, x3, x4], [b, x1, x2])).contains_unsat_eqs_or_diseqs()

    def test_suffix_mismatch(self):
        """Test equation whose sides end with different literals"""
        assert _prep(eq([x1, Term.lit("ab")], [x2, Term.lit("cb")])).contains_unsat_eqs_or_diseqs()

    def test_word_too_short(self):
        """A word cannot equal a side with more literal characters"""
        assert _prep(eq([Term.lit("ab")], [x1, Term.lit("abc")])).contains_unsat_eqs_or_diseqs()

    def test_identical_inequation(self):
        """s != s is unsatisfiable"""
        assert _prep(neq([x1, a], [x1, a])).contains_unsat_eqs_or_diseqs()

    def test_consistent(self):
        """Satisfiable predicates are not reported"""
        prep = _prep(eq([a, x1], [Term.lit("ab"), x2]), eq([x1, b], [x2]), neq([x1], [x2]))
        assert not prep.contains_unsat_eqs_or_diseqs()


class TestLenFormula:
    """Test the preprocessing length formula"""

    def test_bounds_of_constrained_vars(self):
        """Constrained variables in predicates contribute their lengths"""
        store = LanguageStore({"x_1": parse_regex("..")})
        prep = _prep(eq([x2], [x1, a]), store=store)
        assert prep.get_len_formula() == LenAnd(LenEq(LenVar("x_1"), LenConst(2)))

    def test_merged_vars(self):
        """Merged variables keep equal lengths"""
        prep = _prep(eq([x2], [x1]), eq([x3], [x2, a]))
        prep.propagate_variables()
        assert prep.get_len_formula() == LenAnd(LenEq(LenVar("x_2"), LenVar("x_1")))
