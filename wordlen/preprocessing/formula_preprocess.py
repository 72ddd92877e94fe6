"""
Formula Preprocessing for Word Equations

Rewrites a conjunction of word (in)equations together with its language
constraints into a simpler, equisatisfiable one (or an under-approximation of
it) before length reasoning. Each step is a separate method so that callers
can run them in the order they need:

1. remove_trivial: drop equations with identical sides and empty literals
2. reduce_disequalities: turn singleton variables into literals, drop
   inequations that hold trivially
3. underapprox_languages: replace co-finite languages by finite ones
   characterized by lengths only
4. propagate_eps: erase variables forced to be empty
5. propagate_variables: merge variables equated by x = y
6. generate_identities: derive equations by cancelling common prefixes and
   suffixes

Length facts lost by rewriting (for instance |y| = |x| after merging y into
x) are collected into the preprocessing length formula.
"""

from typing import List, Optional, Sequence, Set
from wordlen.core.ast import (
    Term, Predicate, Formula,
    LenNode, LenVar, LenEq, LenAnd
)
from wordlen.automata.automaton import Automaton
from wordlen.automata.store import LanguageStore
from wordlen.preprocessing.equality import UnionFind

DEFAULT_UNDERAPPROX_WINDOW = 8


def _unique(predicates: Sequence[Predicate]) -> List[Predicate]:
    seen = set()
    result = []
    for pred in predicates:
        if pred not in seen:
            seen.add(pred)
            result.append(pred)
    return result


def _is_word(side: Sequence[Term]) -> bool:
    return all(t.is_literal() for t in side)


def _word(side: Sequence[Term]) -> str:
    return "".join(t.name for t in side)


def _leading_word(side: Sequence[Term]) -> str:
    parts = []
    for t in side:
        if not t.is_literal():
            break
        parts.append(t.name)
    return "".join(parts)


def _trailing_word(side: Sequence[Term]) -> str:
    parts = []
    for t in reversed(side):
        if not t.is_literal():
            break
        parts.append(t.name)
    return "".join(reversed(parts))


def _words_conflict(left: Sequence[Term], right: Sequence[Term]) -> bool:
    """True if the literal parts of two sides make them provably different"""
    if _is_word(left) and _is_word(right):
        return _word(left) != _word(right)

    for take in (_leading_word, _trailing_word):
        lw, rw = take(left), take(right)
        common = min(len(lw), len(rw))
        if take is _leading_word:
            if lw[:common] != rw[:common]:
                return True
        elif common and lw[-common:] != rw[-common:]:
            return True

    # A fixed word cannot equal a side whose literals are already longer
    for word_side, other in ((left, right), (right, left)):
        if _is_word(word_side):
            literal_len = sum(len(t.name) for t in other if t.is_literal())
            if literal_len > len(_word(word_side)):
                return True
    return False


class FormulaPreprocessor:
    """Normalizes word equations before length reasoning"""

    def __init__(self, formula: Formula, store: LanguageStore,
                 len_vars: Optional[Set[str]] = None, verbose: bool = False,
                 underapprox_window: int = DEFAULT_UNDERAPPROX_WINDOW):
        """
        Args:
            formula: Input conjunction of predicates
            store: Language constraints of the variables (copied)
            len_vars: Length-sensitive variables (default: all variables)
            verbose: Print each rewriting step
            underapprox_window: Width of the length window that replaces
                co-finite languages
        """
        self.predicates: List[Predicate] = _unique(formula.get_predicates())
        self.store = store.copy()
        self.len_vars: Set[str] = set(len_vars) if len_vars is not None else formula.get_vars()
        self.verbose = verbose
        self.underapprox_window = underapprox_window
        self.len_formula: List[LenNode] = []
        self.uf = UnionFind()

    def _vars(self) -> Set[str]:
        return Formula(self.predicates).get_vars()

    def _substitute(self, var: str, replacement: Sequence[Term]):
        """Replace every occurrence of variable `var`"""
        result = []
        for pred in self.predicates:
            replaced = pred.replace((Term.var(var),), replacement)
            result.append(pred if replaced is None else replaced)
        self.predicates = _unique(result)

    def _drop_identical_equations(self):
        self.predicates = [p for p in self.predicates
                           if not (p.is_equation() and p.left == p.right)]

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def remove_trivial(self):
        """Drop empty literals and equations of the form s = s"""
        result = []
        for pred in self.predicates:
            left = tuple(t for t in pred.left if not (t.is_literal() and t.name == ""))
            right = tuple(t for t in pred.right if not (t.is_literal() and t.name == ""))
            result.append(Predicate(pred.type, left, right))
        self.predicates = _unique(result)
        self._drop_identical_equations()

    def reduce_disequalities(self):
        """Make singleton variables literals and drop trivially true inequations"""
        for var in sorted(self._vars()):
            if var not in self.store or not self.store.is_singleton(var):
                continue
            word = self.store[var].single_word()
            if word == "":
                # Left to propagate_eps
                continue
            if self.verbose:
                print(f"prep: {var} is the literal \"{word}\"")
            self._substitute(var, (Term.lit(word),))

        result = []
        for pred in self.predicates:
            if pred.is_inequation():
                if _is_word(pred.left) and _is_word(pred.right):
                    if _word(pred.left) != _word(pred.right):
                        if self.verbose:
                            print(f"prep: dropping satisfied inequation {pred}")
                        continue
                else:
                    left_lang = self.store.concat_language(pred.left)
                    right_lang = self.store.concat_language(pred.right)
                    if left_lang.intersect(right_lang).is_empty():
                        if self.verbose:
                            print(f"prep: dropping inequation with disjoint sides {pred}")
                        continue
            result.append(pred)
        self.predicates = result

    def underapprox_languages(self) -> bool:
        """Replace co-finite languages by the words of a length window

        A co-finite language contains every word longer than its longest
        missing word, so all words with a length in [k, k + window] (k one
        more than that longest missing word) form a finite sub-language
        determined by lengths alone.

        Returns:
            True if some language was replaced
        """
        changed = False
        for var in sorted(self._vars()):
            aut = self.store.at(var)
            if aut.is_universal() or not aut.is_co_finite():
                continue
            lo = aut.complement().max_word_length() + 1
            self.store.underapproximate(var, Automaton.sigma_range(lo, lo + self.underapprox_window))
            if self.verbose:
                print(f"prep: under-approximating {var} by lengths [{lo}, {lo + self.underapprox_window}]")
            changed = True
        return changed

    def propagate_eps(self):
        """Erase variables that must be the empty word"""
        while True:
            eps_vars: Set[str] = set()
            for pred in self.predicates:
                if not pred.is_equation():
                    continue
                for side, other in ((pred.left, pred.right), (pred.right, pred.left)):
                    if not side:
                        eps_vars |= {t.name for t in other if t.is_variable()}
            present = self._vars()
            eps_vars |= {v for v in present if v in self.store and self.store.is_epsilon(v)}
            eps_vars &= present
            if not eps_vars:
                return

            for var in sorted(eps_vars):
                if self.verbose:
                    print(f"prep: {var} is empty")
                self.store.restrict(var, Automaton.epsilon())
                self._substitute(var, ())
            self._drop_identical_equations()

    def propagate_variables(self):
        """Merge variables equated by bare equations x = y"""
        while True:
            pair = None
            for pred in self.predicates:
                if (pred.is_equation() and len(pred.left) == 1 and len(pred.right) == 1 and
                        pred.left[0].is_variable() and pred.right[0].is_variable() and
                        pred.left[0] != pred.right[0]):
                    pair = (pred.left[0].name, pred.right[0].name)
                    break
            if pair is None:
                return

            rep = self.uf.union(*pair)
            other = pair[1] if rep == pair[0] else pair[0]
            if self.verbose:
                print(f"prep: replacing {other} by {rep}")

            if rep in self.store or other in self.store:
                merged = self.store.at(rep).intersect(self.store.at(other)).minimize()
                self.store[rep] = merged
                self.store[other] = merged
            if {rep, other} & self.store.underapproximated:
                self.store.underapproximated |= {rep, other}
            if other in self.len_vars:
                self.len_vars.add(rep)
            self.len_formula.append(LenEq(LenVar(other), LenVar(rep)))

            self._substitute(other, (Term.var(rep),))
            self._drop_identical_equations()

    def generate_identities(self):
        """Add x = y for equations u ++ x ++ v = u ++ y ++ v"""
        existing = set(self.predicates)
        new = []
        for pred in self.predicates:
            if not pred.is_equation():
                continue
            left, right = list(pred.left), list(pred.right)
            while left and right and left[0] == right[0]:
                left.pop(0)
                right.pop(0)
            while left and right and left[-1] == right[-1]:
                left.pop()
                right.pop()
            if len(left) != 1 or len(right) != 1:
                continue

            identity = Predicate.equation(left, right)
            if identity in existing or identity.switched_sides() in existing:
                continue
            if self.verbose:
                print(f"prep: identity {identity} from {pred}")
            existing.add(identity)
            new.append(identity)
        self.predicates.extend(new)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def contains_unsat_eqs_or_diseqs(self) -> bool:
        """True if some predicate is contradictory by its literals alone"""
        for pred in self.predicates:
            if pred.is_equation() and _words_conflict(pred.left, pred.right):
                if self.verbose:
                    print(f"prep: contradictory equation {pred}")
                return True
            if pred.is_inequation():
                if pred.left == pred.right or (
                        _is_word(pred.left) and _is_word(pred.right) and
                        _word(pred.left) == _word(pred.right)):
                    if self.verbose:
                        print(f"prep: contradictory inequation {pred}")
                    return True
        return False

    def get_modified_formula(self) -> Formula:
        return Formula(self.predicates)

    def get_store(self) -> LanguageStore:
        return self.store

    def get_len_variables(self) -> Set[str]:
        return set(self.len_vars)

    def get_len_formula(self) -> LenNode:
        """Length facts dropped by rewriting plus bounds of constrained variables"""
        parts = list(self.len_formula)
        for var in sorted(self._vars()):
            if var in self.store and not self.store.is_universal(var):
                parts.append(self.store.length_bounds(var))
        return LenAnd(*parts)
