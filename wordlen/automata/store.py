"""
Language constraint store

Maps string variables to the regular language (automaton) they are
constrained to. Variables without an entry are unconstrained (Sigma*).
"""

from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple
from wordlen.automata.automaton import Automaton
from wordlen.core._terms import Term
from wordlen.core._lenformula import (
    LenNode, LenVar, LenConst, LenPlus, LenTimes,
    LenEq, LenLeq, LenAnd, LenOr, LenFalse
)


class LanguageStore:
    """Assignment of automata to variable names

    `underapproximated` names the variables whose language was replaced by a
    sub-language; it travels with copies of the store.
    """

    def __init__(self, languages: Optional[Dict[str, Automaton]] = None,
                 underapproximated: Iterable[str] = ()):
        self._languages: Dict[str, Automaton] = dict(languages or {})
        self.underapproximated: Set[str] = set(underapproximated)

    def __getitem__(self, var: str) -> Automaton:
        return self._languages[var]

    def __setitem__(self, var: str, automaton: Automaton):
        self._languages[var] = automaton

    def __delitem__(self, var: str):
        del self._languages[var]

    def __contains__(self, var: str) -> bool:
        return var in self._languages

    def __iter__(self) -> Iterator[str]:
        return iter(self._languages)

    def __len__(self) -> int:
        return len(self._languages)

    def items(self) -> List[Tuple[str, Automaton]]:
        return list(self._languages.items())

    def copy(self) -> 'LanguageStore':
        return LanguageStore(self._languages, self.underapproximated)

    def at(self, var: str) -> Automaton:
        """Language of a variable (Sigma* when unconstrained)"""
        return self._languages.get(var) or Automaton.sigma_star()

    def underapproximate(self, var: str, automaton: Automaton):
        """Replace the language of `var` by `automaton`, a sub-language of it"""
        self._languages[var] = automaton
        self.underapproximated.add(var)

    def restrict(self, var: str, automaton: Automaton):
        """Intersect the language of `var` with `automaton`"""
        if var in self._languages:
            automaton = self._languages[var].intersect(automaton)
        self._languages[var] = automaton.minimize()

    def concat_language(self, side: Sequence[Term]) -> Automaton:
        """Language of a concatenation of variables and literals"""
        result = Automaton.epsilon()
        for term in side:
            if term.is_literal():
                result = result.concatenate(Automaton.from_word(term.name))
            else:
                result = result.concatenate(self.at(term.name))
        return result.minimize()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_satisfiable(self) -> bool:
        """True if no variable is constrained to the empty language"""
        return all(not aut.is_empty() for aut in self._languages.values())

    def is_universal(self, var: str) -> bool:
        return self.at(var).is_universal()

    def is_co_finite(self, var: str) -> bool:
        return self.at(var).is_co_finite()

    def is_singleton(self, var: str) -> bool:
        return self.at(var).is_singleton()

    def is_epsilon(self, var: str) -> bool:
        return self.at(var).is_epsilon()

    def is_length_only(self, var: str) -> bool:
        return self.at(var).is_length_only()

    def state_count(self, var: str) -> int:
        return self.at(var).num_states()

    def minimize_all(self):
        for var, aut in list(self._languages.items()):
            self._languages[var] = aut.minimize()

    def length_bounds(self, var: str) -> LenNode:
        """Length formula satisfied exactly by the lengths of words of `var`

        The ultimately periodic length set is written as a disjunction:
        |x| = n for each accepted length n before the cycle, and
        |x| = n + period * k (k >= 0) for each accepted position n on it.
        """
        tail, period, accepting = self.at(var).word_lengths()
        length = LenVar(var)
        options: List[LenNode] = []

        for n in range(tail):
            if accepting[n]:
                options.append(LenEq(length, LenConst(n)))

        for n in range(tail, tail + period):
            if not accepting[n]:
                continue
            if period == 1:
                options.append(LenLeq(LenConst(n), length))
            else:
                k = LenVar(f"K!{var}_{n}")
                options.append(LenAnd(
                    LenLeq(LenConst(0), k),
                    LenEq(length, LenPlus(LenConst(n), LenTimes(period, k)))
                ))

        if not options:
            return LenFalse()
        if len(options) == 1:
            return options[0]
        return LenOr(*options)

    def __str__(self) -> str:
        return "{" + ", ".join(f"{v}: {a}" for v, a in sorted(self._languages.items())) + "}"
