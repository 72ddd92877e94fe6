"""
Length Decision Procedure

Decides systems of word equations by reducing them to linear integer
arithmetic over variable lengths and literal begin positions. Applies when
every predicate is an equation, no variable occurs in two concatenations
(multi-term sides) and the variables defined by single-variable sides do not
depend on each other cyclically.

A run goes through the stages

    NOT_STARTED -> SUITABILITY_CHECKED -> POOLED -> CYCLE_CHECKED
                -> FORMULA_ASSEMBLED

and ends in one of three outcomes:
- APPLICABLE: a length formula, EXACT or UNDERAPPROX (satisfiability of the
  formula implies satisfiability of the input, not the converse)
- INAPPLICABLE: the input is outside the fragment, another strategy must
  be used
- UNSATISFIABLE: preprocessing found a contradiction
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple
from wordlen.core.ast import (
    Term, Predicate, Formula,
    LenNode, LenVar, LenConst, LenTrue, LenLeq, LenAnd
)
from wordlen.automata.store import LanguageStore
from wordlen.preprocessing.formula_preprocess import FormulaPreprocessor, DEFAULT_UNDERAPPROX_WINDOW
from wordlen.procedure.names import FreshNames
from wordlen.procedure.var_constraint import VarConstraint


class Stage(Enum):
    """Progress of one procedure run"""
    NOT_STARTED = 0
    SUITABILITY_CHECKED = 1
    POOLED = 2
    CYCLE_CHECKED = 3
    FORMULA_ASSEMBLED = 4


class Status(Enum):
    """Outcome of the procedure"""
    APPLICABLE = "applicable"
    INAPPLICABLE = "inapplicable"
    UNSATISFIABLE = "unsatisfiable"


class Precision(Enum):
    """Relation between the length formula and the input"""
    EXACT = "exact"
    UNDERAPPROX = "underapprox"


@dataclass
class LengthResult:
    """Outcome of one run of the length decision procedure"""
    status: Status
    formula: Optional[LenNode] = None
    precision: Precision = Precision.EXACT
    reason: str = ""

    def __str__(self):
        if self.status is Status.APPLICABLE:
            return f"{self.status.value} ({self.precision.value}): {self.formula}"
        if self.reason:
            return f"{self.status.value}: {self.reason}"
        return self.status.value


def _unsuitability(formula: Formula, store: LanguageStore) -> Optional[str]:
    for pred in formula:
        if not pred.is_eq_or_ineq():
            return f"non-equation predicate {pred}"

    for var in sorted(formula.get_vars()):
        # Sigma*
        if store.state_count(var) <= 1:
            continue
        # Can be under-approximated
        if store.is_co_finite(var):
            continue
        # Becomes a literal
        if store.is_singleton(var):
            continue
        if store.is_length_only(var):
            continue
        return f"regular constraint on {var}"
    return None


class LengthDecisionProcedure:
    """
    Length-based decision procedure for one conjunction of word equations.

    Usage: optionally preprocess(), then compute_next_solution(), then
    get_lengths() when it succeeded. An instance handles one run.
    """

    def __init__(self, formula: Formula, store: Optional[LanguageStore] = None,
                 len_vars: Optional[Set[str]] = None, verbose: bool = False,
                 underapprox: bool = True,
                 underapprox_window: int = DEFAULT_UNDERAPPROX_WINDOW):
        """Initialize the procedure

        Args:
            formula: Conjunction of word (in)equations
            store: Language constraints of the variables (default: none)
            len_vars: Length-sensitive variables (default: all variables)
            verbose: Print debug information
            underapprox: Allow replacing co-finite languages by finite ones
            underapprox_window: Width of the length window used for that
        """
        self.input_formula = formula
        self.formula = formula.copy()
        self.store = store.copy() if store is not None else LanguageStore()
        self.len_vars: Set[str] = set(len_vars) if len_vars is not None else formula.get_vars()
        self.verbose = verbose
        self.underapprox = underapprox
        self.underapprox_window = underapprox_window

        self.names = FreshNames()
        self.conversion: Dict[str, Term] = {}
        self.pool: Dict[str, VarConstraint] = {}
        self.stage = Stage.NOT_STARTED
        # Marks left in the store by an earlier run carry over
        self.precision = Precision.UNDERAPPROX if self.store.underapproximated else Precision.EXACT
        self.reason = ""

        self.preprocessing_len_formula: LenNode = LenTrue()
        self.implicit_len_formula: List[LenNode] = []
        self.computed_len_formula: List[LenNode] = []
        self._preprocessed = False

    @staticmethod
    def is_suitable(formula: Formula, store: LanguageStore) -> bool:
        """Language-level pre-check

        Every predicate must be an (in)equation and every variable's language
        must be Sigma*, co-finite, a singleton or determined by lengths.
        """
        return _unsuitability(formula, store) is None

    def _defer(self, reason: str) -> bool:
        self.reason = reason
        if self.verbose:
            print(f"len: inapplicable - {reason}")
        return False

    # ------------------------------------------------------------------
    # Preprocessing
    # ------------------------------------------------------------------

    def preprocess(self) -> Optional[Status]:
        """Normalize the formula and the language constraints

        Returns:
            Status.UNSATISFIABLE if a contradiction was found, else None
        """
        if self.verbose:
            print("len: preprocessing")

        prep = FormulaPreprocessor(self.formula, self.store, self.len_vars,
                                   verbose=self.verbose,
                                   underapprox_window=self.underapprox_window)

        prep.remove_trivial()
        prep.reduce_disequalities()

        if self.underapprox:
            for var in sorted(self.formula.get_vars()):
                store = prep.get_store()
                if store.is_co_finite(var) and not store.is_universal(var):
                    prep.underapprox_languages()
                    self.precision = Precision.UNDERAPPROX
                    if self.verbose:
                        print("len: under-approximating languages")
                    break

        prep.propagate_eps()
        prep.propagate_variables()
        prep.generate_identities()
        prep.propagate_variables()
        prep.remove_trivial()

        self.formula = prep.get_modified_formula()
        self.store = prep.get_store()
        self.len_vars = prep.get_len_variables()
        self.preprocessing_len_formula = prep.get_len_formula()
        self._preprocessed = True

        if len(self.formula) > 0:
            self.store.minimize_all()

        if self.verbose:
            print(f"len: preprocessed formula: {self.formula}")

        if prep.contains_unsat_eqs_or_diseqs():
            self.reason = "contradictory predicate"
            return Status.UNSATISFIABLE

        if not self.store.is_satisfiable():
            self.reason = "empty language"
            return Status.UNSATISFIABLE

        return None

    # ------------------------------------------------------------------
    # Length formula
    # ------------------------------------------------------------------

    def _check_suitability(self) -> bool:
        concat_vars: Set[Term] = set()
        for pred in self.formula:
            if not pred.is_equation():
                return self._defer(f"inequation {pred}")
            for index, side in enumerate(pred.params):
                if len(side) <= 1:
                    continue
                if pred.mult_occurr_var_side(index):
                    return self._defer(f"variable repeated in one side of {pred}")
                for t in side:
                    if t.is_literal():
                        continue
                    if t in concat_vars:
                        return self._defer(f"{t} occurs in more than one concatenation")
                    concat_vars.add(t)

        for var in sorted(self.formula.get_vars()):
            if not self.store.is_length_only(var):
                return self._defer(f"language of {var} is not determined by lengths")
        return True

    def _add_to_pool(self, pred: Predicate):
        in_pool = False
        for side in pred.params:
            if len(side) == 1 and side[0].is_variable():
                name = side[0].name
                if name not in self.pool:
                    self.pool[name] = VarConstraint(name)
                self.pool[name].add(pred, self.conversion, self.names)
                in_pool = True

        if not in_pool:
            fresh = self.names.fresh("f")
            self.pool[fresh] = VarConstraint(fresh)
            self.pool[fresh].add(pred, self.conversion, self.names)

    def compute_next_solution(self) -> bool:
        """Build the length formula of the (preprocessed) formula

        Returns:
            False if the formula is outside the fragment (see `reason`)
        """
        if self.verbose:
            print(f"len: computing lengths of {self.formula}")

        if not self._check_suitability():
            return False
        self.stage = Stage.SUITABILITY_CHECKED

        for pred in self.formula:
            self._add_to_pool(pred)
        self.stage = Stage.POOLED

        if self.verbose:
            for alias, lit in self.conversion.items():
                print(f"len: {alias} : {lit}")

        for name in sorted(self.pool):
            if not self.pool[name].parse(self.pool):
                return self._defer(f"cyclic dependency through {name}")
        self.stage = Stage.CYCLE_CHECKED

        for var in sorted(self.input_formula.get_vars() | self.formula.get_vars()):
            self.implicit_len_formula.append(LenLeq(LenConst(0), LenVar(var)))
        if not self._preprocessed:
            for var in sorted(self.formula.get_vars()):
                if var in self.store and not self.store.is_universal(var):
                    self.implicit_len_formula.append(self.store.length_bounds(var))

        for name in sorted(self.pool):
            vc = self.pool[name]
            if self.verbose:
                print(f"len: {vc}")
            self.computed_len_formula.append(vc.get_lengths(self.pool, self.conversion))
        self.stage = Stage.FORMULA_ASSEMBLED

        if self.verbose:
            print("len: finished computing")
        return True

    def get_lengths(self) -> Tuple[LenNode, Precision]:
        """The length formula and its precision"""
        parts: List[LenNode] = [
            self.preprocessing_len_formula,
            LenAnd(*self.implicit_len_formula),
            LenAnd(*self.computed_len_formula),
        ]

        vars_in_eqs = self.formula.get_vars()
        for var in sorted(self.store):
            if var not in vars_in_eqs:
                parts.append(self.store.length_bounds(var))

        return LenAnd(*parts), self.precision


def compute(formula: Formula, store: Optional[LanguageStore] = None,
            verbose: bool = False, preprocess: bool = True, underapprox: bool = True,
            underapprox_window: int = DEFAULT_UNDERAPPROX_WINDOW) -> LengthResult:
    """Run the length decision procedure on `formula`

    Args:
        formula: Conjunction of word (in)equations
        store: Language constraints of the variables
        verbose: Print debug information
        preprocess: Normalize the formula first
        underapprox: Allow under-approximating co-finite languages
        underapprox_window: Width of the length window used for that

    Returns:
        LengthResult with status APPLICABLE (formula and precision),
        INAPPLICABLE or UNSATISFIABLE
    """
    store = store if store is not None else LanguageStore()

    reason = _unsuitability(formula, store)
    if reason is not None:
        if verbose:
            print(f"len: not suitable - {reason}")
        return LengthResult(Status.INAPPLICABLE, reason=reason)

    procedure = LengthDecisionProcedure(formula, store, verbose=verbose,
                                        underapprox=underapprox,
                                        underapprox_window=underapprox_window)
    if preprocess and procedure.preprocess() is Status.UNSATISFIABLE:
        return LengthResult(Status.UNSATISFIABLE, precision=procedure.precision,
                            reason=procedure.reason)

    if not procedure.compute_next_solution():
        return LengthResult(Status.INAPPLICABLE, precision=procedure.precision,
                            reason=procedure.reason)

    len_formula, precision = procedure.get_lengths()
    return LengthResult(Status.APPLICABLE, len_formula, precision)
