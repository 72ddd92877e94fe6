"""
Satisfiability Checker for Word Equations

This module provides the main interface for deciding word equations: it runs
the length decision procedure and solves the resulting length formula with Z3.
"""

import z3
from typing import Dict, Optional
from wordlen.core.ast import Formula, LenNode
from wordlen.core.parser import parse
from wordlen.automata.store import LanguageStore
from wordlen.encoding.encoder import LenFormulaEncoder
from wordlen.preprocessing.formula_preprocess import DEFAULT_UNDERAPPROX_WINDOW
from wordlen.procedure.length_procedure import compute, Status, Precision

SAT = "sat"
UNSAT = "unsat"
UNKNOWN = "unknown"


class CheckResult:
    """Result of a satisfiability check"""

    def __init__(self, status: str, precision: Optional[Precision] = None,
                 reason: Optional[str] = None, model: Optional[z3.ModelRef] = None,
                 length_formula: Optional[LenNode] = None):
        self.status = status
        self.precision = precision
        self.reason = reason
        self.model = model
        self.length_formula = length_formula

    def lengths(self) -> Dict[str, int]:
        """Lengths of the string variables in the model (empty without one)"""
        if self.model is None:
            return {}
        result = {}
        for decl in self.model.decls():
            name = decl.name()
            # Positions and multipliers are fresh names
            if "!" not in name:
                result[name] = self.model[decl].as_long()
        return result

    def __str__(self) -> str:
        msg = self.status
        if self.precision is Precision.UNDERAPPROX and self.status == SAT:
            msg += " (under-approximation)"
        if self.reason:
            msg += f": {self.reason}"
        lengths = self.lengths()
        if lengths:
            msg += "\nLengths: " + ", ".join(f"|{v}| = {n}" for v, n in sorted(lengths.items()))
        return msg

    def __bool__(self) -> bool:
        return self.status == SAT


class StringChecker:
    """
    Main satisfiability checker for word equations.

    Verdicts:
    - unsat: preprocessing found a contradiction, or the exact length formula
      is unsatisfiable
    - sat: the length formula (exact or under-approximated) is satisfiable
    - unknown: the procedure does not apply, the under-approximation is
      unsatisfiable, or Z3 gave up
    """

    def __init__(self, timeout: int = 5000, verbose: bool = False,
                 preprocess: bool = True, underapprox: bool = True,
                 underapprox_window: int = DEFAULT_UNDERAPPROX_WINDOW):
        """
        Initialize the checker.

        Args:
            timeout: Z3 solver timeout in milliseconds
            verbose: Print debug information
            preprocess: Normalize formulas before length reasoning
            underapprox: Allow under-approximating co-finite languages
            underapprox_window: Width of the length window used for that
        """
        self.timeout = timeout
        self.verbose = verbose
        self.preprocess = preprocess
        self.underapprox = underapprox
        self.underapprox_window = underapprox_window

    def check(self, formula: Formula, store: Optional[LanguageStore] = None) -> CheckResult:
        """
        Decide the conjunction `formula` under the language constraints `store`

        Args:
            formula: Word (in)equations
            store: Language constraints of the variables

        Returns:
            CheckResult with status sat, unsat or unknown
        """
        result = compute(formula, store, verbose=self.verbose,
                         preprocess=self.preprocess, underapprox=self.underapprox,
                         underapprox_window=self.underapprox_window)

        if result.status is Status.UNSATISFIABLE:
            return CheckResult(UNSAT, result.precision, reason=result.reason)
        if result.status is Status.INAPPLICABLE:
            return CheckResult(UNKNOWN, reason=f"length procedure not applicable: {result.reason}")

        encoder = LenFormulaEncoder()
        solver = z3.Solver()
        solver.set("timeout", self.timeout)
        solver.add(encoder.encode(result.formula))

        if self.verbose:
            print(f"check: solving length formula with {len(encoder.var_cache)} variables")

        answer = solver.check()
        if answer == z3.sat:
            return CheckResult(SAT, result.precision, model=solver.model(),
                               length_formula=result.formula)
        if answer == z3.unsat:
            if result.precision is Precision.EXACT:
                return CheckResult(UNSAT, result.precision, length_formula=result.formula)
            return CheckResult(UNKNOWN, result.precision,
                               reason="under-approximation is unsatisfiable",
                               length_formula=result.formula)
        return CheckResult(UNKNOWN, result.precision, reason=f"z3: {solver.reason_unknown()}",
                           length_formula=result.formula)

    def check_text(self, text: str) -> CheckResult:
        """
        Parse and check a problem given in the textual syntax

        Example:
            >>> checker = StringChecker()
            >>> checker.check_text('x = y ++ "ab" & y = "c"').status
            'sat'
        """
        formula, store = parse(text)
        return self.check(formula, store)
