"""
Finite automata for regular language constraints

Languages are represented by complete deterministic automata over an explicit
set of characters plus one extra symbol, OTHER, which stands for every
character outside that set. Automata built over different character sets are
combined by first widening both to the union of their alphabets: a widened
character simply behaves like OTHER did.

Word-count notions (finite, singleton, co-finite) are relative to this finite
alphabet, where OTHER counts as a single letter.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

OTHER = "<other>"


class Nfa:
    """Nondeterministic automaton with epsilon moves

    Only used as an intermediate step for regex compilation and
    concatenation; every query runs on the determinized Automaton.
    """

    def __init__(self):
        self.delta: List[Dict[str, Set[int]]] = []
        self.eps: List[Set[int]] = []
        self.initial: Set[int] = set()
        self.finals: Set[int] = set()

    @property
    def num_states(self) -> int:
        return len(self.delta)

    def add_state(self) -> int:
        self.delta.append({})
        self.eps.append(set())
        return len(self.delta) - 1

    def add_transition(self, src: int, symbol: str, dst: int):
        self.delta[src].setdefault(symbol, set()).add(dst)

    def add_epsilon(self, src: int, dst: int):
        self.eps[src].add(dst)

    def _closure(self, states: Iterable[int]) -> FrozenSet[int]:
        result = set(states)
        stack = list(result)
        while stack:
            s = stack.pop()
            for t in self.eps[s]:
                if t not in result:
                    result.add(t)
                    stack.append(t)
        return frozenset(result)

    def determinize(self, alphabet: Iterable[str]) -> 'Automaton':
        """Subset construction; the empty subset becomes the sink state"""
        alphabet = frozenset(alphabet)
        symbols = sorted(alphabet) + [OTHER]
        start = self._closure(self.initial)
        index = {start: 0}
        queue = [start]
        delta: List[Dict[str, int]] = []
        finals: Set[int] = set()

        i = 0
        while i < len(queue):
            current = queue[i]
            row = {}
            for a in symbols:
                targets: Set[int] = set()
                for s in current:
                    targets |= self.delta[s].get(a, set())
                nxt = self._closure(targets)
                if nxt not in index:
                    index[nxt] = len(queue)
                    queue.append(nxt)
                row[a] = index[nxt]
            delta.append(row)
            if current & self.finals:
                finals.add(i)
            i += 1

        return Automaton(alphabet, delta, finals)


class Automaton:
    """Complete DFA; state 0 is initial"""

    def __init__(self, alphabet: Iterable[str], delta: List[Dict[str, int]],
                 finals: Iterable[int]):
        self.alphabet: FrozenSet[str] = frozenset(alphabet)
        self.delta = delta
        self.finals: FrozenSet[int] = frozenset(finals)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def empty(cls, alphabet: Iterable[str] = ()) -> 'Automaton':
        symbols = sorted(alphabet) + [OTHER]
        return cls(alphabet, [{a: 0 for a in symbols}], set())

    @classmethod
    def sigma_star(cls, alphabet: Iterable[str] = ()) -> 'Automaton':
        symbols = sorted(alphabet) + [OTHER]
        return cls(alphabet, [{a: 0 for a in symbols}], {0})

    @classmethod
    def epsilon(cls) -> 'Automaton':
        return cls.from_word("")

    @classmethod
    def from_word(cls, word: str) -> 'Automaton':
        alphabet = set(word)
        symbols = sorted(alphabet) + [OTHER]
        sink = len(word) + 1
        delta = []
        for i in range(len(word) + 2):
            row = {a: sink for a in symbols}
            if i < len(word):
                row[word[i]] = i + 1
            delta.append(row)
        return cls(alphabet, delta, {len(word)})

    @classmethod
    def sigma_range(cls, lo: int, hi: Optional[int] = None) -> 'Automaton':
        """All words whose length lies in [lo, hi] (no upper bound if hi is None)"""
        if hi is not None and hi < lo:
            return cls.empty()
        if hi is None:
            delta = [{OTHER: min(i + 1, lo)} for i in range(lo + 1)]
            return cls((), delta, {lo})
        sink = hi + 1
        delta = [{OTHER: min(i + 1, sink)} for i in range(hi + 2)]
        return cls((), delta, set(range(lo, hi + 1)))

    # ------------------------------------------------------------------
    # Basic accessors
    # ------------------------------------------------------------------

    @property
    def symbols(self) -> List[str]:
        return sorted(self.alphabet) + [OTHER]

    def num_states(self) -> int:
        return len(self.delta)

    def with_alphabet(self, chars: Iterable[str]) -> 'Automaton':
        """Same language over a wider explicit alphabet"""
        extra = set(chars) - self.alphabet
        if not extra:
            return self
        delta = []
        for row in self.delta:
            new_row = dict(row)
            for c in extra:
                new_row[c] = row[OTHER]
            delta.append(new_row)
        return Automaton(self.alphabet | extra, delta, self.finals)

    def step(self, state: int, char: str) -> int:
        symbol = char if char in self.alphabet else OTHER
        return self.delta[state][symbol]

    def accepts(self, word: str) -> bool:
        state = 0
        for char in word:
            state = self.step(state, char)
        return state in self.finals

    def __str__(self) -> str:
        chars = "".join(sorted(self.alphabet))
        return f"Automaton(states={self.num_states()}, finals={sorted(self.finals)}, alphabet={chars!r})"

    __repr__ = __str__

    # ------------------------------------------------------------------
    # Boolean operations
    # ------------------------------------------------------------------

    def complement(self) -> 'Automaton':
        return Automaton(self.alphabet, self.delta,
                         set(range(self.num_states())) - self.finals)

    def _product(self, other: 'Automaton', both: bool) -> 'Automaton':
        alphabet = self.alphabet | other.alphabet
        a = self.with_alphabet(alphabet)
        b = other.with_alphabet(alphabet)
        symbols = sorted(alphabet) + [OTHER]

        index = {(0, 0): 0}
        queue = [(0, 0)]
        delta: List[Dict[str, int]] = []
        finals: Set[int] = set()
        i = 0
        while i < len(queue):
            p, q = queue[i]
            row = {}
            for sym in symbols:
                pair = (a.delta[p][sym], b.delta[q][sym])
                if pair not in index:
                    index[pair] = len(queue)
                    queue.append(pair)
                row[sym] = index[pair]
            delta.append(row)
            in_a, in_b = p in a.finals, q in b.finals
            if (in_a and in_b) if both else (in_a or in_b):
                finals.add(i)
            i += 1
        return Automaton(alphabet, delta, finals)

    def intersect(self, other: 'Automaton') -> 'Automaton':
        return self._product(other, both=True)

    def union(self, other: 'Automaton') -> 'Automaton':
        return self._product(other, both=False)

    def _copy_into(self, nfa: Nfa) -> int:
        """Copy states into `nfa`; return the offset of state 0"""
        offset = nfa.num_states
        for _ in range(self.num_states()):
            nfa.add_state()
        for s, row in enumerate(self.delta):
            for sym, t in row.items():
                nfa.add_transition(offset + s, sym, offset + t)
        return offset

    def concatenate(self, other: 'Automaton') -> 'Automaton':
        alphabet = self.alphabet | other.alphabet
        a = self.with_alphabet(alphabet)
        b = other.with_alphabet(alphabet)

        nfa = Nfa()
        off_a = a._copy_into(nfa)
        off_b = b._copy_into(nfa)
        nfa.initial = {off_a}
        for f in a.finals:
            nfa.add_epsilon(off_a + f, off_b)
        nfa.finals = {off_b + f for f in b.finals}
        return nfa.determinize(alphabet)

    def is_equivalent(self, other: 'Automaton') -> bool:
        """Language equality"""
        return (self.intersect(other.complement()).is_empty() and
                other.intersect(self.complement()).is_empty())

    # ------------------------------------------------------------------
    # Minimization
    # ------------------------------------------------------------------

    def _reachable(self) -> Set[int]:
        seen = {0}
        stack = [0]
        while stack:
            s = stack.pop()
            for t in self.delta[s].values():
                if t not in seen:
                    seen.add(t)
                    stack.append(t)
        return seen

    def minimize(self) -> 'Automaton':
        """Moore partition refinement, then drop characters behaving like OTHER"""
        states = sorted(self._reachable())
        symbols = self.symbols

        block = {s: (1 if s in self.finals else 0) for s in states}
        count = len(set(block.values()))
        while True:
            signatures: Dict[Tuple, int] = {}
            refined = {}
            for s in states:
                key = (block[s],) + tuple(block[self.delta[s][a]] for a in symbols)
                refined[s] = signatures.setdefault(key, len(signatures))
            block = refined
            if len(signatures) == count:
                break
            count = len(signatures)

        rep: Dict[int, int] = {}
        for s in states:
            rep.setdefault(block[s], s)

        # Number blocks in BFS order from the initial state
        order = {block[0]: 0}
        queue = [block[0]]
        i = 0
        while i < len(queue):
            b = queue[i]
            i += 1
            for a in symbols:
                tb = block[self.delta[rep[b]][a]]
                if tb not in order:
                    order[tb] = len(queue)
                    queue.append(tb)

        delta = [{a: order[block[self.delta[rep[b]][a]]] for a in symbols} for b in queue]
        finals = {order[b] for b in queue if rep[b] in self.finals}

        redundant = {c for c in self.alphabet
                     if all(row[c] == row[OTHER] for row in delta)}
        if redundant:
            for row in delta:
                for c in redundant:
                    del row[c]
        return Automaton(self.alphabet - redundant, delta, finals)

    # ------------------------------------------------------------------
    # Language queries
    # ------------------------------------------------------------------

    def _useful(self) -> Set[int]:
        """States that are reachable and can reach a final state"""
        reachable = self._reachable()
        reverse: Dict[int, Set[int]] = {}
        for s in reachable:
            for t in self.delta[s].values():
                reverse.setdefault(t, set()).add(s)
        useful = set(f for f in self.finals if f in reachable)
        stack = list(useful)
        while stack:
            t = stack.pop()
            for s in reverse.get(t, ()):
                if s not in useful:
                    useful.add(s)
                    stack.append(s)
        return useful

    def is_empty(self) -> bool:
        return not (self._reachable() & self.finals)

    def is_universal(self) -> bool:
        return self.complement().is_empty()

    def is_epsilon(self) -> bool:
        return self.is_singleton() and self.single_word() == ""

    def _useful_successors(self, state: int, useful: Set[int]) -> List[Tuple[str, int]]:
        return [(a, t) for a, t in self.delta[state].items() if t in useful]

    def is_finite(self) -> bool:
        """True if accepted words have bounded length (no useful cycle)"""
        useful = self._useful()
        colour: Dict[int, int] = {}  # 1 = on stack, 2 = finished
        for root in useful:
            if root in colour:
                continue
            colour[root] = 1
            stack = [(root, iter(self._useful_successors(root, useful)))]
            while stack:
                state, successors = stack[-1]
                advanced = False
                for _, t in successors:
                    mark = colour.get(t)
                    if mark == 1:
                        return False
                    if mark is None:
                        colour[t] = 1
                        stack.append((t, iter(self._useful_successors(t, useful))))
                        advanced = True
                        break
                if not advanced:
                    colour[state] = 2
                    stack.pop()
        return True

    def is_co_finite(self) -> bool:
        return self.complement().is_finite()

    def _topological_useful(self, useful: Set[int]) -> List[int]:
        """Useful states in topological order (automaton must be finite)"""
        indegree = {s: 0 for s in useful}
        for s in useful:
            for _, t in self._useful_successors(s, useful):
                indegree[t] += 1
        order = [s for s in sorted(useful) if indegree[s] == 0]
        i = 0
        while i < len(order):
            s = order[i]
            i += 1
            for _, t in self._useful_successors(s, useful):
                indegree[t] -= 1
                if indegree[t] == 0:
                    order.append(t)
        return order

    def count_words(self, cap: int = 2) -> int:
        """Number of accepted words, saturated at `cap`

        An OTHER transition stands for many characters and counts as `cap`.
        """
        if self.is_empty():
            return 0
        if not self.is_finite():
            return cap
        useful = self._useful()
        counts: Dict[int, int] = {}
        for s in reversed(self._topological_useful(useful)):
            total = 1 if s in self.finals else 0
            for a, t in self._useful_successors(s, useful):
                weight = cap if a == OTHER else 1
                total += weight * counts[t]
            counts[s] = min(total, cap)
        return counts[0]

    def is_singleton(self) -> bool:
        return self.count_words() == 1

    def single_word(self) -> Optional[str]:
        """The only accepted word of a singleton language, else None"""
        if not self.is_singleton():
            return None
        useful = self._useful()
        word = []
        state = 0
        while state not in self.finals:
            (char, state), = self._useful_successors(state, useful)
            word.append(char)
        return "".join(word)

    def max_word_length(self) -> int:
        """Length of the longest word of a finite language (-1 if empty)"""
        if self.is_empty():
            return -1
        if not self.is_finite():
            raise ValueError("Language is infinite")
        useful = self._useful()
        longest: Dict[int, int] = {}
        for s in reversed(self._topological_useful(useful)):
            best = 0 if s in self.finals else -1
            for _, t in self._useful_successors(s, useful):
                if longest[t] >= 0:
                    best = max(best, longest[t] + 1)
            longest[s] = best
        return longest[0]

    def is_length_only(self) -> bool:
        """True if membership depends on the word length only"""
        return all(len(set(row.values())) == 1 for row in self.minimize().delta)

    def word_lengths(self) -> Tuple[int, int, List[bool]]:
        """Lengths of accepted words as an ultimately periodic set

        Follows the unary projection of the automaton: the sets of states
        reachable by words of length 0, 1, 2, ... repeat after `tail` steps
        with period `period`.

        Returns:
            (tail, period, accepting) where accepting[n] tells whether some
            word of length n is accepted, for n < tail + period. A length
            n >= tail is accepted iff accepting[tail + (n - tail) % period].
        """
        sets = [frozenset({0})]
        seen = {sets[0]: 0}
        while True:
            nxt = frozenset(t for s in sets[-1] for t in self.delta[s].values())
            if nxt in seen:
                tail = seen[nxt]
                period = len(sets) - tail
                break
            seen[nxt] = len(sets)
            sets.append(nxt)
        accepting = [bool(s & self.finals) for s in sets]
        return tail, period, accepting
