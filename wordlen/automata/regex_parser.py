"""
Regular Expression Parser

Converts regex patterns to finite automata for language constraints.

Supported patterns:
- Character classes: [0-9], [a-z], [A-Z], [a-zA-Z0-9], negated [^ab]
- Quantifiers: *, +, ?, {m}, {m,}, {m,n}
- Alternation: |
- Concatenation (implicit)
- Literal characters
- Dot: . (any character)
- Anchors: ^, $ (start/end - simplified)

The pattern is first parsed into a small tree of tuples:
    ('eps',) ('char', c) ('class', chars, negated) ('any',)
    ('cat', [nodes]) ('alt', [nodes]) ('star', node) ('plus', node)
    ('opt', node) ('rep', node, lo, hi)
which is then compiled with Thompson's construction and determinized.
Characters outside the ones mentioned by the pattern are matched by '.'
and by negated classes through the OTHER symbol.
"""

import string
from typing import FrozenSet, Optional, Set, Tuple
from wordlen.automata.automaton import Automaton, Nfa, OTHER


class RegexParseError(Exception):
    """Error parsing regex pattern"""
    pass


DIGITS = frozenset(string.digits)
WORD_CHARS = frozenset(string.ascii_letters + string.digits + '_')
WHITESPACE = frozenset(' \t\n\r')


class RegexParser:
    """Parse regex patterns into a regex tree"""

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.pos = 0

    def parse(self) -> Tuple:
        """Parse the regex pattern and return its tree"""
        if not self.pattern:
            return ('eps',)

        result = self._parse_alternation()
        if self.pos < len(self.pattern):
            raise RegexParseError(f"Unexpected {self.pattern[self.pos]!r} at position {self.pos}")
        return result

    def _peek(self) -> Optional[str]:
        """Peek at current character without consuming"""
        if self.pos < len(self.pattern):
            return self.pattern[self.pos]
        return None

    def _consume(self) -> Optional[str]:
        """Consume and return current character"""
        if self.pos < len(self.pattern):
            ch = self.pattern[self.pos]
            self.pos += 1
            return ch
        return None

    def _parse_alternation(self) -> Tuple:
        """Parse alternation (|)"""
        alternatives = [self._parse_concatenation()]

        while self._peek() == '|':
            self._consume()  # consume '|'
            alternatives.append(self._parse_concatenation())

        if len(alternatives) == 1:
            return alternatives[0]
        return ('alt', alternatives)

    def _parse_concatenation(self) -> Tuple:
        """Parse concatenation (implicit)"""
        parts = []

        while True:
            ch = self._peek()
            if ch is None or ch in ['|', ')']:
                break

            parts.append(self._parse_quantified())

        if len(parts) == 0:
            return ('eps',)
        elif len(parts) == 1:
            return parts[0]
        return ('cat', parts)

    def _parse_quantified(self) -> Tuple:
        """Parse quantified expression (*, +, ?, {m,n})"""
        node = self._parse_atom()

        while True:
            ch = self._peek()
            if ch == '*':
                self._consume()
                node = ('star', node)
            elif ch == '+':
                self._consume()
                node = ('plus', node)
            elif ch == '?':
                self._consume()
                node = ('opt', node)
            elif ch == '{':
                lo, hi = self._parse_bounds()
                node = ('rep', node, lo, hi)
            else:
                return node

    def _parse_bounds(self) -> Tuple[int, Optional[int]]:
        """Parse {m}, {m,} or {m,n}"""
        start = self.pos
        self._consume()  # consume '{'
        end = self.pattern.find('}', self.pos)
        if end < 0:
            raise RegexParseError(f"Unclosed repetition at position {start}")
        body = self.pattern[self.pos:end]
        self.pos = end + 1

        lo_text, sep, hi_text = body.partition(',')
        try:
            lo = int(lo_text)
            if not sep:
                hi = lo
            elif hi_text.strip() == '':
                hi = None
            else:
                hi = int(hi_text)
        except ValueError:
            raise RegexParseError(f"Invalid repetition {{{body}}} at position {start}")

        if hi is not None and hi < lo:
            raise RegexParseError(f"Invalid repetition {{{body}}} at position {start}")
        return lo, hi

    def _parse_atom(self) -> Tuple:
        """Parse atomic regex element"""
        ch = self._peek()

        if ch is None:
            raise RegexParseError(f"Unexpected end of pattern at position {self.pos}")

        # Character class [...]
        if ch == '[':
            return self._parse_character_class()

        # Grouping (...)
        elif ch == '(':
            self._consume()  # consume '('
            result = self._parse_alternation()
            if self._peek() != ')':
                raise RegexParseError(f"Expected ')' at position {self.pos}")
            self._consume()  # consume ')'
            return result

        # Dot (any character)
        elif ch == '.':
            self._consume()
            return ('any',)

        # Anchors (simplified - just consume them)
        elif ch in ('^', '$'):
            self._consume()
            return ('eps',)

        elif ch in ('*', '+', '?', '{'):
            raise RegexParseError(f"Nothing to repeat at position {self.pos}")

        # Escape sequences
        elif ch == '\\':
            self._consume()
            escaped = self._consume()
            if escaped is None:
                raise RegexParseError(f"Incomplete escape at position {self.pos}")
            return self._parse_escape(escaped)

        # Literal character
        else:
            self._consume()
            return ('char', ch)

    def _parse_character_class(self) -> Tuple:
        """Parse character class like [0-9], [a-zA-Z], [^ab]"""
        self._consume()  # consume '['

        negated = False
        if self._peek() == '^':
            self._consume()
            negated = True

        chars: Set[str] = set()

        while True:
            ch = self._peek()

            if ch is None:
                raise RegexParseError(f"Unclosed character class at position {self.pos}")

            if ch == ']':
                self._consume()
                break

            start_ch = self._consume()
            if start_ch == '\\':
                escaped = self._consume()
                if escaped is None:
                    raise RegexParseError(f"Incomplete escape at position {self.pos}")
                chars |= _escape_chars(escaped)
                continue

            # Check for range (a-z)
            if self._peek() == '-':
                self._consume()  # consume '-'
                end_ch = self._peek()

                if end_ch is None or end_ch == ']':
                    # Literal '-' at end
                    chars.add(start_ch)
                    chars.add('-')
                else:
                    self._consume()
                    if ord(end_ch) < ord(start_ch):
                        raise RegexParseError(f"Invalid range {start_ch}-{end_ch}")
                    chars |= {chr(c) for c in range(ord(start_ch), ord(end_ch) + 1)}
            else:
                # Single character
                chars.add(start_ch)

        return ('class', frozenset(chars), negated)

    def _parse_escape(self, escaped: str) -> Tuple:
        """Parse escape sequences"""
        chars = _escape_chars(escaped)
        if len(chars) == 1:
            return ('char', next(iter(chars)))
        return ('class', chars, False)


def _escape_chars(escaped: str) -> FrozenSet[str]:
    if escaped == 'd':  # digits
        return DIGITS
    elif escaped == 'w':  # word characters
        return WORD_CHARS
    elif escaped == 's':  # whitespace
        return WHITESPACE
    elif escaped == 'n':
        return frozenset('\n')
    elif escaped == 't':
        return frozenset('\t')
    elif escaped == 'r':
        return frozenset('\r')
    # Escaped special characters and unknown escapes are literals
    return frozenset(escaped)


def _collect_chars(node: Tuple, chars: Set[str]):
    kind = node[0]
    if kind == 'char':
        chars.add(node[1])
    elif kind == 'class':
        chars |= node[1]
    elif kind in ('cat', 'alt'):
        for child in node[1]:
            _collect_chars(child, chars)
    elif kind in ('star', 'plus', 'opt', 'rep'):
        _collect_chars(node[1], chars)


def _compile(node: Tuple, nfa: Nfa, alphabet: FrozenSet[str]) -> Tuple[int, int]:
    """Thompson construction; returns the (start, end) states of the fragment"""
    kind = node[0]
    if kind == 'rep':
        _, child, lo, hi = node
        parts = [child] * lo
        if hi is None:
            parts.append(('star', child))
        else:
            parts.extend([('opt', child)] * (hi - lo))
        return _compile(('cat', parts) if parts else ('eps',), nfa, alphabet)

    start = nfa.add_state()
    if kind == 'eps':
        end = nfa.add_state()
        nfa.add_epsilon(start, end)
    elif kind == 'char':
        end = nfa.add_state()
        nfa.add_transition(start, node[1], end)
    elif kind in ('class', 'any'):
        end = nfa.add_state()
        if kind == 'any':
            symbols = set(alphabet) | {OTHER}
        elif node[2]:
            symbols = (set(alphabet) - node[1]) | {OTHER}
        else:
            symbols = node[1]
        for sym in symbols:
            nfa.add_transition(start, sym, end)
    elif kind == 'cat':
        end = start
        for child in node[1]:
            s, e = _compile(child, nfa, alphabet)
            nfa.add_epsilon(end, s)
            end = e
    elif kind == 'alt':
        end = nfa.add_state()
        for child in node[1]:
            s, e = _compile(child, nfa, alphabet)
            nfa.add_epsilon(start, s)
            nfa.add_epsilon(e, end)
    elif kind in ('star', 'plus', 'opt'):
        end = nfa.add_state()
        s, e = _compile(node[1], nfa, alphabet)
        nfa.add_epsilon(start, s)
        nfa.add_epsilon(e, end)
        if kind != 'plus':
            nfa.add_epsilon(start, end)
        if kind != 'opt':
            nfa.add_epsilon(e, s)
    else:
        raise RegexParseError(f"Unknown regex node {kind}")

    return start, end


def parse_regex(pattern: str) -> Automaton:
    """Parse a regex pattern and return its minimal automaton

    Args:
        pattern: Regex pattern string

    Returns:
        Minimal complete DFA accepting exactly the matched words

    Raises:
        RegexParseError: If pattern is invalid
    """
    tree = RegexParser(pattern).parse()
    chars: Set[str] = set()
    _collect_chars(tree, chars)
    alphabet = frozenset(chars)

    nfa = Nfa()
    start, end = _compile(tree, nfa, alphabet)
    nfa.initial = {start}
    nfa.finals = {end}
    return nfa.determinize(alphabet).minimize()
