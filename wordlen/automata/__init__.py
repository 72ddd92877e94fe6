"""
Regular language constraints.

This module contains:
- Finite automata (complete DFAs with an OTHER symbol)
- Regex compiler producing automata
- Language constraint store mapping variables to automata
"""

from wordlen.automata.automaton import Automaton, Nfa, OTHER
from wordlen.automata.regex_parser import parse_regex, RegexParseError
from wordlen.automata.store import LanguageStore
