"""
Lexical Analyzer for word equation problems

Tokenizes input strings for the parser.
"""

import re
from typing import List


class ParseError(Exception):
    """Exception raised for parsing errors"""
    pass


class Token:
    """Token in the input stream"""

    def __init__(self, type: str, value: str, pos: int):
        self.type = type
        self.value = value
        self.pos = pos

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.pos})"


class Lexer:
    """Lexical analyzer for word equation problems"""

    TOKEN_PATTERNS = [
        ('COMMENT', r'#[^\n]*'),
        ('STRING', r'"([^"\\]|\\.)*"'),  # String literals with escape support
        ('REGEX', r'/([^/\\]|\\.)+/'),  # Regex patterns like /pattern/
        ('CONCAT', r'\+\+'),
        ('NEQ', r'!='),  # Must come before NOT
        ('NOT', r'!'),
        ('EQ', r'='),
        ('AND', r'&'),
        ('SEMI', r';'),
        ('NEWLINE', r'\n'),
        ('LPAREN', r'\('),
        ('RPAREN', r'\)'),
        # Keywords
        ('MATCHES', r'matches\b'),
        ('EPS', r'eps\b'),
        ('IDENT', r'[a-zA-Z_][a-zA-Z0-9_]*'),
        ('WHITESPACE', r'[ \t\r]+'),
    ]

    _COMPILED = [(name, re.compile(pattern)) for name, pattern in TOKEN_PATTERNS]

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: List[Token] = []
        self._tokenize()

    def _tokenize(self):
        """Tokenize the input text"""
        while self.pos < len(self.text):
            matched = False
            for token_type, regex in self._COMPILED:
                match = regex.match(self.text, self.pos)
                if match:
                    value = match.group(0)
                    if token_type not in ('WHITESPACE', 'COMMENT'):
                        self.tokens.append(Token(token_type, value, self.pos))
                    self.pos = match.end()
                    matched = True
                    break

            if not matched:
                raise ParseError(f"Invalid character at position {self.pos}: {self.text[self.pos]!r}")
