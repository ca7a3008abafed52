"""
SQL Lexer - Splits console input into tokens carrying their source offsets
"""

import re
from typing import List, Optional
from .exceptions import CareerSQLLexerError


class TokenType:
    """Token types understood by the console"""
    # Statement and clause keywords
    SELECT = 'SELECT'
    FROM = 'FROM'
    WHERE = 'WHERE'
    GROUP = 'GROUP'
    ORDER = 'ORDER'
    BY = 'BY'
    LIMIT = 'LIMIT'
    OFFSET = 'OFFSET'
    ASC = 'ASC'
    DESC = 'DESC'
    AS = 'AS'
    AND = 'AND'
    OR = 'OR'
    NOT = 'NOT'
    LIKE = 'LIKE'
    JOIN = 'JOIN'
    ON = 'ON'
    SHOW = 'SHOW'
    DATABASES = 'DATABASES'
    TABLES = 'TABLES'
    COLUMNS = 'COLUMNS'
    IN = 'IN'
    USE = 'USE'
    DESCRIBE = 'DESCRIBE'
    EXIT = 'EXIT'
    INSERT = 'INSERT'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'
    CREATE = 'CREATE'
    DROP = 'DROP'
    TABLE = 'TABLE'

    IDENTIFIER = 'IDENTIFIER'
    STRING_LITERAL = 'STRING_LITERAL'
    NUMBER = 'NUMBER'
    FLOAT_LITERAL = 'FLOAT_LITERAL'

    EQ = 'EQ'
    NEQ = 'NEQ'  # != and <>
    LT = 'LT'
    GT = 'GT'
    LTE = 'LTE'
    GTE = 'GTE'
    STAR = 'STAR'
    ARITHMETIC = 'ARITHMETIC'  # + - /

    COMMA = 'COMMA'
    SEMICOLON = 'SEMICOLON'
    LPAREN = 'LPAREN'
    RPAREN = 'RPAREN'
    DOT = 'DOT'

    EOF = 'EOF'
    ERROR = 'ERROR'


KEYWORD_TYPES = (
    TokenType.SELECT, TokenType.FROM, TokenType.WHERE, TokenType.GROUP, TokenType.ORDER,
    TokenType.BY, TokenType.LIMIT, TokenType.OFFSET, TokenType.ASC, TokenType.DESC,
    TokenType.AS, TokenType.AND, TokenType.OR, TokenType.NOT, TokenType.LIKE,
    TokenType.JOIN, TokenType.ON, TokenType.SHOW, TokenType.DATABASES, TokenType.TABLES,
    TokenType.COLUMNS, TokenType.IN, TokenType.USE, TokenType.DESCRIBE, TokenType.EXIT,
    TokenType.INSERT, TokenType.UPDATE, TokenType.DELETE, TokenType.CREATE, TokenType.DROP,
    TokenType.TABLE,
)

# lower-case word -> keyword type
KEYWORDS = {keyword.lower(): keyword for keyword in KEYWORD_TYPES}


class Token:
    """One lexeme plus where it came from"""

    def __init__(self, token_type: str, value: str, line: int, column: int,
                 start: int = 0, end: int = 0):
        self.type = token_type
        self.value = value
        self.line = line
        self.column = column
        # Offsets into the source text, used to slice verbatim fragments
        self.start = start
        self.end = end

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Regex driven tokenizer; patterns are tried in order, first match wins"""

    TOKEN_PATTERNS = [
        (r'\s+', None),
        (r'--[^\n]*', None),

        (r'!=|<>', TokenType.NEQ),
        (r'<=', TokenType.LTE),
        (r'>=', TokenType.GTE),
        (r'=', TokenType.EQ),
        (r'<', TokenType.LT),
        (r'>', TokenType.GT),
        (r'\*', TokenType.STAR),
        (r'[+\-/]', TokenType.ARITHMETIC),

        (r',', TokenType.COMMA),
        (r';', TokenType.SEMICOLON),
        (r'\(', TokenType.LPAREN),
        (r'\)', TokenType.RPAREN),
        (r'\.', TokenType.DOT),

        (r'\d+\.\d+', TokenType.FLOAT_LITERAL),
        (r'\d+', TokenType.NUMBER),

        # Either quote style; backslash escapes the quote
        (r"'(?:[^'\\]|\\.)*'", TokenType.STRING_LITERAL),
        (r'"(?:[^"\\]|\\.)*"', TokenType.STRING_LITERAL),

        # Unicode word characters, so Japanese column names lex as identifiers
        (r'[^\W\d]\w*', TokenType.IDENTIFIER),
    ]

    COMPILED_PATTERNS = [(re.compile(pattern), token_type)
                         for pattern, token_type in TOKEN_PATTERNS]

    def __init__(self, text: str):
        self.text = text
        self.position = 0
        self.line = 1
        self.column = 1
        self.tokens = []

    def tokenize(self) -> List[Token]:
        """Tokenize the whole input; the last token is always EOF"""
        self.tokens = []
        token = self._next_token()
        while token is not None:
            self.tokens.append(token)
            token = self._next_token()

        self.tokens.append(Token(TokenType.EOF, '', self.line, self.column,
                                 self.position, self.position))
        return self.tokens

    def tokenize_strict(self) -> List[Token]:
        """Like tokenize(), but raise on the first character no pattern accepts"""
        tokens = self.tokenize()
        bad = next((token for token in tokens if token.type == TokenType.ERROR), None)
        if bad is not None:
            raise CareerSQLLexerError(
                f"Unexpected character at {bad.line}:{bad.column}: {bad.value}",
                token=bad.value)
        return tokens

    def _next_token(self) -> Optional[Token]:
        """Next significant token, or None at end of input"""
        while self.position < len(self.text):
            start, line, column = self.position, self.line, self.column
            token_type, value = self._match_at(start)
            self._advance_over(value)

            if token_type is None:
                continue  # whitespace / comment

            if token_type == TokenType.STRING_LITERAL:
                quote = value[0]
                value = value[1:-1].replace('\\' + quote, quote)
            elif token_type == TokenType.IDENTIFIER:
                token_type = KEYWORDS.get(value.lower(), TokenType.IDENTIFIER)

            return Token(token_type, value, line, column, start, self.position)
        return None

    def _match_at(self, position: int):
        for regex, token_type in self.COMPILED_PATTERNS:
            match = regex.match(self.text, position)
            if match:
                return token_type, match.group(0)
        return TokenType.ERROR, self.text[position]

    def _advance_over(self, consumed: str) -> None:
        """Move position, line and column past consumed text"""
        self.position += len(consumed)
        newlines = consumed.count('\n')
        if newlines:
            self.line += newlines
            self.column = len(consumed) - consumed.rfind('\n')
        else:
            self.column += len(consumed)
