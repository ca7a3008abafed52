"""
Parser Exceptions - Custom exceptions for parsing errors
"""


class CareerSQLParseError(Exception):
    """Base class for parsing errors"""

    def __init__(self, message: str, token: str = ''):
        super().__init__(message)
        # Offending token echoed back to the user
        self.token = token


class CareerSQLLexerError(CareerSQLParseError):
    """Lexer/tokenization errors"""
    pass


class CareerSQLSyntaxError(CareerSQLParseError):
    """Syntax errors in SQL statements"""
    pass
