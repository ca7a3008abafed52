"""
SQL Parser - Turns console input into statement nodes
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from .lexer import Lexer, Token, TokenType
from .ast import *
from .exceptions import CareerSQLParseError, CareerSQLSyntaxError
from ..constants import LEADING_KEYWORDS


logger = logging.getLogger(__name__)

EXIT_PATTERN = re.compile(r'^exit\s*;?$', re.IGNORECASE)
LEADING_WORD = re.compile(r'[^\W\d]\w*')

# Clause keywords of a SELECT in canonical order
CLAUSE_ORDER = [TokenType.FROM, TokenType.WHERE, TokenType.GROUP,
                TokenType.ORDER, TokenType.LIMIT, TokenType.OFFSET]

COMPARISON_OPERATORS = {
    TokenType.EQ: '=',
    TokenType.NEQ: '!=',
    TokenType.LT: '<',
    TokenType.GT: '>',
    TokenType.LTE: '<=',
    TokenType.GTE: '>=',
    TokenType.LIKE: 'LIKE',
}

READ_ONLY_OPERATIONS = {
    TokenType.INSERT: 'INSERT',
    TokenType.UPDATE: 'UPDATE',
    TokenType.DELETE: 'DELETE',
}


def syntax_error_message(token: str) -> str:
    return f'syntax error at or near "{token}"'


class Parser:
    """Statement parser over a token stream"""

    def __init__(self, tokens: List[Token], text: str, original_command: Optional[str] = None):
        self.tokens = tokens
        self.text = text
        self.original_command = original_command if original_command is not None else text
        self.position = 0
        self.current_token = tokens[0] if tokens else None

    def parse(self) -> Statement:
        """Parse a terminated statement (the terminator already removed)"""
        if not self.tokens:
            raise CareerSQLSyntaxError("No tokens to parse")

        if self._match(TokenType.SELECT):
            return self.parse_select()

        if self._match(TokenType.SHOW):
            return self.parse_show()
        elif self._match(TokenType.USE):
            database = self._consume(TokenType.IDENTIFIER, "Expected database name").value
            self._expect_end()
            return UseDatabase(self.original_command, database=database)
        elif self._match(TokenType.DESCRIBE, TokenType.DESC):
            return self.parse_describe()
        elif self.current_token.type in READ_ONLY_OPERATIONS:
            return ReadOnlyStatement(self.original_command,
                                     operation=READ_ONLY_OPERATIONS[self.current_token.type])
        elif self._match(TokenType.CREATE):
            self._consume(TokenType.TABLE, "Expected TABLE after CREATE")
            return ReadOnlyStatement(self.original_command, operation='CREATE_TABLE')
        elif self._match(TokenType.DROP):
            self._consume(TokenType.TABLE, "Expected TABLE after DROP")
            return ReadOnlyStatement(self.original_command, operation='DROP_TABLE')

        raise CareerSQLSyntaxError(f"Unexpected token: {self.current_token}",
                                   token=self.current_token.value)

    def parse_show(self) -> Statement:
        """Parse SHOW statement"""
        # SHOW already consumed
        if self._match(TokenType.DATABASES):
            self._expect_end()
            return ShowDatabases(self.original_command)
        elif self._match(TokenType.TABLES):
            self._expect_end()
            return ShowTables(self.original_command)
        elif self._match(TokenType.COLUMNS):
            self._match(TokenType.FROM, TokenType.IN)
            table = self._consume(TokenType.IDENTIFIER, "Expected table name").value
            self._expect_end()
            return DescribeTable(self.original_command, table=table)
        raise CareerSQLSyntaxError("Expected DATABASES, TABLES or COLUMNS after SHOW")

    def parse_describe(self) -> DescribeTable:
        """Parse DESCRIBE / DESC statement"""
        table = self._consume(TokenType.IDENTIFIER, "Expected table name").value
        self._expect_end()
        return DescribeTable(self.original_command, table=table)

    def parse_select(self) -> SelectStatement:
        """
        Parse SELECT statement.

        Clause keywords are located up front at parenthesis depth 0, then each
        clause body is parsed from its own token span. Clauses must appear in
        the order FROM, WHERE, GROUP BY, ORDER BY, LIMIT, OFFSET.
        """
        # SELECT already consumed
        clauses = self._locate_clauses()
        if TokenType.FROM not in clauses:
            raise self._error_at(self.tokens[-1] if not clauses else
                                 self.tokens[min(kw for kw, _, _ in clauses.values())])

        from_keyword, _, _ = clauses[TokenType.FROM]
        columns = self._parse_column_list(self.tokens[self.position:from_keyword],
                                          self.tokens[from_keyword])

        table, table_alias = self._parse_from(*self._span(clauses, TokenType.FROM))

        where = None
        if TokenType.WHERE in clauses:
            where = self._parse_where(*self._span(clauses, TokenType.WHERE))

        group_by = []
        if TokenType.GROUP in clauses:
            span, follow = self._span(clauses, TokenType.GROUP)
            group_by = [self._slice(item) for item in self._split_items(span, follow)]

        order_by = []
        if TokenType.ORDER in clauses:
            order_by = self._parse_order_by(*self._span(clauses, TokenType.ORDER))

        limit = None
        if TokenType.LIMIT in clauses:
            limit = self._parse_integer(*self._span(clauses, TokenType.LIMIT))

        offset = None
        if TokenType.OFFSET in clauses:
            offset = self._parse_integer(*self._span(clauses, TokenType.OFFSET))

        return SelectStatement(
            self.original_command,
            columns=columns,
            table=table,
            table_alias=table_alias,
            where=where,
            group_by=group_by,
            order_by=order_by,
            limit=limit,
            offset=offset,
        )

    def _locate_clauses(self) -> dict:
        """Map clause keyword -> (keyword index, body start, body end)"""
        found = []
        depth = 0
        index = self.position
        while self.tokens[index].type != TokenType.EOF:
            token = self.tokens[index]
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1
            elif depth == 0 and token.type == TokenType.JOIN:
                raise CareerSQLSyntaxError("JOIN is not supported", token=token.value)
            elif depth == 0 and token.type in CLAUSE_ORDER:
                body_start = index + 1
                if token.type in (TokenType.GROUP, TokenType.ORDER):
                    if self.tokens[index + 1].type != TokenType.BY:
                        raise self._error_at(self.tokens[index + 1])
                    body_start = index + 2

                rank = CLAUSE_ORDER.index(token.type)
                if found and rank <= CLAUSE_ORDER.index(found[-1][0]):
                    raise self._error_at(token)
                found.append((token.type, index, body_start))
                index = body_start
                continue
            index += 1

        eof_index = len(self.tokens) - 1
        clauses = {}
        for i, (clause, keyword, body_start) in enumerate(found):
            body_end = found[i + 1][1] if i + 1 < len(found) else eof_index
            clauses[clause] = (keyword, body_start, body_end)
        return clauses

    def _span(self, clauses: dict, clause: str) -> Tuple[List[Token], Token]:
        """Token span of a clause body plus the token that follows it"""
        _, start, end = clauses[clause]
        return self.tokens[start:end], self.tokens[end]

    def _parse_column_list(self, tokens: List[Token], follow: Token) -> List[str]:
        """Projection list, taken verbatim from the source text"""
        return [self._slice(item) for item in self._split_items(tokens, follow)]

    def _parse_from(self, tokens: List[Token], follow: Token) -> Tuple[str, Optional[str]]:
        """FROM table [[AS] alias]"""
        if not tokens:
            raise self._error_at(follow)
        if tokens[0].type != TokenType.IDENTIFIER:
            raise self._error_at(tokens[0])
        table = tokens[0].value
        rest = tokens[1:]
        if rest and rest[0].type == TokenType.AS:
            rest = rest[1:]
            if not rest:
                raise self._error_at(follow)
        alias = None
        if rest:
            if rest[0].type != TokenType.IDENTIFIER:
                raise self._error_at(rest[0])
            alias = rest[0].value
            if len(rest) > 1:
                raise self._error_at(rest[1])
        return table, alias

    def _parse_where(self, tokens: List[Token], follow: Token) -> Optional[WhereCondition]:
        """
        Single-predicate WHERE: the first `column op literal` wins.

        AND/OR are not composed; anything after the first comparison is ignored.
        """
        if not tokens:
            raise self._error_at(follow)

        for i in range(len(tokens)):
            column_end = self._column_reference_end(tokens, i)
            if column_end is None or column_end + 1 >= len(tokens):
                continue
            operator = tokens[column_end]
            literal = tokens[column_end + 1]
            if operator.type not in COMPARISON_OPERATORS:
                continue
            if literal.type == TokenType.STRING_LITERAL:
                value = literal.value
            else:
                value = self._numeric_literal(tokens[column_end + 1:])
                if value is None:
                    continue
            return WhereCondition(
                column=self._slice(tokens[i:column_end]),
                operator=COMPARISON_OPERATORS[operator.type],
                value=value,
            )
        return None

    @staticmethod
    def _numeric_literal(tokens: List[Token]) -> Optional[Union[int, float]]:
        """`5`, `-1`, `+2`, `1.5`, `-0.25`; None if tokens do not start with a number"""
        sign = 1
        if tokens[0].type == TokenType.ARITHMETIC and tokens[0].value in ('-', '+'):
            sign = -1 if tokens[0].value == '-' else 1
            tokens = tokens[1:]
        if not tokens:
            return None
        if tokens[0].type == TokenType.NUMBER:
            return sign * int(tokens[0].value)
        if tokens[0].type == TokenType.FLOAT_LITERAL:
            return sign * float(tokens[0].value)
        return None

    def _parse_order_by(self, tokens: List[Token], follow: Token) -> List[OrderByClause]:
        """ORDER BY col [ASC|DESC], ..."""
        clauses = []
        for item in self._split_items(tokens, follow):
            direction = 'ASC'
            if item[-1].type in (TokenType.ASC, TokenType.DESC):
                direction = item[-1].type
                item = item[:-1]
                if not item:
                    raise self._error_at(tokens[0])
            clauses.append(OrderByClause(column=self._slice(item), direction=direction))
        return clauses

    def _parse_integer(self, tokens: List[Token], follow: Token) -> int:
        """LIMIT / OFFSET argument"""
        if not tokens:
            raise self._error_at(follow)
        if tokens[0].type != TokenType.NUMBER:
            raise self._error_at(tokens[0])
        if len(tokens) > 1:
            raise self._error_at(tokens[1])
        return int(tokens[0].value)

    def _split_items(self, tokens: List[Token], follow: Token) -> List[List[Token]]:
        """Split a token span on top-level commas; empty items are errors"""
        if not tokens:
            raise self._error_at(follow)
        items = [[]]
        depth = 0
        for token in tokens:
            if token.type == TokenType.LPAREN:
                depth += 1
            elif token.type == TokenType.RPAREN:
                depth -= 1
            if token.type == TokenType.COMMA and depth == 0:
                if not items[-1]:
                    raise self._error_at(token)
                items.append([])
                continue
            items[-1].append(token)
        if not items[-1]:
            raise self._error_at(follow)
        return items

    @staticmethod
    def _column_reference_end(tokens: List[Token], start: int) -> Optional[int]:
        """If tokens[start:] begins with `name` or `qualifier.name`, return the index after it"""
        if tokens[start].type != TokenType.IDENTIFIER:
            return None
        if (start + 2 < len(tokens) and tokens[start + 1].type == TokenType.DOT
                and tokens[start + 2].type == TokenType.IDENTIFIER):
            return start + 3
        return start + 1

    def _slice(self, tokens: List[Token]) -> str:
        """Verbatim source text covered by a run of tokens"""
        return self.text[tokens[0].start:tokens[-1].end].strip()

    def _error_at(self, token: Token) -> CareerSQLSyntaxError:
        if token.type == TokenType.EOF:
            return CareerSQLSyntaxError("syntax error at end of input", token='')
        return CareerSQLSyntaxError(syntax_error_message(token.value), token=token.value)

    # Helper methods
    def _expect_end(self) -> None:
        if self.current_token.type != TokenType.EOF:
            raise CareerSQLSyntaxError(f"Unexpected token: {self.current_token}")

    def _advance(self) -> Token:
        """Move to next token"""
        if self.position < len(self.tokens):
            self.position += 1
            if self.position < len(self.tokens):
                self.current_token = self.tokens[self.position]
            else:
                self.current_token = None
        return self.previous_token()

    def _match(self, *token_types: str) -> bool:
        """Check if current token matches any of the given types"""
        if self.current_token and self.current_token.type in token_types:
            self._advance()
            return True
        return False

    def _consume(self, token_type: str, message: str) -> Token:
        """Consume token of expected type or raise error"""
        if self.current_token and self.current_token.type == token_type:
            return self._advance()
        raise CareerSQLSyntaxError(f"{message}, got {self.current_token}")

    def previous_token(self) -> Optional[Token]:
        """Get previous token"""
        if self.position > 0:
            return self.tokens[self.position - 1]
        return None

    @classmethod
    def parse_sql(cls, raw_text: str) -> Optional[Statement]:
        """
        Parse raw console input.

        Returns:
            A statement node, or None when the input is incomplete (a SQL
            statement still waiting for its terminator) or is an unrecognized
            meta-command.
        """
        text = raw_text.strip()
        if not text:
            return None

        if text.startswith('\\'):
            return cls.parse_meta_command(text)

        if EXIT_PATTERN.match(text):
            return Exit(text)

        lowered = text.lower()
        first_word = lowered.split()[0]
        leading = LEADING_WORD.match(lowered)
        leading_word = leading.group(0) if leading else ''

        if not text.endswith(';'):
            if leading_word in LEADING_KEYWORDS:
                logger.debug("Incomplete statement, waiting for terminator: %r", text)
                return None
            return ErrorStatement(text, message=syntax_error_message(first_word),
                                  error_token=first_word)

        body = text[:-1]
        try:
            tokens = Lexer(body).tokenize_strict()
            return cls(tokens, body, text).parse()
        except CareerSQLParseError as e:
            if leading_word == 'select':
                # SELECT errors point at the offending token
                token = e.token
                message = str(e)
                if not message.startswith('syntax error'):
                    message = syntax_error_message(token)
            else:
                token = first_word
                message = syntax_error_message(first_word)
            logger.debug("Rejected %r: %s", text, message)
            return ErrorStatement(text, message=message, error_token=token)

    @staticmethod
    def parse_meta_command(text: str) -> Optional[Statement]:
        """Parse a backslash meta-command (\\l, \\dt, \\d, \\c, \\q)"""
        command_text = text[:-1] if text.endswith(';') else text
        parts = command_text.split()
        command = parts[0][1:]
        args = parts[1:]

        if command == 'l':
            return ShowDatabases(text)
        elif command == 'dt':
            return ShowTables(text)
        elif command == 'd':
            if args:
                return DescribeTable(text, table=args[0])
            return ShowTables(text)
        elif command == 'c':
            if args:
                return UseDatabase(text, database=args[0])
            return None
        elif command == 'q':
            return Exit(text)

        logger.debug("Ignoring unknown meta-command %r", command)
        return None


def parse(raw_text: str) -> Optional[Statement]:
    """Parse raw console input; None means incomplete or silently ignored"""
    return Parser.parse_sql(raw_text)


def parse_select(text: str) -> SelectStatement:
    """
    Parse a single SELECT statement (terminator optional).

    Raises:
        CareerSQLParseError: if the text is not a well-formed SELECT
    """
    body = text.strip()
    if body.endswith(';'):
        body = body[:-1]
    parser = Parser(Lexer(body).tokenize_strict(), body, text.strip())
    parser._consume(TokenType.SELECT, "Expected SELECT")
    return parser.parse_select()
