import dataclasses
import itertools

import pytest
from careersql.parser.ast import *
from careersql.parser.lexer import Lexer, TokenType
from careersql.parser.parser import parse, parse_select
from careersql.parser.exceptions import CareerSQLParseError, CareerSQLLexerError

CLAUSES = {
    'where': "WHERE id = 1",
    'group': "GROUP BY name",
    'order': "ORDER BY id DESC",
    'limit': "LIMIT 5",
}


def test_lexer_tokens():
    tokens = Lexer("SELECT e.name FROM engineers e WHERE id <> 'x';").tokenize()
    types = [t.type for t in tokens]
    assert types == [
        TokenType.SELECT, TokenType.IDENTIFIER, TokenType.DOT, TokenType.IDENTIFIER,
        TokenType.FROM, TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.WHERE,
        TokenType.IDENTIFIER, TokenType.NEQ, TokenType.STRING_LITERAL, TokenType.SEMICOLON,
        TokenType.EOF,
    ]
    assert tokens[10].value == 'x'

def test_lexer_unicode_identifiers():
    tokens = Lexer("名前 = '山田'").tokenize()
    assert tokens[0].type == TokenType.IDENTIFIER
    assert tokens[0].value == '名前'
    assert tokens[2].value == '山田'

def test_lexer_strict_rejects_unknown_character():
    with pytest.raises(CareerSQLLexerError) as exc_info:
        Lexer("SELECT # FROM t").tokenize_strict()
    assert exc_info.value.token == '#'

def test_blank_input_is_nothing():
    assert parse("") is None
    assert parse("   ") is None

def test_incomplete_then_complete():
    first = "select * from engineers"
    assert parse(first) is None

    stmt = parse(first + "\n where id = 1;")
    assert isinstance(stmt, SelectStatement)
    assert stmt.table == 'engineers'
    assert stmt.columns == ['*']
    assert stmt.where == WhereCondition(column='id', operator='=', value=1)

@pytest.mark.parametrize("prefix", ["insert into x", "UPDATE engineers", "show", "use", "desc"])
def test_leading_keyword_without_terminator_is_incomplete(prefix):
    assert parse(prefix) is None

@pytest.mark.parametrize("subset", [
    combo for n in range(len(CLAUSES) + 1)
    for combo in itertools.combinations(list(CLAUSES), n)
])
def test_clause_subsets(subset):
    sql = " ".join(["SELECT id, name FROM engineers"] + [CLAUSES[c] for c in subset]) + ";"
    stmt = parse(sql)

    assert isinstance(stmt, SelectStatement)
    assert stmt.columns == ['id', 'name']
    assert stmt.table == 'engineers'
    assert stmt.where == (WhereCondition('id', '=', 1) if 'where' in subset else None)
    assert stmt.group_by == (['name'] if 'group' in subset else [])
    assert stmt.order_by == ([OrderByClause('id', 'DESC')] if 'order' in subset else [])
    assert stmt.limit == (5 if 'limit' in subset else None)

def test_select_details():
    stmt = parse("SELECT e.name, years_of_experience FROM engineers AS e "
                 "WHERE name LIKE '%田%' ORDER BY id DESC, name LIMIT 2 OFFSET 1;")
    assert stmt.columns == ['e.name', 'years_of_experience']
    assert stmt.table_alias == 'e'
    assert stmt.where == WhereCondition('name', 'LIKE', '%田%')
    assert stmt.order_by == [OrderByClause('id', 'DESC'), OrderByClause('name', 'ASC')]
    assert stmt.order_by[1].ascending
    assert stmt.limit == 2
    assert stmt.offset == 1

def test_alias_without_as():
    stmt = parse("select e.name from engineers e;")
    assert stmt.table == 'engineers'
    assert stmt.table_alias == 'e'

def test_where_first_predicate_wins():
    stmt = parse("SELECT * FROM engineers WHERE years_of_experience >= 5 AND id = 2;")
    assert stmt.where == WhereCondition('years_of_experience', '>=', 5)

def test_where_operators():
    assert parse("SELECT * FROM t WHERE a <> 3;").where.operator == '!='
    assert parse("SELECT * FROM t WHERE a != 3;").where.operator == '!='
    assert parse("SELECT * FROM t WHERE a < 3;").where.operator == '<'
    assert parse("SELECT * FROM t WHERE name = '山田太郎';").where.value == '山田太郎'

def test_where_without_literal_comparison():
    stmt = parse("SELECT * FROM skills WHERE engineer_id = id;")
    assert isinstance(stmt, SelectStatement)
    assert stmt.where is None

def test_clause_keywords_inside_parentheses_are_ignored():
    stmt = parse("SELECT COUNT(id) FROM skills;")
    assert stmt.columns == ['COUNT(id)']

def test_out_of_order_clause():
    stmt = parse("SELECT * FROM engineers LIMIT 1 WHERE id = 1;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.message == 'syntax error at or near "WHERE"'
    assert stmt.error_token == 'WHERE'

def test_missing_table():
    stmt = parse("SELECT * FROM;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.message == 'syntax error at end of input'

def test_join_rejected():
    stmt = parse("SELECT * FROM engineers JOIN skills ON engineers.id = skills.engineer_id;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.error_token == 'JOIN'
    assert stmt.message == 'syntax error at or near "JOIN"'

def test_group_without_by():
    stmt = parse("SELECT * FROM engineers GROUP name;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.error_token == 'name'

def test_unknown_statement():
    stmt = parse("hello world")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.message == 'syntax error at or near "hello"'
    assert stmt.error_token == 'hello'

    stmt = parse("foo bar;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.error_token == 'foo'

def test_lexer_error_becomes_error_statement():
    stmt = parse("SELECT * FROM engineers WHERE id = 1 # note;")
    assert isinstance(stmt, ErrorStatement)
    assert stmt.error_token == '#'

@pytest.mark.parametrize("sql, kind", [
    ("\\l", ShowDatabases),
    ("\\l;", ShowDatabases),
    ("\\dt", ShowTables),
    ("\\d", ShowTables),
    ("\\q", Exit),
])
def test_meta_commands(sql, kind):
    stmt = parse(sql)
    assert isinstance(stmt, kind)
    assert stmt.dialect == Dialect.POSTGRES

def test_meta_commands_with_arguments():
    assert parse("\\d engineers") == DescribeTable("\\d engineers", table='engineers')
    assert parse("\\c career_db") == UseDatabase("\\c career_db", database='career_db')
    assert parse("\\c") is None
    assert parse("\\x") is None

@pytest.mark.parametrize("sql, expected", [
    ("show databases;", ShowDatabases("show databases;")),
    ("SHOW TABLES;", ShowTables("SHOW TABLES;")),
    ("use career_db;", UseDatabase("use career_db;", database='career_db')),
    ("describe engineers;", DescribeTable("describe engineers;", table='engineers')),
    ("DESC skills;", DescribeTable("DESC skills;", table='skills')),
    ("show columns from projects;", DescribeTable("show columns from projects;", table='projects')),
])
def test_mysql_statements(sql, expected):
    stmt = parse(sql)
    assert stmt == expected
    assert stmt.dialect == Dialect.MYSQL

@pytest.mark.parametrize("sql", ["exit", "EXIT;", "exit ;"])
def test_exit(sql):
    assert isinstance(parse(sql), Exit)

@pytest.mark.parametrize("sql, operation", [
    ("INSERT INTO engineers VALUES (3, 'x', 1, 'y');", 'INSERT'),
    ("update engineers set name = 'x';", 'UPDATE'),
    ("DELETE FROM engineers;", 'DELETE'),
    ("CREATE TABLE t (id int);", 'CREATE_TABLE'),
    ("drop table engineers;", 'DROP_TABLE'),
])
def test_read_only_statements(sql, operation):
    stmt = parse(sql)
    assert isinstance(stmt, ReadOnlyStatement)
    assert stmt.operation == operation

def test_original_command_is_kept_verbatim():
    sql = "select *\nfrom engineers;"
    assert parse(sql).original_command == sql

def test_statements_are_immutable():
    stmt = parse("SELECT * FROM engineers;")
    with pytest.raises(dataclasses.FrozenInstanceError):
        stmt.table = 'skills'

def test_parse_select_helper():
    stmt = parse_select("SELECT name FROM engineers")
    assert stmt.columns == ['name']

    with pytest.raises(CareerSQLParseError):
        parse_select("SELECT name engineers")

@pytest.mark.parametrize("condition, value", [
    ("id = -1", -1),
    ("id = +2", 2),
    ("id = 1.5", 1.5),
    ("rating >= -0.5", -0.5),
])
def test_where_signed_and_decimal_literals(condition, value):
    stmt = parse(f"SELECT * FROM t WHERE {condition};")
    assert stmt.where is not None
    assert stmt.where.value == value
    assert type(stmt.where.value) is type(value)
