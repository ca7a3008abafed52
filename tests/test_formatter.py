import pytest
from careersql.catalog.catalog import Catalog
from careersql.display import formatter
from careersql.display.formatter import (format_table, format_boxed_table, format_database_list,
                                         format_table_list, format_describe, format_use_database,
                                         format_error)
from careersql.display.width import display_width
from careersql.parser.ast import Dialect

@pytest.fixture(scope="module")
def catalog():
    return Catalog.from_file()

def bar_positions(line):
    """Display columns at which '|' appears"""
    positions = []
    column = 0
    for char in line:
        if char == '|':
            positions.append(column)
        column += display_width(char)
    return positions

def test_empty_result():
    assert format_table(["id"], []) == "(0 rows)"

def test_single_row_golden():
    assert format_table(["id", "name"], [[1, "山田太郎"]]) == (
        "id | name    \n"
        "---+---------\n"
        "1  | 山田太郎\n"
        "(1 row)"
    )

def test_cjk_alignment():
    rows = [[1, "山田太郎", "シニアエンジニア"], [2, "Bob", "dev"]]
    lines = format_table(["id", "name", "current_position"], rows).split("\n")
    header = bar_positions(lines[0])
    for line in lines[2:-1]:
        assert bar_positions(line) == header
    assert lines[1].index('+') == header[0]
    assert lines[-1] == "(2 rows)"

def test_null_and_float_cells():
    output = format_table(["a", "b"], [[None, 2.0]])
    assert output.split("\n")[2] == "NULL | 2"

def test_boxed_table_lines_have_equal_width():
    output = format_boxed_table(["Column", "Type"], [["名前", "text"], ["id", "integer"]])
    assert output.endswith("\n")
    lines = output.rstrip("\n").split("\n")
    widths = {display_width(line) for line in lines}
    assert len(widths) == 1
    assert lines[0].startswith("+-") and lines[0].endswith("-+")

def test_postgres_database_list():
    output = format_database_list(['career_db', 'private_db'], Dialect.POSTGRES)
    lines = output.split("\n")
    assert lines[0] == formatter.PG_DATABASES_TITLE
    assert lines[1] == formatter.PG_DATABASES_HEADER
    assert lines[2] == formatter.PG_DATABASES_SEPARATOR
    assert lines[3] == " career_db | user  | UTF8     | en_US.UTF-8 | en_US.UTF-8 | "
    assert lines[4] == " private_db| user  | UTF8     | en_US.UTF-8 | en_US.UTF-8 | "
    assert output.endswith("\n")

def test_mysql_database_list():
    output = format_database_list(['career_db', 'private_db'], Dialect.MYSQL)
    assert output == (
        "+-------------+\n"
        "| Database    |\n"
        "+-------------+\n"
        "| career_db   |\n"
        "| private_db  |\n"
        "+-------------+\n"
    )

def test_postgres_table_list():
    output = format_table_list(['engineers', 'skills'], 'career_db', Dialect.POSTGRES)
    lines = output.split("\n")
    assert lines[:3] == [formatter.PG_TABLES_TITLE, formatter.PG_TABLES_HEADER,
                         formatter.PG_TABLES_SEPARATOR]
    assert lines[3] == " public | engineers    | table | user"
    assert lines[4] == " public | skills       | table | user"

def test_mysql_table_list():
    output = format_table_list(['engineers', 'skills'], 'career_db', Dialect.MYSQL)
    lines = output.rstrip("\n").split("\n")
    assert lines[1] == "| Tables_in_career_db   |"
    assert lines[3] == "| engineers             |"
    assert len({len(line) for line in lines}) == 1

def test_postgres_describe(catalog):
    table = catalog.get_table('career_db', 'engineers')
    lines = format_describe(table, 'career_db', Dialect.POSTGRES).split("\n")
    assert lines[0] == '                                Table "career_db.public.engineers"'
    assert lines[3] == " id                 | integer                    |           | not null | "
    assert lines[4].startswith(" name               | text ")

def test_mysql_describe(catalog):
    table = catalog.get_table('career_db', 'engineers')
    output = format_describe(table, 'career_db', Dialect.MYSQL)
    lines = output.rstrip("\n").split("\n")
    assert [cell.strip() for cell in lines[1].strip('|').split('|')] == formatter.DESCRIBE_COLUMNS
    assert len(lines) == 3 + len(table.columns) + 1
    assert "| integer |" in lines[3]

def test_use_database_messages():
    assert format_use_database('career_db', Dialect.POSTGRES) == \
        'You are now connected to database "career_db" as user "user"'
    assert format_use_database('career_db', Dialect.MYSQL) == 'Database changed to career_db'

def test_error_messages():
    message = 'syntax error at or near "foo"'
    assert format_error(message, 1, 'foo', Dialect.POSTGRES) == \
        'ERROR:  syntax error at or near "foo"\n行 1: foo'
    assert format_error(message, 1, 'foo', Dialect.MYSQL) == message
