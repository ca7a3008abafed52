import logging
from typing import List, Dict, Any, Optional

from careersql.catalog.catalog import Catalog
from careersql.completion.completer import SQLCompleter
from careersql.parser.ast import ErrorStatement, SelectStatement
from careersql.parser.parser import parse
from careersql.query.engine import QueryEngine


logger = logging.getLogger(__name__)


class InvalidQuery(Exception):
    """Query text does not parse to a complete statement"""


class UnsupportedQuery(Exception):
    """Query parses, but is not a SELECT"""


class DatasetManager:
    def __init__(self, data_path=None):
        self.load(data_path)

    def load(self, data_path=None):
        """(Re)load the dataset the API serves"""
        self.catalog = Catalog.from_file(data_path)
        logger.info("Serving databases: %s", ", ".join(self.catalog.list_databases()))
        self.engine = QueryEngine(self.catalog)
        self.completer = SQLCompleter(self.catalog)

    def has_database(self, db_name: str) -> bool:
        return self.catalog.has_database(db_name)

    def get_databases(self) -> List[str]:
        return self.catalog.list_databases()

    def get_structure(self, db_name: str) -> Dict[str, Any]:
        return self.catalog.structure(db_name)

    def get_personal_data(self) -> Dict[str, Any]:
        return self.catalog.to_dict()

    def run_query(self, db_name: str, sql: str) -> Dict[str, Any]:
        """
        Run one SELECT statement against db_name.

        Raises:
            InvalidQuery: the text is incomplete or does not parse
            UnsupportedQuery: anything other than SELECT
            QueryExecutionError: unknown table/column or engine failure
        """
        statement = parse(sql)
        if statement is None or isinstance(statement, ErrorStatement):
            raise InvalidQuery(sql)
        if not isinstance(statement, SelectStatement):
            raise UnsupportedQuery(type(statement).__name__)

        res = self.engine.execute(statement, db_name)
        columns = res['columns']
        return {
            'result': [dict(zip(columns, row)) for row in res['data']],
            'columns': columns,
        }

    def get_completions(self, text: str, db_name: Optional[str] = None) -> List[str]:
        return self.completer.complete(text, db_name)


db_manager = DatasetManager()
