"""
Query Engine - Main interface for running SELECT statements
"""

import logging
from typing import Any, Dict, List

from ..parser.ast import SelectStatement
from ..catalog.catalog import Catalog
from .planner import Planner
from .executor import Executor, Row
from .exceptions import QueryExecutionError


logger = logging.getLogger(__name__)


class QueryEngine:
    """Coordinates planning and execution of read-only queries"""

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.executor = Executor()

    def execute(self, stmt: SelectStatement, db_name: str) -> Dict[str, Any]:
        """
        Execute a SELECT against one database

        Args:
            stmt: parsed SELECT statement
            db_name: database the session is connected to

        Returns:
            dict with 'columns', 'data' (raw values), 'row_count', 'plan_type'

        Raises:
            QueryExecutionError: For unknown databases, tables or columns
        """
        database = self.catalog.get_database(db_name)
        if database is None:
            raise QueryExecutionError(f'Database "{db_name}" does not exist')

        plan = Planner(database).plan_select(stmt)
        logger.debug("Planned %r", plan)

        execution_plan = plan.details.copy()
        execution_plan['plan_type'] = plan.plan_type
        try:
            rows = self.executor.execute(execution_plan)
        except QueryExecutionError:
            raise
        except Exception as e:
            raise QueryExecutionError(f"Execution error: {e}") from e

        return self._format_select_result(rows, plan.details)

    def _format_select_result(self, rows: List[Row], plan_details: dict) -> dict:
        """Shape SELECT results for the formatter and the API"""
        return {
            'columns': plan_details.get('column_names', []),
            'data': [row.raw() for row in rows],
            'row_count': len(rows),
            'plan_type': 'SELECT',
        }
