"""
Catalog Module - Schema directory
Holds every database, table and row of the console dataset. Loaded once,
read-only afterwards.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .schema import CatalogError, DatabaseSchema, TableSchema
from ..constants import DEFAULT_DATA_PATH


logger = logging.getLogger(__name__)


class Catalog:
    """Read-only directory of databases -> tables -> columns/rows"""

    def __init__(self, databases: Optional[Dict[str, DatabaseSchema]] = None):
        """
        Initialize catalog

        Args:
            databases: database schemas keyed by name
        """
        self.databases: Dict[str, DatabaseSchema] = databases or {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Catalog':
        """
        Build a catalog from the dataset format:

            {"databases": {db: {"tables": {table: {"columns": [...], "data": [[...]]}}}}}

        Raises:
            CatalogError: if the structure or a table invariant is violated
        """
        if not isinstance(data, dict) or not isinstance(data.get('databases'), dict):
            raise CatalogError("Dataset must contain a 'databases' mapping")

        databases = {}
        for db_name, db_data in data['databases'].items():
            if not isinstance(db_data, dict):
                raise CatalogError(f"Database '{db_name}' must be a mapping")
            tables_data = db_data.get('tables')
            if not isinstance(tables_data, dict):
                raise CatalogError(f"Database '{db_name}' must contain a 'tables' mapping")

            tables = {}
            for table_name, table_data in tables_data.items():
                if not isinstance(table_data, dict):
                    raise CatalogError(f"Table '{table_name}' must be a mapping")
                columns = table_data.get('columns')
                if not isinstance(columns, list):
                    raise CatalogError(f"Table '{table_name}' must list its columns")
                rows = table_data.get('data') or []
                tables[table_name] = TableSchema(table_name, list(columns),
                                                 [list(row) for row in rows])
            databases[db_name] = DatabaseSchema(db_name, tables)

        return cls(databases)

    @classmethod
    def from_file(cls, path: Union[str, Path, None] = None) -> 'Catalog':
        """Load the dataset JSON file (defaults to the bundled career dataset)"""
        path = Path(path) if path else DEFAULT_DATA_PATH
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Cannot load dataset {path}: {e}") from e

        catalog = cls.from_dict(data)
        logger.info("Loaded %d databases from %s", len(catalog.databases), path)
        return catalog

    def list_databases(self) -> List[str]:
        return list(self.databases.keys())

    def has_database(self, db_name: str) -> bool:
        return db_name in self.databases

    def get_database(self, db_name: Optional[str]) -> Optional[DatabaseSchema]:
        if db_name is None:
            return None
        return self.databases.get(db_name)

    def list_tables(self, db_name: Optional[str]) -> List[str]:
        database = self.get_database(db_name)
        return database.list_tables() if database else []

    def get_table(self, db_name: Optional[str], table_name: str) -> Optional[TableSchema]:
        database = self.get_database(db_name)
        return database.get_table(table_name) if database else None

    def list_columns(self, db_name: Optional[str], table_name: str) -> List[str]:
        table = self.get_table(db_name, table_name)
        return list(table.columns) if table else []

    def structure(self, db_name: str) -> Dict[str, Dict[str, List[str]]]:
        """Table -> columns mapping of one database (no row data)"""
        database = self.get_database(db_name)
        if database is None:
            return {}
        return {name: table.to_dict(include_rows=False)
                for name, table in database.tables.items()}

    def to_dict(self) -> Dict[str, Any]:
        return {'databases': {name: db.to_dict() for name, db in self.databases.items()}}
