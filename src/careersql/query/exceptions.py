"""
Query Exceptions - Errors raised while planning or executing a query
"""


class QueryExecutionError(Exception):
    """Query could not be planned or executed against the catalog"""
    pass
