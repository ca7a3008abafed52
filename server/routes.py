import logging

from flask import request
from flask_restful import Resource, Api

from careersql.query.exceptions import QueryExecutionError
from .models import db_manager, InvalidQuery, UnsupportedQuery


logger = logging.getLogger(__name__)


def init_routes(api: Api):
    # Dataset
    api.add_resource(DatabaseList, '/api/databases')
    api.add_resource(DatabaseStructure, '/api/database-structure')
    api.add_resource(PersonalData, '/api/personal-data')

    # Console
    api.add_resource(Query, '/api/query')
    api.add_resource(Completions, '/api/completions')


class DatabaseList(Resource):
    def get(self):
        return {'databases': db_manager.get_databases()}


class DatabaseStructure(Resource):
    def get(self):
        db_name = request.args.get('dbName')
        if not db_name:
            return {'error': 'Database name is required'}, 400
        if not db_manager.has_database(db_name):
            return {'error': 'Database not found'}, 404
        return {'structure': db_manager.get_structure(db_name)}


class PersonalData(Resource):
    def get(self):
        """The whole dataset, rows included"""
        return db_manager.get_personal_data()


class Query(Resource):
    def post(self):
        data = request.get_json(silent=True) or {}
        db_name = data.get('dbName')
        query = data.get('query')
        if not db_name or not query:
            return {'error': 'Database name and query are required'}, 400

        if not db_manager.has_database(db_name):
            return {'error': 'Database not found'}, 404

        logger.info("Query on %s: %s", db_name, query)
        try:
            return db_manager.run_query(db_name, query)
        except InvalidQuery:
            return {'error': 'Invalid query'}, 400
        except UnsupportedQuery:
            return {'error': 'Unsupported query type'}, 400
        except QueryExecutionError as e:
            logger.warning("Query execution failed: %s", e)
            return {'error': 'Query execution failed'}, 500


class Completions(Resource):
    def post(self):
        data = request.get_json(silent=True) or {}
        text = data.get('text', '')
        return {'completions': db_manager.get_completions(text, data.get('dbName'))}
