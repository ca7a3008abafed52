from flask import Flask
from flask_cors import CORS
from flask_restful import Api
from .routes import init_routes
from .models import db_manager

def create_app(data_path=None):
    app = Flask(__name__)
    CORS(app) # Enable CORS for frontend communication
    api = Api(app)

    # Initialize Routes
    init_routes(api)

    # Serve a different dataset than the bundled one
    if data_path is not None:
        db_manager.load(data_path)

    return app
