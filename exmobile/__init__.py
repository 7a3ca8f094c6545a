# exmobile/__init__.py

from flask import Flask
from flask_pymongo import PyMongo
from flask_cors import CORS
from pymongo.errors import OperationFailure
from .config import config_by_name
from .store import MarketStore
import os
import logging

mongo = PyMongo()


def create_app(config_name='default', db=None):
    """
    Application factory function.

    `db` lets callers (tests, scripts) hand in an already-built database
    object; otherwise the Flask-PyMongo extension connects using MONGO_URI.
    """
    app = Flask(__name__)

    # --- Load Configuration ---
    app.config.from_object(config_by_name[config_name])

    # --- Initialize extensions ---
    if db is None:
        mongo.init_app(app)
        db = mongo.db if mongo.db is not None else mongo.cx[app.config['MONGO_DBNAME']]

    # Setup file logging if not in debug mode
    if not app.debug and not app.testing:
        if not os.path.exists('logs'):
            os.mkdir('logs')
        file_handler = logging.FileHandler('logs/exmobile.log')
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)
        app.logger.setLevel(logging.INFO)
        app.logger.info('Ex Mobile Backend startup')

    store = MarketStore(db)
    try:
        store.ensure_indexes()
    except OperationFailure as e:
        # Existing duplicate emails block the unique index; keep serving
        app.logger.error(f"Could not create unique email index on users: {e}")

    # Enable CORS
    CORS(app)

    # --- Register blueprints (routes) ---
    from .routes import register_blueprints
    register_blueprints(app, store)

    return app
