from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
import logging

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()

def create_app(config_object='config.Config', generation_client=None):
    """
    Create and configure an instance of the Flask application.

    ``generation_client`` replaces the OpenRouter-backed client built from
    the configuration; tests pass a scripted stand-in here.
    """
    app = Flask(__name__)

    # Load configuration from config.py
    app.config.from_object(config_object)

    logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger(__name__).setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions with the app
    db.init_app(app)
    jwt.init_app(app)

    if generation_client is None:
        from .generation import GenerationClient
        generation_client = GenerationClient.from_config(app.config)
    app.extensions['generation_client'] = generation_client

    with app.app_context():
        # Import parts of our application
        from . import routes
        from . import auth
        from . import admin
        from .errors import register_error_handlers
        from . import models  # noqa: F401  registers the tables

        # Create database tables for our models
        db.create_all()

        register_error_handlers(app)

        # Register blueprints
        app.register_blueprint(routes.quiz_bp)
        app.register_blueprint(routes.ratings_bp)
        app.register_blueprint(auth.auth_bp)
        app.register_blueprint(admin.admin_bp)
        app.register_blueprint(admin.analytics_bp)
        app.register_blueprint(admin.ai_bp)

        app.logger.info("Brand quiz app ready (model %s)", getattr(generation_client, 'model_name', 'unknown'))
        return app
