from flask import Flask, jsonify
from flask_migrate import Migrate
from flask_login import LoginManager
from marketplace.extensions import db
from marketplace.config import Config
from marketplace.errors import register_error_handlers
from marketplace.middleware import setup_auth_middleware
import logging
import os

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(os.environ.get('LOG_FILE', 'app.log')),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger(__name__)

migrate = Migrate()
login_manager = LoginManager()
# Bearer tokens only; no cookie session.
login_manager.session_protection = None


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # Credential verifier: Authorization header -> users row
    setup_auth_middleware(login_manager)

    # Register blueprints
    from marketplace.blueprints import (
        admin_dashboard,
        admin_logs,
        business_profiles,
        categories,
        products,
        users,
    )

    # Blueprints use absolute /api/... routes.
    app.register_blueprint(products.bp)
    app.register_blueprint(users.bp)
    app.register_blueprint(business_profiles.bp)
    app.register_blueprint(categories.bp)
    app.register_blueprint(admin_logs.bp)
    app.register_blueprint(admin_dashboard.bp)

    register_error_handlers(app)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({'success': True, 'message': 'API is running'})

    # Note: Database tables are managed via Flask-Migrate
    # Use 'flask db upgrade' to create/update tables

    logger.info("Flask application initialized")
    return app
