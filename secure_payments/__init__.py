import logging

from flask import Flask, request
from flask_cors import CORS
from flask_restx import Api
from werkzeug.exceptions import HTTPException

from secure_payments.cli import register_commands
from secure_payments.config import Config
from secure_payments.csrf import HEADER_NAME
from secure_payments.errors import ConfigurationError, PaymentsError
from secure_payments.models import bcrypt, db
from secure_payments.routes import register_namespaces
from secure_payments.store import seed_employees

logger = logging.getLogger(__name__)

GENERIC_ERROR = {'status': 'error', 'error': 'InternalError', 'message': 'Unexpected server error.'}


def _http_error(error):
    return {
        'status': 'error',
        'error': error.name.replace(' ', ''),
        'message': error.description,
    }, error.code


def register_error_handlers(app, api):
    @api.errorhandler(PaymentsError)
    def handle_payments_error(error):
        if error.status_code >= 500:
            logger.error("%s: %s", type(error).__name__, error.message)
            return dict(GENERIC_ERROR), 500
        return error.to_dict(), error.status_code

    # Registered last so the specific handler above wins
    @api.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return _http_error(error)
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return dict(GENERIC_ERROR), 500

    @app.errorhandler(404)
    def route_not_found(error):
        return {'status': 'error', 'error': 'NotFound', 'message': 'Route not found.'}, 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return _http_error(error)


def create_app(overrides=None):
    """Build the Flask app. ``overrides`` is applied on top of Config."""
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    if not app.config.get('JWT_SECRET_KEY'):
        raise ConfigurationError('Missing JWT_SECRET. Please set it in the environment.')
    if not app.config.get('SECRET_KEY'):
        raise ConfigurationError('Missing SECRET_KEY. Please set it in the environment.')

    # Credentialed requests only from the trusted portals
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config['ALLOWED_ORIGINS']}},
        supports_credentials=True,
        methods=['GET', 'POST', 'OPTIONS'],
        allow_headers=['Content-Type', HEADER_NAME],
    )

    db.init_app(app)
    bcrypt.init_app(app)

    api = Api(
        app,
        prefix='/api',
        doc='/api-docs/',
        title='Secure Payments API',
        description='Customer payment instructions and staff review.',
    )
    register_namespaces(api)
    register_error_handlers(app, api)
    register_commands(app)

    @app.after_request
    def log_request(response):
        logger.debug("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    with app.app_context():
        db.create_all()
        seed_employees(app.config['EMPLOYEE_SEED'])

    return app
