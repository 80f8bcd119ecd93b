from flask import jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException
from marketplace.extensions import db
import logging

logger = logging.getLogger(__name__)


def handle_validation_error(error):
    return jsonify({
        'success': False,
        'message': 'Invalid payload',
        'error': error.messages,
    }), 400


def handle_http_error(error):
    return jsonify({
        'success': False,
        # Short reason phrase, e.g. 'Not found'.
        'message': error.name.capitalize(),
    }), error.code


def handle_store_error(error):
    logger.error(f"Database error: {error}", exc_info=True)
    db.session.rollback()
    return jsonify({'success': False, 'message': 'Server error'}), 500


def handle_unexpected_error(error):
    logger.exception("Unhandled exception")
    db.session.rollback()
    return jsonify({'success': False, 'message': 'Server error'}), 500


def register_error_handlers(app):
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(SQLAlchemyError, handle_store_error)
    app.register_error_handler(Exception, handle_unexpected_error)
