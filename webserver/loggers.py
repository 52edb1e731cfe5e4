import logging
from logging.handlers import RotatingFileHandler

import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration


def init_loggers(app):
    if app.config.get('LOG_FILE_ENABLED'):
        _add_file_handler(app, app.config['LOG_FILE'])
    if app.config.get('LOG_SENTRY_ENABLED'):
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            environment=app.config.get('SENTRY_ENVIRONMENT'),
        )


def _add_file_handler(app, filename, max_bytes=512 * 1024, backup_count=100):
    """Adds file logging to the application's logger."""
    file_handler = RotatingFileHandler(filename, maxBytes=max_bytes, backupCount=backup_count)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    app.logger.addHandler(file_handler)
