from flask import Flask
from pprint import pprint

import os
import time

from flask_wtf import CSRFProtect

# Check to see if we're running under a docker deployment. If so, don't second guess
# the config file setup and just wait for the correct configuration to be generated.
deploy_env = os.environ.get('DEPLOY_ENV', '')
CONSUL_CONFIG_FILE_RETRY_COUNT = 10

ROOT_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "..")


def load_config(app, config_path=None):
    """Load configuration file for specified Flask app.

    Defaults from default_config.py are loaded first, then the file at
    `config_path` (config.py in the project root if it's not specified).
    """
    app.config.from_pyfile(os.path.join(ROOT_DIR, "default_config.py"))

    # config.py is optional outside of deployments
    silent = False
    if config_path is None:
        config_path = os.path.join(ROOT_DIR, "config.py")
        silent = not deploy_env
        if deploy_env:
            for _ in range(CONSUL_CONFIG_FILE_RETRY_COUNT):
                if not os.path.exists(config_path):
                    time.sleep(1)

            if not os.path.exists(config_path):
                print("No config file generated. Retried %d times, exiting." % CONSUL_CONFIG_FILE_RETRY_COUNT)

    app.config.from_pyfile(config_path, silent=silent)

    if not app.config.get('LEARN_URL'):
        app.config['LEARN_URL'] = app.config['HOME_LOCATION'] + '/learn'

    if deploy_env:
        print('Config file loaded!')
        pprint(dict(app.config))


def create_app(debug=None, config_path=None):
    app = Flask(import_name=__name__)

    # Configuration
    load_config(app, config_path)

    if debug is not None:
        app.debug = debug

    # Logging
    from webserver.loggers import init_loggers
    init_loggers(app)

    # Database connection
    from db import init_db_engine
    init_db_engine(app.config['SQLALCHEMY_DATABASE_URI'])

    # Authentication
    from webserver.login import login_manager
    login_manager.init_app(app)

    # Error handling
    from webserver.errors import init_error_handlers
    init_error_handlers(app)

    # CSRF
    CSRFProtect(app)

    _register_blueprints(app)

    return app


def create_app_flaskgroup(script_info=None):
    """Factory function that accepts script_info and creates a Flask application"""
    return create_app()


def _register_blueprints(app):
    from webserver.views.challenges import challenges_bp, completion_bp
    app.register_blueprint(challenges_bp)
    app.register_blueprint(completion_bp)

    # Completion endpoints take JSON bodies from the client application.
    if 'csrf' in app.extensions:
        app.extensions['csrf'].exempt(completion_bp)
