import os

from flask import g

import db
import db.challenge
from webserver import create_app

from flask_testing import TestCase


ADMIN_SQL_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), '..', 'admin', 'sql')
TEST_CONFIG_PATH = os.path.join(os.path.dirname(os.path.realpath(__file__)), '..', 'test_config.py')


class ServerTestCase(TestCase):

    def create_app(self):
        app = create_app(debug=False, config_path=TEST_CONFIG_PATH)
        app.config['WTF_CSRF_ENABLED'] = False
        app.config['TESTING'] = True
        return app

    def setUp(self):
        self.reset_db()

    def temporary_login(self, user_id):
        with self.client.session_transaction() as session:
            session['_user_id'] = user_id
            session['_fresh'] = True
        self.forget_loaded_user()

    def forget_loaded_user(self):
        """Drop the user that flask-login cached for the test's app context, so that
        the next request loads it from the database again."""
        g.pop('_login_user', None)

    def reset_db(self):
        self.drop_tables()
        self.init_db()

    def init_db(self):
        db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'create_tables.sql'))
        db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'create_indexes.sql'))

    def drop_tables(self):
        db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'drop_tables.sql'))

    def assertRedirects(self, response, location, message=None, permanent=False):
        """Override Flask testing's assertRedirects, which doesn't know about the new
        redirect behaviour from RFC 9110 (https://github.com/pallets/werkzeug/pull/2354)"""
        if permanent:
            valid_status_codes = (301, 308)
        else:
            valid_status_codes = (301, 302, 303, 305, 307, 308)

        valid_status_code_str = ', '.join(str(code) for code in valid_status_codes)
        not_redirect = "HTTP Status %s expected but got %d" % (valid_status_code_str, response.status_code)

        self.assertIn(response.status_code, valid_status_codes, message or not_redirect)
        location_mismatch = "Expected redirect location %s but got %s" % (location, response.location)
        self.assertTrue(response.location.endswith(location), message or location_mismatch)

    assert_redirects = assertRedirects

    def add_challenge(self, id, block, super_block, dashed_name, **kwargs):
        """Add a challenge to the database and return it as a dictionary."""
        db.challenge.create(id, block, super_block, dashed_name, **kwargs)
        return db.challenge.get(id)

    def add_first_challenge(self):
        return self.add_challenge("456def", "first", "the", "challenge",
                                  super_order=1, block_order=0, challenge_order=0)
