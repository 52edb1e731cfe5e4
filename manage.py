import json
import logging
import os

import click
from flask import current_app
from flask.cli import FlaskGroup

import db
import db.challenge
import db.exceptions
import db.user
import webserver

ADMIN_SQL_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), 'admin', 'sql')

cli = FlaskGroup(add_default_commands=False, create_app=webserver.create_app_flaskgroup)

logging.basicConfig(level=logging.INFO)


@cli.command(name='init_db')
@click.option("--force", "-f", is_flag=True, help="Drop existing tables.")
def init_db(force):
    """Initialize database.

    This process involves several steps:
    1. Existing tables are dropped (only with --force).
    2. Table structure is created.
    3. Indexes are created.
    """
    db.init_db_engine(current_app.config['SQLALCHEMY_DATABASE_URI'])

    if force:
        current_app.logger.info('Dropping existing tables...')
        db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'drop_tables.sql'))

    current_app.logger.info('Creating tables...')
    db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'create_tables.sql'))

    current_app.logger.info('Creating indexes...')
    db.run_sql_script(os.path.join(ADMIN_SQL_DIR, 'create_indexes.sql'))

    current_app.logger.info("Done!")


@cli.command(name='import_challenges')
@click.argument("curriculum", type=click.File("r"))
def import_challenges(curriculum):
    """Import challenges from a JSON file.

    The file must contain a list of challenges as published by the curriculum,
    with `id`, `block`, `superBlock` and `dashedName` keys and optional
    `title`, `challengeType`, `superOrder`, `order` and `challengeOrder`.
    """
    try:
        challenges = json.load(curriculum)
    except ValueError as e:
        raise click.ClickException("Curriculum file is not valid JSON: %s" % e)
    if not isinstance(challenges, list):
        raise click.ClickException("Curriculum file must contain a list of challenges.")

    try:
        count = db.challenge.create_from_curriculum(challenges)
    except db.exceptions.BadDataException as e:
        raise click.ClickException(str(e))
    current_app.logger.info("Imported %d challenges.", count)


@cli.command(name='add_user')
@click.argument("username")
def add_user(username):
    """Create a user with a specified username and print its ID."""
    user = db.user.get_or_create(username)
    click.echo(user["id"])


if __name__ == '__main__':
    cli()
