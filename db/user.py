import uuid

import db
import db.exceptions
import sqlalchemy

USER_COLUMNS = ["id", "username", "current_challenge_id", "timezone"]
ALL_USER_COLUMNS = ", ".join(['"user".%s' % c for c in USER_COLUMNS])


def create(username):
    new_id = str(uuid.uuid4())
    with db.engine.begin() as connection:
        try:
            connection.execute(sqlalchemy.text("""
                INSERT INTO "user" (id, username)
                     VALUES (:id, :username)
            """), {"id": new_id, "username": username})
        except sqlalchemy.exc.IntegrityError as err:
            raise db.exceptions.BadDataException("Couldn't create user %s: %s" % (username, str(err)))
    return new_id


def get(id):
    """Get user with a specified ID."""
    with db.engine.connect() as connection:
        result = connection.execute(sqlalchemy.text("""
            SELECT %s
              FROM "user"
             WHERE id = :id
        """ % ALL_USER_COLUMNS), {"id": id})
        row = result.mappings().fetchone()
        return dict(row) if row else None


def get_by_username(username):
    """Get user with a specified username.
    Usernames are case-insensitive matched.
    """
    with db.engine.connect() as connection:
        result = connection.execute(sqlalchemy.text("""
            SELECT %s
              FROM "user"
             WHERE LOWER(username) = LOWER(:username)
        """ % ALL_USER_COLUMNS), {"username": username})
        row = result.mappings().fetchone()
        return dict(row) if row else None


def get_or_create(username):
    """Return a user row for the given username, creating it
    if it does not exist.
    """
    user = get_by_username(username)
    if not user:
        create(username)
        user = get_by_username(username)
    return user


def update_current_challenge(user_id, challenge_id):
    """Set the challenge that the user is currently working on.

    Args:
        user_id (str): ID of the user
        challenge_id (str): ID of the challenge, empty string to clear it
    """
    with db.engine.begin() as connection:
        try:
            connection.execute(sqlalchemy.text("""
                UPDATE "user"
                   SET current_challenge_id = :challenge_id
                 WHERE id = :user_id
            """), {
                "user_id": user_id,
                "challenge_id": challenge_id or "",
            })
        except sqlalchemy.exc.SQLAlchemyError as err:
            raise db.exceptions.DatabaseException("Couldn't update current challenge for user: %s" % str(err))


def update_timezone(user_id, timezone):
    with db.engine.begin() as connection:
        try:
            connection.execute(sqlalchemy.text("""
                UPDATE "user"
                   SET timezone = :timezone
                 WHERE id = :user_id
            """), {
                "user_id": user_id,
                "timezone": timezone,
            })
        except sqlalchemy.exc.SQLAlchemyError as err:
            raise db.exceptions.DatabaseException("Couldn't update timezone for user: %s" % str(err))
