import json

import db
import db.exceptions
import sqlalchemy

COMPLETED_CHALLENGE_COLUMNS = ["challenge_id", "completed_date", "challenge_type",
                               "solution", "github_link", "files"]
ALL_COMPLETED_CHALLENGE_COLUMNS = ", ".join(COMPLETED_CHALLENGE_COLUMNS)


def _prep_row_out(row):
    row = dict(row)
    row["id"] = row.pop("challenge_id")
    row["files"] = json.loads(row["files"]) if row["files"] else []
    return row


def save(user_id, completed_challenge):
    """Store a challenge completion for a user.

    If the user has already completed this challenge, the stored record is
    replaced.

    Args:
        user_id: ID of the user that completed the challenge.
        completed_challenge: Dictionary with at least `id` (challenge ID) and
            `completed_date` (milliseconds since epoch). Optional keys:
            `challenge_type`, `solution`, `github_link`, `files` (list of dicts).
    """
    files = completed_challenge.get("files")
    with db.engine.begin() as connection:
        try:
            connection.execute(sqlalchemy.text("""
                INSERT INTO completed_challenge (user_id, %s)
                     VALUES (:user_id, :challenge_id, :completed_date, :challenge_type,
                             :solution, :github_link, :files)
                ON CONFLICT (user_id, challenge_id)
                  DO UPDATE
                        SET completed_date = EXCLUDED.completed_date,
                            challenge_type = EXCLUDED.challenge_type,
                            solution = EXCLUDED.solution,
                            github_link = EXCLUDED.github_link,
                            files = EXCLUDED.files
            """ % ALL_COMPLETED_CHALLENGE_COLUMNS), {
                "user_id": user_id,
                "challenge_id": completed_challenge["id"],
                "completed_date": completed_challenge["completed_date"],
                "challenge_type": completed_challenge.get("challenge_type"),
                "solution": completed_challenge.get("solution"),
                "github_link": completed_challenge.get("github_link"),
                "files": json.dumps(files) if files else None,
            })
        except sqlalchemy.exc.IntegrityError as err:
            raise db.exceptions.BadDataException("Couldn't save completed challenge: %s" % str(err))


def get(user_id, challenge_id):
    """Get a user's completion of a challenge, or None if they haven't completed it."""
    with db.engine.connect() as connection:
        result = connection.execute(sqlalchemy.text("""
            SELECT %s
              FROM completed_challenge
             WHERE user_id = :user_id
               AND challenge_id = :challenge_id
        """ % ALL_COMPLETED_CHALLENGE_COLUMNS), {
            "user_id": user_id,
            "challenge_id": challenge_id,
        })
        row = result.mappings().fetchone()
        return _prep_row_out(row) if row else None


def count(user_id):
    with db.engine.connect() as connection:
        result = connection.execute(sqlalchemy.text("""
            SELECT COUNT(*)
              FROM completed_challenge
             WHERE user_id = :user_id
        """), {"user_id": user_id})
        return result.scalar()
