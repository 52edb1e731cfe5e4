import db
import db.exceptions
import sqlalchemy

CHALLENGE_COLUMNS = ["id", "title", "block", "super_block", "dashed_name", "challenge_type",
                     "super_order", "block_order", "challenge_order"]
ALL_CHALLENGE_COLUMNS = ", ".join(CHALLENGE_COLUMNS)

# Columns that `find_one` accepts as filters.
FILTER_COLUMNS = ["block", "super_block", "dashed_name", "challenge_type",
                  "super_order", "block_order", "challenge_order"]


def create(id, block, super_block, dashed_name, title="", challenge_type=0,
           super_order=0, block_order=0, challenge_order=0):
    """Create a new challenge.

    Args:
        id: Opaque identifier of the challenge (curriculum ID).
        block: Name of a block that the challenge belongs to.
        super_block: Name of a super block that the block belongs to. Can
            contain spaces, they are replaced when building URLs.
        dashed_name: URL-friendly name of the challenge.
        title: Human readable title.
        challenge_type: Numeric type of the challenge as used by the curriculum.
        super_order: Position of the super block in the curriculum.
        block_order: Position of the block within its super block.
        challenge_order: Position of the challenge within its block.

    Returns:
        ID of the new challenge.
    """
    with db.engine.begin() as connection:
        try:
            connection.execute(sqlalchemy.text("""
                INSERT INTO challenge (%s)
                     VALUES (:id, :title, :block, :super_block, :dashed_name, :challenge_type,
                             :super_order, :block_order, :challenge_order)
            """ % ALL_CHALLENGE_COLUMNS), {
                "id": id,
                "title": title,
                "block": block,
                "super_block": super_block,
                "dashed_name": dashed_name,
                "challenge_type": challenge_type,
                "super_order": super_order,
                "block_order": block_order,
                "challenge_order": challenge_order,
            })
        except sqlalchemy.exc.IntegrityError as err:
            raise db.exceptions.BadDataException("Couldn't create challenge %s: %s" % (id, str(err)))
    return id


def create_from_curriculum(challenges):
    """Import a list of challenges in the format published by the curriculum.

    Curriculum entries use camelCase keys (`superBlock`, `dashedName`,
    `challengeType`, `superOrder`, `order`, `challengeOrder`). Existing
    challenges with the same ID are replaced.

    Returns:
        Number of imported challenges.
    """
    rows = []
    for challenge in challenges:
        try:
            rows.append({
                "id": challenge["id"],
                "title": challenge.get("title", ""),
                "block": challenge["block"],
                "super_block": challenge["superBlock"],
                "dashed_name": challenge["dashedName"],
                "challenge_type": challenge.get("challengeType", 0),
                "super_order": challenge.get("superOrder", 0),
                "block_order": challenge.get("order", 0),
                "challenge_order": challenge.get("challengeOrder", 0),
            })
        except KeyError as e:
            raise db.exceptions.BadDataException("Challenge is missing a required field: %s" % e)

    if not rows:
        return 0

    with db.engine.begin() as connection:
        connection.execute(sqlalchemy.text("""
            DELETE FROM challenge
                  WHERE id = :id
        """), [{"id": row["id"]} for row in rows])
        connection.execute(sqlalchemy.text("""
            INSERT INTO challenge (%s)
                 VALUES (:id, :title, :block, :super_block, :dashed_name, :challenge_type,
                         :super_order, :block_order, :challenge_order)
        """ % ALL_CHALLENGE_COLUMNS), rows)
    return len(rows)


def get(id):
    """Get challenge with a specified ID.

    Raises:
        NoDataFoundException: if there is no such challenge.
        DatabaseException: if the query fails.
    """
    try:
        with db.engine.connect() as connection:
            result = connection.execute(sqlalchemy.text("""
                SELECT %s
                  FROM challenge
                 WHERE id = :id
            """ % ALL_CHALLENGE_COLUMNS), {"id": id})
            row = result.mappings().fetchone()
    except sqlalchemy.exc.SQLAlchemyError as err:
        raise db.exceptions.DatabaseException("Couldn't get challenge: %s" % str(err))
    if not row:
        raise db.exceptions.NoDataFoundException("Can't find challenge with a specified ID.")
    return dict(row)


def find_one(**filters):
    """Get the first challenge matching all of the given column values.

    For example, ``find_one(super_order=1, block_order=0, challenge_order=0)``
    returns the first challenge of the curriculum. When several challenges
    match, the one that comes first in curriculum order is returned.

    Raises:
        NoDataFoundException: if no challenge matches.
        DatabaseException: if the query fails.
    """
    for column in filters:
        if column not in FILTER_COLUMNS:
            raise ValueError("Can't filter challenges by `%s`." % column)

    where = " AND ".join("%s = :%s" % (column, column) for column in sorted(filters)) or "1 = 1"
    try:
        with db.engine.connect() as connection:
            result = connection.execute(sqlalchemy.text("""
                SELECT %s
                  FROM challenge
                 WHERE %s
              ORDER BY super_order, block_order, challenge_order, id
                 LIMIT 1
            """ % (ALL_CHALLENGE_COLUMNS, where)), filters)
            row = result.mappings().fetchone()
    except sqlalchemy.exc.SQLAlchemyError as err:
        raise db.exceptions.DatabaseException("Couldn't find challenge: %s" % str(err))
    if not row:
        raise db.exceptions.NoDataFoundException("Can't find challenge matching %s." % filters)
    return dict(row)
