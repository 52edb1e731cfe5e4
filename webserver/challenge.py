"""Resolution of challenge URLs and bookkeeping of challenge completions.

The functions in this module don't talk to the database directly. Lookups go
through a *challenge model*: any object with a ``get(id)`` function that
raises :class:`db.exceptions.NoDataFoundException` when the challenge doesn't
exist and a ``find_one(**filters)`` function. The :mod:`db.challenge` module
is the default one.
"""
import re

import pytz
from flask import current_app, redirect
from flask_login import current_user

import db.challenge
import db.exceptions

#: Path of the curriculum root. Users are sent here when no challenge can be found.
LEARN_BASE_PATH = "/learn"

#: Ordering keys of the very first challenge of the curriculum.
FIRST_CHALLENGE_FILTER = {
    "challenge_order": 0,
    "super_order": 1,
    "block_order": 0,
}

#: Certification projects for which submitted source files are kept.
JS_PROJECT_IDS = [
    "aaa48de84e1ecc7c742e1124",  # palindrome checker
    "a7f4d8f2483413a6ce226cac",  # roman numeral converter
    "56533eb9ac21ba0edf2244e2",  # caesars cipher
    "aff0395860f5d3034dc0bfc9",  # telephone number validator
    "aa2e6f85cab2ab736c9a9b24",  # cash register
]

#: Keys of a submitted file that are stored.
SAVED_FILE_KEYS = ["contents", "key", "index", "name", "path", "ext"]


def slugify_name(name):
    """Convert a curriculum name to its URL form.

    Lowercases the name and replaces whitespace with hyphens. Leading and
    trailing whitespace is stripped. Names that are already slugs are
    returned unchanged.
    """
    return re.sub(r"\s+", "-", name.strip().lower())


def build_challenge_url(challenge):
    return "{base}/{super_block}/{block}/{dashed_name}".format(
        base=LEARN_BASE_PATH,
        super_block=slugify_name(challenge["super_block"]),
        block=challenge["block"],
        dashed_name=challenge["dashed_name"],
    )


def get_first_challenge_url(challenge_model=db.challenge):
    """Get URL of the first challenge in the curriculum.

    Falls back to the curriculum root if the first challenge can't be found.
    """
    try:
        challenge = challenge_model.find_one(**FIRST_CHALLENGE_FILTER)
    except db.exceptions.DatabaseException as e:
        current_app.logger.warning("Can't find the first challenge: %s", e)
        return LEARN_BASE_PATH
    return build_challenge_url(challenge)


def create_challenge_url_resolver(challenge_model=db.challenge, get_first_challenge=None):
    """Create a function that maps a challenge ID to the URL of that challenge.

    Args:
        challenge_model: Module or object used to look challenges up.
        get_first_challenge: Function without arguments that returns URL of
            the first challenge. It is used when no ID is given or when the ID
            doesn't belong to any challenge. By default the first challenge is
            looked up in `challenge_model`.

    Returns:
        Function that takes an optional challenge ID and returns a path.
    """
    if get_first_challenge is None:
        def get_first_challenge():
            return get_first_challenge_url(challenge_model)

    def resolve_challenge_url(challenge_id=None):
        if not challenge_id:
            return get_first_challenge()
        try:
            challenge = challenge_model.get(challenge_id)
        except db.exceptions.DatabaseException as e:
            current_app.logger.debug("Can't resolve challenge %s: %s", challenge_id, e)
            return get_first_challenge()
        return build_challenge_url(challenge)

    return resolve_challenge_url


def create_redirect_to_current_challenge(resolve_challenge_url, home_location=None, learn_url=None):
    """Create a view that redirects the user to the challenge they are working on.

    Anonymous users are sent to `learn_url`. Signed in users are sent to
    `home_location` followed by the path of their current challenge, or of
    the first challenge if they haven't started yet.

    `home_location` and `learn_url` default to the HOME_LOCATION and
    LEARN_URL configuration values.
    """
    def redirect_to_current_challenge():
        _home_location = home_location or current_app.config["HOME_LOCATION"]
        _learn_url = learn_url or current_app.config["LEARN_URL"]
        if not current_user.is_authenticated:
            return redirect(_learn_url)
        challenge_url = resolve_challenge_url(current_user.current_challenge_id or None)
        return redirect("%s%s" % (_home_location, challenge_url))

    return redirect_to_current_challenge


def _pick_file(file):
    return {key: file[key] for key in SAVED_FILE_KEYS if key in file}


def build_user_update(user, challenge_id, completed_challenge, timezone=None, previous=None):
    """Work out how a user's record changes after they complete a challenge.

    Args:
        user: User dictionary (`timezone` key is used).
        challenge_id: ID of the completed challenge.
        completed_challenge: Submitted completion. Must contain
            `completed_date`, can contain `files`, `solution`, `github_link`
            and `challenge_type`.
        timezone: Timezone reported by the user's browser.
        previous: Existing completion of the same challenge, if there is one.

    Returns:
        Dictionary with the following keys:
            already_completed: True if the user completed this challenge before.
            completed_date: Date of the first completion.
            completed_challenge: Record that needs to be stored.
            timezone: Timezone that needs to be stored for the user, None if
                it shouldn't change.
    """
    completed_challenge = dict(completed_challenge, id=challenge_id)
    files = completed_challenge.pop("files", None)
    if challenge_id in JS_PROJECT_IDS and files:
        completed_challenge["files"] = [_pick_file(f) for f in files]

    already_completed = previous is not None
    if already_completed:
        completed_challenge["completed_date"] = previous["completed_date"]

    new_timezone = None
    user_timezone = user.get("timezone")
    if timezone and timezone != "UTC" and timezone in pytz.all_timezones_set \
            and (not user_timezone or user_timezone == "UTC"):
        new_timezone = timezone

    return {
        "already_completed": already_completed,
        "completed_date": completed_challenge["completed_date"],
        "completed_challenge": completed_challenge,
        "timezone": new_timezone,
    }
