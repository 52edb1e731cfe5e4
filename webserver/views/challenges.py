from datetime import datetime

from flask import Blueprint, request, jsonify, current_app, redirect
from flask_login import current_user
import pytz

import db.challenge
import db.completed_challenge
import db.exceptions
import db.user
from webserver.challenge import (build_user_update, create_challenge_url_resolver,
                                 create_redirect_to_current_challenge)
from webserver.decorators import service_session_login_required
from webserver.exceptions import APIBadRequest, APIForbidden, APINotFound

# Challenge type of back-end projects, they need a link to the source code.
BACKEND_PROJECT_TYPE = 4

INVALID_LINKS_MESSAGE = "You have not provided the valid links for us to inspect your work."

challenges_bp = Blueprint('challenges', __name__)
completion_bp = Blueprint('completion', __name__)

redirect_to_current_challenge = create_redirect_to_current_challenge(create_challenge_url_resolver())
challenges_bp.add_url_rule("/challenges/current-challenge", "current_challenge", redirect_to_current_challenge)
challenges_bp.add_url_rule("/challenges/current", "current", redirect_to_current_challenge)


@challenges_bp.route("/challenges")
@challenges_bp.route("/challenges/")
@challenges_bp.route("/challenges/<path:path>")
@challenges_bp.route("/map")
def redirect_to_learn(path=None):
    """Send old curriculum and map pages to the learn page."""
    return redirect(current_app.config["LEARN_URL"])


@completion_bp.route("/modern-challenge-completed", methods=["POST"])
@service_session_login_required
def modern_challenge_completed():
    """Mark a challenge that is completed in the browser as completed.

    **Example request**:

    .. sourcecode:: json

        {
            "id": "bd7123c8c441eddfaeb5bdef",
            "challengeType": 0,
            "files": []
        }

    **Example response**:

    .. sourcecode:: json

        {
            "alreadyCompleted": false,
            "points": 1,
            "completedDate": 1546300800000
        }

    :reqheader Content-Type: *application/json*
    :resheader Content-Type: *application/json*
    """
    data = _get_json_body()
    challenge = _get_challenge(data.get("id"))
    return _complete(challenge, {
        "challenge_type": data.get("challengeType"),
        "files": _get_files(data),
    }, _get_timezone(data))


@completion_bp.route("/project-completed", methods=["POST"])
@service_session_login_required
def project_completed():
    """Mark a project as completed.

    Body must contain `id` and `solution` (URL of the working project).
    Back-end projects also need `githubLink`.
    """
    data = _get_json_body()
    challenge = _get_challenge(data.get("id"))
    challenge_type = data.get("challengeType")
    if not data.get("solution") or (challenge_type == BACKEND_PROJECT_TYPE and not data.get("githubLink")):
        raise APIForbidden(INVALID_LINKS_MESSAGE, payload={"type": "error"})
    return _complete(challenge, {
        "challenge_type": challenge_type,
        "solution": data["solution"],
        "github_link": data.get("githubLink"),
    }, _get_timezone(data))


@completion_bp.route("/backend-challenge-completed", methods=["POST"])
@service_session_login_required
def backend_challenge_completed():
    """Mark a back-end challenge as completed. Body must contain `id` and `solution`."""
    data = _get_json_body()
    challenge = _get_challenge(data.get("id"))
    if not data.get("solution"):
        raise APIForbidden(INVALID_LINKS_MESSAGE, payload={"type": "error"})
    return _complete(challenge, {
        "challenge_type": challenge["challenge_type"],
        "solution": data["solution"],
    }, _get_timezone(data))


@completion_bp.route("/update-my-current-challenge", methods=["POST"])
@service_session_login_required
def update_my_current_challenge():
    data = _get_json_body()
    challenge_id = data.get("currentChallengeId")
    if not challenge_id:
        raise APIBadRequest("Current challenge ID is missing.")
    if not isinstance(challenge_id, str):
        raise APIBadRequest("Current challenge ID must be a string.")
    _get_challenge(challenge_id)
    db.user.update_current_challenge(current_user.id, challenge_id)
    return jsonify({
        "type": "success",
        "message": "Your current challenge has been updated",
    })


def _get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise APIBadRequest("Data must be submitted in JSON format.")
    return data


def _get_challenge(challenge_id):
    if not challenge_id:
        raise APIBadRequest("Challenge ID is missing.")
    if not isinstance(challenge_id, str):
        raise APIBadRequest("Challenge ID must be a string.")
    try:
        return db.challenge.get(challenge_id)
    except db.exceptions.NoDataFoundException:
        raise APINotFound("Can't find challenge with a specified ID.")


def _get_timezone(data):
    timezone = data.get("timezone")
    if timezone is not None and not isinstance(timezone, str):
        raise APIBadRequest("Timezone must be a string.")
    return timezone


def _get_files(data):
    files = data.get("files")
    if files is None:
        return None
    if not isinstance(files, list) or not all(isinstance(f, dict) for f in files):
        raise APIBadRequest("Files must be a list of objects.")
    return files


def _complete(challenge, completed_challenge, timezone):
    user = db.user.get(current_user.id)
    completed_challenge["completed_date"] = int(datetime.now(pytz.utc).timestamp() * 1000)
    update = build_user_update(
        user=user,
        challenge_id=challenge["id"],
        completed_challenge=completed_challenge,
        timezone=timezone,
        previous=db.completed_challenge.get(user["id"], challenge["id"]),
    )

    db.completed_challenge.save(user["id"], update["completed_challenge"])
    db.user.update_current_challenge(user["id"], challenge["id"])
    if update["timezone"]:
        db.user.update_timezone(user["id"], update["timezone"])
    current_app.logger.info("User %s completed challenge %s", user["id"], challenge["id"])

    return jsonify({
        "alreadyCompleted": update["already_completed"],
        "points": db.completed_challenge.count(user["id"]),
        "completedDate": update["completed_date"],
    })
