from functools import wraps
from flask_login import current_user

from webserver.exceptions import APIUnauthorized


def service_session_login_required(f):
    """Require an endpoint used by the client application to have a valid
    session authorization.
    The session is logged in with the standard flask_login user_loader.
    If the user isn't logged in, return an Unauthorized error formatted as json.

    This is different to flask-login's @login_required in that it directly returns Unauthorized
    instead of redirecting the user to the login page.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        if current_user.is_authenticated:
            return f(*args, **kwargs)
        else:
            raise APIUnauthorized("You need to be signed in to do this.")
    return decorated
