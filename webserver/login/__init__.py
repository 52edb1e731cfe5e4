from flask_login import LoginManager, UserMixin
import db.user

login_manager = LoginManager()


class User(UserMixin):

    def __init__(self, id, username, current_challenge_id, timezone):
        self.id = id
        self.username = username
        self.current_challenge_id = current_challenge_id
        self.timezone = timezone

    @classmethod
    def from_dbrow(cls, user):
        return User(
            id=user['id'],
            username=user['username'],
            current_challenge_id=user['current_challenge_id'],
            timezone=user['timezone'],
        )


@login_manager.user_loader
def load_user(user_id):
    user = db.user.get(user_id)
    if user:
        return User.from_dbrow(user)
    else:
        return None
