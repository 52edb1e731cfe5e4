import unittest
from unittest import mock

from flask_login import AnonymousUserMixin

import db.exceptions
from webserver import challenge
from webserver.login import User
from webserver.testing import ServerTestCase

FIRST_CHALLENGE_URL = "/learn/the/first/challenge"
REQUESTED_CHALLENGE_URL = "/learn/my/actual/challenge"

MOCK_CHALLENGE = {
    "id": "123abc",
    "block": "actual",
    "super_block": "my",
    "dashed_name": "challenge",
}
MOCK_FIRST_CHALLENGE = {
    "id": "456def",
    "block": "first",
    "super_block": "the",
    "dashed_name": "challenge",
}


class FakeChallengeModel(object):
    """Challenge model that only knows about a fixed set of challenges."""

    def __init__(self, challenges, first_challenge=None):
        self.challenges = {c["id"]: c for c in challenges}
        self.first_challenge = first_challenge

    def get(self, id):
        if id not in self.challenges:
            raise db.exceptions.NoDataFoundException("challenge not found")
        return self.challenges[id]

    def find_one(self, **filters):
        if self.first_challenge is None or filters != challenge.FIRST_CHALLENGE_FILTER:
            raise db.exceptions.NoDataFoundException("no challenge found")
        return self.first_challenge


def mock_get_first_challenge():
    return FIRST_CHALLENGE_URL


class BuildChallengeUrlTestCase(unittest.TestCase):

    def test_build_challenge_url(self):
        self.assertEqual(challenge.build_challenge_url(MOCK_CHALLENGE), REQUESTED_CHALLENGE_URL)

    def test_build_challenge_url_spaces(self):
        """Names that aren't valid in URLs are slugged"""
        challenge_with_spaces = dict(MOCK_CHALLENGE, super_block="my awesome")
        self.assertEqual(challenge.build_challenge_url(challenge_with_spaces),
                         "/learn/my-awesome/actual/challenge")

    def test_build_challenge_url_only_super_block_is_slugged(self):
        url = challenge.build_challenge_url(dict(MOCK_CHALLENGE, super_block="Responsive Web Design",
                                                 block="basic-html", dashed_name="say-hello"))
        self.assertEqual(url, "/learn/responsive-web-design/basic-html/say-hello")

    def test_slugify_name(self):
        self.assertEqual(challenge.slugify_name("my awesome"), "my-awesome")
        self.assertEqual(challenge.slugify_name("  JavaScript   Algorithms\tand Data "),
                         "javascript-algorithms-and-data")

    def test_slugify_name_idempotent(self):
        for name in ["my-awesome", "responsive-web-design", "my awesome block"]:
            slug = challenge.slugify_name(name)
            self.assertEqual(challenge.slugify_name(slug), slug)
        self.assertEqual(challenge.slugify_name("already-a-slug"), "already-a-slug")


class BuildUserUpdateTestCase(unittest.TestCase):

    def setUp(self):
        self.user = {"id": "user-1", "username": "camperbot", "current_challenge_id": "", "timezone": None}
        self.files = [{
            "key": "indexjs",
            "ext": "js",
            "name": "index",
            "contents": "function palindrome() {}",
            "path": "index.js",
            "index": 0,
            "history": ["index.js"],
            "editableRegionBoundaries": [],
        }]

    def test_first_completion(self):
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 100, "solution": "url"})
        self.assertFalse(update["already_completed"])
        self.assertEqual(update["completed_date"], 100)
        self.assertEqual(update["completed_challenge"], {"id": "123abc", "completed_date": 100, "solution": "url"})
        self.assertIsNone(update["timezone"])

    def test_already_completed_keeps_date(self):
        previous = {"id": "123abc", "completed_date": 50}
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 100}, previous=previous)
        self.assertTrue(update["already_completed"])
        self.assertEqual(update["completed_date"], 50)
        self.assertEqual(update["completed_challenge"]["completed_date"], 50)

    def test_files_dropped_for_regular_challenges(self):
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 100, "files": self.files})
        self.assertNotIn("files", update["completed_challenge"])

    def test_files_kept_for_js_projects(self):
        project_id = challenge.JS_PROJECT_IDS[0]
        update = challenge.build_user_update(self.user, project_id, {"completed_date": 100, "files": self.files})
        self.assertEqual(update["completed_challenge"]["files"], [{
            "key": "indexjs",
            "ext": "js",
            "name": "index",
            "contents": "function palindrome() {}",
            "path": "index.js",
            "index": 0,
        }])

    def test_does_not_modify_submission(self):
        submission = {"completed_date": 100, "files": self.files}
        challenge.build_user_update(self.user, challenge.JS_PROJECT_IDS[0], submission)
        self.assertEqual(submission, {"completed_date": 100, "files": self.files})

    def test_timezone(self):
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 1}, timezone="Europe/Berlin")
        self.assertEqual(update["timezone"], "Europe/Berlin")

        # UTC is the default, no need to store it
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 1}, timezone="UTC")
        self.assertIsNone(update["timezone"])

        # unknown timezones are ignored
        update = challenge.build_user_update(self.user, "123abc", {"completed_date": 1}, timezone="Mars/Olympus")
        self.assertIsNone(update["timezone"])

        # users who already have a timezone keep it
        user = dict(self.user, timezone="America/New_York")
        update = challenge.build_user_update(user, "123abc", {"completed_date": 1}, timezone="Europe/Berlin")
        self.assertIsNone(update["timezone"])

        user = dict(self.user, timezone="UTC")
        update = challenge.build_user_update(user, "123abc", {"completed_date": 1}, timezone="Europe/Berlin")
        self.assertEqual(update["timezone"], "Europe/Berlin")


class ChallengeUrlResolverTestCase(ServerTestCase):

    def setUp(self):
        super(ChallengeUrlResolverTestCase, self).setUp()
        self.challenge_model = FakeChallengeModel([MOCK_CHALLENGE, MOCK_FIRST_CHALLENGE])

    def test_resolves_first_challenge_by_default(self):
        resolve = challenge.create_challenge_url_resolver(self.challenge_model,
                                                          get_first_challenge=mock_get_first_challenge)
        self.assertEqual(resolve(), FIRST_CHALLENGE_URL)
        self.assertEqual(resolve(None), FIRST_CHALLENGE_URL)
        self.assertEqual(resolve(""), FIRST_CHALLENGE_URL)

    def test_unknown_challenge_resolves_first_challenge(self):
        resolve = challenge.create_challenge_url_resolver(self.challenge_model,
                                                          get_first_challenge=mock_get_first_challenge)
        self.assertEqual(resolve("not-a-real-challenge"), FIRST_CHALLENGE_URL)

    def test_resolves_requested_challenge(self):
        resolve = challenge.create_challenge_url_resolver(self.challenge_model,
                                                          get_first_challenge=mock_get_first_challenge)
        self.assertEqual(resolve("123abc"), REQUESTED_CHALLENGE_URL)

    def test_database_error_resolves_first_challenge(self):
        challenge_model = mock.Mock()
        challenge_model.get.side_effect = db.exceptions.DatabaseException("connection refused")
        resolve = challenge.create_challenge_url_resolver(challenge_model,
                                                          get_first_challenge=mock_get_first_challenge)
        self.assertEqual(resolve("123abc"), FIRST_CHALLENGE_URL)
        challenge_model.get.assert_called_once_with("123abc")

    def test_default_first_challenge_uses_model(self):
        challenge_model = FakeChallengeModel([MOCK_CHALLENGE], first_challenge=MOCK_FIRST_CHALLENGE)
        resolve = challenge.create_challenge_url_resolver(challenge_model)
        self.assertEqual(resolve(), FIRST_CHALLENGE_URL)
        self.assertEqual(resolve("not-a-real-challenge"), FIRST_CHALLENGE_URL)

    def test_default_challenge_model(self):
        self.add_challenge(**MOCK_CHALLENGE)
        resolve = challenge.create_challenge_url_resolver()
        self.assertEqual(resolve("123abc"), REQUESTED_CHALLENGE_URL)
        # there is no first challenge in the database
        self.assertEqual(resolve(), challenge.LEARN_BASE_PATH)

        self.add_first_challenge()
        self.assertEqual(resolve(), FIRST_CHALLENGE_URL)


class GetFirstChallengeUrlTestCase(ServerTestCase):

    def test_returns_first_challenge_url(self):
        challenge_model = FakeChallengeModel([], first_challenge=MOCK_FIRST_CHALLENGE)
        self.assertEqual(challenge.get_first_challenge_url(challenge_model), FIRST_CHALLENGE_URL)

    def test_returns_learn_base_if_no_challenges_found(self):
        challenge_model = FakeChallengeModel([])
        self.assertEqual(challenge.get_first_challenge_url(challenge_model), "/learn")

    def test_returns_learn_base_on_database_error(self):
        challenge_model = mock.Mock()
        challenge_model.find_one.side_effect = db.exceptions.DatabaseException("connection refused")
        self.assertEqual(challenge.get_first_challenge_url(challenge_model), "/learn")

    def test_queries_database_by_default(self):
        self.assertEqual(challenge.get_first_challenge_url(), "/learn")
        self.add_first_challenge()
        self.assertEqual(challenge.get_first_challenge_url(), FIRST_CHALLENGE_URL)


class RedirectToCurrentChallengeTestCase(ServerTestCase):

    home_location = "https://www.example.com"
    learn_url = "https://www.example.com/learn"

    def setUp(self):
        super(RedirectToCurrentChallengeTestCase, self).setUp()
        self.resolve = challenge.create_challenge_url_resolver(
            FakeChallengeModel([MOCK_CHALLENGE]),
            get_first_challenge=mock_get_first_challenge,
        )

    def _redirect_as(self, user, resolve=None):
        redirect_to_current_challenge = challenge.create_redirect_to_current_challenge(
            resolve or self.resolve,
            home_location=self.home_location,
            learn_url=self.learn_url,
        )
        with mock.patch("webserver.challenge.current_user", user):
            return redirect_to_current_challenge()

    def _user(self, current_challenge_id):
        return User(id="user-1", username="camperbot",
                    current_challenge_id=current_challenge_id, timezone=None)

    def test_redirects_non_users_to_learn(self):
        resolve = mock.Mock()
        response = self._redirect_as(AnonymousUserMixin(), resolve)
        self.assertStatus(response, 302)
        self.assertEqual(response.location, self.learn_url)
        resolve.assert_not_called()

    def test_redirects_to_first_challenge_without_progress(self):
        response = self._redirect_as(self._user(""))
        self.assertStatus(response, 302)
        self.assertEqual(response.location, self.home_location + FIRST_CHALLENGE_URL)

    def test_redirects_to_current_challenge(self):
        response = self._redirect_as(self._user("123abc"))
        self.assertStatus(response, 302)
        self.assertEqual(response.location, self.home_location + REQUESTED_CHALLENGE_URL)

    def test_passes_none_for_empty_challenge_id(self):
        resolve = mock.Mock(return_value=FIRST_CHALLENGE_URL)
        self._redirect_as(self._user(""), resolve)
        resolve.assert_called_once_with(None)

    def test_resolver_errors_are_not_caught(self):
        resolve = mock.Mock(side_effect=RuntimeError("broken resolver"))
        with self.assertRaises(RuntimeError):
            self._redirect_as(self._user("123abc"), resolve)

    def test_defaults_from_config(self):
        self.app.config["HOME_LOCATION"] = "https://learn.example.org"
        self.app.config["LEARN_URL"] = "https://learn.example.org/learn"
        redirect_to_current_challenge = challenge.create_redirect_to_current_challenge(self.resolve)

        with mock.patch("webserver.challenge.current_user", AnonymousUserMixin()):
            response = redirect_to_current_challenge()
        self.assertEqual(response.location, "https://learn.example.org/learn")

        with mock.patch("webserver.challenge.current_user", self._user("123abc")):
            response = redirect_to_current_challenge()
        self.assertEqual(response.location, "https://learn.example.org" + REQUESTED_CHALLENGE_URL)
