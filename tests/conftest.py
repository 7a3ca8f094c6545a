"""
Shared pytest fixtures.

The app is built with create_app("testing", db=...) around an in-memory
mongomock database, so no MongoDB server is needed.
"""

import mongomock
import pytest

from exmobile import create_app
from exmobile.tokens import issue_token


@pytest.fixture
def db():
    return mongomock.MongoClient().exMobile


@pytest.fixture
def app(db):
    return create_app('testing', db=db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    """Inserts a user document and returns its ObjectId."""
    def _make_user(email, role=None, verified=False):
        doc = {"email": email, "name": email.split("@")[0], "verified": verified}
        if role is not None:
            doc["role"] = role
        return db.users.insert_one(doc).inserted_id
    return _make_user


@pytest.fixture
def auth_header(app):
    """Returns an Authorization header carrying a valid token for `email`."""
    def _auth_header(email):
        token = issue_token(email, app.config['ACCESS_TOKEN_SECRET'])
        return {"Authorization": f"Bearer {token}"}
    return _auth_header
