"""App factory startup."""

import logging

import mongomock
from pymongo.errors import DuplicateKeyError

from exmobile import create_app
from exmobile.store import MarketStore


class TestCreateApp:

    def test_builds_unique_email_index(self, db):
        create_app('testing', db=db)
        unique_keys = [index["key"] for index in db.users.index_information().values() if index.get("unique")]
        assert [("email", 1)] in unique_keys

    def test_starts_when_duplicate_emails_block_the_index(self, monkeypatch, caplog):
        def raise_duplicate(self):
            raise DuplicateKeyError("E11000 duplicate key error collection: exMobile.users index: email_1")

        monkeypatch.setattr(MarketStore, "ensure_indexes", raise_duplicate)
        db = mongomock.MongoClient().exMobile
        db.users.insert_many([{"email": "a@x.com"}, {"email": "a@x.com"}])

        with caplog.at_level(logging.ERROR):
            app = create_app('testing', db=db)

        assert "unique email index" in caplog.text
        response = app.test_client().get("/stats")
        assert response.status_code == 200
        assert response.get_json()["users"] == 2
