"""Unit tests for MongoDB document models."""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from schemas.models.account import AccountDoc
from schemas.models.base import PyObjectId, to_object_id
from schemas.models.otp import OtpCodeDoc
from schemas.models.session import SessionDoc


# ── Helpers ───────────────────────────────────────────────────────────────────

def now():
    return datetime.now(timezone.utc)


def oid():
    return ObjectId()


# ── PyObjectId ────────────────────────────────────────────────────────────────

class TestPyObjectId:
    def test_accepts_objectid_instance(self):
        o = oid()
        assert PyObjectId._validate(o) == o

    def test_accepts_valid_string(self):
        s = str(oid())
        result = PyObjectId._validate(s)
        assert isinstance(result, ObjectId)
        assert str(result) == s

    def test_rejects_invalid_string(self):
        with pytest.raises(ValueError):
            PyObjectId._validate("not-an-objectid")

    def test_rejects_none(self):
        with pytest.raises((ValueError, TypeError)):
            PyObjectId._validate(None)


class TestToObjectId:
    def test_valid(self):
        o = oid()
        assert to_object_id(o) == o
        assert to_object_id(str(o)) == o

    @pytest.mark.parametrize("value", [None, "", "xyz", 123])
    def test_invalid(self, value):
        assert to_object_id(value) is None


# ── MongoBaseModel via AccountDoc ─────────────────────────────────────────────

class TestAccountDoc:
    def test_to_mongo_drops_missing_id(self):
        data = AccountDoc(email="a@x.com", name="A").to_mongo()
        assert "_id" not in data
        assert data["email_verified"] is False

    def test_to_mongo_keeps_id_as_objectid(self):
        o = oid()
        data = AccountDoc(_id=o, email="a@x.com", name="A").to_mongo()
        assert data["_id"] == o

    def test_from_mongo_none(self):
        assert AccountDoc.from_mongo(None) is None

    def test_from_mongo_fills_defaults(self):
        o = oid()
        doc = AccountDoc.from_mongo({"_id": o, "email": "a@x.com", "name": "A"})
        assert doc.id == o
        assert doc.password_hash is None
        assert doc.profile_picture is None
        assert doc.email_verified is False


class TestSessionDoc:
    def test_user_id_from_string(self):
        o = oid()
        doc = SessionDoc(token_hash="h", user_id=str(o), created_at=now())
        assert doc.user_id == o
        assert isinstance(doc.to_mongo()["user_id"], ObjectId)

    def test_user_id_invalid(self):
        with pytest.raises(ValueError):
            SessionDoc(token_hash="h", user_id="nope", created_at=now())


class TestOtpCodeDoc:
    def test_consumed_row(self):
        doc = OtpCodeDoc.from_mongo({"_id": oid(), "email": "a@x.com", "verified_at": now()})
        assert doc.code_hash is None
        assert doc.expires_at is None
        assert doc.verified_at is not None
