"""Unit tests for property report shaping and owner operations."""

from datetime import datetime

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from propertysnap.repos import property_reports as reports_repo
from propertysnap.schemas.property_schema import PropertyCreate, ReportAction
from propertysnap.services import property_service
from propertysnap.services.cache_keys import property_list_key


def _doc(**overrides):
    doc = {
        "_id": ObjectId("64b0000000000000000000aa"),
        "shareToken": "tok123456789",
        "userId": "u1",
        "title": "Villa",
        "status": "APPROVED",
        "isPublic": True,
        "locationLat": 7.9,
        "locationLng": 98.3,
        "address": "Phuket",
        "viewCount": None,
        "createdAt": datetime(2024, 1, 2, 3, 4, 5),
        "user": {"email": "owner@example.com"},
    }
    doc.update(overrides)
    return doc


class TestShaping:

    def test_shared_report_hides_owner_email(self) -> None:
        shaped = property_service.shape_shared_report(_doc())
        assert shaped["user"] == {"name": property_service.DEFAULT_USER_NAME}
        assert "userId" not in shaped
        assert shaped["viewCount"] == 1
        assert shaped["images"] == []
        assert shaped["createdAt"] == "2024-01-02T03:04:05"

    def test_owner_report_includes_moderation_fields(self) -> None:
        shaped = property_service.shape_owner_report(_doc(status="REJECTED", rejectionReason="blurry photos"))
        assert shaped["status"] == "REJECTED"
        assert shaped["rejectionReason"] == "blurry photos"
        assert shaped["user"]["id"] == "u1"

    def test_list_item_defaults(self) -> None:
        shaped = property_service.shape_list_item(_doc(status=None))
        assert shaped["status"] == "ACTIVE"
        assert shaped["viewCount"] == 0
        assert shaped["location"] == {"lat": 7.9, "lng": 98.3, "address": "Phuket"}


class TestKeys:

    def test_list_key_distinguishes_every_parameter(self) -> None:
        base = dict(user_id="u1", page=1, limit=10, search="", property_type="", status="")
        keys = {
            property_list_key(**base),
            property_list_key(**{**base, "page": 2}),
            property_list_key(**{**base, "limit": 20}),
            property_list_key(**{**base, "search": "pool"}),
            property_list_key(**{**base, "property_type": "condo"}),
            property_list_key(**{**base, "status": "PENDING"}),
            property_list_key(**{**base, "user_id": "u2"}),
        }
        assert len(keys) == 7
        assert property_list_key(**base) == property_list_key(**base)

    def test_hyphenated_search_does_not_collide_with_filters(self) -> None:
        base = dict(user_id="u1", page=1, limit=10)
        keys = {
            property_list_key(**base, search="a-b", property_type="c", status=""),
            property_list_key(**base, search="a", property_type="b", status="c"),
            property_list_key(**base, search="a-b-c", property_type="", status=""),
            property_list_key(**base, search="a", property_type="", status="b"),
            property_list_key(**base, search="a-", property_type="", status="b"),
        }
        assert len(keys) == 5


class TestShareTokenFormat:

    def test_generated_tokens_are_accepted(self) -> None:
        assert property_service.is_share_token(property_service.generate_share_token())

    @pytest.mark.parametrize("value", ["", "short", "AbCdEf1234567", "AbCdEf-12345", "ผู้ใช้ผู้ใช้", "property-list-u1-1-10---"])
    def test_other_strings_are_rejected(self, value) -> None:
        assert not property_service.is_share_token(value)


class TestCreate:

    def test_share_token_format(self) -> None:
        token = property_service.generate_share_token()
        assert len(token) == 12
        assert token.isalnum()

    @pytest.mark.asyncio
    async def test_retries_on_token_collision(self, db, monkeypatch) -> None:
        attempts = []

        def fake_insert(db, data, *, user_id, share_token):
            attempts.append(share_token)
            if len(attempts) == 1:
                raise DuplicateKeyError("duplicate shareToken")
            return {"_id": ObjectId(), "status": "PENDING"}

        monkeypatch.setattr(reports_repo, "insert_report", fake_insert)
        payload = PropertyCreate(title="Townhouse", location={"lat": 13.0, "lng": 100.0})
        result = await property_service.create_report(db, "u1", payload)

        assert len(attempts) == 2
        assert result["shareToken"] == attempts[-1]


class TestModeration:

    @pytest.mark.parametrize("action,status", [("approve", "APPROVED"), ("hide", "HIDDEN"), ("unhide", "APPROVED")])
    def test_status_transitions(self, action, status) -> None:
        patch = property_service._moderation_patch(ReportAction(action=action), "admin@example.com")
        assert patch["status"] == status
        assert patch["reviewedBy"] == "admin@example.com"

    def test_reject_with_reason(self) -> None:
        patch = property_service._moderation_patch(
            ReportAction(action="reject", rejectionReason="  duplicate listing "), "admin@example.com"
        )
        assert patch["status"] == "REJECTED"
        assert patch["rejectionReason"] == "duplicate listing"

    def test_reject_without_reason(self) -> None:
        with pytest.raises(ValueError):
            property_service._moderation_patch(ReportAction(action="reject", rejectionReason="  "), "admin@example.com")
