"""Tests for the in-memory workflow store."""

import asyncio
from datetime import datetime
from datetime import timezone
from uuid import uuid4

import pytest

from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.enums import NotificationStatus
from santa_api.workflow.enums import WishStatus
from santa_api.workflow.exceptions import DuplicateRecordError
from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import Group
from santa_api.workflow.models import Mapping
from santa_api.workflow.models import Membership
from santa_api.workflow.models import NotificationRecord

NOW = datetime(2026, 12, 1, 12, 0, tzinfo=timezone.utc)


def _group(group_id="g1", name="Office", owner_id="owner", join_code="abc123"):
    return Group(group_id=group_id, name=name, owner_id=owner_id, join_code=join_code, created_at=NOW)


class TestMemoryStoreGroups:
    """Group and membership keys."""

    @pytest.mark.asyncio
    async def test_create_and_lookup(self, memory_store):
        await memory_store.create_group(_group())

        assert (await memory_store.get_group("g1")).name == "Office"
        assert (await memory_store.get_group_by_join_code("abc123")).group_id == "g1"
        assert (await memory_store.get_group_by_owner_and_name("owner", "Office")).group_id == "g1"
        assert await memory_store.get_group("missing") is None

    @pytest.mark.asyncio
    async def test_duplicate_join_code(self, memory_store):
        await memory_store.create_group(_group())
        with pytest.raises(DuplicateRecordError):
            await memory_store.create_group(_group(group_id="g2", name="Other"))

    @pytest.mark.asyncio
    async def test_duplicate_owner_and_name(self, memory_store):
        await memory_store.create_group(_group())
        with pytest.raises(DuplicateRecordError):
            await memory_store.create_group(_group(group_id="g2", join_code="ffffff"))

    @pytest.mark.asyncio
    async def test_same_name_different_owner_allowed(self, memory_store):
        await memory_store.create_group(_group())
        await memory_store.create_group(_group(group_id="g2", owner_id="someone-else", join_code="ffffff"))
        assert len(await memory_store.list_groups()) == 2

    @pytest.mark.asyncio
    async def test_membership_unique_and_listing(self, memory_store):
        await memory_store.create_group(_group())
        await memory_store.add_member(Membership(group_id="g1", user_id="u1", joined_at=NOW))

        with pytest.raises(DuplicateRecordError):
            await memory_store.add_member(Membership(group_id="g1", user_id="u1", joined_at=NOW))

        assert [g.group_id for g in await memory_store.list_groups_for_user("u1")] == ["g1"]
        assert await memory_store.list_groups_for_user("u2") == []
        assert [m.user_id for m in await memory_store.list_members("g1")] == ["u1"]


class TestMemoryStoreApprovalTracks:
    """Compare-and-set behaviour of the wish and address tracks."""

    @pytest.mark.asyncio
    async def test_wish_track(self, memory_store):
        assert await memory_store.submit_wish("g1", "u1", "default", "enc-1", NOW)
        assert await memory_store.submit_wish("g1", "u1", "default", "enc-2", NOW)
        assert (await memory_store.get_wish("g1", "u1")).wish_encrypted == "enc-2"

        assert await memory_store.approve_wish("g1", "u1", "admin", NOW)
        assert not await memory_store.approve_wish("g1", "u1", "admin", NOW)
        assert not await memory_store.submit_wish("g1", "u1", "default", "enc-3", NOW)

        wish = await memory_store.get_wish("g1", "u1")
        assert wish.status == WishStatus.APPROVED
        assert wish.wish_encrypted == "enc-2"
        assert wish.approved_by == "admin"

    @pytest.mark.asyncio
    async def test_approve_missing_wish(self, memory_store):
        assert not await memory_store.approve_wish("g1", "nobody", "admin", NOW)

    @pytest.mark.asyncio
    async def test_ensure_participation_is_idempotent(self, memory_store):
        await memory_store.ensure_participation("g1", "u1", "default")
        assert await memory_store.submit_address("g1", "u1", "addr", NOW)
        await memory_store.ensure_participation("g1", "u1", "default")

        participation = await memory_store.get_participation("g1", "u1")
        assert participation.address_status == AddressStatus.PENDING
        assert participation.submitted is True

    @pytest.mark.asyncio
    async def test_address_track(self, memory_store):
        assert not await memory_store.submit_address("g1", "u1", "addr", NOW)
        assert not await memory_store.approve_address("g1", "u1", "admin", NOW)

        await memory_store.ensure_participation("g1", "u1", "default")
        assert not await memory_store.approve_address("g1", "u1", "admin", NOW)

        assert await memory_store.submit_address("g1", "u1", "addr", NOW)
        assert await memory_store.approve_address("g1", "u1", "admin", NOW)
        assert not await memory_store.approve_address("g1", "u1", "admin", NOW)
        assert not await memory_store.submit_address("g1", "u1", "other", NOW)

        participation = await memory_store.get_participation("g1", "u1")
        assert participation.address_status == AddressStatus.APPROVED
        assert participation.address_encrypted == "addr"

    @pytest.mark.asyncio
    async def test_concurrent_approvals_only_one_wins(self, memory_store):
        await memory_store.submit_wish("g1", "u1", "default", "enc", NOW)

        results = await asyncio.gather(*[memory_store.approve_wish("g1", "u1", f"admin-{i}", NOW) for i in range(5)])
        assert results.count(True) == 1


class TestMemoryStoreMappings:
    """Replacement of a group's mapping set."""

    @pytest.mark.asyncio
    async def test_replace_drops_previous_set(self, memory_store):
        first = [
            Mapping(group_id="g1", santa_id="a", recipient_id="b"),
            Mapping(group_id="g1", santa_id="b", recipient_id="a"),
        ]
        second = [
            Mapping(group_id="g1", santa_id="a", recipient_id="c"),
            Mapping(group_id="g1", santa_id="c", recipient_id="a"),
        ]

        assert await memory_store.replace_mappings("g1", "default", first) == 2
        assert await memory_store.replace_mappings("g1", "default", second) == 2

        current = await memory_store.list_mappings("g1", "default")
        assert {(m.santa_id, m.recipient_id) for m in current} == {("a", "c"), ("c", "a")}
        assert await memory_store.get_mapping_for_santa("g1", "default", "b") is None

    @pytest.mark.asyncio
    async def test_replace_leaves_other_groups_and_events(self, memory_store):
        await memory_store.replace_mappings("g2", "default", [Mapping(group_id="g2", santa_id="x", recipient_id="y")])
        await memory_store.replace_mappings(
            "g1", "xmas-2025", [Mapping(group_id="g1", event_id="xmas-2025", santa_id="a", recipient_id="b")]
        )
        await memory_store.replace_mappings("g1", "default", [Mapping(group_id="g1", santa_id="a", recipient_id="c")])

        assert len(await memory_store.list_mappings("g2", "default")) == 1
        assert len(await memory_store.list_mappings("g1", "xmas-2025")) == 1
        assert len(await memory_store.list_mappings("g1", "default")) == 1

    @pytest.mark.asyncio
    async def test_duplicate_rows_are_skipped(self, memory_store):
        rows = [
            Mapping(group_id="g1", santa_id="a", recipient_id="b"),
            Mapping(group_id="g1", santa_id="a", recipient_id="c"),
            Mapping(group_id="g1", santa_id="c", recipient_id="b"),
        ]
        assert await memory_store.replace_mappings("g1", "default", rows) == 1
        assert [m.santa_id for m in await memory_store.list_mappings_for_recipient("g1", "default", "b")] == ["a"]


class TestMemoryStoreRecords:
    """Acknowledgements and notifications."""

    @pytest.mark.asyncio
    async def test_acknowledgement_once(self, memory_store):
        ack = Acknowledgement(group_id="g1", santa_id="a", recipient_id="b", sent_at=NOW)
        await memory_store.create_acknowledgement(ack)
        with pytest.raises(DuplicateRecordError):
            await memory_store.create_acknowledgement(ack)
        assert await memory_store.get_acknowledgement("g1", "a", "b") == ack

    @pytest.mark.asyncio
    async def test_notification_status_updates(self, memory_store):
        sent_id, failed_id = uuid4(), uuid4()
        for notification_id in (sent_id, failed_id):
            await memory_store.create_notification(
                NotificationRecord(
                    notification_id=notification_id,
                    group_id="g1",
                    santa_id="a",
                    recipient_email="a@example.com",
                    subject="subject",
                    created_at=NOW,
                )
            )

        await memory_store.mark_notification_sent(sent_id, NOW)
        await memory_store.mark_notification_failed(failed_id, "ConnectionRefusedError: nope")

        by_id = {n.notification_id: n for n in await memory_store.list_notifications("g1")}
        assert by_id[sent_id].status == NotificationStatus.SENT
        assert by_id[sent_id].sent_at == NOW
        assert by_id[failed_id].status == NotificationStatus.FAILED
        assert by_id[failed_id].error_message == "ConnectionRefusedError: nope"

    @pytest.mark.asyncio
    async def test_health_check(self, memory_store):
        assert await memory_store.health_check() is True
        await memory_store.close()
