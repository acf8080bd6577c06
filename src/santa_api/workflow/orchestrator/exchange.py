"""
Exchange Orchestrator

Sole writer of mappings and of every status transition on wishes and
participations. Participants only supply content (wish text, address text)
and only while the status allows it.

Wish track:     (none) -> PENDING -> APPROVED
Address track:  NONE -> PENDING -> APPROVED   (submit requires an APPROVED wish)

Approving an address triggers disclosure to the recipient's santas.
"""

import random
import secrets
from datetime import datetime
from datetime import timezone
from typing import Callable
from typing import List
from typing import Optional
from uuid import uuid4

from loguru import logger

from santa_api.workflow.crypto import SecretCodec
from santa_api.workflow.db.store import WorkflowStore
from santa_api.workflow.derangement import pair_santas
from santa_api.workflow.enums import AddressStatus
from santa_api.workflow.enums import WishStatus
from santa_api.workflow.exceptions import Conflict
from santa_api.workflow.exceptions import DuplicateRecordError
from santa_api.workflow.exceptions import Forbidden
from santa_api.workflow.exceptions import InsufficientParticipants
from santa_api.workflow.exceptions import InternalError
from santa_api.workflow.exceptions import InvalidRequest
from santa_api.workflow.exceptions import NotFound
from santa_api.workflow.exceptions import NotReady
from santa_api.workflow.exceptions import TransitionNotImplemented
from santa_api.workflow.models import Acknowledgement
from santa_api.workflow.models import ApprovalResult
from santa_api.workflow.models import Disclosure
from santa_api.workflow.models import Group
from santa_api.workflow.models import GroupStatus
from santa_api.workflow.models import Identity
from santa_api.workflow.models import Mapping
from santa_api.workflow.models import Membership
from santa_api.workflow.models import ParticipantSummary
from santa_api.workflow.models import ShuffleResult
from santa_api.workflow.notifications import NotificationSender
from santa_api.workflow.orchestrator.disclosure import notify_santas
from santa_api.workflow.orchestrator.group_status import build_group_status
from santa_api.workflow.orchestrator.group_status import build_participant_list

JOIN_CODE_BYTES = 3
JOIN_CODE_ATTEMPTS = 5


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_admin(identity: Identity) -> None:
    if not identity.is_admin:
        raise Forbidden("Admin role required")


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not value.strip():
        raise InvalidRequest(f"{field} must not be empty")
    return value.strip()


class ExchangeOrchestrator:
    """
    Drives the Secret Santa exchange for every group.

    Args:
        store: Persistence backend (PostgresStore or MemoryStore)
        codec: At-rest codec for wish and address text
        notifier: Delivery channel for santa disclosure
        default_event_id: Event that scopes mappings, wishes and participations
        clock: Timestamp source
        rng: Randomness for the shuffle; defaults to SystemRandom
    """

    def __init__(
        self,
        store: WorkflowStore,
        codec: SecretCodec,
        notifier: NotificationSender,
        default_event_id: str = "default",
        clock: Callable[[], datetime] = utcnow,
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.codec = codec
        self.notifier = notifier
        self.default_event_id = default_event_id
        self.clock = clock
        self.rng = rng

    # ════════════════════════════════════════════════════════════════════════
    # Groups and membership
    # ════════════════════════════════════════════════════════════════════════

    async def _require_group(self, group_id: str) -> Group:
        group = await self.store.get_group(group_id)
        if group is None:
            raise NotFound(f"Group '{group_id}' not found")
        return group

    async def _add_participant(self, group_id: str, identity: Identity) -> None:
        await self.store.add_member(
            Membership(
                group_id=group_id,
                user_id=identity.user_id,
                email=identity.email,
                display_name=identity.name,
                joined_at=self.clock(),
            )
        )
        await self.store.ensure_participation(group_id, identity.user_id, self.default_event_id)

    async def create_group(self, identity: Identity, name: str) -> Group:
        """Create a group owned by the caller, with the owner as first member."""
        name = _require_text(name, "Group name")

        if await self.store.get_group_by_owner_and_name(identity.user_id, name):
            raise Conflict(f"You already own a group named '{name}'")

        for attempt in range(1, JOIN_CODE_ATTEMPTS + 1):
            group = Group(
                group_id=str(uuid4()),
                name=name,
                owner_id=identity.user_id,
                join_code=secrets.token_hex(JOIN_CODE_BYTES),
                created_at=self.clock(),
            )
            try:
                await self.store.create_group(group)
                break
            except DuplicateRecordError:
                if await self.store.get_group_by_owner_and_name(identity.user_id, name):
                    raise Conflict(f"You already own a group named '{name}'")
                logger.warning(f"Join code collision, retrying (attempt {attempt}/{JOIN_CODE_ATTEMPTS})")
        else:
            raise InternalError("Could not allocate a unique join code")

        await self._add_participant(group.group_id, identity)
        logger.success("Group created", group_id=group.group_id, owner_id=identity.user_id)
        return group

    async def join_group(self, identity: Identity, join_code: str) -> Group:
        join_code = _require_text(join_code, "Join code")

        group = await self.store.get_group_by_join_code(join_code)
        if group is None:
            raise NotFound("Invalid join code")

        if await self.store.get_member(group.group_id, identity.user_id):
            raise Conflict("Already a member of this group")

        try:
            await self._add_participant(group.group_id, identity)
        except DuplicateRecordError:
            raise Conflict("Already a member of this group")

        logger.info("Member joined group", group_id=group.group_id, user_id=identity.user_id)
        return group

    async def list_my_groups(self, identity: Identity) -> List[Group]:
        return await self.store.list_groups_for_user(identity.user_id)

    async def list_all_groups(self, identity: Identity) -> List[Group]:
        _require_admin(identity)
        return await self.store.list_groups()

    # ════════════════════════════════════════════════════════════════════════
    # Shuffle
    # ════════════════════════════════════════════════════════════════════════

    async def shuffle(self, identity: Identity, group_id: str) -> ShuffleResult:
        """
        Pair every member with a recipient and replace the group's mappings.

        Mappings are written under the configured event, the same one every
        participant operation reads.

        Raises:
            NotFound: Unknown group
            InsufficientParticipants: Fewer than two members
        """
        _require_admin(identity)
        await self._require_group(group_id)
        event_id = self.default_event_id

        member_ids = [m.user_id for m in await self.store.list_members(group_id)]
        if len(member_ids) < 2:
            raise InsufficientParticipants("Need at least 2 members to shuffle")

        pairs = pair_santas(member_ids, self.rng)
        mappings = [
            Mapping(group_id=group_id, event_id=event_id, santa_id=santa, recipient_id=recipient)
            for santa, recipient in pairs.items()
        ]
        inserted = await self.store.replace_mappings(group_id, event_id, mappings)

        if inserted != len(mappings):
            logger.warning(
                f"Shuffle inserted {inserted} of {len(mappings)} mappings",
                group_id=group_id,
                event_id=event_id,
            )
        logger.success("Shuffle complete", group_id=group_id, event_id=event_id, members=len(member_ids))

        return ShuffleResult(
            group_id=group_id,
            event_id=event_id,
            member_count=len(member_ids),
            mappings_inserted=inserted,
        )

    # ════════════════════════════════════════════════════════════════════════
    # Wish track
    # ════════════════════════════════════════════════════════════════════════

    async def submit_wish(self, identity: Identity, group_id: str, wish: str) -> None:
        """Store the caller's wish as PENDING. Resubmission overwrites until approved."""
        wish = _require_text(wish, "Wish")
        await self._require_group(group_id)

        santas = await self.store.list_mappings_for_recipient(group_id, self.default_event_id, identity.user_id)
        if not santas:
            raise Forbidden("You are not a recipient in this group")

        current = await self.store.get_wish(group_id, identity.user_id)
        if current is not None and current.status == WishStatus.APPROVED:
            raise Conflict("Wish already approved")

        changed = await self.store.submit_wish(
            group_id,
            identity.user_id,
            self.default_event_id,
            self.codec.encrypt(wish),
            self.clock(),
        )
        if not changed:
            raise Conflict("Wish already approved")

        logger.info("Wish submitted", group_id=group_id, user_id=identity.user_id)

    async def approve_wish(self, identity: Identity, group_id: str, user_id: str) -> ApprovalResult:
        _require_admin(identity)

        wish = await self.store.get_wish(group_id, user_id)
        if wish is None:
            raise NotFound("Wish not found")
        if wish.status == WishStatus.APPROVED:
            raise Conflict("Wish already approved")
        if wish.status != WishStatus.PENDING:
            raise Conflict(f"Wish is {wish.status.value}, not PENDING")

        approved_at = self.clock()
        if not await self.store.approve_wish(group_id, user_id, identity.user_id, approved_at):
            raise Conflict("Wish already approved")

        logger.success("Wish approved", group_id=group_id, user_id=user_id, approved_by=identity.user_id)
        return ApprovalResult(group_id=group_id, user_id=user_id, approved_at=approved_at)

    async def reject_wish(self, identity: Identity, group_id: str, user_id: str) -> None:
        _require_admin(identity)
        raise TransitionNotImplemented("Rejecting a wish is not supported")

    # ════════════════════════════════════════════════════════════════════════
    # Address track
    # ════════════════════════════════════════════════════════════════════════

    async def submit_address(self, identity: Identity, group_id: str, address: str) -> None:
        """Store the caller's address as PENDING. Requires an APPROVED wish."""
        address = _require_text(address, "Address")
        await self._require_group(group_id)

        participation = await self.store.get_participation(group_id, identity.user_id)
        if participation is None:
            raise Forbidden("You are not a participant in this group")

        wish = await self.store.get_wish(group_id, identity.user_id)
        if wish is None or wish.status != WishStatus.APPROVED:
            raise Forbidden("Your wish must be approved before submitting an address")

        if participation.address_status == AddressStatus.APPROVED:
            raise Conflict("Address already approved")

        changed = await self.store.submit_address(
            group_id,
            identity.user_id,
            self.codec.encrypt(address),
            self.clock(),
        )
        if not changed:
            raise Conflict("Address already approved")

        logger.info("Address submitted", group_id=group_id, user_id=identity.user_id)

    async def approve_address(self, identity: Identity, group_id: str, user_id: str) -> ApprovalResult:
        """
        Approve a pending address and disclose wish + address to the recipient's santas.

        The approval is committed before any email is sent; delivery failures
        are reported in the result counts only.
        """
        _require_admin(identity)

        participation = await self.store.get_participation(group_id, user_id)
        if participation is None or participation.address_status == AddressStatus.NONE:
            raise NotFound("Address not found")
        if participation.address_status == AddressStatus.APPROVED:
            raise Conflict("Address already approved")
        if participation.address_status != AddressStatus.PENDING:
            raise Conflict(f"Address is {participation.address_status.value}, not PENDING")

        # read before the approval commits; an approved wish never changes
        wish = await self.store.get_wish(group_id, user_id)

        approved_at = self.clock()
        if not await self.store.approve_address(group_id, user_id, identity.user_id, approved_at):
            raise Conflict("Address already approved")

        logger.success("Address approved", group_id=group_id, user_id=user_id, approved_by=identity.user_id)

        notified, failed = 0, 0
        if wish is None or wish.status != WishStatus.APPROVED:
            logger.error("Address approved without an approved wish - nothing disclosed", group_id=group_id)
        else:
            notified, failed = await notify_santas(
                self.store,
                self.codec,
                self.notifier,
                participation,
                wish,
                self.default_event_id,
                self.clock,
            )

        return ApprovalResult(
            group_id=group_id,
            user_id=user_id,
            approved_at=approved_at,
            santas_notified=notified,
            notifications_failed=failed,
        )

    async def reject_address(self, identity: Identity, group_id: str, user_id: str) -> None:
        _require_admin(identity)
        raise TransitionNotImplemented("Rejecting an address is not supported")

    # ════════════════════════════════════════════════════════════════════════
    # Santa side
    # ════════════════════════════════════════════════════════════════════════

    async def acknowledge(self, identity: Identity, group_id: str) -> Acknowledgement:
        """Record that the caller has sent their gift. Exactly once per pairing."""
        mapping = await self.store.get_mapping_for_santa(group_id, self.default_event_id, identity.user_id)
        if mapping is None:
            raise Forbidden("You are not a santa in this group")

        if await self.store.get_acknowledgement(group_id, mapping.santa_id, mapping.recipient_id):
            raise Conflict("Gift already acknowledged")

        ack = Acknowledgement(
            group_id=group_id,
            santa_id=mapping.santa_id,
            recipient_id=mapping.recipient_id,
            sent=True,
            sent_at=self.clock(),
        )
        try:
            await self.store.create_acknowledgement(ack)
        except DuplicateRecordError:
            raise Conflict("Gift already acknowledged")

        logger.info("Gift acknowledged", group_id=group_id, santa_id=identity.user_id)
        return ack

    async def get_assignment(self, identity: Identity, group_id: str) -> Disclosure:
        """
        Return the caller's recipient's wish and address.

        Raises:
            NotFound: Caller has no assignment in the group
            NotReady: Wish or address not yet approved
        """
        mapping = await self.store.get_mapping_for_santa(group_id, self.default_event_id, identity.user_id)
        if mapping is None:
            raise NotFound("No assignment found")

        wish = await self.store.get_wish(group_id, mapping.recipient_id)
        participation = await self.store.get_participation(group_id, mapping.recipient_id)
        if (
            wish is None
            or wish.status != WishStatus.APPROVED
            or participation is None
            or participation.address_status != AddressStatus.APPROVED
        ):
            raise NotReady("Recipient wish and address are not both approved yet")

        return Disclosure(
            wish=self.codec.decrypt(wish.wish_encrypted),
            address=self.codec.decrypt(participation.address_encrypted or ""),
        )

    # ════════════════════════════════════════════════════════════════════════
    # Admin views
    # ════════════════════════════════════════════════════════════════════════

    async def group_status(self, identity: Identity, group_id: str) -> GroupStatus:
        _require_admin(identity)
        await self._require_group(group_id)
        return await build_group_status(self.store, group_id, self.default_event_id)

    async def list_participants(self, identity: Identity, group_id: str) -> List[ParticipantSummary]:
        """Members of a group with their submission and address status."""
        _require_admin(identity)
        await self._require_group(group_id)
        return await build_participant_list(self.store, group_id)
