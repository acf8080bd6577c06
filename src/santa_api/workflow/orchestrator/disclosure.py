"""
Santa Disclosure

Runs after a recipient's address is approved: every santa paired with the
recipient receives the approved wish and address out-of-band. Failures are
logged and counted per santa and never undo or fail the approval.
"""

from datetime import datetime
from typing import Awaitable
from typing import Callable
from typing import Dict
from typing import Tuple
from uuid import uuid4

from loguru import logger

from santa_api.workflow.crypto import SecretCodec
from santa_api.workflow.db.store import WorkflowStore
from santa_api.workflow.enums import NotificationType
from santa_api.workflow.exceptions import CodecError
from santa_api.workflow.models import NotificationRecord
from santa_api.workflow.models import Participation
from santa_api.workflow.models import RecipientWish
from santa_api.workflow.notifications import SANTA_EMAIL_SUBJECT
from santa_api.workflow.notifications import NotificationSender


async def notify_santas(
    store: WorkflowStore,
    codec: SecretCodec,
    notifier: NotificationSender,
    participation: Participation,
    wish: RecipientWish,
    event_id: str,
    clock: Callable[[], datetime],
) -> Tuple[int, int]:
    """
    Send the disclosure email to each santa of ``participation.user_id``.

    Args:
        store: Workflow store
        codec: Codec used to decrypt the approved wish and address
        notifier: Delivery channel
        participation: The recipient's (now approved) participation
        wish: The recipient's approved wish
        event_id: Event whose mappings are consulted
        clock: Timestamp source

    Returns:
        (santas_notified, notifications_failed)
    """
    group_id = participation.group_id
    recipient_id = participation.user_id

    try:
        mappings = await store.list_mappings_for_recipient(group_id, event_id, recipient_id)
    except Exception as e:
        logger.opt(exception=e).error(
            "Cannot load santas for disclosure",
            group_id=group_id,
            user_id=recipient_id,
            error=f"{type(e).__name__}: {e}",
        )
        return 0, 0

    if not mappings:
        logger.warning("Address approved but recipient has no santa yet", group_id=group_id, user_id=recipient_id)
        return 0, 0

    try:
        wish_text = codec.decrypt(wish.wish_encrypted)
        address_text = codec.decrypt(participation.address_encrypted or "")
    except CodecError as e:
        logger.error(f"Cannot decrypt disclosure content: {e}", group_id=group_id, user_id=recipient_id)
        return 0, len(mappings)

    notified = 0
    failed = 0
    for mapping in mappings:
        context = {"group_id": group_id, "santa_id": mapping.santa_id}
        try:
            santa = await store.get_member(group_id, mapping.santa_id)
        except Exception as e:
            failed += 1
            logger.opt(exception=e).error("Santa lookup failed", error=f"{type(e).__name__}: {e}", **context)
            continue

        if santa is None or not santa.email:
            logger.warning("Santa has no email on file - skipping", **context)
            continue

        record = NotificationRecord(
            notification_id=uuid4(),
            notification_type=NotificationType.SANTA_DISCLOSURE,
            group_id=group_id,
            santa_id=mapping.santa_id,
            recipient_email=santa.email,
            subject=SANTA_EMAIL_SUBJECT,
            created_at=clock(),
        )
        context["notification_id"] = str(record.notification_id)

        # the approval is already committed; the email goes out even if the log row cannot be written
        recorded = await _write_log("insert", context, store.create_notification, record)

        try:
            await notifier.send_santa_email(santa.email, wish_text, address_text)
        except Exception as e:
            failed += 1
            logger.error("Santa email failed", error=f"{type(e).__name__}: {e}", **context)
            if recorded:
                await _write_log(
                    "update",
                    context,
                    store.mark_notification_failed,
                    record.notification_id,
                    f"{type(e).__name__}: {e}",
                )
            continue

        notified += 1
        if recorded:
            await _write_log("update", context, store.mark_notification_sent, record.notification_id, clock())

    logger.info(
        f"Disclosure finished: {notified} notified, {failed} failed",
        group_id=group_id,
        user_id=recipient_id,
    )
    return notified, failed


async def _write_log(action: str, context: Dict[str, str], write: Callable[..., Awaitable[None]], *args) -> bool:
    """Run a notification-log write. Failures are logged and reported as False."""
    try:
        await write(*args)
        return True
    except Exception as e:
        logger.opt(exception=e).error(
            "Notification log {action} failed", action=action, error=f"{type(e).__name__}: {e}", **context
        )
        return False
