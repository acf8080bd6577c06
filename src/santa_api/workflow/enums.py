"""
Workflow Enums

All enum types used throughout the exchange workflow.
Values must match exactly with database constraints.
"""

from enum import Enum

# ════════════════════════════════════════════════════════════════════════════
# Identity Enums
# ════════════════════════════════════════════════════════════════════════════


class Role(str, Enum):
    """Fixed roles issued by the identity provider."""

    ADMIN = "ADMIN"
    USER = "USER"


# ════════════════════════════════════════════════════════════════════════════
# Approval Workflow Enums
# ════════════════════════════════════════════════════════════════════════════


class WishStatus(str, Enum):
    """Recipient wish approval status."""

    PENDING = "PENDING"  # Submitted, awaiting admin
    APPROVED = "APPROVED"  # Locked until explicit reset (none exists)
    REJECTED = "REJECTED"  # Modelled only; no transition drives it


class AddressStatus(str, Enum):
    """Recipient address approval status."""

    NONE = "NONE"  # Nothing submitted yet
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"  # Modelled only; no transition drives it


# ════════════════════════════════════════════════════════════════════════════
# Notification Enums
# ════════════════════════════════════════════════════════════════════════════


class NotificationType(str, Enum):
    """Notification event types."""

    SANTA_DISCLOSURE = "SANTA_DISCLOSURE"


class NotificationStatus(str, Enum):
    """Notification delivery status."""

    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


# ════════════════════════════════════════════════════════════════════════════
# Entity Type Enums (for logging and generic operations)
# ════════════════════════════════════════════════════════════════════════════


class EntityType(str, Enum):
    """Entity types in the system."""

    GROUP = "group"
    MEMBERSHIP = "membership"
    PARTICIPATION = "participation"
    WISH = "wish"
    MAPPING = "mapping"
    ACKNOWLEDGEMENT = "acknowledgement"
    NOTIFICATION = "notification"
