"""Pydantic models for notification records."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Value stored in notifications.user_id for messages addressed to everyone
BROADCAST_USER_ID = "all"


class NotificationType(str, Enum):
    ASSIGNED = "assigned"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    REMINDER = "reminder"
    REWARD = "reward"
    PENALTY = "penalty"
    DEADLINE = "deadline"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class UserRecipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["user"] = "user"
    user_id: str = Field(min_length=1)

    def includes(self, user_id: str) -> bool:
        return self.user_id == user_id


class BroadcastRecipient(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["broadcast"] = "broadcast"

    def includes(self, user_id: str) -> bool:
        return True


Recipient = Annotated[Union[UserRecipient, BroadcastRecipient], Field(discriminator="kind")]


def recipient_for(user_id: str) -> UserRecipient | BroadcastRecipient:
    """Build the recipient for a stored ``user_id`` value."""
    if user_id == BROADCAST_USER_ID:
        return BroadcastRecipient()
    return UserRecipient(user_id=user_id)


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class NotificationMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    bonus_amount: float | None = None
    penalty_amount: float | None = None
    deadline: datetime | None = None

    @field_validator("deadline")
    @classmethod
    def deadline_utc(cls, v: datetime | None) -> datetime | None:
        return _as_utc(v) if v is not None else None


class Notification(BaseModel):
    """One notification as read from the notification store.

    Accepts the stored ``user_id`` column in place of ``recipient``.
    """

    model_config = ConfigDict(frozen=True)

    id: int | str
    recipient: Recipient
    type: NotificationType
    priority: NotificationPriority = NotificationPriority.MEDIUM
    read: bool = False
    created_at: datetime
    title: str
    message: str = ""
    action: str | None = None
    action_url: str | None = None
    metadata: NotificationMetadata | None = None

    @model_validator(mode="before")
    @classmethod
    def recipient_from_user_id(cls, data: Any) -> Any:
        if isinstance(data, dict) and "recipient" not in data and "user_id" in data:
            data = dict(data)
            user_id = data.pop("user_id")
            if user_id is not None:
                data["recipient"] = recipient_for(str(user_id)).model_dump()
        return data

    @field_validator("message", mode="before")
    @classmethod
    def message_not_null(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("metadata", mode="before")
    @classmethod
    def decode_metadata(cls, v: Any) -> Any:
        if isinstance(v, str):
            return json.loads(v) if v.strip() else None
        return v

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @property
    def user_id(self) -> str:
        """The stored form of the recipient."""
        if isinstance(self.recipient, BroadcastRecipient):
            return BROADCAST_USER_ID
        return self.recipient.user_id

    @property
    def is_broadcast(self) -> bool:
        return isinstance(self.recipient, BroadcastRecipient)

    def is_visible_to(self, user_id: str | None) -> bool:
        if not user_id:
            return False
        return self.recipient.includes(user_id)
