"""
Entity interfaces of the Kook platform.

Only the contracts live here; the framework implementation supplies the
concrete objects backed by the HTTP API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Collection, Iterable, Optional


class NotifyType(IntEnum):
    """Notification preference of a guild."""

    DEFAULT = 0  # use the guild setting
    ALL = 1
    MENTION_ONLY = 2
    NO_NOTIFY = 3

    @classmethod
    def from_value(cls, value: int) -> "NotifyType":
        """
        Look up a notify type by its API value.

        Raises:
            ValueError: If ``value`` is not a known notify type.
        """
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown notify type value: {value!r}") from None


class User(ABC):
    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def identify_number(self) -> int:
        """The four-digit number shown after the name."""

    @property
    @abstractmethod
    def is_bot(self) -> bool: ...

    @property
    @abstractmethod
    def is_online(self) -> bool: ...

    @property
    @abstractmethod
    def avatar_url(self) -> str: ...

    @property
    def full_name(self) -> str:
        return f"{self.name}#{self.identify_number:04d}"


class Guild(ABC):
    @property
    @abstractmethod
    def id(self) -> str: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def master(self) -> User: ...

    @property
    @abstractmethod
    def users(self) -> Iterable[User]: ...

    @property
    @abstractmethod
    def online_users(self) -> Iterable[User]: ...

    @property
    @abstractmethod
    def voice_channel_server_region(self) -> str: ...

    @property
    @abstractmethod
    def custom_emojis(self) -> Collection[Any]: ...

    @property
    @abstractmethod
    def online_user_count(self) -> int: ...

    @property
    @abstractmethod
    def user_count(self) -> int: ...

    @property
    @abstractmethod
    def is_public(self) -> bool: ...

    @property
    @abstractmethod
    def mute_status(self) -> Any: ...

    @property
    @abstractmethod
    def notify_type(self) -> NotifyType: ...

    @property
    @abstractmethod
    def banned_users(self) -> Collection[User]: ...

    @abstractmethod
    def leave(self) -> None:
        """Leave this guild. This cannot be undone."""

    @abstractmethod
    def ban(self, user: User, reason: Optional[str] = None, del_message_days: int = 0) -> None:
        """
        Ban ``user`` from this guild.

        Args:
            user: The user to ban.
            reason: Shown in the guild's ban list.
            del_message_days: How many days of the user's messages are deleted.
        """

    @abstractmethod
    def unban(self, user: User) -> None: ...
