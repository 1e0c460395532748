from enum import Flag
from typing import Self


class LabeledFlag(Flag):
    """Flag whose string form is the comma separated list of its labels.

    Labels are the lower-cased member names, listed in declaration order.
    This is the format VK expects for ``filters``, ``scope`` and similar
    parameters.
    """

    def __str__(self) -> str:
        # Iterating the class yields single-bit members only, in declaration order
        return ",".join(member.name.lower() for member in type(self) if member in self)

    @classmethod
    def parse(cls, text: str) -> Self:
        """Builds a flag from a comma separated label list, e.g. ``"friends,photos"``."""
        result = cls(0)
        for label in text.split(","):
            label = label.strip()
            if not label:
                continue
            try:
                result |= cls[label.upper()]
            except KeyError:
                raise ValueError(f"Unknown {cls.__name__} label: {label!r}") from None
        return result


class VideoFilters(LabeledFlag):
    """Filters for ``video.search``."""

    MP4 = 1
    YOUTUBE = 2
    VIMEO = 4
    SHORT = 8
    LONG = 16

    ALL = MP4 | YOUTUBE | VIMEO | SHORT | LONG


class Settings(LabeledFlag):
    """Application permission scopes requested during authorization.

    Values are the bit masks VK documents, so ``int(settings)`` is a valid
    numeric ``scope`` as well.
    """

    NOTIFY = 1
    FRIENDS = 2
    PHOTOS = 4
    AUDIO = 8
    VIDEO = 16
    STORIES = 64
    PAGES = 128
    STATUS = 1024
    NOTES = 2048
    MESSAGES = 4096
    WALL = 8192
    ADS = 32768
    OFFLINE = 65536
    DOCS = 131072
    GROUPS = 262144
    NOTIFICATIONS = 524288
    STATS = 1048576
    EMAIL = 4194304
    MARKET = 134217728

    ALL = (
        NOTIFY
        | FRIENDS
        | PHOTOS
        | AUDIO
        | VIDEO
        | STORIES
        | PAGES
        | STATUS
        | NOTES
        | MESSAGES
        | WALL
        | ADS
        | OFFLINE
        | DOCS
        | GROUPS
        | NOTIFICATIONS
        | STATS
        | EMAIL
        | MARKET
    )

    def __int__(self) -> int:
        return self.value
