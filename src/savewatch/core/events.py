"""
Raw filesystem events and the policy that decides which of them count as a change
"""

import enum
from dataclasses import dataclass


class Op(enum.IntFlag):
    """Operation bitmask carried by a raw event"""
    CREATE = 1
    WRITE = 2
    REMOVE = 4
    RENAME = 8
    CHMOD = 16


# Editors either write the file in place (followed by a chmod) or write a swap
# file and move it over the original, which shows up as a create.
CHANGE_OPS = Op.WRITE | Op.CREATE


@dataclass(frozen=True)
class RawEvent:
    """A single notification for a path inside the watched directory"""
    path: str
    op: Op

    def __str__(self) -> str:
        return f"{self.op!r} {self.path}"


def is_qualifying(event: RawEvent, target: str) -> bool:
    """Check whether an event means the target file changed.

    The watch is directory-scoped, so events for siblings are dropped first.
    Of the remaining events only those whose bitmask includes WRITE or CREATE
    are accepted; a bitmask with both still counts once.

    Args:
        event: Raw event from the watch session
        target: Normalized path of the watched file

    Returns:
        True if a change signal should be sent for this event
    """
    if event.path != target:
        return False
    return bool(event.op & CHANGE_OPS)
