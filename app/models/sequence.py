"""
Named integer counters used to hand out document ids.

Ids are taken with an atomic $inc, so they only ever grow and a deleted
document's id is never handed out again.
"""

from beanie import Document


class Sequence(Document):
    """One counter per name; value is the last id handed out."""

    id: str
    value: int = 0

    class Settings:
        name = "sequences"
