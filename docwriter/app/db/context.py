"""Request context for owner scoping."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the document owner.

    Used to scope every remote store read and write to a single owner.
    """

    user_id: UUID
