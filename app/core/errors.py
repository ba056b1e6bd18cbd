"""Domain errors raised by the crowdfunding services.

Each error carries the HTTP status the request layer is expected to answer
with, so callers can translate failures without inspecting messages.
"""

from typing import Optional


class CrowdfundError(Exception):
    """Base class for every failure surfaced by the core."""

    status_code: int = 500

    def __init__(self, message: str, *, entity: Optional[str] = None, entity_id: Optional[object] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> dict:
        """Convert error to a response-friendly dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
        }


class NotFoundError(CrowdfundError):
    """A referenced entity id does not exist."""

    status_code = 404

    @classmethod
    def for_entity(cls, entity: str, entity_id: object) -> "NotFoundError":
        return cls(f"{entity} {entity_id} not found", entity=entity, entity_id=entity_id)


class InvalidInputError(CrowdfundError):
    """A value is outside its allowed domain."""

    status_code = 400


class DuplicateVoteError(CrowdfundError):
    """The voter already voted on the proposal."""

    status_code = 400

    def __init__(self, proposal_id: int, voter_address: str):
        super().__init__(
            f"Address {voter_address} already voted on proposal {proposal_id}",
            entity="Proposal",
            entity_id=proposal_id,
        )
        self.voter_address = voter_address


class InvalidStateError(CrowdfundError):
    """The operation is not permitted in the entity's current state."""

    status_code = 400


class UnauthorizedError(CrowdfundError):
    """An admin-only operation was attempted without privilege."""

    status_code = 401
