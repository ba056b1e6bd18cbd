from app.core.errors import (
    CrowdfundError,
    DuplicateVoteError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    UnauthorizedError,
)


def test_status_codes():
    assert NotFoundError("x").status_code == 404
    assert InvalidInputError("x").status_code == 400
    assert DuplicateVoteError(1, "0xa").status_code == 400
    assert InvalidStateError("x").status_code == 400
    assert UnauthorizedError("x").status_code == 401


def test_not_found_for_entity():
    error = NotFoundError.for_entity("Proposal", 7)

    assert isinstance(error, CrowdfundError)
    assert error.entity == "Proposal"
    assert error.entity_id == 7
    assert error.to_dict() == {
        "error": "NotFoundError",
        "message": "Proposal 7 not found",
        "status_code": 404,
    }


def test_duplicate_vote_message():
    error = DuplicateVoteError(3, "0xabc")

    assert error.voter_address == "0xabc"
    assert "0xabc" in str(error)
    assert error.entity_id == 3
