from app.db.models.user import UserModel
from app.db.models.proposal import ProposalModel
from app.db.models.vote import VoteModel

# These imports are required to ensure all models are discovered by SQLAlchemy
__all__ = [
    "UserModel",
    "ProposalModel",
    "VoteModel",
]
