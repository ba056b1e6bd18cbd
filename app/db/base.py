# Import all models so that Base has them before running Alembic
from app.db.base_class import Base  # noqa: F401

from app.db.models.user import UserModel  # noqa: F401
from app.db.models.proposal import ProposalModel  # noqa: F401
from app.db.models.vote import VoteModel  # noqa: F401
