"""Reviews bounded context — Product Reviews and Usefulness Voting.

Handles review submission, audited per-user usefulness votes (the Vote
Ledger), the un-audited tally increment, and read models for listing
reviews and per-product statistics.
"""

import structlog
from protean.domain import Domain

reviews = Domain(name="reviews")

logger = structlog.get_logger(__name__)
