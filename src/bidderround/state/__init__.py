"""State management and persistence."""

from bidderround.state.database import create_db_engine, get_session_factory, init_db
from bidderround.state.repository import BidderRoundRepository, SyncResult

__all__ = ["BidderRoundRepository", "SyncResult", "create_db_engine", "get_session_factory", "init_db"]
