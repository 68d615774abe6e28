from mediadb.ui.navigation.location import Location
from mediadb.ui.navigation.service import HistoryService

__all__ = ["Location", "HistoryService"]
