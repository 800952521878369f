from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from src.domain.models.gtfs import GtfsFeedRecords


class IGtfsRepository(ABC):
    """Port for reading the tables of one GTFS feed source."""

    @abstractmethod
    def load_feed(self, source: str | Path) -> GtfsFeedRecords:
        """Parse all five tables of `source`.

        Raises IoFailure when a table is missing or unreadable and MalformedRow
        when a required field cannot be decoded.
        """
