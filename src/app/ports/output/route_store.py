from __future__ import annotations

from abc import ABC, abstractmethod

from src.domain.models import FinalizedTransitRoute


def check_map_name(map_name: str) -> str:
    """Return `map_name` if it is usable as a single path segment.

    Raises ValueError for empty names, `.`, `..` and names with separators.
    """

    if map_name in {"", ".", ".."} or any(c in map_name for c in "/\\\0"):
        raise ValueError(f"Invalid map name: {map_name!r}")
    return map_name


class IRouteStore(ABC):
    """Persistence port for finalized transit routes, namespaced by map."""

    @abstractmethod
    def save_object(
        self, map_name: str, name: str, route: FinalizedTransitRoute
    ) -> None:
        raise NotImplementedError

    @abstractmethod
    def load_object(self, map_name: str, name: str) -> FinalizedTransitRoute | None:
        raise NotImplementedError

    @abstractmethod
    def list_objects(self, map_name: str) -> list[str]:
        """Sorted object names without extension; a missing namespace is empty."""

    def load_all_objects(
        self, map_name: str
    ) -> list[tuple[str, FinalizedTransitRoute]]:
        out: list[tuple[str, FinalizedTransitRoute]] = []
        for name in self.list_objects(map_name):
            route = self.load_object(map_name, name)
            if route is not None:
                out.append((name, route))
        return out
