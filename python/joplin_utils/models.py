"""
Data classes shared by the collection, filtering and deletion stages.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Resource identifier -> byte size (None when the service did not report one)
ResourceSet = Dict[str, Optional[int]]


@dataclass
class ResourceItem:
    """One entry of an envelope's ``items`` list (a resource or a note)"""
    id: str
    size: Optional[int] = None


@dataclass
class Envelope:
    """Decoded response body shared by listing, note lookup and deletion calls"""
    error: str = ""
    items: List[ResourceItem] = field(default_factory=list)
    has_more: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Envelope":
        """Build an envelope from a decoded JSON object, ignoring unknown keys"""
        items = []
        for raw in payload.get("items") or []:
            if not isinstance(raw, dict) or not raw.get("id"):
                continue
            size = raw.get("size")
            if isinstance(size, bool) or not isinstance(size, int):
                size = None
            items.append(ResourceItem(id=str(raw["id"]), size=size))

        return cls(
            error=str(payload.get("error") or ""),
            items=items,
            has_more=bool(payload.get("has_more", False)),
        )

    @property
    def ok(self) -> bool:
        return not self.error


@dataclass
class RunSummary:
    """Outcome of a deletion pass"""
    deleted_count: int = 0
    total_bytes: int = 0
    failures: List[str] = field(default_factory=list)

    def record_success(self, resource_id: str, size: Optional[int] = None) -> None:
        self.deleted_count += 1
        if size:
            self.total_bytes += size

    def record_failure(self, resource_id: str) -> None:
        self.failures.append(resource_id)

    @property
    def processed(self) -> int:
        return self.deleted_count + len(self.failures)
