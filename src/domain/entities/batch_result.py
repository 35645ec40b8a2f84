from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ItemOutcome:
    item_id: str
    ok: bool
    error: Optional[str] = None


@dataclass
class BatchResult:
    """Per-item outcomes of a best-effort batch (category cascade, import).

    Items are processed independently; a failed item never aborts the rest.
    """

    outcomes: List[ItemOutcome] = field(default_factory=list)

    def record_success(self, item_id: str) -> None:
        self.outcomes.append(ItemOutcome(item_id=str(item_id), ok=True))

    def record_failure(self, item_id: str, error: BaseException | str) -> None:
        self.outcomes.append(ItemOutcome(item_id=str(item_id), ok=False, error=str(error)))

    @property
    def succeeded(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> List[ItemOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed

    def __len__(self) -> int:
        return len(self.outcomes)
