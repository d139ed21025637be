from typing import Dict, Any
from dataclasses import dataclass, field

@dataclass(frozen=True)
class ChecklistItem:
    id: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text}

@dataclass
class ChecklistProgress:
    """Completion state of one phase checklist."""
    phase: int
    items: Dict[str, bool] = field(default_factory=dict)
    total: int = 0

    @property
    def completed(self) -> int:
        return sum(1 for done in self.items.values() if done)

    @property
    def ratio(self) -> float:
        return self.completed / self.total if self.total > 0 else 0.0

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.completed == self.total

    def to_dict(self) -> Dict[str, Any]:
        """Summary record persisted under phase{N}Progress."""
        return {"completed": self.completed, "total": self.total}
