"""Tag domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class Tag:
    """Domain entity for a workspace Tag."""

    workspace_id: UUID
    name: str
    id: UUID = field(default_factory=uuid4)
    color: str = "#6366F1"
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Validate and normalize color hex."""
        if not self.color.startswith("#"):
            self.color = f"#{self.color}"
        self.color = self.color.upper()


@dataclass(frozen=True, slots=True)
class TagWithCount:
    """Read-only value object: a Tag bundled with its usage count."""

    tag: Tag
    usage_count: int
