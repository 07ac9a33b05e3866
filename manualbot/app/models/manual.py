"""Manual (document) domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from manualbot.app.models.common import MatchKind, PermissionLevel


class CategoryPath(BaseModel):
    """Three-level category of a manual."""

    model_config = ConfigDict(frozen=True)

    major: str
    middle: str = ""
    minor: str = ""

    def label(self) -> str:
        """Join non-empty levels with ' > '."""
        return " > ".join(part for part in (self.major, self.middle, self.minor) if part)


class Manual(BaseModel):
    """Searchable manual. Read-only from the core's perspective."""

    model_config = ConfigDict(frozen=True)

    id: str
    category_path: CategoryPath
    title: str
    body: str = ""
    tags: frozenset[str] = frozenset()
    required_permission: PermissionLevel = PermissionLevel.general
    active: bool = True
    image_url: str | None = None
    video_url: str | None = None
    updated_at: datetime | None = None


class ScoredResult(BaseModel):
    """Manual paired with a relevance score and the reason it matched."""

    document: Manual
    score: float = Field(..., ge=0.0, le=1.0)
    match_kind: MatchKind
