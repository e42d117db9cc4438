"""Merge Report Schemas — outcome of one snapshot import.

Invariants:
    - total_items == created + updated + duplicates + near_duplicates + errors
    - success is False only when the format precondition failed (in which case the
      engine raises before a report exists); item errors never flip it
    - items_for_review holds one entry per near-duplicate, nothing else
"""

from pydantic import BaseModel, Field

from debatekb.core.merge_policy import MergeOutcome


class ReviewItem(BaseModel):
    """Near-duplicate pair needing a human decision."""
    entity_type: str
    incoming_id: str
    existing_id: str
    incoming_text: str
    existing_text: str
    similarity_score: float
    reason: str = "near_duplicate"


class MergeReport(BaseModel):
    success: bool = True
    total_items: int = 0
    created: int = 0
    updated: int = 0
    duplicates: int = 0
    near_duplicates: int = 0
    errors: int = 0
    error_messages: list[str] = Field(default_factory=list)
    items_for_review: list[ReviewItem] = Field(default_factory=list)

    def record(self, outcome: MergeOutcome) -> None:
        self.total_items += 1
        if outcome is MergeOutcome.CREATED:
            self.created += 1
        elif outcome is MergeOutcome.UPDATED:
            self.updated += 1
        elif outcome is MergeOutcome.DUPLICATE:
            self.duplicates += 1
        else:
            self.near_duplicates += 1

    def record_error(self, message: str) -> None:
        self.total_items += 1
        self.errors += 1
        self.error_messages.append(message)
