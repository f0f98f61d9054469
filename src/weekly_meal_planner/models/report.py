"""Batch run report."""

from typing import Any

from pydantic import BaseModel, Field


class BatchReport(BaseModel):
    """Aggregate counters for one generation batch."""

    week_start_date: str
    processed: int = 0
    success: int = 0
    failed: int = 0
    skipped_invalid_emails: int = 0
    skipped: dict[str, int] = Field(
        default_factory=dict,
        description="Other skip reasons, by reason; invalid emails are counted separately",
    )
    message: str = "AI meal plan generation batch completed"

    def to_response(self) -> dict[str, Any]:
        """JSON body returned to the cron caller."""
        return {
            "message": self.message,
            "processed": self.processed,
            "success": self.success,
            "failed": self.failed,
            "skippedInvalidEmails": self.skipped_invalid_emails,
            "skipped": dict(self.skipped),
            "weekStartDate": self.week_start_date,
        }
