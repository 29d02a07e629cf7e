"""Result of a crawl run."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict

from api_model_gen.parser.base import Resource


class CrawlResult(BaseModel):
    """Summary of one crawl. ``success`` is False only when the index page could not be fetched."""

    model_config = ConfigDict(frozen=True)

    resources: tuple[Resource, ...]
    detailed_resources: tuple[Resource, ...]
    generated_files: tuple[Path, ...]
    success: bool
    error: str | None = None

    @classmethod
    def aborted(cls, error: str) -> "CrawlResult":
        return cls(resources=(), detailed_resources=(), generated_files=(), success=False, error=error)

    def statistics(self) -> dict[str, int | bool]:
        """Counts for reporting. Compare total_resources with generated_files to spot skipped resources."""
        return {
            "total_resources": len(self.resources),
            "detailed_resources": len(self.detailed_resources),
            "generated_files": len(self.generated_files),
            "success": self.success,
        }
