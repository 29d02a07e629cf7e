"""File output for generated models."""

from pathlib import Path


class FileWriter:
    """Writes generated files. Both operations are idempotent."""

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, content: str) -> None:
        """Write *content* to *path*, replacing any existing file."""
        path.write_text(content, encoding="utf-8")
