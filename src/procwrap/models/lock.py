"""Lock record persisted per task name.

The file holds a single decimal process id followed by a newline so that
shell tools (``cat``, ``kill $(cat name.pid)``) keep working against it.
"""

from pydantic import BaseModel, Field


class LockRecord(BaseModel):
    """Process id written to ``<temp_dir>/<name>.pid``.

    Attributes:
        pid: Process ID of the supervised command.
    """

    pid: int = Field(gt=0, description="Process ID of the supervised command")

    def to_text(self) -> str:
        """Render the on-disk representation."""
        return f"{self.pid}\n"

    @classmethod
    def from_text(cls, text: str) -> "LockRecord":
        """Parse the on-disk representation.

        Raises:
            ValueError: If the content is not a positive integer
        """
        return cls(pid=int(text.strip()))
