"""
Paper data model.

A paper is the unit exchanged with the upstream feed. Only ``paperId`` is
required; every other field is display payload carried through unchanged.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class Paper(BaseModel):
    """A recommendable paper with an open set of display fields."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    paper_id: str = Field(alias="paperId", min_length=1, description="Unique paper identifier")
    title: Optional[str] = Field(default=None, description="Paper title")
    abstract: Optional[str] = Field(default=None, description="Paper abstract")

    @field_validator("paper_id", mode="before")
    @classmethod
    def _coerce_paper_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def display_title(self) -> str:
        """Title for history lists, falling back to the identifier."""
        return self.title or self.paper_id

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the upstream payload shape.

        Only fields present in the original record are emitted.
        """
        data: Dict[str, Any] = {"paperId": self.paper_id}
        for name in ("title", "abstract"):
            if name in self.model_fields_set:
                data[name] = getattr(self, name)
        data.update(self.model_extra or {})
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paper":
        """Create a Paper from an upstream record."""
        return cls.model_validate(data)


def parse_papers(records: Iterable[Any], source: str = "upstream") -> List[Paper]:
    """Parse a sequence of raw records, dropping any without a usable ``paperId``.

    Args:
        records: Raw records (normally dicts decoded from JSON)
        source: Label used in log messages

    Returns:
        Parsed papers in their original order
    """
    papers: List[Paper] = []
    for record in records:
        if not isinstance(record, dict):
            logger.warning(f"[{source}] skipping non-object record: {record!r}")
            continue
        try:
            papers.append(Paper.from_dict(record))
        except ValidationError as e:
            logger.warning(f"[{source}] skipping record without valid paperId: {e.errors()[0].get('msg')}")
    return papers
