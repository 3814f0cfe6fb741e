"""Question record model shared by the catalog engine and the backend client."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass
class QuestionRecord:
    """A single question as stored by the backend.

    Only ``id`` and the seven filterable attributes are inspected by the
    engine; the display fields are carried through untouched.
    """

    id: Optional[int] = None

    # Filterable attributes
    subject: str = ""
    topic: str = ""
    subtopic: str = ""
    source: str = ""
    difficulty: str = ""
    question_type: str = ""
    format: str = ""

    # Display fields
    question_text: str = ""
    option_a: str = ""
    option_b: str = ""
    option_c: str = ""
    option_d: str = ""
    correct_option: str = ""
    explanation: str = ""
    tags: str = ""
    image_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionRecord":
        """Create from a backend JSON object, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in data.items():
            if key not in known:
                continue
            if key == "id":
                values[key] = int(value) if value is not None else None
            else:
                values[key] = "" if value is None else str(value)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, including the identifier."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_payload(self) -> Dict[str, Any]:
        """Attribute payload for create/update requests (no identifier)."""
        payload = self.to_dict()
        payload.pop("id")
        return payload

    @property
    def tag_list(self) -> list:
        """Tags split on commas, blanks removed."""
        return [t.strip() for t in self.tags.split(",") if t.strip()]
