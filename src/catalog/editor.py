"""Question create/edit draft.

Mirrors the question form: rich-text question and explanation, four
options, the correct option, classification fields and source. The
subject/topic/subtopic fields follow the same cascade as the filters.
"""

from typing import Dict, Optional, Protocol
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.constants import (
    CORRECT_OPTIONS,
    DEFAULT_CORRECT_OPTION,
    DEFAULT_DIFFICULTY,
    DEFAULT_FORMAT,
    DEFAULT_QUESTION_TYPE,
)
from src.catalog.errors import InvalidQuestion
from src.catalog.models import QuestionRecord


# Content a rich-text editor reports for an empty document
BLANK_HTML = ("", "<p><br></p>", "<p></p>")


def is_blank_html(html: str) -> bool:
    return (html or "").strip() in BLANK_HTML


class RichTextField(Protocol):
    """Rich-text editor surface: sanitized HTML in and out."""

    def get_html(self) -> str:
        ...

    def set_html(self, html: str) -> None:
        ...


class HtmlBuffer:
    """In-memory rich-text field."""

    def __init__(self, html: str = ""):
        self._html = html

    def get_html(self) -> str:
        return self._html

    def set_html(self, html: str) -> None:
        self._html = html or ""

    def is_blank(self) -> bool:
        """True for empty content, including an editor's empty paragraph."""
        return is_blank_html(self._html)


class QuestionDraft:
    """Editable state of one question, new or existing."""

    def __init__(
        self,
        question: Optional[RichTextField] = None,
        explanation: Optional[RichTextField] = None,
    ):
        self.question = question or HtmlBuffer()
        self.explanation = explanation or HtmlBuffer()
        self.reset()

    def reset(self) -> None:
        """Return every field to the blank-form defaults."""
        self.record_id: Optional[int] = None
        self.question.set_html("")
        self.explanation.set_html("")
        self.options: Dict[str, str] = {key: "" for key in CORRECT_OPTIONS}
        self.correct_option = DEFAULT_CORRECT_OPTION
        self.tags = ""
        self.difficulty = DEFAULT_DIFFICULTY
        self.image_url = ""
        self.subject = ""
        self.topic = ""
        self.subtopic = ""
        self.question_type = DEFAULT_QUESTION_TYPE
        self.format = DEFAULT_FORMAT
        self.source = ""

    @property
    def is_new(self) -> bool:
        return self.record_id is None

    def set_subject(self, subject: str) -> None:
        self.subject = subject or ""
        self.topic = ""
        self.subtopic = ""

    def set_topic(self, topic: str) -> None:
        self.topic = topic or ""
        self.subtopic = ""

    def set_subtopic(self, subtopic: str) -> None:
        self.subtopic = subtopic or ""

    def load(self, record: QuestionRecord) -> None:
        """Populate the draft from an existing record for editing."""
        self.record_id = record.id
        self.question.set_html(record.question_text)
        self.explanation.set_html(record.explanation)
        self.options = {
            "A": record.option_a,
            "B": record.option_b,
            "C": record.option_c,
            "D": record.option_d,
        }
        self.correct_option = record.correct_option or DEFAULT_CORRECT_OPTION
        self.tags = record.tags
        self.difficulty = record.difficulty or DEFAULT_DIFFICULTY
        self.image_url = record.image_url
        # Direct assignment: the stored record is already consistent
        self.subject = record.subject
        self.topic = record.topic
        self.subtopic = record.subtopic
        self.question_type = record.question_type or DEFAULT_QUESTION_TYPE
        self.format = record.format or DEFAULT_FORMAT
        self.source = record.source

    def validate(self) -> None:
        """
        Check the draft can be saved.

        Raises:
            InvalidQuestion: If the question text is blank or the correct
                option is not one of A-D.
        """
        if is_blank_html(self.question.get_html()):
            raise InvalidQuestion("Question text is required")
        if self.correct_option not in CORRECT_OPTIONS:
            raise InvalidQuestion(
                f"Correct option must be one of {', '.join(CORRECT_OPTIONS)}, "
                f"got {self.correct_option!r}"
            )

    def to_record(self) -> QuestionRecord:
        """Build the record to send to the backend (validates first)."""
        self.validate()
        return QuestionRecord(
            id=self.record_id,
            subject=self.subject,
            topic=self.topic,
            subtopic=self.subtopic,
            source=self.source,
            difficulty=self.difficulty,
            question_type=self.question_type,
            format=self.format,
            question_text=self.question.get_html(),
            option_a=self.options.get("A", ""),
            option_b=self.options.get("B", ""),
            option_c=self.options.get("C", ""),
            option_d=self.options.get("D", ""),
            correct_option=self.correct_option,
            explanation=self.explanation.get_html(),
            tags=self.tags,
            image_url=self.image_url,
        )
