"""Data models for LeetCode submissions.

SubmissionRef and SubmissionPage come from the listing query; detail and
question records are merged into an EnrichedSubmission right before commit.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List

ACCEPTED_STATUS = "Accepted"


class SubmissionRef(BaseModel):
    """Listing entry, enough to decide inclusion and ordering"""

    id: str
    title_slug: str
    timestamp: int = Field(..., ge=0)
    status_display: str = ACCEPTED_STATUS

    @property
    def is_accepted(self) -> bool:
        return self.status_display == ACCEPTED_STATUS


class SubmissionPage(BaseModel):
    """One page of the submission listing, newest first"""

    entries: List[SubmissionRef] = Field(default_factory=list)
    has_more: bool = False


class SubmissionDetail(BaseModel):
    lang: str
    timestamp: int = Field(..., ge=0)
    code: str
    runtime_display: str = ""
    memory_display: str = ""


class QuestionDetail(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""
    difficulty: str = ""
    tags: List[str] = Field(default_factory=list)


class EnrichedSubmission(BaseModel):
    """Submission merged with its question, ready to commit"""

    model_config = ConfigDict(frozen=True)

    id: str
    slug: str
    title: str
    lang: str
    timestamp: int
    code: str
    question_body: str
    difficulty: str
    tags: List[str] = Field(default_factory=list)
    runtime_display: str = ""
    memory_display: str = ""
    generated_readme: str = ""

    @classmethod
    def merge(
        cls,
        ref: SubmissionRef,
        detail: SubmissionDetail,
        question: QuestionDetail,
        question_body: str,
        readme: str = "",
    ) -> "EnrichedSubmission":
        """Build from the listing entry plus both detail responses"""
        return cls(
            id=ref.id,
            slug=ref.title_slug,
            title=question.title,
            lang=detail.lang,
            timestamp=detail.timestamp,
            code=detail.code,
            question_body=question_body,
            difficulty=question.difficulty,
            tags=list(question.tags),
            runtime_display=detail.runtime_display,
            memory_display=detail.memory_display,
            generated_readme=readme,
        )
