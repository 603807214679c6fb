"""Pydantic models for the records the engine reads and writes."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        """Dump to the JSON-ready camelCase form, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ScholarshipStatus(str, Enum):
    """Application status of a tracked scholarship."""

    DRAFT = "draft"
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    SUBMITTED = "submitted"
    AWARDED = "awarded"
    RECEIVED = "received"
    REJECTED = "rejected"


class EssayRecord(CamelModel):
    """Essay prompt attached to an application."""

    prompt: str = Field("", description="Essay prompt")
    word_limit: int = Field(0, ge=0, description="Word limit, 0 when unlimited")
    response: Optional[str] = Field(None, description="Student's draft or final response")


class DocumentRecord(CamelModel):
    """Supporting document tracked for an application."""

    name: str = Field("", description="Document name")
    required: bool = Field(False, description="Required by the provider")
    submitted: bool = Field(False, description="Already sent")
    description: Optional[str] = Field(None, description="Where/how to obtain it")


class ScholarshipRecord(CamelModel):
    """A scholarship the student is tracking.

    ``name`` and ``deadline`` stay optional so that import candidates can carry
    missing or unparseable values through to validation.
    """

    id: Optional[str] = Field(None, description="Record identifier")
    name: Optional[str] = Field(None, description="Scholarship name")
    organization: Optional[str] = Field(None, description="Funding organization")
    application_url: Optional[str] = Field(None, description="Where to apply")
    amount: float = Field(0.0, ge=0, description="Award amount in dollars")
    deadline: Optional[str] = Field(None, description="ISO date when parseable, raw text otherwise")
    description: str = Field("", description="Free-text description")
    requirements: list[str] = Field(default_factory=list, description="Ordered requirement list")
    status: Optional[ScholarshipStatus] = Field(None, description="Application status")
    essays: list[EssayRecord] = Field(default_factory=list)
    documents: list[DocumentRecord] = Field(default_factory=list)
    notes: Optional[str] = Field(None, description="Personal notes")
    submission_date: Optional[str] = Field(None, description="Date the application was sent")
    follow_up_date: Optional[str] = Field(None, description="Planned follow-up date")


class FinancialGoalRecord(CamelModel):
    """A savings/funding goal the scholarships contribute toward."""

    id: Optional[str] = None
    title: str = ""
    target_amount: float = Field(0.0, ge=0)
    current_amount: float = Field(0.0, ge=0)
    deadline: Optional[str] = None
    calculation_method: Optional[str] = Field(
        None, description="How the target was derived, e.g. manual or tuition-based"
    )


class StudentProfile(CamelModel):
    """The student the portfolio belongs to."""

    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    email: Optional[str] = Field(None, description="Email address")
    gpa: Optional[float] = Field(None, ge=0.0, le=4.0, description="GPA on 4.0 scale")
    major: Optional[str] = Field(None, description="Primary major")
    graduation_year: Optional[int] = Field(None, description="Expected graduation year")
    school: Optional[str] = Field(None, description="Name of institution")
    state: Optional[str] = Field(None, description="US state if applicable")
    ethnicity: Optional[str] = Field(None, description="Ethnicity")
    first_generation: Optional[bool] = Field(None, description="First generation college student")
    financial_need: Optional[bool] = Field(None, description="Demonstrates financial need")

    @property
    def display_name(self) -> str:
        """Full name, or an empty string when neither part is set."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)
