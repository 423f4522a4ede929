# app/schemas/details.py
"""
Type-specific achievement attributes.

Each sub-type maps to exactly one details model. Callers read the event
name, organizer, location, position, level and dated year through the
model's accessors instead of coalescing raw optional keys.
"""

from abc import abstractmethod
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationError
from app.services.points_service import normalize_position


class AchievementDetails(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @abstractmethod
    def display_name(self) -> Optional[str]:
        """Event, course or award name shown in reports and emails."""

    def organizer(self) -> Optional[str]:
        return None

    def location(self) -> Optional[str]:
        return None

    @abstractmethod
    def year(self) -> Optional[int]:
        """Year the achievement is dated to, used by the report year range."""

    @property
    def position_value(self) -> Optional[str]:
        return None

    @property
    def level_value(self) -> Optional[str]:
        return None

    @property
    def indexing_value(self) -> Optional[str]:
        return None

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ------------------------------------------------------------
# Shared pieces
# ------------------------------------------------------------
class _Leveled(AchievementDetails):
    level: Optional[str] = None

    @property
    def level_value(self) -> Optional[str]:
        return self.level


class _Placed(_Leveled):
    position: Optional[str] = None
    prize: Optional[str] = None

    @field_validator("position")
    @classmethod
    def _normalize_position(cls, v):
        return normalize_position(v) if v else v

    @property
    def position_value(self) -> Optional[str]:
        return self.position


# ------------------------------------------------------------
# Co-Curricular events
# ------------------------------------------------------------
class WorkshopDetails(_Leveled):
    workshop_name: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    workshop_location: Optional[str] = None

    def display_name(self):
        return self.workshop_name

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.workshop_location

    def year(self):
        return self.event_date.year if self.event_date else None


class SeminarDetails(_Leveled):
    seminar_name: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    seminar_location: Optional[str] = None

    def display_name(self):
        return self.seminar_name

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.seminar_location

    def year(self):
        return self.event_date.year if self.event_date else None


class OtherEventDetails(_Leveled):
    event_name: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    other_location: Optional[str] = None

    def display_name(self):
        return self.event_name

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.other_location

    def year(self):
        return self.event_date.year if self.event_date else None


class CompetitionDetails(_Placed):
    """Project Competition / Paper Presentation."""

    project_topic: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    competition_location: Optional[str] = None

    def display_name(self):
        return self.project_topic

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.competition_location

    def year(self):
        return self.event_date.year if self.event_date else None


class HackathonDetails(_Placed):
    """Hackathon / Code Competition."""

    event_name: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    organizer_location: Optional[str] = None

    def display_name(self):
        return self.event_name

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.organizer_location

    def year(self):
        return self.event_date.year if self.event_date else None


class PublicationDetails(_Leveled):
    title: str
    author1: Optional[str] = None
    author2: Optional[str] = None
    author3: Optional[str] = None
    journal_conference_name: Optional[str] = None
    publisher_name: Optional[str] = None
    publication_date: Optional[date] = None
    indexing: Optional[str] = None
    publication_type: Optional[str] = None

    def display_name(self):
        return self.title

    def organizer(self):
        return self.publisher_name

    def year(self):
        return self.publication_date.year if self.publication_date else None

    @property
    def indexing_value(self):
        return self.indexing


# ------------------------------------------------------------
# Extra-Curricular
# ------------------------------------------------------------
class SportsCulturalDetails(_Placed):
    event_name: str
    organizer_name: Optional[str] = None
    event_date: Optional[date] = None
    competition_location: Optional[str] = None

    def display_name(self):
        return self.event_name

    def organizer(self):
        return self.organizer_name

    def location(self):
        return self.competition_location

    def year(self):
        return self.event_date.year if self.event_date else None


# ------------------------------------------------------------
# Courses
# ------------------------------------------------------------
class CourseDetails(AchievementDetails):
    course_name: str
    start_month: Optional[str] = None
    start_year: Optional[int] = None
    end_month: Optional[str] = None
    end_year: Optional[int] = None

    def display_name(self):
        return self.course_name

    def year(self):
        return self.end_year or self.start_year


# ------------------------------------------------------------
# Special Achievement
# ------------------------------------------------------------
class ScholarshipDetails(AchievementDetails):
    award_type: str = "Scholarship"
    amount: Optional[str] = None
    awarding_organization: str
    start_year: Optional[int] = None
    end_year: Optional[int] = None

    def display_name(self):
        return self.award_type

    def organizer(self):
        return self.awarding_organization

    def year(self):
        return self.start_year


class CashPrizeDetails(AchievementDetails):
    award_type: str = "Cash Prize"
    amount: Optional[str] = None
    awarding_organization: str
    month: Optional[str] = None
    year_awarded: Optional[int] = None

    model_config = ConfigDict(
        alias_generator=lambda name: "year" if name == "year_awarded" else to_camel(name),
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def display_name(self):
        return self.award_type

    def organizer(self):
        return self.awarding_organization

    def year(self):
        return self.year_awarded


DETAILS_BY_CATEGORY: dict[str, type[AchievementDetails]] = {
    "Workshop": WorkshopDetails,
    "Seminar/Webinar": SeminarDetails,
    "Other": OtherEventDetails,
    "Project Competition": CompetitionDetails,
    "Paper Presentation": CompetitionDetails,
    "Paper Publication": PublicationDetails,
    "Hackathon": HackathonDetails,
    "Code Competition": HackathonDetails,
    "Sports": SportsCulturalDetails,
    "Cultural": SportsCulturalDetails,
    "Coursera": CourseDetails,
    "NPTEL": CourseDetails,
    "Udemy": CourseDetails,
    "Others": CourseDetails,
    "Scholarship": ScholarshipDetails,
    "Cash Prize": CashPrizeDetails,
}


def parse_details(category: str, data: dict[str, Any] | None) -> AchievementDetails:
    model = DETAILS_BY_CATEGORY.get(category)
    if model is None:
        raise ValidationError(f"Unknown achievement category '{category}'")
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValidationError(f"Invalid {category} details: {problems}") from e
