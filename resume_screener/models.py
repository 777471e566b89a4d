# models.py
import math
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timezone
from typing import List, Dict, Optional

DAYS_PER_MONTH = 30.44

NAME_NOT_FOUND = "Name Not Found"
EMAIL_NOT_FOUND = "Email Not Found"
NOT_SPECIFIED = "Not specified"


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class DateRangeMatch:
    text: str
    line_number: int = 0
    offset: int = 0


@dataclass
class EmploymentPeriod:
    start_date: date
    end_date: date
    duration_months: int

    @classmethod
    def between(cls, start: date, end: date) -> "EmploymentPeriod":
        """Build a period, crediting at least one month even for same-month ranges."""
        if end < start:
            raise ValueError(f"Period ends before it starts: {start} > {end}")
        months = round_half_up((end - start).days / DAYS_PER_MONTH)
        return cls(start_date=start, end_date=end, duration_months=max(1, months))


@dataclass
class RoleRecommendation:
    role: str
    percent: int


@dataclass
class Project:
    name: str
    description: str = ""


@dataclass
class AIAnalysis:
    category: Optional[str] = None
    years_of_experience: Optional[int] = None
    skills: List[str] = field(default_factory=list)
    job_title: Optional[str] = None
    professional_summary: Optional[str] = None
    college_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    name: Optional[str] = None
    projects: List[Project] = field(default_factory=list)


@dataclass
class CandidateRecord:
    file_name: str
    content_hash: str
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    category: str = "Other"
    college_name: Optional[str] = None
    education: Optional[str] = None
    job_title: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    years_of_experience: int = 0
    recommended_roles: List[RoleRecommendation] = field(default_factory=list)
    professional_summary: str = ""
    short_summary: str = ""
    projects: List[Project] = field(default_factory=list)
    extraction_method: str = "heuristic"
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> Dict:
        """Render the record in its stored shape, with sentinels for missing fields."""
        return {
            "file_name": self.file_name,
            "content_hash": self.content_hash,
            "user_id": self.user_id,
            "name": self.name or NAME_NOT_FOUND,
            "email": self.email or EMAIL_NOT_FOUND,
            "phone": self.phone or NOT_SPECIFIED,
            "category": self.category,
            "college_name": self.college_name or NOT_SPECIFIED,
            "education": self.education or NOT_SPECIFIED,
            "job_title": self.job_title or NOT_SPECIFIED,
            "skills": list(self.skills),
            "years_of_experience": max(0, int(self.years_of_experience)),
            "recommended_roles": [asdict(r) for r in self.recommended_roles],
            "professional_summary": self.professional_summary,
            "short_summary": self.short_summary,
            "projects": [asdict(p) for p in self.projects],
            "extraction_method": self.extraction_method,
            "processed_at": self.processed_at,
        }


@dataclass
class BatchResult:
    file_name: str
    status: str
    error: Optional[str] = None
    record: Optional[CandidateRecord] = None
