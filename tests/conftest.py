import json
from datetime import date
from types import SimpleNamespace

import pytest

SAMPLE_CV = """
John Doe
Software Engineer
john.doe@email.com
+1-555-123-4567

WORK EXPERIENCE

Senior Software Engineer
TechCorp Inc.
May 2018 - Present
• Led development of microservices architecture
• Managed team of 5 developers

Software Engineer
StartupXYZ
Jan 2015 - Apr 2018
• Developed full-stack web applications
• Worked with React, Node.js, and MongoDB

Junior Developer
CodeWorks Ltd
Jun 2013 - Dec 2014
• Built responsive web interfaces with HTML and CSS

EDUCATION
Bachelor of Science in Computer Science
State University
"""

FIXED_TODAY = date(2024, 1, 1)


@pytest.fixture
def sample_cv() -> str:
    return SAMPLE_CV


@pytest.fixture
def today() -> date:
    return FIXED_TODAY


class FakeStore:
    """In-memory stand-in for MongoDBManager keyed by (file_name, user_id)."""

    def __init__(self, fail_writes: bool = False):
        self.docs = {}
        self.fail_writes = fail_writes

    def find_candidate(self, file_name, user_id):
        return self.docs.get((file_name, user_id))

    def upsert_candidate(self, candidate):
        from resume_screener.exceptions import StorageError

        if self.fail_writes:
            raise StorageError("write refused")
        key = (candidate["file_name"], candidate["user_id"])
        created = key not in self.docs
        self.docs[key] = candidate
        return created


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeAIClient:
    def __init__(self, content=None, error=None):
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def ai_payload() -> dict:
    return {
        "category": "Software Developer",
        "yearsOfExperience": 7,
        "skills": ["Python", "Django", "PostgreSQL"],
        "jobTitle": "Backend Engineer",
        "professionalSummary": "Backend engineer focused on APIs.",
        "collegeName": "State University",
        "email": "john.doe@email.com",
        "phone": "+1-555-123-4567",
        "name": "John Doe",
        "projects": [{"name": "Billing API", "description": "Payments service"}],
    }


@pytest.fixture
def ai_client(ai_payload) -> FakeAIClient:
    return FakeAIClient(content=json.dumps(ai_payload))
