import re

import pytest

from resume_screener.fields import (
    Cascade,
    FunctionRule,
    PatternRule,
    SKILL_VOCABULARY,
    build_short_summary,
    extract_category,
    extract_college,
    extract_education,
    extract_email,
    extract_job_title,
    extract_name,
    extract_phone,
    extract_skills,
    is_plausible,
)


# ---------- Cascade ----------
def test_cascade_first_plausible_rule_wins():
    cascade = Cascade(
        name="demo",
        rules=[
            FunctionRule(lambda text: None),
            PatternRule(re.compile(r"id: (\d+)"), group=1),  # digits only, rejected
            PatternRule(re.compile(r"city: (\w+)"), group=1),
        ],
    )
    assert cascade.run("id: 12345 city: Lahore") == "Lahore"


def test_cascade_empty_text():
    assert Cascade(name="demo", rules=[FunctionRule(lambda t: "value")]).run("") is None


@pytest.mark.parametrize("value", ["ab", "x" * 101, "jane@x.io", "http://site", "12345"])
def test_implausible_values(value):
    assert not is_plausible(value)


# ---------- Name ----------
def test_name_from_first_lines(sample_cv):
    assert extract_name(sample_cv) == "John Doe"


def test_name_skips_titles_and_headers():
    text = "RESUME\nSenior Software Developer\nMaria Garcia Lopez\nmaria@mail.com"
    assert extract_name(text) == "Maria Garcia Lopez"


def test_name_before_email_fallback():
    lines = ["SUMMARY OF QUALIFICATIONS FOR THE ROLE"] * 10
    text = "\n".join(lines) + "\nContact: Priya Sharma priya.sharma@mail.com"
    assert extract_name(text) == "Priya Sharma"


def test_name_not_found():
    assert extract_name("senior developer\n555 123 4567") is None


# ---------- Email ----------
def test_email_prefers_real_address():
    text = "template: someone@example.com\nreal: jane.smith@acme.io"
    assert extract_email(text) == "jane.smith@acme.io"


def test_only_example_address_is_still_returned():
    assert extract_email("Reach me at jane.doe@example.com") == "jane.doe@example.com"


def test_no_email():
    assert extract_email("no contact here") is None


# ---------- Phone ----------
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Phone: +1-555-123-4567", "+1-555-123-4567"),
        ("Mobile 9876543210", "9876543210"),
        ("Call (555) 123-4567 today", "(555) 123-4567"),
    ],
)
def test_phone_patterns(text, expected):
    assert extract_phone(text) == expected


def test_phone_missing():
    assert extract_phone("Worked 2015 - 2018 at Acme") is None


# ---------- Education ----------
def test_bachelor_with_field(sample_cv):
    assert extract_education(sample_cv) == "Bachelor of Science in Computer Science"


def test_technology_degree():
    assert extract_education("B.Tech in Information Technology, 2016") == "Bachelor of Technology in Information Technology"


def test_mba():
    assert extract_education("MBA in Finance from XYZ") == "Master of Business Administration in Finance"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Masters in Data Science, 2019", "Master in Data Science"),
        ("Bachelors in Computer Science", "Bachelor in Computer Science"),
        ("Bachelor's degree in Economics", "Bachelor in Economics"),
        ("BS in Computer Science", "Bachelor of Science in Computer Science"),
        ("MS in Finance", "Master of Science in Finance"),
    ],
)
def test_plural_and_abbreviated_degrees(text, expected):
    assert extract_education(text) == expected


def test_university_phrase_fallback():
    assert extract_education("I graduated from Stanford University in 2010") == "Degree from Stanford University"


def test_education_section_fallback():
    text = "EDUCATION\n\nNorthside Institute of Design, 2012\n\nEXPERIENCE\nDesigner"
    assert extract_education(text) == "Northside Institute of Design, 2012"


def test_education_not_found():
    assert extract_education("Experienced welder and fabricator") is None


# ---------- College ----------
def test_college_name(sample_cv):
    assert extract_college(sample_cv) == "State University"


def test_college_with_of_suffix():
    assert extract_college("Studied at the University of California, Berkeley") == "University of California"


def test_bare_heading_is_not_a_college():
    assert extract_college("University\nnothing else") is None


# ---------- Skills ----------
def test_skills_follow_vocabulary_order(sample_cv):
    skills = extract_skills(sample_cv)
    assert skills == [s for s in SKILL_VOCABULARY if s in skills]
    assert {"React", "Node.js", "MongoDB", "HTML", "CSS"} <= set(skills)


def test_skills_are_case_insensitive_and_unique():
    assert extract_skills("python PYTHON Docker docker") == ["Python", "Docker"]


def test_no_skills():
    assert extract_skills("Forklift operator") == []


# ---------- Category ----------
@pytest.mark.parametrize(
    "text, expected",
    [
        ("Wrote Selenium suites as a QA lead", "QA Engineer"),
        ("Business Analyst working with stakeholders", "Business Analyst"),
        ("Front-end developer building dashboards", "Frontend Developer"),
        ("Backend services in Go", "Backend Developer"),
        ("Full stack engineer", "Fullstack Developer"),
        ("Data scientist with deep learning focus", "Data Scientist"),
        ("Chef and restaurant manager", "Other"),
    ],
)
def test_category_buckets(text, expected):
    assert extract_category(text) == expected


# ---------- Job title / summary ----------
def test_job_title(sample_cv):
    assert extract_job_title(sample_cv) == "Software Engineer"


def test_job_title_missing():
    assert extract_job_title("Warehouse associate") is None


def test_short_summary():
    text = "Jane Roe\nExperienced platform engineer\nBuilt CI pipelines for teams\nLoves observability tooling\nExtra line here"
    summary = build_short_summary(text)
    assert summary == "Experienced platform engineer Built CI pipelines for teams Loves observability tooling..."


def test_short_summary_truncates():
    summary = build_short_summary("\n".join(["a" * 200] * 3))
    assert len(summary) == 253
