# fields.py
"""
Heuristic field extractors.

Every extractor is a ``Cascade``: an ordered list of rules tried against the
resume text until one of them yields a plausible value. Extractors return
None on a miss; sentinel strings are applied only when a record is stored.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Pattern

SKILL_VOCABULARY = [
    "JavaScript", "Python", "Java", "React", "Node.js", "HTML", "CSS", "SQL",
    "TypeScript", "Angular", "Vue.js", "PHP", "C++", "C#", "Git", "Docker",
    "Kubernetes", "AWS", "Azure", "MongoDB", "PostgreSQL", "MySQL", "Redis",
    "Express", "Django", "Flask", "Spring", "Laravel", "Figma", "Photoshop",
    "Pandas", "Machine Learning", "Selenium", "Jenkins",
]

# First bucket with a keyword hit wins
CATEGORY_KEYWORDS = [
    ("QA Engineer", [r"\bqa\b", r"quality assurance", r"selenium", r"test automation", r"manual testing", r"test cases"]),
    ("Business Analyst", [r"business analyst", r"requirements gathering", r"stakeholder", r"\bbrd\b"]),
    ("Frontend Developer", [r"front[\s-]?end", r"ui developer"]),
    ("Backend Developer", [r"back[\s-]?end", r"api developer", r"server[\s-]side"]),
    ("Fullstack Developer", [r"full[\s-]?stack", r"\bmern\b", r"\bmean stack\b"]),
    ("Data Scientist", [r"data scien", r"machine learning", r"deep learning", r"data analyst"]),
]
DEFAULT_CATEGORY = "Other"

_TITLE_WORDS = re.compile(
    r"(Software|Developer|Engineer|Manager|Full|Stack|Senior|Junior|Lead|Data|Web|Mobile|"
    r"Frontend|Backend|Analyst|Designer|Consultant|Intern|Architect)",
    re.I,
)
_HEADER_LINE = re.compile(r"^(resume|cv|curriculum|vitae|curriculum vitae|contact|email|phone|address|tel|mobile)$", re.I)
_NAME_WORD = re.compile(r"^[A-Z][a-z]+$")

EMAIL_PATTERN = re.compile(r"\b[a-zA-Z0-9][a-zA-Z0-9._%+-]*@[a-zA-Z0-9][a-zA-Z0-9.-]*\.[a-zA-Z]{2,}\b")
_FAKE_EMAIL = re.compile(r"(example|sample|template|test|dummy|noreply)", re.I)

_FIELDS = (
    r"computer\s+science|information\s+technology|software\s+engineering|data\s+science|"
    r"engineering|mathematics|business|arts|science|technology|economics|finance|marketing|"
    r"psychology|management|law|medicine|biology|chemistry|physics|english|history|education|"
    r"administration|electrical|mechanical|civil|electronics|telecommunications|biotechnology"
)
_INSTITUTION_WORDS = re.compile(r"\b(university|college|institute|school|academy)\b", re.I)
_DEGREE_WORDS = re.compile(r"\b(bachelor|master|phd|b\.?s\.?c?|m\.?s\.?c?|b\.?a|m\.?a|mba|b\.?tech|m\.?tech)\b", re.I)


# ---------- Plausibility ----------
def is_plausible(value: Optional[str], min_len: int = 3, max_len: int = 100) -> bool:
    """Length bound plus rejection of contact-like strings where text is expected."""
    if not value:
        return False
    v = value.strip()
    if not (min_len <= len(v) <= max_len):
        return False
    lowered = v.lower()
    if "@" in v or "http" in lowered:
        return False
    if re.fullmatch(r"[\d\s\-+().]+", v):
        return False
    return True


def _title_case(text: str) -> str:
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split())


# ---------- Rules ----------
@dataclass
class PatternRule:
    pattern: Pattern
    group: int = 0
    formatter: Optional[Callable[[re.Match], str]] = None

    def try_extract(self, text: str) -> Optional[str]:
        m = self.pattern.search(text)
        if not m:
            return None
        if self.formatter is not None:
            return self.formatter(m)
        value = m.group(self.group)
        return value.strip() if value else None


@dataclass
class FunctionRule:
    func: Callable[[str], Optional[str]]

    def try_extract(self, text: str) -> Optional[str]:
        return self.func(text)


@dataclass
class Cascade:
    name: str
    rules: List = field(default_factory=list)
    validator: Callable[[Optional[str]], bool] = is_plausible

    def run(self, text: str) -> Optional[str]:
        if not text:
            return None
        for rule in self.rules:
            value = rule.try_extract(text)
            if value and self.validator(value):
                return value.strip()
        return None


# ---------- Name ----------
def _name_from_header_lines(text: str) -> Optional[str]:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    for line in lines[:10]:
        if _HEADER_LINE.match(line) or "@" in line or re.match(r"^\d", line) or re.search(r"\d{3,}", line):
            continue
        words = [w for w in line.split() if len(w) > 1]
        if not 2 <= len(words) <= 4:
            continue
        cleaned = [re.sub(r"[^\w]", "", w) for w in words]
        if all(
            _NAME_WORD.match(c) and 2 <= len(c) <= 15 and not _TITLE_WORDS.search(c)
            for c in cleaned
        ):
            return " ".join(words)
    return None


NAME_CASCADE = Cascade(
    name="name",
    rules=[
        FunctionRule(_name_from_header_lines),
        PatternRule(
            re.compile(r"([A-Z][a-z]+ [A-Z][a-z]+)\s+[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
            group=1,
        ),
    ],
)


def extract_name(text: str) -> Optional[str]:
    return NAME_CASCADE.run(text)


# ---------- Email ----------
def extract_email(text: str) -> Optional[str]:
    """First real-looking address; a template address is returned only if it is the only kind present."""
    emails = EMAIL_PATTERN.findall(text or "")
    if not emails:
        return None
    real = [e for e in emails if not _FAKE_EMAIL.search(e)]
    return real[0] if real else emails[0]


# ---------- Phone ----------
PHONE_PATTERNS = [
    # International: +44 20 7946 0958, +1-555-123-4567
    re.compile(r"\+\d{1,3}[\s.-]?\(?\d{1,4}\)?(?:[\s.-]?\d{2,4}){2,4}"),
    # Indian mobile: 9876543210, +91 98765 43210
    re.compile(r"(?<!\d)(?:0)?[6-9]\d{4}[\s-]?\d{5}(?!\d)"),
    # US: (555) 123-4567, 555.123.4567
    re.compile(r"(?<!\d)\(?\d{3}\)?[\s.-]?\d{3}[\s.-]\d{4}(?!\d)"),
]


def _valid_phone(value: Optional[str]) -> bool:
    if not value:
        return False
    digits = re.sub(r"\D", "", value)
    return 7 <= len(digits) <= 15


PHONE_CASCADE = Cascade(
    name="phone",
    rules=[PatternRule(rx) for rx in PHONE_PATTERNS],
    validator=_valid_phone,
)


def extract_phone(text: str) -> Optional[str]:
    return PHONE_CASCADE.run(text)


# ---------- Education ----------
_TECH_FIELDS = (
    r"computer\s+science|information\s+technology|software\s+engineering|engineering|electrical|"
    r"mechanical|civil|electronics|telecommunications|biotechnology"
)


def _degree_formatter(degree: str) -> Callable[[re.Match], str]:
    def fmt(m: re.Match) -> str:
        field_name = m.groupdict().get("field")
        if field_name and field_name.lower() not in degree.lower():
            return f"{degree} in {_title_case(field_name)}"
        return degree
    return fmt


def _bachelor(m: re.Match) -> str:
    s = m.group(0).lower()
    if re.match(r"b\.?s\b", s) or "of science" in s:
        degree = "Bachelor of Science"
    elif "b.a" in s or "of arts" in s:
        degree = "Bachelor of Arts"
    else:
        degree = "Bachelor"
    return _degree_formatter(degree)(m)


def _master(m: re.Match) -> str:
    s = m.group(0).lower()
    if "mba" in s or "m.b.a" in s:
        degree = "Master of Business Administration"
    elif re.match(r"m\.?s\b", s) or "of science" in s:
        degree = "Master of Science"
    elif "m.a" in s or "of arts" in s:
        degree = "Master of Arts"
    else:
        degree = "Master"
    return _degree_formatter(degree)(m)


# Technology degrees go first so "Bachelor of Technology" is not read as a plain bachelor
DEGREE_RULES = [
    PatternRule(
        re.compile(
            rf"(?:\bb\.?tech\b|\bb\.e\.?|bachelor\s+of\s+technology|bachelor\s+of\s+engineering)\s+(?:in\s+)?(?P<field>{_TECH_FIELDS})",
            re.I,
        ),
        formatter=_degree_formatter("Bachelor of Technology"),
    ),
    PatternRule(
        re.compile(
            rf"(?:\bm\.?tech\b|\bm\.e\.?|master\s+of\s+technology|master\s+of\s+engineering)\s+(?:in\s+)?(?P<field>{_TECH_FIELDS})",
            re.I,
        ),
        formatter=_degree_formatter("Master of Technology"),
    ),
    PatternRule(
        re.compile(
            rf"(?:\bbachelor(?:'?s)?|\bb\.?s\.?|\bb\.a\.?)\s+(?:degree\s+)?(?:of\s+)?(?:science\s+|arts\s+)?(?:in\s+)?(?P<field>{_FIELDS})",
            re.I,
        ),
        formatter=_bachelor,
    ),
    PatternRule(
        re.compile(
            rf"(?:\bmaster(?:'?s)?|\bm\.?s\.?|\bm\.a\.?|\bmba\b|\bm\.b\.a\.?)\s+(?:degree\s+)?(?:of\s+)?(?:science\s+|arts\s+)?(?:in\s+)?(?P<field>{_FIELDS})",
            re.I,
        ),
        formatter=_master,
    ),
    PatternRule(
        re.compile(rf"(?:\bphd\b|\bph\.d\.?|doctorate|doctoral)\s+(?:degree\s+)?(?:in\s+)?(?P<field>{_FIELDS})", re.I),
        formatter=_degree_formatter("Doctor of Philosophy"),
    ),
    PatternRule(
        re.compile(r"(?:juris\s+doctor|\bj\.?d\.?\s+degree|law\s+degree|\bllb\b|\bll\.b\.?)", re.I),
        formatter=lambda m: "Juris Doctor (Law Degree)",
    ),
    PatternRule(
        re.compile(r"(?:doctor\s+of\s+medicine|\bm\.?d\.?\s+degree|medical\s+degree|\bmbbs\b|\bm\.b\.b\.s\.?)", re.I),
        formatter=lambda m: "Doctor of Medicine",
    ),
]

UNIVERSITY_RULES = [
    PatternRule(
        re.compile(r"(?:graduated\s+from|studied\s+at|attended)\s+([^,\n\r]{2,50}?)\s*(university|college|institute)", re.I),
        formatter=lambda m: f"Degree from {m.group(1).strip()} {m.group(2).title()}",
    ),
    PatternRule(
        re.compile(r"(?:bachelor|master|phd|degree)\s+from\s+([^,\n\r]{2,50}?)\s*(university|college|institute)", re.I),
        formatter=lambda m: f"Degree from {m.group(1).strip()} {m.group(2).title()}",
    ),
]

_EDUCATION_HEADER = re.compile(r"^\s*(education|academic(?:s| background)?|qualifications?)\b\s*:?\s*$", re.I)


def _education_from_section(text: str, window: int = 5) -> Optional[str]:
    lines = text.splitlines()
    for i, line in enumerate(lines):
        if not _EDUCATION_HEADER.match(line):
            continue
        for candidate in lines[i + 1: i + 1 + window]:
            candidate = candidate.strip()
            if not candidate:
                continue
            if (_INSTITUTION_WORDS.search(candidate) or _DEGREE_WORDS.search(candidate)) and is_plausible(candidate, 5, 100):
                return candidate
    return None


EDUCATION_CASCADE = Cascade(
    name="education",
    rules=[*DEGREE_RULES, *UNIVERSITY_RULES, FunctionRule(_education_from_section)],
)


def extract_education(text: str) -> Optional[str]:
    return EDUCATION_CASCADE.run(text)


# ---------- College ----------
_INSTITUTION_NAME = re.compile(
    r"((?:[A-Z][A-Za-z.&'-]*[ \t]+){0,5}(?:University|College|Institute|School|Academy)"
    r"(?:[ \t]+of(?:[ \t]+(?:and|&|[A-Z][A-Za-z.&'-]*)){1,4})?)"
)


def _valid_institution(value: Optional[str]) -> bool:
    # a bare "University" heading is not a name
    return is_plausible(value, 5, 100) and len(value.split()) >= 2


def _first_institution(text: str) -> Optional[str]:
    for m in _INSTITUTION_NAME.finditer(text):
        if _valid_institution(m.group(1)):
            return m.group(1)
    return None


COLLEGE_CASCADE = Cascade(
    name="college",
    rules=[FunctionRule(_first_institution)],
    validator=_valid_institution,
)


def extract_college(text: str) -> Optional[str]:
    return COLLEGE_CASCADE.run(text)


# ---------- Skills ----------
def extract_skills(text: str) -> List[str]:
    lowered = (text or "").lower()
    found = [skill for skill in SKILL_VOCABULARY if skill.lower() in lowered]
    return list(dict.fromkeys(found))


# ---------- Category ----------
def extract_category(text: str) -> str:
    lowered = (text or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(re.search(kw, lowered) for kw in keywords):
            return category
    return DEFAULT_CATEGORY


# ---------- Job Title ----------
JOB_TITLE_CASCADE = Cascade(
    name="job_title",
    rules=[
        PatternRule(rx, formatter=lambda m: _title_case(m.group(0)))
        for rx in (
            re.compile(r"(?:(?:senior|junior|lead|principal)\s+)?(?:software|web|mobile|frontend|backend|full[\s-]?stack)\s+(?:developer|engineer)", re.I),
            re.compile(r"data\s+(?:scientist|analyst|engineer)", re.I),
            re.compile(r"(?:product|project)\s+manager", re.I),
            re.compile(r"(?:ui/ux|ui|ux)\s+designer", re.I),
            re.compile(r"(?:devops|cloud)\s+engineer", re.I),
            re.compile(r"(?:quality\s+assurance|qa)\s+engineer", re.I),
            re.compile(r"machine\s+learning\s+engineer", re.I),
            re.compile(r"business\s+analyst", re.I),
        )
    ],
)


def extract_job_title(text: str) -> Optional[str]:
    return JOB_TITLE_CASCADE.run(text)


# ---------- Summary ----------
def build_short_summary(text: str, max_chars: int = 250) -> str:
    lines = [line.strip() for line in re.split(r"[\n\r]+", text or "") if len(line.strip()) > 10]
    if not lines:
        return ""
    return " ".join(lines[:3])[:max_chars] + "..."
