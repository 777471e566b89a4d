import json
import logging
import math
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from openai import AzureOpenAI, OpenAI, OpenAIError

from .config import (
    AI_CACHE_FILE,
    AI_PROMPT_CHARS,
    AI_TIMEOUT_SECONDS,
    AZURE_OPENAI_API_KEY,
    AZURE_OPENAI_API_VERSION,
    AZURE_OPENAI_DEPLOYMENT,
    AZURE_OPENAI_ENDPOINT,
    OPENAI_API_KEY,
    OPENAI_MODEL,
)
from .models import AIAnalysis, Project

# ---------- Logging ----------
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are an AI assistant that analyzes resumes and CVs. Respond with valid JSON only."

CATEGORIES = [
    "Software Developer",
    "QA Engineer",
    "BA Engineer",
    "Project Manager",
    "Data Analyst",
    "Designer",
    "DevOps Engineer",
    "Other",
]


# ---------- Client ----------
def build_ai_client() -> Optional[Union[AzureOpenAI, OpenAI]]:
    """
    Create the AI client once at start-up.

    Azure settings win over a plain OpenAI key. Returns None when neither is
    configured, in which case extraction runs on heuristics alone.
    """
    if AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT:
        return AzureOpenAI(
            api_key=AZURE_OPENAI_API_KEY,
            azure_endpoint=AZURE_OPENAI_ENDPOINT,
            api_version=AZURE_OPENAI_API_VERSION,
            timeout=AI_TIMEOUT_SECONDS,
            max_retries=0,
        )
    if OPENAI_API_KEY:
        return OpenAI(api_key=OPENAI_API_KEY, timeout=AI_TIMEOUT_SECONDS, max_retries=0)
    logger.warning("No OpenAI configuration found; AI analysis will be skipped")
    return None


def default_model() -> str:
    if AZURE_OPENAI_API_KEY and AZURE_OPENAI_ENDPOINT:
        return AZURE_OPENAI_DEPLOYMENT
    return OPENAI_MODEL


# ---------- Cache ----------
def _load_cache(path: Path) -> Dict:
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return {}


def _save_cache(path: Path, cache: Dict) -> None:
    if not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cache, f, indent=2)


# ---------- Prompt ----------
def build_analysis_prompt(text: str, max_chars: int = AI_PROMPT_CHARS) -> str:
    categories = ", ".join(f'"{c}"' for c in CATEGORIES)
    return f"""
Analyze the following CV/resume text and extract this information in JSON format:
1. Most appropriate job category (choose exactly one): {categories}
2. Total years of job experience (as a number, return 0 if no experience found)
3. Skills (as an array of strings)
4. Current or most recent job title
5. Brief professional summary (1-2 sentences)
6. College or university name ONLY (just the institution name, not dates or degree details)
7. Email address (if found)
8. Phone number (if found)
9. Name of the person (if found)
10. Projects (as an array of objects with "name" and "description" fields, up to 3 projects)

CV TEXT:
{text[:max_chars]}

Return ONLY a valid JSON object with these fields:
{{
  "category": "",
  "yearsOfExperience": 0,
  "skills": [],
  "jobTitle": "",
  "professionalSummary": "",
  "collegeName": "",
  "email": "",
  "phone": "",
  "name": "",
  "projects": [{{"name": "", "description": ""}}]
}}
"""


# ---------- Response Parsing ----------
def parse_ai_json(raw: Optional[str]) -> Optional[Dict]:
    """Parse a JSON object from the model output, tolerating markdown fences."""
    text = (raw or "").strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def _clean_str(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value or value.lower() in {"not found", "not specified", "n/a", "none", "unknown"}:
        return None
    return value


def _clean_years(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        years = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(years) or years < 0:
        return None
    return int(years)


def _clean_skills(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    skills = [s.strip() for s in value if isinstance(s, str) and s.strip()]
    return list(dict.fromkeys(skills))


def _clean_projects(value: Any) -> List[Project]:
    if not isinstance(value, list):
        return []
    projects = []
    for item in value[:3]:
        if isinstance(item, dict) and _clean_str(item.get("name")):
            projects.append(Project(name=item["name"].strip(), description=_clean_str(item.get("description")) or ""))
    return projects


def analysis_from_response(data: Dict) -> AIAnalysis:
    """Map the model's camelCase payload onto AIAnalysis; invalid fields become None."""
    return AIAnalysis(
        category=_clean_str(data.get("category")),
        years_of_experience=_clean_years(data.get("yearsOfExperience")),
        skills=_clean_skills(data.get("skills")),
        job_title=_clean_str(data.get("jobTitle")),
        professional_summary=_clean_str(data.get("professionalSummary")),
        college_name=_clean_str(data.get("collegeName")),
        email=_clean_str(data.get("email")),
        phone=_clean_str(data.get("phone")),
        name=_clean_str(data.get("name")),
        projects=_clean_projects(data.get("projects")),
    )


# ---------- Analyzer ----------
class AIAnalyzer:
    """Wraps one chat-completions client; never raises, returns None on any failure."""

    def __init__(
        self,
        client,
        model: Optional[str] = None,
        max_prompt_chars: int = AI_PROMPT_CHARS,
        cache_file: Optional[Path] = AI_CACHE_FILE,
        max_tokens: int = 800,
    ) -> None:
        self.client = client
        self.model = model or default_model()
        self.max_prompt_chars = max_prompt_chars
        self.cache_file = cache_file
        self.max_tokens = max_tokens
        self._cache_lock = threading.Lock()

    def _cached(self, cache_key: Optional[str]) -> Optional[str]:
        if not cache_key or self.cache_file is None:
            return None
        with self._cache_lock:
            try:
                return _load_cache(self.cache_file).get(cache_key)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("AI cache unreadable, ignoring it: %s", exc)
                return None

    def _store(self, cache_key: Optional[str], response_text: str) -> None:
        if not cache_key or self.cache_file is None:
            return
        with self._cache_lock:
            try:
                cache = _load_cache(self.cache_file)
            except (OSError, json.JSONDecodeError):
                cache = {}
            cache[cache_key] = response_text
            try:
                _save_cache(self.cache_file, cache)
            except OSError as exc:
                logger.warning("Could not write AI cache: %s", exc)

    def _complete(self, prompt: str) -> Optional[str]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=0.2,
            max_tokens=self.max_tokens,
            response_format={"type": "json_object"},
        )
        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message or not choice.message.content:
            return None
        return choice.message.content

    def analyze(self, text: str, cache_key: Optional[str] = None) -> Optional[AIAnalysis]:
        response_text = self._cached(cache_key)

        if response_text is None:
            prompt = build_analysis_prompt(text, self.max_prompt_chars)
            try:
                response_text = self._complete(prompt)
            except OpenAIError as exc:
                logger.warning("AI analysis failed, falling back to heuristics: %s", exc)
                return None
            except Exception:
                logger.exception("Unexpected AI client error, falling back to heuristics")
                return None
            if not response_text:
                logger.warning("AI analysis returned an empty response")
                return None

        data = parse_ai_json(response_text)
        if data is None:
            logger.warning("AI analysis returned malformed JSON")
            return None

        try:
            analysis = analysis_from_response(data)
        except (TypeError, ValueError, OverflowError, AttributeError) as exc:
            logger.warning("AI analysis could not be mapped, falling back to heuristics: %s", exc)
            return None

        self._store(cache_key, response_text)
        return analysis
