# report.py
import csv
import logging
from io import StringIO
from pathlib import Path
from typing import Dict, List

from tabulate import tabulate

from .config import SKILL_DISPLAY_LIMIT

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    "file_name",
    "name",
    "email",
    "phone",
    "category",
    "job_title",
    "years_of_experience",
    "education",
    "college_name",
    "skills",
    "recommended_roles",
    "professional_summary",
    "extraction_method",
    "content_hash",
    "processed_at",
]


def format_roles(roles: List[Dict]) -> str:
    return "; ".join(f"{r.get('role', '')} ({r.get('percent', 0)}%)" for r in roles or [])


def format_skills(skills: List[str], limit: int = 0) -> str:
    skills = list(skills or [])
    if limit:
        skills = skills[:limit]
    return "; ".join(skills)


def format_candidate_table(candidates: List[Dict]) -> str:
    table = [
        [
            idx + 1,
            c.get("name", ""),
            c.get("category", ""),
            c.get("years_of_experience", 0),
            format_skills(c.get("skills"), SKILL_DISPLAY_LIMIT),
            format_roles(c.get("recommended_roles")),
            c.get("file_name", ""),
        ]
        for idx, c in enumerate(candidates)
    ]
    return tabulate(
        table,
        headers=["#", "Name", "Category", "Years", "Skills", "Recommended", "File"],
        tablefmt="github",
    )


def _csv_row(candidate: Dict) -> Dict:
    row = {col: candidate.get(col, "") for col in CSV_COLUMNS}
    row["skills"] = format_skills(candidate.get("skills"))
    row["recommended_roles"] = format_roles(candidate.get("recommended_roles"))
    processed_at = candidate.get("processed_at")
    row["processed_at"] = processed_at.isoformat() if hasattr(processed_at, "isoformat") else processed_at or ""
    return row


def _write_csv(handle, candidates: List[Dict]) -> None:
    writer = csv.DictWriter(handle, fieldnames=CSV_COLUMNS, quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    for candidate in candidates:
        writer.writerow(_csv_row(candidate))


def get_csv_as_string(candidates: List[Dict]) -> str:
    buffer = StringIO()
    _write_csv(buffer, candidates)
    return buffer.getvalue()


def export_to_csv(candidates: List[Dict], output_path: Path) -> Path:
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        _write_csv(f, candidates)
    logger.info("Exported %d candidates to %s", len(candidates), output_path)
    return output_path.resolve()
