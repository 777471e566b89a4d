# extractor.py
import asyncio
import hashlib
import logging
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional

from PyPDF2 import PdfReader
from docx import Document
from PIL import Image
import pytesseract
from tqdm import tqdm

from .config import AI_MIN_TEXT_LENGTH, MIN_TEXT_LENGTH, SUPPORTED_EXTENSIONS, WORKER_COUNT
from .exceptions import InsufficientTextError, StorageError
from .experience import calculate_years_of_experience
from .fields import (
    build_short_summary,
    extract_category,
    extract_college,
    extract_education,
    extract_email,
    extract_job_title,
    extract_name,
    extract_phone,
    extract_skills,
)
from .models import AIAnalysis, BatchResult, CandidateRecord
from .recommender import recommend_roles
from .utils import AIAnalyzer

logger = logging.getLogger(__name__)


# ---------- Text Extraction ----------
def extract_text_from_pdf(data: bytes) -> str:
    reader = PdfReader(BytesIO(data))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def extract_text_from_docx(data: bytes) -> str:
    doc = Document(BytesIO(data))
    return "\n".join(p.text for p in doc.paragraphs)


def extract_text_from_image(data: bytes) -> str:
    image = Image.open(BytesIO(data))
    return pytesseract.image_to_string(image)


def extract_raw_text(data: bytes, file_name: str) -> Optional[str]:
    suffix = Path(file_name).suffix.lower()
    try:
        if suffix == ".pdf":
            text = extract_text_from_pdf(data)
        elif suffix == ".docx":
            text = extract_text_from_docx(data)
        elif suffix == ".txt":
            text = data.decode("utf-8", errors="ignore")
        elif suffix in {".png", ".jpg", ".jpeg"}:
            text = extract_text_from_image(data)
        else:
            logger.warning("Unsupported file type: %s", file_name)
            return None
    except Exception as exc:
        logger.error(f"Text extraction failed for {file_name}", exc_info=exc)
        return None
    return text.replace("\x00", "")


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


# ---------- Orchestration ----------
class ExtractionOrchestrator:
    """
    Turns one resume into a CandidateRecord and stores it.

    The AI analyzer and the store are injected; either may be None. AI output
    is preferred field by field, and any AI failure drops back to the regex
    heuristics rather than failing the file.
    """

    def __init__(
        self,
        analyzer: Optional[AIAnalyzer] = None,
        store=None,
        min_text_length: int = MIN_TEXT_LENGTH,
        today: Optional[date] = None,
    ) -> None:
        self.analyzer = analyzer
        self.store = store
        self.min_text_length = min_text_length
        # "present" resolves against this date; None means the real today
        self.today = today

    # ---------- Validation ----------
    def validate_text(self, resume_text: Optional[str]) -> str:
        text = (resume_text or "").strip()
        if len(text) < self.min_text_length:
            raise InsufficientTextError("insufficient text")
        return text

    # ---------- Heuristics ----------
    def heuristic_extract(self, resume_text: str) -> Dict:
        skills = extract_skills(resume_text)
        return {
            "name": extract_name(resume_text),
            "email": extract_email(resume_text),
            "phone": extract_phone(resume_text),
            "category": extract_category(resume_text),
            "college_name": extract_college(resume_text),
            "education": extract_education(resume_text),
            "job_title": extract_job_title(resume_text),
            "skills": skills,
            "years_of_experience": calculate_years_of_experience(resume_text, self.today),
            "short_summary": build_short_summary(resume_text),
        }

    def _analyze_with_ai(self, text: str, cache_key: str) -> Optional[AIAnalysis]:
        if self.analyzer is None or len(text) < AI_MIN_TEXT_LENGTH:
            return None
        return self.analyzer.analyze(text, cache_key=cache_key)

    @staticmethod
    def _merge(fields: Dict, analysis: AIAnalysis) -> Dict:
        merged = dict(fields)
        for key in ("name", "email", "phone", "category", "college_name", "job_title"):
            value = getattr(analysis, key)
            if value:
                merged[key] = value
        if analysis.skills:
            merged["skills"] = analysis.skills
        if analysis.years_of_experience is not None:
            merged["years_of_experience"] = analysis.years_of_experience
        return merged

    def extract(
        self,
        resume_text: str,
        file_name: str,
        content_hash: str,
        user_id: str,
    ) -> CandidateRecord:
        text = self.validate_text(resume_text)
        fields = self.heuristic_extract(text)

        method = "heuristic"
        summary = fields["short_summary"]
        projects = []
        analysis = self._analyze_with_ai(text, content_hash)
        if analysis is not None:
            fields = self._merge(fields, analysis)
            method = "ai"
            summary = analysis.professional_summary or summary
            projects = analysis.projects
        else:
            logger.debug("Using heuristic extraction for %s", file_name)

        return CandidateRecord(
            file_name=file_name,
            content_hash=content_hash,
            user_id=user_id,
            name=fields["name"],
            email=fields["email"],
            phone=fields["phone"],
            category=fields["category"],
            college_name=fields["college_name"],
            education=fields["education"],
            job_title=fields["job_title"],
            skills=fields["skills"],
            years_of_experience=max(0, int(fields["years_of_experience"] or 0)),
            recommended_roles=recommend_roles(fields["skills"]),
            professional_summary=summary,
            short_summary=fields["short_summary"],
            projects=projects,
            extraction_method=method,
        )

    # ---------- Persistence ----------
    def save(self, record: CandidateRecord) -> str:
        if self.store is None:
            return "inserted"
        created = self.store.upsert_candidate(record.to_document())
        return "inserted" if created else "updated"

    def process_bytes(self, data: bytes, file_name: str, user_id: str, force: bool = False) -> BatchResult:
        digest = content_hash(data)
        try:
            if self.store is not None and not force:
                existing = self.store.find_candidate(file_name, user_id)
                if existing and existing.get("content_hash") == digest:
                    logger.info("Skipping %s: identical content already stored", file_name)
                    return BatchResult(file_name=file_name, status="unchanged")

            text = extract_raw_text(data, file_name)
            record = self.extract(text, file_name, digest, user_id)
            status = self.save(record)
        except InsufficientTextError as exc:
            logger.warning("Rejected %s: %s", file_name, exc)
            return BatchResult(file_name=file_name, status="rejected", error=str(exc))
        except StorageError as exc:
            logger.error("Could not store %s: %s", file_name, exc)
            return BatchResult(file_name=file_name, status="failed", error=str(exc))

        logger.info("Processed %s (%s, %s)", file_name, record.extraction_method, status)
        return BatchResult(file_name=file_name, status=status, record=record)

    def process_file(self, path: Path, user_id: str, force: bool = False) -> BatchResult:
        try:
            data = path.read_bytes()
        except OSError as exc:
            logger.error("Could not read %s: %s", path, exc)
            return BatchResult(file_name=path.name, status="failed", error=str(exc))
        return self.process_bytes(data, path.name, user_id, force=force)


# ---------- Async Worker ----------
async def process_resume(
    queue: asyncio.Queue,
    orchestrator: ExtractionOrchestrator,
    user_id: str,
    results: List[BatchResult],
    force: bool = False,
    progress: Optional[tqdm] = None,
) -> None:
    while True:
        try:
            path: Path = await queue.get()
        except asyncio.CancelledError:
            break

        try:
            result = await asyncio.to_thread(orchestrator.process_file, path, user_id, force)
        except Exception as exc:
            logger.exception("Unexpected failure while processing %s", path.name)
            result = BatchResult(file_name=path.name, status="failed", error=str(exc))

        results.append(result)
        if progress is not None:
            progress.update(1)
        queue.task_done()


# ---------- Public API ----------
def list_resume_files(folder: Path) -> List[Path]:
    return sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() in SUPPORTED_EXTENSIONS
    )


async def ingest_resumes(
    folder: Path,
    user_id: str,
    orchestrator: ExtractionOrchestrator,
    workers: int = WORKER_COUNT,
    force: bool = False,
    show_progress: bool = True,
) -> List[BatchResult]:
    queue: asyncio.Queue = asyncio.Queue()
    results: List[BatchResult] = []

    resume_files = list_resume_files(folder)
    for path in resume_files:
        queue.put_nowait(path)

    progress = tqdm(total=len(resume_files), desc="Resumes", unit="file", disable=not show_progress)
    tasks = [
        asyncio.create_task(process_resume(queue, orchestrator, user_id, results, force, progress))
        for _ in range(max(1, workers))
    ]

    # Wait for all items to be processed
    await queue.join()

    for t in tasks:
        t.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    progress.close()

    return results
