# db.py
import logging
import re
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from pymongo import ASCENDING, MongoClient, errors
from pymongo.client_session import ClientSession

from .config import CANDIDATE_COLLECTION, DB_NAME, MONGO_URI
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class MongoDBManager:
    def __init__(self, uri: str = MONGO_URI, db_name: str = DB_NAME) -> None:
        try:
            self.client = MongoClient(uri)
            self.db = self.client[db_name]
            self.candidates = self.db[CANDIDATE_COLLECTION]
        except errors.PyMongoError as exc:
            raise StorageError(f"MongoDB connection failed: {exc}") from exc

    @contextmanager
    def session(self) -> Iterator[ClientSession]:
        """Hold one pooled connection for the duration of a write."""
        try:
            with self.client.start_session() as session:
                yield session
        except errors.PyMongoError as exc:
            raise StorageError(str(exc)) from exc

    def ensure_indexes(self) -> None:
        try:
            self.candidates.create_index(
                [("file_name", ASCENDING), ("user_id", ASCENDING)],
                unique=True,
            )
            logger.info("Ensured unique (file_name, user_id) index on %s", self.candidates.name)
        except errors.PyMongoError as exc:
            raise StorageError(f"Index creation failed: {exc}") from exc

    # ---------- Candidate ----------
    def find_candidate(self, file_name: str, user_id: str) -> Optional[Dict]:
        try:
            return self.candidates.find_one({"file_name": file_name, "user_id": user_id}, {"_id": 0})
        except errors.PyMongoError as exc:
            raise StorageError(f"Lookup failed for {file_name}: {exc}") from exc

    def upsert_candidate(self, candidate: Dict) -> bool:
        """Insert or replace by (file_name, user_id). Returns True when a new document was created."""
        key = {"file_name": candidate["file_name"], "user_id": candidate["user_id"]}
        with self.session() as session:
            try:
                result = self.candidates.replace_one(key, candidate, upsert=True, session=session)
            except errors.PyMongoError as exc:
                raise StorageError(f"Write failed for {candidate['file_name']}: {exc}") from exc
        created = result.upserted_id is not None
        logger.debug("%s candidate %s for %s", "Inserted" if created else "Replaced", key["file_name"], key["user_id"])
        return created

    def get_candidates(
        self,
        user_id: str,
        category: Optional[str] = None,
        min_years: Optional[int] = None,
        skill: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[Dict]:
        query: Dict = {"user_id": user_id}
        if category:
            query["category"] = {"$regex": f"^{re.escape(category)}$", "$options": "i"}
        if min_years is not None:
            query["years_of_experience"] = {"$gte": min_years}
        if skill:
            query["skills"] = {"$regex": f"^{re.escape(skill)}$", "$options": "i"}
        if name:
            query["name"] = {"$regex": re.escape(name), "$options": "i"}

        try:
            return list(self.candidates.find(query, {"_id": 0}).sort("processed_at", -1))
        except errors.PyMongoError as exc:
            raise StorageError(f"Candidate query failed: {exc}") from exc
