import logging
import uuid
from typing import Dict

from .llm import SummaryGenerator
from .resume_schema import Resume

logger = logging.getLogger(__name__)


class ResumeSession:
    """One editing session: the current snapshot plus its summary guard."""

    def __init__(self, doc_id: str, resume: Resume):
        self.doc_id = doc_id
        self.resume = resume
        self.summary = SummaryGenerator()


class SessionStore:
    """
    Process-lifetime, in-memory sessions keyed by doc_id.
    Nothing is persisted; sessions vanish with the process.
    """

    def __init__(self):
        self._sessions: Dict[str, ResumeSession] = {}

    def create(self, resume: Resume = None) -> ResumeSession:
        doc_id = str(uuid.uuid4())
        session = ResumeSession(doc_id, resume or Resume())
        self._sessions[doc_id] = session
        logger.info("Created resume session %s", doc_id)
        return session

    def get(self, doc_id: str) -> ResumeSession:
        return self._sessions[doc_id]

    def delete(self, doc_id: str) -> None:
        self._sessions.pop(doc_id, None)
