import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import ValidationError

from . import editing
from .config import TEMPLATES, setup_logging
from .llm import SummaryGenerationError, SummaryInProgressError
from .models import (
    AddEntryRequest,
    FieldUpdateRequest,
    MetaUpdateRequest,
    SessionResponse,
    TemplateInfo,
    TemplateListResponse,
)
from .render import render_resume_html
from .resume_schema import DEFAULT_THEME_COLORS, Resume, TemplateId
from .storage import ResumeSession, SessionStore

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI()
sessions = SessionStore()


def _dump(resume: Resume) -> Dict[str, Any]:
    return resume.model_dump(by_alias=True)


def _session(doc_id: str) -> ResumeSession:
    try:
        return sessions.get(doc_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="No resume session found for this doc_id.")


def _apply_edit(session: ResumeSession, edit, *args) -> Dict[str, Any]:
    try:
        updated = edit(session.resume, *args)
    except editing.EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"No entry with id {exc.args[0]}") from exc
    except editing.UnknownFieldError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False)) from exc

    session.resume = updated
    return _dump(updated)


@app.get("/health")
def health() -> Dict[str, bool]:
    return {"ok": True}


@app.get("/api/templates", response_model=TemplateListResponse)
def list_templates() -> TemplateListResponse:
    return TemplateListResponse(
        templates=[
            TemplateInfo(id=t["id"], name=t["name"], color=DEFAULT_THEME_COLORS[TemplateId(t["id"])])
            for t in TEMPLATES
        ]
    )


@app.post("/api/resume", response_model=SessionResponse)
def create_resume() -> SessionResponse:
    session = sessions.create()
    return SessionResponse(doc_id=session.doc_id, resume=_dump(session.resume))


@app.get("/api/resume/{doc_id}")
def get_resume(doc_id: str) -> Dict[str, Any]:
    return _dump(_session(doc_id).resume)


@app.put("/api/resume/{doc_id}")
def replace_resume(doc_id: str, resume: Resume) -> Dict[str, Any]:
    session = _session(doc_id)
    session.resume = resume
    return _dump(resume)


@app.delete("/api/resume/{doc_id}")
def end_session(doc_id: str) -> Dict[str, bool]:
    _session(doc_id)
    sessions.delete(doc_id)
    logger.info("Ended resume session %s", doc_id)
    return {"ok": True}


@app.patch("/api/resume/{doc_id}/personal")
def update_personal(doc_id: str, req: FieldUpdateRequest) -> Dict[str, Any]:
    return _apply_edit(_session(doc_id), editing.update_personal_info, req.field, req.value)


@app.put("/api/resume/{doc_id}/meta")
def update_meta(doc_id: str, req: MetaUpdateRequest) -> Dict[str, Any]:
    session = _session(doc_id)
    resume = session.resume

    if req.template_id is not None:
        resume = editing.set_template(resume, req.template_id, req.theme_color)
        logger.info("Session %s switched to template %s", doc_id, req.template_id)
    else:
        resume = editing.set_theme_color(resume, req.theme_color)

    session.resume = resume
    return _dump(resume)


@app.post("/api/resume/{doc_id}/summary")
async def generate_summary(doc_id: str) -> Dict[str, Any]:
    session = _session(doc_id)

    def _store(resume: Resume) -> None:
        session.resume = resume

    try:
        updated = await session.summary.apply(lambda: session.resume, _store)
    except SummaryInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except SummaryGenerationError as exc:
        raise HTTPException(
            status_code=502,
            detail="Failed to generate summary. Please try again.",
        ) from exc

    return _dump(updated)


@app.get("/api/resume/{doc_id}/preview", response_class=HTMLResponse)
def preview_resume(doc_id: str) -> HTMLResponse:
    return HTMLResponse(render_resume_html(_session(doc_id).resume))


@app.post("/api/resume/{doc_id}/{section}")
def add_entry(doc_id: str, section: str, req: AddEntryRequest = None) -> Dict[str, Any]:
    fields = req.fields if req is not None else {}
    return _apply_edit(_session(doc_id), editing.add_entry, section, fields)


@app.patch("/api/resume/{doc_id}/{section}/{entry_id}")
def update_entry(doc_id: str, section: str, entry_id: str, req: FieldUpdateRequest) -> Dict[str, Any]:
    return _apply_edit(_session(doc_id), editing.update_entry, section, entry_id, req.field, req.value)


@app.delete("/api/resume/{doc_id}/{section}/{entry_id}")
def remove_entry(doc_id: str, section: str, entry_id: str) -> Dict[str, Any]:
    return _apply_edit(_session(doc_id), editing.remove_entry, section, entry_id)


@app.post("/api/render", response_class=HTMLResponse)
def render_resume(resume: Resume) -> HTMLResponse:
    return HTMLResponse(render_resume_html(resume))
