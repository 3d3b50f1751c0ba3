"""
Snapshot-producing edit operations on a Resume.

Every helper takes the current snapshot and returns a new one; the input is
never modified. Entries are addressed by their `id` only.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from .resume_schema import (
    DEFAULT_THEME_COLORS,
    ENTRY_MODELS,
    PersonalInfo,
    Resume,
    TemplateId,
)


class EntryNotFoundError(KeyError):
    pass


class UnknownFieldError(ValueError):
    pass


def _entry_model(section: str) -> Type[BaseModel]:
    model = ENTRY_MODELS.get(section)
    if model is None:
        raise UnknownFieldError(f"unknown section: {section}")
    return model


def _field_name(model: Type[BaseModel], field: str) -> str:
    """Accept either the python name or the camelCase alias."""
    for name, info in model.model_fields.items():
        if field == name or field == info.alias:
            return name
    raise UnknownFieldError(f"unknown field for {model.__name__}: {field}")


def _new_id(existing: set) -> str:
    while True:
        candidate = uuid.uuid4().hex
        if candidate not in existing:
            return candidate


def _replace(model: BaseModel, name: str, value: Any) -> BaseModel:
    # Re-validate so the replaced value keeps the field's shape.
    data = model.model_dump()
    data[name] = value
    return type(model).model_validate(data)


def add_entry(resume: Resume, section: str, fields: Optional[Dict[str, Any]] = None) -> Resume:
    model = _entry_model(section)
    entries = getattr(resume, section)

    data: Dict[str, Any] = {}
    for key, value in (fields or {}).items():
        name = _field_name(model, key)
        if name != "id":
            data[name] = value
    data["id"] = _new_id({entry.id for entry in entries})

    entry = model.model_validate(data)
    return resume.model_copy(update={section: [*entries, entry]})


def remove_entry(resume: Resume, section: str, entry_id: str) -> Resume:
    _entry_model(section)
    entries = getattr(resume, section)
    remaining = [entry for entry in entries if entry.id != entry_id]
    if len(remaining) == len(entries):
        raise EntryNotFoundError(entry_id)
    return resume.model_copy(update={section: remaining})


def update_entry(resume: Resume, section: str, entry_id: str, field: str, value: Any) -> Resume:
    model = _entry_model(section)
    name = _field_name(model, field)
    if name == "id":
        raise UnknownFieldError("entry id cannot be changed")

    entries = getattr(resume, section)
    updated = []
    found = False
    for entry in entries:
        if entry.id == entry_id:
            entry = _replace(entry, name, value)
            found = True
        updated.append(entry)

    if not found:
        raise EntryNotFoundError(entry_id)
    return resume.model_copy(update={section: updated})


def update_personal_info(resume: Resume, field: str, value: Any) -> Resume:
    name = _field_name(PersonalInfo, field)
    info = _replace(resume.personal_info, name, value)
    return resume.model_copy(update={"personal_info": info})


def set_summary(resume: Resume, summary: str) -> Resume:
    return update_personal_info(resume, "summary", summary)


def set_template(resume: Resume, template_id: str, theme_color: Optional[str] = None) -> Resume:
    """
    Switch template. The accent colour resets to the template's default
    unless `theme_color` is given; an unknown template keeps the current colour.
    """
    template_id = getattr(template_id, "value", template_id)
    if theme_color is None:
        try:
            theme_color = DEFAULT_THEME_COLORS[TemplateId(template_id)]
        except ValueError:
            theme_color = resume.meta.theme_color

    meta = resume.meta.model_copy(update={"template_id": template_id, "theme_color": theme_color})
    return resume.model_copy(update={"meta": meta})


def set_theme_color(resume: Resume, theme_color: str) -> Resume:
    meta = resume.meta.model_copy(update={"theme_color": theme_color})
    return resume.model_copy(update={"meta": meta})
