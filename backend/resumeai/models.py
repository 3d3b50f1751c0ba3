from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator


class TemplateInfo(BaseModel):
    id: str
    name: str
    color: str


class TemplateListResponse(BaseModel):
    templates: List[TemplateInfo]


class FieldUpdateRequest(BaseModel):
    field: str
    value: Any = None

    @model_validator(mode="after")
    def validate_request(self) -> "FieldUpdateRequest":
        self.field = self.field.strip()
        if self.field == "":
            raise ValueError("field must not be empty")
        return self


class AddEntryRequest(BaseModel):
    fields: Dict[str, Any] = Field(default_factory=dict)


class MetaUpdateRequest(BaseModel):
    template_id: Optional[str] = Field(default=None, alias="templateId")
    theme_color: Optional[str] = Field(default=None, alias="themeColor")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def validate_request(self) -> "MetaUpdateRequest":
        if self.template_id is None and self.theme_color is None:
            raise ValueError("templateId or themeColor is required")
        return self


class SessionResponse(BaseModel):
    doc_id: str
    resume: Dict[str, Any]
