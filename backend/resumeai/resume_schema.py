from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class TemplateId(str, Enum):
    MODERN = "modern"
    CLASSIC = "classic"
    CREATIVE = "creative"


class SkillLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


DEFAULT_THEME_COLORS = {
    TemplateId.MODERN: "#2563eb",
    TemplateId.CLASSIC: "#111827",
    TemplateId.CREATIVE: "#8b5cf6",
}


class _Snapshot(BaseModel):
    # Immutable; camelCase on the wire, snake_case in Python.
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


class PersonalInfo(_Snapshot):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    website: str = ""
    linkedin: str = ""
    github: str = ""
    summary: str = ""


class Experience(_Snapshot):
    id: str
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    description: str = ""


class Education(_Snapshot):
    id: str
    degree: str = ""
    institution: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    grade: str = ""


class Skill(_Snapshot):
    id: str
    name: str = ""
    level: SkillLevel = SkillLevel.INTERMEDIATE


class Project(_Snapshot):
    id: str
    title: str = ""
    description: str = ""
    link: str = ""
    technologies: str = ""


class Meta(_Snapshot):
    # Free string: unknown identifiers are resolved at render time.
    template_id: str = TemplateId.MODERN.value
    theme_color: str = DEFAULT_THEME_COLORS[TemplateId.MODERN]


class Resume(_Snapshot):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[Experience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[Skill] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    meta: Meta = Field(default_factory=Meta)

    @model_validator(mode="after")
    def validate_entry_ids(self) -> "Resume":
        for section in ("experience", "education", "skills", "projects"):
            seen = set()
            for entry in getattr(self, section):
                if entry.id in seen:
                    raise ValueError(f"duplicate {section} id: {entry.id}")
                seen.add(entry.id)
        return self


ENTRY_MODELS = {
    "experience": Experience,
    "education": Education,
    "skills": Skill,
    "projects": Project,
}
