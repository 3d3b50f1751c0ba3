from __future__ import annotations

import re
from typing import Iterable

from jinja2 import Environment, PackageLoader, select_autoescape

from .resume_schema import (
    DEFAULT_THEME_COLORS,
    PersonalInfo,
    Resume,
    SkillLevel,
    TemplateId,
)


MONTH_ABBR = (
	"Jan", "Feb", "Mar", "Apr", "May", "Jun",
	"Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

YEAR_MONTH_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})\s*$")

SKILL_LEVEL_PERCENT = {
	SkillLevel.EXPERT: 100,
	SkillLevel.ADVANCED: 75,
	SkillLevel.INTERMEDIATE: 50,
	SkillLevel.BEGINNER: 25,
}

TEMPLATE_FILES = {
	TemplateId.MODERN: "modern.html",
	TemplateId.CLASSIC: "classic.html",
	TemplateId.CREATIVE: "creative.html",
}


def format_month(value: str) -> str:
	"""
	"2021-06" -> "Jun 2021". Empty or unparseable input renders as "".
	"""
	if not value:
		return ""
	match = YEAR_MONTH_RE.match(value)
	if not match:
		return ""
	year, month = int(match.group(1)), int(match.group(2))
	if not 1 <= month <= 12:
		return ""
	return f"{MONTH_ABBR[month - 1]} {year:04d}"


def date_range(start: str, end: str, is_current: bool = False) -> str:
	start_text = format_month(start)
	end_text = "Present" if is_current else format_month(end)
	if not start_text and not end_text:
		return ""
	return f"{start_text} - {end_text}"


def skill_percent(level: str) -> int:
	try:
		return SKILL_LEVEL_PERCENT[SkillLevel(level)]
	except ValueError:
		return SKILL_LEVEL_PERCENT[SkillLevel.BEGINNER]


def _normalize_url(url: str) -> str:
	if not url:
		return ""
	if url.startswith("http://") or url.startswith("https://"):
		return url
	return f"https://{url}"


def _join_non_empty(parts: Iterable[str], sep: str = " • ") -> str:
	cleaned = [part for part in parts if part]
	return sep.join(cleaned)


def modern_contact_line(info: PersonalInfo) -> str:
	return _join_non_empty([
		info.email,
		info.phone,
		info.address,
		info.linkedin,
		info.website,
	])


def classic_contact_line(info: PersonalInfo) -> str:
	# No suppression: empty fields still keep their separators.
	return " | ".join([info.address, info.phone, info.email])


def resolve_template(template_id: str) -> TemplateId:
	"""
	Map a stored identifier onto one of the closed set of templates.
	Anything unrecognised falls back to Modern.
	"""
	template_id = getattr(template_id, "value", template_id)
	if template_id == TemplateId.MODERN.value:
		return TemplateId.MODERN
	elif template_id == TemplateId.CLASSIC.value:
		return TemplateId.CLASSIC
	elif template_id == TemplateId.CREATIVE.value:
		return TemplateId.CREATIVE
	else:
		return TemplateId.MODERN


def accent_color(resume: Resume, template: TemplateId) -> str:
	return resume.meta.theme_color or DEFAULT_THEME_COLORS[template]


env = Environment(
	loader=PackageLoader("resumeai", "templates"),
	autoescape=select_autoescape(["html", "xml"]),
	trim_blocks=True,
	lstrip_blocks=True,
)
env.filters["skill_percent"] = skill_percent
env.filters["url"] = _normalize_url
env.globals["date_range"] = date_range


def _template_context(resume: Resume, template: TemplateId) -> dict:
	info = resume.personal_info
	context = {
		"r": resume,
		"info": info,
		"accent": accent_color(resume, template),
		"template_id": template.value,
	}

	if template == TemplateId.MODERN:
		context["contact_line"] = modern_contact_line(info)
	elif template == TemplateId.CLASSIC:
		context["contact_line"] = classic_contact_line(info)
		context["skills_line"] = " • ".join(skill.name for skill in resume.skills)
	elif template == TemplateId.CREATIVE:
		context["initial"] = info.full_name[:1]
		context["headline"] = resume.experience[0].job_title if resume.experience else ""

	return context


def render_resume_html(resume: Resume) -> str:
	"""
	Render the whole document with the template named in `meta.template_id`.
	Pure: the same Resume always yields the same HTML.
	"""
	template = resolve_template(resume.meta.template_id)
	page = env.get_template(TEMPLATE_FILES[template])
	return page.render(**_template_context(resume, template))
