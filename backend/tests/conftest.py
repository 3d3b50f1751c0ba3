import pytest

from resumeai.resume_schema import Resume


@pytest.fixture
def make_resume():
    def _make(template_id="modern", theme_color="#2563eb", **sections):
        data = {
            "personalInfo": sections.pop("personal_info", {}),
            "meta": {"templateId": template_id, "themeColor": theme_color},
        }
        data.update(sections)
        return Resume.model_validate(data)

    return _make


@pytest.fixture
def engineer_experience():
    return {
        "id": "exp-1",
        "jobTitle": "Engineer",
        "company": "Acme",
        "location": "Boston",
        "startDate": "2020-01",
        "endDate": "2022-06",
        "isCurrent": False,
        "description": "Built things",
    }
