import asyncio
from types import SimpleNamespace

import pytest

from resumeai import editing
from resumeai.llm import (
    SummaryGenerationError,
    SummaryGenerator,
    SummaryInProgressError,
    _build_summary_prompt,
    build_summary_request,
    generate_resume_summary,
)
from resumeai.resume_schema import Resume


class FakeModels:
    def __init__(self, text=None, exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


def fake_client(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def test_request_without_experience_uses_placeholders():
    req = build_summary_request(Resume())
    assert req.job_title == "Professional"
    assert req.company == "Industry"
    assert req.skills == "General Professional Skills"
    assert req.years_of_experience == 0


def test_request_uses_first_experience_and_skills(make_resume, engineer_experience):
    second = dict(engineer_experience, id="exp-2", jobTitle="Intern", company="Beta")
    resume = make_resume(
        experience=[engineer_experience, second],
        skills=[{"id": "a", "name": "Python"}, {"id": "b", "name": "SQL"}],
    )
    req = build_summary_request(resume)
    assert (req.job_title, req.company) == ("Engineer", "Acme")
    assert req.skills == "Python, SQL"
    assert req.years_of_experience == 4


def test_prompt_carries_request_details():
    prompt = _build_summary_prompt(build_summary_request(Resume()))
    assert "Most Recent Role: Professional at Industry" in prompt
    assert "Key Skills: General Professional Skills" in prompt
    assert "Years of Experience: 0 (estimated)" in prompt
    assert "50-80 words" in prompt


def test_generate_returns_stripped_text(monkeypatch):
    monkeypatch.setenv("GEMINI_MODEL", "test-model")
    models = FakeModels(text="  Seasoned engineer with a record of delivery.\n")
    text = asyncio.run(generate_resume_summary(Resume(), client=fake_client(models)))
    assert text == "Seasoned engineer with a record of delivery."
    assert models.calls[0]["model"] == "test-model"
    assert "Professional at Industry" in models.calls[0]["contents"]


def test_output_cap_leaves_room_for_thinking_tokens():
    models = FakeModels(text="Summary")
    asyncio.run(generate_resume_summary(Resume(), client=fake_client(models)))
    assert models.calls[0]["config"].max_output_tokens == 4096


def test_provider_error_becomes_generation_error():
    models = FakeModels(exc=ConnectionError("boom"))
    with pytest.raises(SummaryGenerationError):
        asyncio.run(generate_resume_summary(Resume(), client=fake_client(models)))


def test_empty_response_becomes_generation_error():
    models = FakeModels(text="")
    with pytest.raises(SummaryGenerationError):
        asyncio.run(generate_resume_summary(Resume(), client=fake_client(models)))


def test_missing_api_key_becomes_generation_error(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(SummaryGenerationError):
        asyncio.run(generate_resume_summary(Resume()))


def test_second_call_while_in_flight_is_rejected():
    calls = []

    async def scenario():
        release = asyncio.Event()

        async def slow(resume):
            calls.append(resume)
            await release.wait()
            return "Summary"

        generator = SummaryGenerator(slow)
        first = asyncio.create_task(generator.generate(Resume()))
        await asyncio.sleep(0)
        assert generator.in_flight

        with pytest.raises(SummaryInProgressError):
            await generator.generate(Resume())

        release.set()
        assert await first == "Summary"
        assert not generator.in_flight
        assert await generator.generate(Resume()) == "Summary"

    asyncio.run(scenario())
    assert len(calls) == 2


def test_apply_writes_into_latest_snapshot():
    state = {"resume": Resume()}

    async def scenario():
        async def generate(resume):
            # An edit lands while the request is outstanding.
            state["resume"] = editing.update_personal_info(state["resume"], "fullName", "Ada")
            return "Generated summary"

        generator = SummaryGenerator(generate)
        await generator.apply(lambda: state["resume"], lambda r: state.update(resume=r))

    asyncio.run(scenario())
    assert state["resume"].personal_info.summary == "Generated summary"
    assert state["resume"].personal_info.full_name == "Ada"


def test_apply_failure_leaves_summary_unchanged():
    original = editing.set_summary(Resume(), "Existing summary")
    state = {"resume": original}

    async def scenario():
        async def failing(resume):
            raise SummaryGenerationError("nope")

        generator = SummaryGenerator(failing)
        with pytest.raises(SummaryGenerationError):
            await generator.apply(lambda: state["resume"], lambda r: state.update(resume=r))
        assert not generator.in_flight

    asyncio.run(scenario())
    assert state["resume"] is original
