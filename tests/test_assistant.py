import httpx
import pytest

from thesisgen import config, prompts
from thesisgen.assistant import (
    DEFAULT_REWRITE_TITLE,
    FALLBACK_CONTENT,
    GENERIC_ERROR,
    GenerationError,
    build_payload,
    build_user_message,
    default_structure,
    detect_chapter_type,
    parse_thesis_rewrite,
)
from thesisgen.models import AcademicLevel, Chapter, Complexity, DiagramSpec, GenerationRequest, TaskType

from conftest import chat_response

REWRITE_TEXT = """Sure, here is the rewrite.
TITLE: Quantum Error Correction for Near-Term Devices

CHAPTER 1: Introduction
Quantum computers are noisy.

They need error correction.
CHAPTER 2:   Background
Surface codes dominate.
"""


class TestParseThesisRewrite:
    def test_title_and_chapters(self):
        result = parse_thesis_rewrite(REWRITE_TEXT)
        assert result.title == "Quantum Error Correction for Near-Term Devices"
        assert result.chapters == [
            Chapter(title="Introduction", content="Quantum computers are noisy.\nThey need error correction.\n"),
            Chapter(title="Background", content="Surface codes dominate.\n"),
        ]

    def test_lines_before_first_marker_are_dropped(self):
        result = parse_thesis_rewrite("preamble\nCHAPTER 1: Only\nbody")
        assert result.chapters == [Chapter(title="Only", content="body\n")]

    def test_missing_title_uses_default(self):
        assert parse_thesis_rewrite("CHAPTER 1: A\ntext").title == DEFAULT_REWRITE_TITLE

    def test_no_markers_gives_no_chapters(self):
        result = parse_thesis_rewrite("TITLE: Lonely\nJust prose without structure.")
        assert result.title == "Lonely"
        assert result.chapters == []

    def test_marker_must_start_the_line(self):
        assert parse_thesis_rewrite("  CHAPTER 1: Indented\nbody").chapters == []

    def test_empty_text(self):
        result = parse_thesis_rewrite("")
        assert result.title == DEFAULT_REWRITE_TITLE
        assert result.chapters == []


class TestPayload:
    @pytest.mark.parametrize("task", list(TaskType))
    def test_model_and_system_prompt_follow_task(self, task):
        payload = build_payload(GenerationRequest(prompt="p", type=task))
        assert payload["model"] == prompts.MODEL_FOR_TASK[task]
        assert payload["messages"][0] == {"role": "system", "content": prompts.SYSTEM_PROMPTS[task]}
        assert payload["messages"][1] == {"role": "user", "content": "p"}

    def test_bibliography_runs_cold(self):
        assert build_payload(GenerationRequest(prompt="p", type=TaskType.BIBLIOGRAPHY))["temperature"] == 0.3
        assert build_payload(GenerationRequest(prompt="p", type=TaskType.IMPROVE))["temperature"] == 0.7

    @pytest.mark.parametrize(
        "task, max_tokens",
        [
            (TaskType.STRUCTURE, 4000),
            (TaskType.CONTENT, 4000),
            (TaskType.REWRITE, 4000),
            (TaskType.IMPROVE, 2000),
            (TaskType.DIAGRAM, 2000),
        ],
    )
    def test_token_limits(self, task, max_tokens):
        assert build_payload(GenerationRequest(prompt="p", type=task))["max_tokens"] == max_tokens

    def test_explicit_model_wins(self):
        payload = build_payload(GenerationRequest(prompt="p", type=TaskType.CONTENT, model="some/model"))
        assert payload["model"] == "some/model"


class TestUserMessage:
    def test_prompt_alone_without_context(self):
        assert build_user_message(GenerationRequest(prompt="Write it")) == "Write it"

    def test_context_defaults_to_intermediate(self):
        message = build_user_message(GenerationRequest(prompt="Write it", context="ML thesis"))
        assert message == "Context: ML thesis\n\nComplexity Level: intermediate\n\nRequest: Write it"

    def test_explicit_complexity(self):
        request = GenerationRequest(prompt="x", context="c", complexity=Complexity.ADVANCED)
        assert "Complexity Level: advanced" in build_user_message(request)


@pytest.mark.parametrize(
    "prompt, expected",
    [
        ("Write the Introduction", "introduction"),
        ("A literature survey", "literature"),
        ("Research Methodology", "methodology"),
        ("Results and Analysis", "results"),
        ("Conclusion", "conclusion"),
        ("Case Study", "default"),
    ],
)
def test_detect_chapter_type(prompt, expected):
    assert detect_chapter_type(prompt) == expected


class TestDefaultStructure:
    @pytest.mark.parametrize(
        "level, pages", [(AcademicLevel.PHD, 200), (AcademicLevel.MASTER, 100), (AcademicLevel.BACHELOR, 60)]
    )
    def test_total_pages_by_level(self, level, pages):
        assert default_structure("T", level).total_pages == pages

    def test_chapter_page_estimates(self):
        phd = default_structure("T", AcademicLevel.PHD)
        master = default_structure("T", AcademicLevel.MASTER)
        assert [c.estimated_pages for c in phd.chapters] == [20, 40]
        assert [c.estimated_pages for c in master.chapters] == [12, 25]
        assert [c.title for c in master.chapters] == ["Introduction", "Literature Review"]


class TestGenerate:
    @pytest.mark.asyncio
    async def test_success(self, make_assistant):
        assistant, handler = make_assistant(chat_response("Generated text"))

        response = await assistant.generate(GenerationRequest(prompt="Write", type=TaskType.IMPROVE))

        assert response.content == "Generated text"
        assert response.model == prompts.MISTRAL_SMALL
        (request,) = handler.requests
        assert str(request.url) == f"{config.OPENROUTER_BASE_URL}/chat/completions"
        assert request.headers["authorization"] == "Bearer test-key"
        assert request.headers["x-title"] == "Thesis Generator"
        body = handler.json_bodies()[0]
        assert body["model"] == prompts.MISTRAL_SMALL
        assert body["max_tokens"] == 2000

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": ""}}]},
            {"error": "nope"},
        ],
    )
    async def test_missing_text_falls_back(self, make_assistant, payload):
        assistant, _ = make_assistant(httpx.Response(200, json=payload))

        response = await assistant.generate(GenerationRequest(prompt="x"))

        assert response.content == FALLBACK_CONTENT

    @pytest.mark.asyncio
    async def test_http_error_raises_generic_error(self, make_assistant):
        assistant, _ = make_assistant(httpx.Response(429, json={"error": "rate limited"}))

        with pytest.raises(GenerationError) as exc_info:
            await assistant.generate(GenerationRequest(prompt="x"))
        assert str(exc_info.value) == GENERIC_ERROR

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self, make_assistant):
        assistant, _ = make_assistant(httpx.Response(200, content=b"<html>not json</html>"))

        with pytest.raises(GenerationError):
            await assistant.generate(GenerationRequest(prompt="x"))

    @pytest.mark.asyncio
    async def test_network_error_raises(self, make_assistant):
        assistant, _ = make_assistant(httpx.ConnectTimeout("timed out"))

        with pytest.raises(GenerationError):
            await assistant.generate(GenerationRequest(prompt="x"))

    @pytest.mark.asyncio
    async def test_missing_api_key_never_calls_out(self, make_assistant):
        assistant, handler = make_assistant(chat_response("unused"), api_key="")

        with pytest.raises(GenerationError):
            await assistant.generate(GenerationRequest(prompt="x"))
        assert handler.requests == []


class TestTaskHelpers:
    @pytest.mark.asyncio
    async def test_chapter_content_uses_chapter_prompt(self, make_assistant):
        assistant, handler = make_assistant(chat_response("Chapter body"))

        content = await assistant.generate_chapter_content(
            "Introduction", "Solar Forecasting", "introduction", AcademicLevel.PHD
        )

        assert content == "Chapter body"
        body = handler.json_bodies()[0]
        user = body["messages"][1]["content"]
        assert 'phd-level thesis titled "Solar Forecasting"' in user
        assert body["model"] == prompts.DEEPSEEK_R1

    @pytest.mark.asyncio
    async def test_unknown_chapter_type_uses_default_prompt(self, make_assistant):
        assistant, handler = make_assistant(chat_response("ok"))

        await assistant.generate_chapter_content("Case Study", "T", "case-study")

        user = handler.json_bodies()[0]["messages"][1]["content"]
        assert user == prompts.CHAPTER_PROMPTS["default"].format(level="master", thesis_title="T", title="Case Study")

    @pytest.mark.asyncio
    async def test_bibliography_request(self, make_assistant):
        assistant, handler = make_assistant(chat_response("@article{a}"))

        bib = await assistant.generate_bibliography("wind power", count=5, style="recent")

        assert bib == "@article{a}"
        body = handler.json_bodies()[0]
        assert body["temperature"] == 0.3
        assert "Generate 5 realistic" in body["messages"][1]["content"]
        assert prompts.BIBLIOGRAPHY_STYLES["recent"] in body["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_improve_with_focus(self, make_assistant):
        assistant, handler = make_assistant(chat_response("better"))

        await assistant.improve_text("rough text", focus="academic-tone")

        user = handler.json_bodies()[0]["messages"][1]["content"]
        assert "rough text" in user
        assert "academic tone" in user

    @pytest.mark.asyncio
    async def test_structure_keeps_raw_outline(self, make_assistant):
        assistant, _ = make_assistant(chat_response("1. Introduction\n2. Review"))

        structure = await assistant.generate_thesis_structure("T", "Physics", AcademicLevel.BACHELOR)

        assert structure.total_pages == 60
        assert structure.outline_text == "1. Introduction\n2. Review"

    @pytest.mark.asyncio
    async def test_diagram_prompt_carries_diagram_details(self, make_assistant):
        assistant, handler = make_assistant(chat_response("\\begin{tikzpicture}\\end{tikzpicture}"))

        await assistant.generate_diagram(DiagramSpec(type="timeline", title="History"), context="ML")

        body = handler.json_bodies()[0]
        assert body["model"] == prompts.DEEPSEEK_R1_QWEN
        assert 'timeline diagram titled "History"' in body["messages"][1]["content"]
        assert "Context: ML" in body["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_outline_numbers_research_questions(self, make_assistant):
        assistant, handler = make_assistant(chat_response("1. Introduction"))

        outline = await assistant.generate_research_outline(
            "Grid Storage", ["How much?", "At what cost?"], AcademicLevel.PHD
        )

        assert outline == "1. Introduction"
        body = handler.json_bodies()[0]
        assert body["model"] == prompts.DEEPSEEK_R1
        assert body["messages"][0]["content"] == prompts.SYSTEM_PROMPTS[TaskType.OUTLINE]
        user = body["messages"][1]["content"]
        assert 'research outline for "Grid Storage" at phd level' in user
        assert "Research Questions:\n1. How much?\n2. At what cost?\n" in user

    @pytest.mark.asyncio
    async def test_enhance_names_level_and_focus(self, make_assistant):
        assistant, handler = make_assistant(chat_response("deeper"))

        content = await assistant.enhance_content_to_level("plain text", AcademicLevel.PHD, focus="rigor")

        assert content == "deeper"
        body = handler.json_bodies()[0]
        assert body["model"] == prompts.MISTRAL_SMALL
        assert body["messages"][0]["content"] == prompts.SYSTEM_PROMPTS[TaskType.ENHANCE]
        user = body["messages"][1]["content"]
        assert "to phd level with focus on rigor" in user
        assert '"plain text"' in user

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "level, expected",
        [
            (AcademicLevel.BACHELOR, Complexity.BASIC),
            (AcademicLevel.MASTER, Complexity.INTERMEDIATE),
            (AcademicLevel.PHD, Complexity.ADVANCED),
        ],
    )
    async def test_outline_and_enhance_pass_level_complexity(self, make_assistant, monkeypatch, level, expected):
        assistant, _ = make_assistant(chat_response("a"), chat_response("b"))
        seen = []
        generate = assistant.generate

        async def recording_generate(request):
            seen.append(request)
            return await generate(request)

        monkeypatch.setattr(assistant, "generate", recording_generate)

        await assistant.generate_research_outline("T", ["Q"], level)
        await assistant.enhance_content_to_level("c", level)

        assert [(r.type, r.complexity) for r in seen] == [(TaskType.OUTLINE, expected), (TaskType.ENHANCE, expected)]

    @pytest.mark.asyncio
    async def test_rewrite_end_to_end(self, make_assistant):
        assistant, handler = make_assistant(chat_response(REWRITE_TEXT))

        result = await assistant.rewrite_thesis_for_topic("Old", "quantum computing", "Physics", AcademicLevel.PHD)

        assert result.title == "Quantum Error Correction for Near-Term Devices"
        assert [c.title for c in result.chapters] == ["Introduction", "Background"]
        body = handler.json_bodies()[0]
        assert body["max_tokens"] == 4000
        assert 'Transform the thesis "Old" to focus on "quantum computing"' in body["messages"][1]["content"]
