"""
Writing assistant backed by the OpenRouter chat-completions API.

Every call is a single request: one system message picked by task type and
one user message carrying the prompt. Failures are not retried; callers get a
GenerationError with a generic, user-presentable message.
"""
import logging
import re
from typing import List, Optional

import httpx

from . import config, prompts
from .models import (
    AcademicLevel,
    Chapter,
    ChapterOutline,
    Complexity,
    DiagramSpec,
    GenerationRequest,
    GenerationResponse,
    RewriteResult,
    TaskType,
    ThesisStructure,
)

logger = logging.getLogger(__name__)

FALLBACK_CONTENT = "Unable to generate content. Please try again."
GENERIC_ERROR = "Failed to generate AI content. Please check your connection and try again."
DEFAULT_REWRITE_TITLE = "Generated Thesis Title"

_CHAPTER_MARKER = re.compile(r"^CHAPTER \d+:\s*")


class GenerationError(Exception):
    def __init__(self, message: str = GENERIC_ERROR):
        super().__init__(message)


def build_user_message(request: GenerationRequest) -> str:
    if not request.context:
        return request.prompt
    complexity = (request.complexity or Complexity.INTERMEDIATE).value
    return f"Context: {request.context}\n\nComplexity Level: {complexity}\n\nRequest: {request.prompt}"


def build_payload(request: GenerationRequest) -> dict:
    model = request.model or prompts.MODEL_FOR_TASK.get(request.type, prompts.DEEPSEEK_R1)
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": prompts.SYSTEM_PROMPTS[request.type]},
            {"role": "user", "content": build_user_message(request)},
        ],
        "temperature": 0.3 if request.type in prompts.LOW_TEMPERATURE_TASKS else 0.7,
        "max_tokens": 4000 if request.type in prompts.LONG_FORM_TASKS else 2000,
    }


def detect_chapter_type(prompt: str) -> str:
    lowered = prompt.lower()
    for keyword, chapter_type in prompts.CHAPTER_KEYWORDS:
        if keyword in lowered:
            return chapter_type
    return "default"


def parse_thesis_rewrite(text: str) -> RewriteResult:
    """
    Best-effort parse of a rewrite response.

    Expects a ``TITLE:`` line followed by ``CHAPTER n:`` markers, each followed
    by body lines. Body lines before the first marker and blank lines are
    dropped. Without markers the chapter list is empty.
    """
    title = ""
    chapters: List[Chapter] = []
    current: Optional[Chapter] = None

    for line in text.split("\n"):
        if line.startswith("TITLE:"):
            title = line[len("TITLE:"):].strip()
        elif _CHAPTER_MARKER.match(line):
            if current is not None:
                chapters.append(current)
            current = Chapter(title=_CHAPTER_MARKER.sub("", line, count=1).strip(), content="")
        elif current is not None and line.strip():
            current.content += line + "\n"

    if current is not None:
        chapters.append(current)

    return RewriteResult(title=title or DEFAULT_REWRITE_TITLE, chapters=chapters)


def default_structure(title: str, level: AcademicLevel) -> ThesisStructure:
    phd = level == AcademicLevel.PHD
    total_pages = {AcademicLevel.PHD: 200, AcademicLevel.MASTER: 100, AcademicLevel.BACHELOR: 60}[level]
    return ThesisStructure(
        title=title,
        academic_level=level,
        total_pages=total_pages,
        chapters=[
            ChapterOutline(
                title="Introduction",
                sections=["Background", "Problem Statement", "Objectives", "Thesis Outline"],
                subsections={
                    "Background": ["Context", "Motivation"],
                    "Problem Statement": ["Research Problem", "Research Questions"],
                    "Objectives": ["Primary Objectives", "Secondary Objectives"],
                },
                estimated_pages=20 if phd else 12,
                diagrams=[
                    DiagramSpec(type="conceptual", title="Research Framework", description="Overview of research approach")
                ],
            ),
            ChapterOutline(
                title="Literature Review",
                sections=["Theoretical Foundation", "Related Work", "Research Gaps"],
                subsections={
                    "Theoretical Foundation": ["Core Theories", "Frameworks"],
                    "Related Work": ["Recent Studies", "Comparative Analysis"],
                    "Research Gaps": ["Identified Gaps", "Contribution Positioning"],
                },
                estimated_pages=40 if phd else 25,
                diagrams=[
                    DiagramSpec(type="timeline", title="Literature Evolution", description="Timeline of key research developments")
                ],
            ),
        ],
    )


class WritingAssistant:
    """Client for the OpenRouter chat-completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = config.OPENROUTER_BASE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = config.OPENROUTER_API_KEY if api_key is None else api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """
        Sends one chat-completions request.

        Returns the first choice's message text, or FALLBACK_CONTENT when the
        response has no text. Raises GenerationError on any transport or
        protocol failure.
        """
        if not self.api_key:
            logger.error("OPENROUTER_API_KEY is not configured")
            raise GenerationError()

        payload = build_payload(request)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "http://localhost",
            "X-Title": "Thesis Generator",
        }

        logger.info(f"Requesting {request.type.value} generation from {payload['model']}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/chat/completions", headers=headers, json=payload)
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"AI service error: {e}", exc_info=True)
            raise GenerationError() from e

        return GenerationResponse(content=self._first_message(result), model=payload["model"])

    @staticmethod
    def _first_message(result) -> str:
        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str) or not content:
            logger.warning("Response carried no message text; using fallback content")
            return FALLBACK_CONTENT
        return content

    async def _text(self, prompt: str, task: TaskType, complexity: Optional[Complexity] = None) -> str:
        response = await self.generate(GenerationRequest(prompt=prompt, type=task, complexity=complexity))
        return response.content

    # --- Task helpers ---

    async def generate_chapter_content(
        self,
        title: str,
        thesis_title: str,
        chapter_type: str,
        level: AcademicLevel = AcademicLevel.MASTER,
    ) -> str:
        template = prompts.CHAPTER_PROMPTS.get(chapter_type.lower(), prompts.CHAPTER_PROMPTS["default"])
        prompt = template.format(level=level.value, thesis_title=thesis_title, title=title)
        return await self._text(prompt, TaskType.CONTENT, level.complexity)

    async def improve_text(self, text: str, focus: Optional[str] = None) -> str:
        focus_sentence = f" Focus specifically on improving {focus.replace('-', ' ')}." if focus else ""
        return await self._text(prompts.IMPROVE_PROMPT.format(text=text, focus=focus_sentence), TaskType.IMPROVE)

    async def generate_bibliography(self, topic: str, count: int = 10, style: str = "mixed") -> str:
        style_sentence = prompts.BIBLIOGRAPHY_STYLES.get(style, prompts.BIBLIOGRAPHY_STYLES["mixed"])
        prompt = prompts.BIBLIOGRAPHY_PROMPT.format(count=count, topic=topic, style=style_sentence)
        return await self._text(prompt, TaskType.BIBLIOGRAPHY)

    async def generate_thesis_structure(
        self, title: str, field: str, level: AcademicLevel = AcademicLevel.MASTER
    ) -> ThesisStructure:
        prompt = prompts.STRUCTURE_PROMPT.format(title=title, field=field, level=level.value)
        outline = await self._text(prompt, TaskType.STRUCTURE, level.complexity)
        structure = default_structure(title, level)
        structure.outline_text = outline
        return structure

    async def generate_research_outline(self, topic: str, research_questions: List[str], level: AcademicLevel) -> str:
        questions = "\n".join(f"{i}. {q}" for i, q in enumerate(research_questions, start=1))
        prompt = prompts.OUTLINE_PROMPT.format(topic=topic, level=level.value, questions=questions)
        return await self._text(prompt, TaskType.OUTLINE, level.complexity)

    async def enhance_content_to_level(self, content: str, level: AcademicLevel, focus: str = "all") -> str:
        prompt = prompts.ENHANCE_PROMPT.format(content=content, level=level.value, focus=focus)
        return await self._text(prompt, TaskType.ENHANCE, level.complexity)

    async def generate_diagram(self, spec: DiagramSpec, context: Optional[str] = None) -> str:
        prompt = prompts.DIAGRAM_PROMPT.format(
            type=spec.type,
            title=spec.title,
            description=spec.description,
            context=f"Context: {context}" if context else "",
        )
        return await self._text(prompt, TaskType.DIAGRAM)

    async def rewrite_thesis_for_topic(
        self,
        current_title: str,
        new_topic: str,
        target_field: str,
        level: AcademicLevel = AcademicLevel.MASTER,
    ) -> RewriteResult:
        prompt = prompts.REWRITE_PROMPT.format(
            current_title=current_title, new_topic=new_topic, target_field=target_field, level=level.value
        )
        text = await self._text(prompt, TaskType.REWRITE, level.complexity)
        result = parse_thesis_rewrite(text)
        logger.info(f"Rewrite produced {len(result.chapters)} chapters")
        return result
