import logging
import re
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.templating import Jinja2Templates

from . import config, diagrams, state
from .assistant import GenerationError, WritingAssistant, detect_chapter_type
from .compiler import CompilationClient
from .docx_export import create_thesis_document
from .latex import MAIN_TEX, REFERENCES_BIB, generate_latex_files
from .models import (
    AcademicLevel,
    BibliographyRequest,
    ChapterContentRequest,
    CompilationState,
    CompilationStatus,
    CustomDiagramRequest,
    DiagramBundle,
    DiagramGenerationRequest,
    EnhanceRequest,
    GeneratedText,
    GenerationRequest,
    GenerationResponse,
    GraphRequest,
    GraphResponse,
    ImproveRequest,
    OutlineRequest,
    RewriteRequest,
    RewriteResult,
    StructureRequest,
    ThesisRecord,
    ThesisStructure,
)

# Configure logging
logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Thesis Generation Service",
    description="Builds LaTeX thesis sources from form data, compiles them remotely and assists with writing.",
    version="0.1.0",
)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

TABS = ("basic", "chapters", "bibliography", "preview")
PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

compilation_client = CompilationClient()
writing_assistant = WritingAssistant()


def get_compiler() -> CompilationClient:
    return compilation_client


def get_assistant() -> WritingAssistant:
    return writing_assistant


def attachment(content, file_name: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


def safe_stem(title: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", title) or "thesis"


def pdf_response(record: ThesisRecord, compiled: CompilationStatus) -> Response:
    return attachment(compiled.pdf, f"{safe_stem(record.title)}_thesis.pdf", PDF_MEDIA_TYPE)


def source_download(record: ThesisRecord, file_name: str) -> Response:
    files = generate_latex_files(record)
    if file_name not in files:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown source file: {file_name}")
    return attachment(files[file_name], file_name, "text/plain")


def docx_download(record: ThesisRecord) -> Response:
    content = create_thesis_document(record)
    return attachment(content, f"{safe_stem(record.title)}_thesis.docx", DOCX_MEDIA_TYPE)


def render_form(
    request: Request,
    record: ThesisRecord,
    tab: str = "basic",
    compiled: Optional[CompilationStatus] = None,
    error: Optional[str] = None,
    notice: Optional[str] = None,
):
    tab = tab if tab in TABS else "basic"
    context = {
        "record": record,
        "tab": tab,
        "tabs": TABS,
        "max_chapters": config.MAX_CHAPTERS,
        "compiled": compiled,
        "error": error,
        "notice": notice,
        "levels": [level.value for level in AcademicLevel],
    }
    if tab == "preview":
        context["latex_code"] = compiled.latex_code if compiled and compiled.latex_code else generate_latex_files(record)[MAIN_TEX]
    return templates.TemplateResponse(request, "index.html", context)


def _parse_level(value: str) -> AcademicLevel:
    try:
        return AcademicLevel(value)
    except ValueError:
        return AcademicLevel.MASTER


def _parse_index(action: str) -> int:
    try:
        return int(action.rsplit(":", 1)[1])
    except (IndexError, ValueError):
        return -1


# --- Browser form ---


@app.get("/", response_class=HTMLResponse)
async def show_form(request: Request):
    return render_form(request, state.sample_record())


@app.post("/", response_class=HTMLResponse)
async def submit_form(
    request: Request,
    compiler: CompilationClient = Depends(get_compiler),
    assistant: WritingAssistant = Depends(get_assistant),
):
    """
    Every button on the page posts the whole form here; ``action`` names the
    button. The record round-trips through the form fields, so the server
    keeps no state between requests.
    """
    form = await request.form()
    record = state.record_from_form(form)
    action = form.get("action", "")
    tab = form.get("tab", "basic")
    prompt = form.get("assist_prompt", "").strip()
    logger.info(f"Form action: {action or 'none'}")

    if action.startswith("tab:"):
        return render_form(request, record, tab=action[len("tab:"):])

    if action == "add_chapter":
        return render_form(request, state.add_chapter(record), tab="chapters")

    if action.startswith("remove_chapter:"):
        return render_form(request, state.remove_chapter(record, _parse_index(action)), tab="chapters")

    if action.startswith("download:"):
        kind = action[len("download:"):]
        if kind == "docx":
            return docx_download(record)
        return source_download(record, MAIN_TEX if kind == "tex" else REFERENCES_BIB)

    if action == "compile":
        compiled = await compiler.compile(generate_latex_files(record))
        if compiled.state == CompilationState.SUCCESS:
            return pdf_response(record, compiled)
        return render_form(request, record, tab="preview", compiled=compiled)

    try:
        if action.startswith("assist:chapter:"):
            index = _parse_index(action)
            if not 0 <= index < len(record.chapters):
                return render_form(request, record, tab=tab)
            if not prompt:
                return render_form(request, record, tab=tab, error="Describe what you want in this chapter first.")
            content = await assistant.generate_chapter_content(prompt, record.title, detect_chapter_type(prompt))
            record = state.apply_generated_content(record, content, index)
            return render_form(request, record, tab="chapters", notice="Chapter content generated.")

        if action.startswith("assist:improve:"):
            index = _parse_index(action)
            if not 0 <= index < len(record.chapters):
                return render_form(request, record, tab=tab)
            content = await assistant.improve_text(record.chapters[index].content)
            record = state.apply_generated_content(record, content, index)
            return render_form(request, record, tab="chapters", notice="Chapter text improved.")

        if action == "assist:bibliography":
            if not prompt:
                return render_form(request, record, tab=tab, error="Enter a research topic first.")
            content = await assistant.generate_bibliography(prompt, count=5)
            record = state.apply_generated_content(record, content)
            return render_form(request, record, tab="bibliography", notice="References generated.")

        if action == "rewrite":
            level = _parse_level(form.get("academic_level", ""))
            result = await assistant.rewrite_thesis_for_topic(
                record.title, form.get("new_topic", ""), form.get("target_field", ""), level
            )
            record = state.apply_rewrite(record, result)
            return render_form(request, record, tab="chapters", notice=f"Thesis rewritten with {len(result.chapters)} chapters.")
    except GenerationError as e:
        logger.error(f"Assistant action {action} failed: {e}", exc_info=True)
        return render_form(request, record, tab=tab, error=str(e))

    return render_form(request, record, tab=tab)


@app.get("/diagrams", response_class=HTMLResponse)
async def show_diagrams(
    request: Request,
    template: Optional[str] = None,
    context: str = "",
    custom: str = "",
):
    bundle = None
    if custom.strip():
        bundle = diagrams.render_custom(custom.strip())
    elif template:
        bundle = diagrams.render_template(template, diagrams.context_label(context or None))
    return templates.TemplateResponse(
        request,
        "diagrams.html",
        {
            "templates": diagrams.DIAGRAM_TEMPLATES,
            "categories": diagrams.CATEGORIES,
            "bundle": bundle,
            "context": context,
            "custom": custom,
        },
    )


@app.get("/diagrams/{template_id}/{dialect}")
async def download_diagram(template_id: str, dialect: str, context: str = ""):
    bundle = diagrams.render_template(template_id, diagrams.context_label(context or None))
    try:
        file_name, content, media_type = diagrams.export_source(bundle, dialect)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return attachment(content, file_name, media_type)


# --- JSON API: LaTeX sources and compilation ---


@app.post("/api/latex")
async def latex_sources(record: ThesisRecord):
    return generate_latex_files(record)


@app.post("/api/latex/{file_name}")
async def latex_source_file(file_name: str, record: ThesisRecord):
    return source_download(record, file_name)


@app.post("/api/compile")
async def compile_thesis(record: ThesisRecord, compiler: CompilationClient = Depends(get_compiler)):
    """Compilation status as JSON; on success the PDF is inlined as ``pdf_base64``."""
    logger.info(f"Received compilation request for '{record.title}'")
    compiled = await compiler.compile(generate_latex_files(record))
    return JSONResponse(content=compiled.model_dump(mode="json"))


@app.post("/api/compile/pdf")
async def compile_thesis_pdf(record: ThesisRecord, compiler: CompilationClient = Depends(get_compiler)):
    compiled = await compiler.compile(generate_latex_files(record))
    if compiled.state != CompilationState.SUCCESS:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=compiled.model_dump(mode="json"))
    return pdf_response(record, compiled)


@app.post("/api/docx")
async def export_docx(record: ThesisRecord):
    try:
        return docx_download(record)
    except Exception as e:
        logger.error(f"Failed to export Word document for '{record.title}': {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Document generation failed: {str(e)}")


# --- JSON API: writing assistant ---


async def _assist(call):
    try:
        return await call
    except GenerationError as e:
        logger.error(f"Generation failed: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@app.post("/api/generate", response_model=GenerationResponse)
async def generate(request_data: GenerationRequest, assistant: WritingAssistant = Depends(get_assistant)):
    return await _assist(assistant.generate(request_data))


@app.post("/api/generate/chapter", response_model=GeneratedText)
async def generate_chapter(request_data: ChapterContentRequest, assistant: WritingAssistant = Depends(get_assistant)):
    chapter_type = request_data.chapter_type or detect_chapter_type(request_data.title)
    content = await _assist(
        assistant.generate_chapter_content(
            request_data.title, request_data.thesis_title, chapter_type, request_data.academic_level
        )
    )
    return GeneratedText(content=content)


@app.post("/api/generate/improve", response_model=GeneratedText)
async def improve(request_data: ImproveRequest, assistant: WritingAssistant = Depends(get_assistant)):
    return GeneratedText(content=await _assist(assistant.improve_text(request_data.text, request_data.focus)))


@app.post("/api/generate/bibliography", response_model=GeneratedText)
async def bibliography(request_data: BibliographyRequest, assistant: WritingAssistant = Depends(get_assistant)):
    content = await _assist(assistant.generate_bibliography(request_data.topic, request_data.count, request_data.style))
    return GeneratedText(content=content)


@app.post("/api/generate/structure", response_model=ThesisStructure)
async def structure(request_data: StructureRequest, assistant: WritingAssistant = Depends(get_assistant)):
    return await _assist(
        assistant.generate_thesis_structure(request_data.title, request_data.field, request_data.academic_level)
    )


@app.post("/api/generate/outline", response_model=GeneratedText)
async def outline(request_data: OutlineRequest, assistant: WritingAssistant = Depends(get_assistant)):
    content = await _assist(
        assistant.generate_research_outline(
            request_data.topic, request_data.research_questions, request_data.academic_level
        )
    )
    return GeneratedText(content=content)


@app.post("/api/generate/enhance", response_model=GeneratedText)
async def enhance(request_data: EnhanceRequest, assistant: WritingAssistant = Depends(get_assistant)):
    content = await _assist(
        assistant.enhance_content_to_level(request_data.content, request_data.academic_level, request_data.focus)
    )
    return GeneratedText(content=content)


@app.post("/api/generate/diagram", response_model=GeneratedText)
async def diagram(request_data: DiagramGenerationRequest, assistant: WritingAssistant = Depends(get_assistant)):
    return GeneratedText(content=await _assist(assistant.generate_diagram(request_data.spec, request_data.context)))


@app.post("/api/generate/rewrite", response_model=RewriteResult)
async def rewrite(request_data: RewriteRequest, assistant: WritingAssistant = Depends(get_assistant)):
    return await _assist(
        assistant.rewrite_thesis_for_topic(
            request_data.current_title,
            request_data.new_topic,
            request_data.target_field,
            request_data.academic_level,
        )
    )


# --- JSON API: diagram library ---


@app.get("/api/diagrams")
async def diagram_templates(category: Optional[str] = None):
    return diagrams.list_templates(category)


@app.get("/api/diagrams/{template_id}", response_model=DiagramBundle)
async def diagram_template(
    template_id: str,
    thesis_title: Optional[str] = Query(None),
    chapter_title: Optional[str] = Query(None),
):
    return diagrams.render_template(template_id, diagrams.context_label(thesis_title, chapter_title))


@app.post("/api/diagrams/custom", response_model=DiagramBundle)
async def custom_diagram(request_data: CustomDiagramRequest):
    return diagrams.render_custom(request_data.prompt)


@app.post("/api/graphs", response_model=GraphResponse)
async def graph(request_data: GraphRequest):
    return diagrams.render_graph(request_data.prompt, request_data.type, request_data.format, request_data.style)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT, log_level=config.LOG_LEVEL.lower())
