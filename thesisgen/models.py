import base64
from enum import Enum
from typing import List, Literal, Optional, Dict

from pydantic import BaseModel, Field, computed_field


class Chapter(BaseModel):
    title: str = Field("", description="Title of the chapter")
    content: str = Field("", description="Full content of the chapter")


class ThesisRecord(BaseModel):
    title: str = ""
    author: str = ""
    institution: str = ""
    degree_program: str = ""
    supervisor: str = ""
    year: str = ""
    chapters: List[Chapter] = Field(default_factory=lambda: [Chapter()])
    bibliography: str = Field("", description="Raw BibTeX source for references.bib")


class CompilationState(str, Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILED = "failed"


class CompileAttempt(BaseModel):
    service: str
    ok: bool
    error: Optional[str] = None


class CompilationStatus(BaseModel):
    state: CompilationState = CompilationState.IDLE
    message: str = ""
    service: Optional[str] = None
    pdf: Optional[bytes] = Field(default=None, exclude=True)
    latex_code: Optional[str] = None
    attempts: List[CompileAttempt] = Field(default_factory=list)

    @computed_field
    @property
    def pdf_base64(self) -> Optional[str]:
        if self.pdf is None:
            return None
        return base64.b64encode(self.pdf).decode("ascii")


class TaskType(str, Enum):
    CONTENT = "content"
    IMPROVE = "improve"
    BIBLIOGRAPHY = "bibliography"
    STRUCTURE = "structure"
    DIAGRAM = "diagram"
    OUTLINE = "outline"
    REWRITE = "rewrite"
    ENHANCE = "enhance"


class Complexity(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class AcademicLevel(str, Enum):
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"

    @property
    def complexity(self) -> Complexity:
        return {
            AcademicLevel.BACHELOR: Complexity.BASIC,
            AcademicLevel.MASTER: Complexity.INTERMEDIATE,
            AcademicLevel.PHD: Complexity.ADVANCED,
        }[self]


class GenerationRequest(BaseModel):
    prompt: str
    type: TaskType = TaskType.CONTENT
    context: Optional[str] = None
    model: Optional[str] = Field(None, description="Overrides the per-task default model")
    complexity: Optional[Complexity] = None


class GenerationResponse(BaseModel):
    content: str
    model: str


class RewriteRequest(BaseModel):
    current_title: str
    new_topic: str
    target_field: str
    academic_level: AcademicLevel = AcademicLevel.MASTER


class RewriteResult(BaseModel):
    title: str
    chapters: List[Chapter] = Field(default_factory=list)


class DiagramSpec(BaseModel):
    type: str = Field(..., description="flowchart, architecture, timeline, conceptual or methodology")
    title: str
    description: str = ""


class ChapterOutline(BaseModel):
    title: str
    sections: List[str] = Field(default_factory=list)
    subsections: Dict[str, List[str]] = Field(default_factory=dict)
    estimated_pages: int = 0
    diagrams: List[DiagramSpec] = Field(default_factory=list)


class ThesisStructure(BaseModel):
    title: str
    academic_level: AcademicLevel
    total_pages: int
    chapters: List[ChapterOutline] = Field(default_factory=list)
    outline_text: str = ""


class DiagramBundle(BaseModel):
    template_id: str
    title: str
    description: str
    prompt: str
    tikz: str
    mermaid: str
    chartjs: str


class GraphResponse(BaseModel):
    code: str
    title: str
    description: str
    format: str
    instructions: List[str] = Field(default_factory=list)


class GeneratedText(BaseModel):
    content: str


class ChapterContentRequest(BaseModel):
    title: str = Field(..., description="Chapter title or a short description of the chapter")
    thesis_title: str = ""
    chapter_type: Optional[str] = Field(None, description="Detected from the title when omitted")
    academic_level: AcademicLevel = AcademicLevel.MASTER


class ImproveRequest(BaseModel):
    text: str
    focus: Optional[Literal["clarity", "flow", "grammar", "academic-tone"]] = None


class BibliographyRequest(BaseModel):
    topic: str
    count: int = Field(10, ge=1, le=50)
    style: Literal["recent", "foundational", "mixed"] = "mixed"


class StructureRequest(BaseModel):
    title: str
    field: str
    academic_level: AcademicLevel = AcademicLevel.MASTER


class OutlineRequest(BaseModel):
    topic: str
    research_questions: List[str] = Field(default_factory=list)
    academic_level: AcademicLevel = AcademicLevel.MASTER


class EnhanceRequest(BaseModel):
    content: str
    academic_level: AcademicLevel = AcademicLevel.MASTER
    focus: Literal["depth", "complexity", "rigor", "all"] = "all"


class DiagramGenerationRequest(BaseModel):
    spec: DiagramSpec
    context: Optional[str] = None


class CustomDiagramRequest(BaseModel):
    prompt: str = Field(..., min_length=1)


class GraphRequest(BaseModel):
    prompt: str
    type: Literal["flowchart", "bar_chart", "line_chart", "pie_chart", "architecture", "timeline", "conceptual"]
    format: Literal["tikz", "mermaid", "chartjs"] = "tikz"
    style: Literal["academic", "modern", "minimal", "colorful"] = "academic"
