"""Fixed prompt and model tables for the writing assistant."""
from .models import TaskType

DEEPSEEK_R1 = "deepseek/deepseek-r1-0528:free"
DEEPSEEK_R1_QWEN = "deepseek/deepseek-r1-0528-qwen3-8b:free"
MISTRAL_SMALL = "mistralai/mistral-small-3.2-24b-instruct:free"

MODEL_FOR_TASK = {
    TaskType.CONTENT: DEEPSEEK_R1,
    TaskType.IMPROVE: MISTRAL_SMALL,
    TaskType.BIBLIOGRAPHY: MISTRAL_SMALL,
    TaskType.STRUCTURE: DEEPSEEK_R1,
    TaskType.DIAGRAM: DEEPSEEK_R1_QWEN,
    TaskType.OUTLINE: DEEPSEEK_R1,
    TaskType.REWRITE: DEEPSEEK_R1,
    TaskType.ENHANCE: MISTRAL_SMALL,
}

SYSTEM_PROMPTS = {
    TaskType.CONTENT: (
        "You are an expert academic writing assistant. Generate comprehensive, well-structured scholarly "
        "content with proper citations, examples, and academic rigor. Use formal academic language "
        "appropriate for peer review."
    ),
    TaskType.IMPROVE: (
        "You are a senior academic editor with expertise in scholarly writing. Enhance clarity, coherence, "
        "academic tone, and logical flow while preserving original meaning. Focus on precision and "
        "scholarly excellence."
    ),
    TaskType.BIBLIOGRAPHY: (
        "You are a bibliography specialist. Create properly formatted BibTeX entries following academic "
        "standards. Include DOI, proper capitalization, and complete bibliographic information."
    ),
    TaskType.STRUCTURE: (
        "You are a thesis structure expert. Create detailed, logical thesis outlines with proper academic "
        "hierarchy, estimated page counts, and comprehensive section breakdowns."
    ),
    TaskType.DIAGRAM: (
        "You are a technical diagram specialist. Generate detailed TikZ/LaTeX code for academic diagrams "
        "including flowcharts, architectural diagrams, timelines, and conceptual frameworks."
    ),
    TaskType.OUTLINE: (
        "You are an academic planning expert. Create detailed chapter outlines with learning objectives, "
        "key concepts, and logical progression suitable for thesis-level work."
    ),
    TaskType.REWRITE: (
        "You are an expert thesis transformation specialist. Completely rewrite and restructure academic "
        "content while maintaining scholarly rigor. Transform topics, methodologies, and focus areas while "
        "preserving academic quality."
    ),
    TaskType.ENHANCE: (
        "You are a content enhancement specialist. Dramatically improve academic content by adding depth, "
        "sophistication, and scholarly rigor. Enhance complexity and academic level while maintaining clarity."
    ),
}

LOW_TEMPERATURE_TASKS = {TaskType.BIBLIOGRAPHY}
LONG_FORM_TASKS = {TaskType.STRUCTURE, TaskType.CONTENT, TaskType.REWRITE}

# Chapter prompts take {level}, {thesis_title} and {title}.
CHAPTER_PROMPTS = {
    "introduction": (
        'Write a comprehensive introduction chapter for a {level}-level thesis titled "{thesis_title}".\n'
        "Include: background with context and significance, clear problem statement with research questions,\n"
        "specific objectives and hypotheses, scope and limitations, thesis structure overview, and contribution summary.\n"
        "Use formal academic language with proper citations and examples. Make it detailed and scholarly."
    ),
    "literature": (
        'Write an extensive literature review for "{thesis_title}" at {level} level.\n'
        "Include: systematic review of relevant literature, theoretical frameworks, methodological approaches in the field,\n"
        "critical analysis of existing work, identification of research gaps, and positioning of current research.\n"
        "Organize thematically with proper academic citations. Ensure comprehensive coverage."
    ),
    "methodology": (
        'Write a detailed methodology chapter for "{thesis_title}" at {level} level.\n'
        "Include: research paradigm and philosophy, research design and approach, data collection methods,\n"
        "sampling strategy, data analysis techniques, validity and reliability measures, ethical considerations,\n"
        "and limitations. Justify all methodological choices with academic rigor."
    ),
    "results": (
        'Write a comprehensive results and analysis chapter for "{thesis_title}" at {level} level.\n'
        "Include: presentation of findings, statistical analysis, interpretation of results, comparison with existing research,\n"
        "discussion of implications, and references to figures and tables. Maintain objectivity and academic rigor."
    ),
    "conclusion": (
        'Write a thorough conclusion chapter for "{thesis_title}" at {level} level.\n'
        "Include: summary of key findings, theoretical contributions, practical implications, limitations and challenges,\n"
        "recommendations for practice, suggestions for future research, and final reflections. Synthesize the entire work."
    ),
    "default": (
        'Write comprehensive academic content for a chapter titled "{title}" in a {level}-level thesis about "{thesis_title}".\n'
        "Ensure scholarly depth, proper structure, academic language, and appropriate complexity for the academic level.\n"
        "Include relevant examples, theoretical frameworks, and critical analysis."
    ),
}

# Checked in order; the first keyword found in the prompt wins.
CHAPTER_KEYWORDS = (
    ("introduction", "introduction"),
    ("literature", "literature"),
    ("methodology", "methodology"),
    ("result", "results"),
    ("conclusion", "conclusion"),
)

BIBLIOGRAPHY_STYLES = {
    "recent": "Focus on publications from the last 3 years (2022-2024)",
    "foundational": "Include seminal works and foundational papers",
    "mixed": "Include a mix of recent work (2022-2024) and foundational papers",
}

BIBLIOGRAPHY_PROMPT = """Generate {count} realistic, high-quality BibTeX entries for academic references related to "{topic}".
{style}. Include:
- Mix of journal articles, conference papers, books, and technical reports
- Proper DOI and URL fields where applicable
- Complete author names and affiliations
- Accurate publication details with realistic venues
- Relevant keywords and abstracts where appropriate
- Ensure all entries are properly formatted BibTeX
- Use realistic publication years and venues for the field"""

IMPROVE_PROMPT = """Improve this academic text for better scholarly quality:

"{text}"

{focus} Maintain academic rigor while enhancing readability and precision. Add depth and sophistication where appropriate."""

REWRITE_PROMPT = """Transform the thesis "{current_title}" to focus on "{new_topic}" in the field of "{target_field}".

Generate:
1. A new professional thesis title
2. 5-7 comprehensive chapters with titles and detailed content
3. Ensure academic rigor appropriate for {level} level
4. Include proper academic structure and scholarly language
5. Make each chapter substantial with theoretical frameworks, methodologies, and analysis

Format the response as:
TITLE: [New thesis title]

CHAPTER 1: [Chapter title]
[Detailed chapter content...]

CHAPTER 2: [Chapter title]
[Detailed chapter content...]

Continue for all chapters."""

ENHANCE_PROMPT = """Enhance this academic content to {level} level with focus on {focus}:

"{content}"

Requirements:
- Increase academic sophistication and depth
- Add theoretical frameworks and scholarly analysis
- Include more complex concepts and methodologies
- Enhance critical thinking and evaluation
- Improve academic language and terminology
- Add relevant examples and case studies
- Ensure proper academic structure and flow"""

STRUCTURE_PROMPT = """Create a comprehensive thesis structure for "{title}" in {field} at {level} level.
Include:
- Detailed chapter breakdown with sections and subsections
- Estimated page counts for each chapter
- Suggested diagrams and figures for each chapter
- Academic milestones and deliverables
- Timeline considerations

Format as a structured outline with clear hierarchy."""

OUTLINE_PROMPT = """Create a detailed research outline for "{topic}" at {level} level.
Research Questions:
{questions}

Include:
- Research methodology framework
- Literature review strategy
- Data collection approach
- Analysis methodology
- Timeline and milestones
- Expected deliverables
- Risk assessment and mitigation"""

DIAGRAM_PROMPT = """Generate TikZ/LaTeX code for a {type} diagram titled "{title}".
Description: {description}
{context}

Requirements:
- Use proper TikZ syntax with necessary packages
- Include clear labels and annotations
- Make it publication-ready for academic documents
- Ensure proper spacing and professional appearance
- Include positioning and styling commands"""
