"""
Canned diagram and chart sources.

Nothing here is generated: every snippet is a literal looked up by template
id (or by graph type / output format for the generic graph table). The
caller's context text only ends up in prompt strings, titles and node labels.
"""
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .latex import escape_latex, latex_template
from .models import DiagramBundle, GraphResponse

DIALECTS = ("tikz", "mermaid", "chartjs")
CATEGORIES = ("statistical", "flow", "architecture", "conceptual", "timeline")


@dataclass(frozen=True)
class DiagramTemplate:
    id: str
    title: str
    description: str
    category: str
    prompt: str


DIAGRAM_TEMPLATES = (
    DiagramTemplate(
        "performance_comparison",
        "Performance Comparison",
        "Bar chart comparing algorithm/method performance",
        "statistical",
        "Create a performance comparison bar chart showing accuracy, speed, and efficiency metrics for "
        "different algorithms or methods in {context}",
    ),
    DiagramTemplate(
        "research_methodology_flow",
        "Research Methodology Flow",
        "Flowchart showing research process steps",
        "flow",
        "Generate a comprehensive research methodology flowchart showing data collection, analysis, "
        "validation, and conclusion steps for {context}",
    ),
    DiagramTemplate(
        "system_architecture",
        "System Architecture",
        "Technical architecture diagram",
        "architecture",
        "Create a detailed system architecture diagram showing components, data flow, and interactions for {context}",
    ),
    DiagramTemplate(
        "conceptual_framework",
        "Conceptual Framework",
        "Theoretical framework visualization",
        "conceptual",
        "Design a conceptual framework diagram illustrating theoretical relationships, variables, and "
        "hypotheses for {context}",
    ),
    DiagramTemplate(
        "timeline_milestones",
        "Project Timeline",
        "Research timeline with milestones",
        "timeline",
        "Create a project timeline showing research phases, milestones, deliverables, and dependencies for {context}",
    ),
    DiagramTemplate(
        "data_distribution",
        "Data Distribution",
        "Statistical distribution charts",
        "statistical",
        "Generate statistical distribution charts (histogram, pie chart, box plot) showing data patterns "
        "and insights for {context}",
    ),
    DiagramTemplate(
        "trend_analysis",
        "Trend Analysis",
        "Line chart showing trends over time",
        "statistical",
        "Create a trend analysis line chart showing changes, patterns, and projections over time for {context}",
    ),
    DiagramTemplate(
        "process_workflow",
        "Process Workflow",
        "Detailed process workflow diagram",
        "flow",
        "Design a detailed workflow diagram showing process steps, decision points, and outcomes for {context}",
    ),
)
TEMPLATES_BY_ID = {template.id: template for template in DIAGRAM_TEMPLATES}

# --- Template snippets, keyed by template id ---

TIKZ_TEMPLATES = {
    "performance_comparison": r"""\begin{tikzpicture}
\begin{axis}[
    ybar,
    enlargelimits=0.15,
    legend style={at={(0.5,-0.15)},anchor=north,legend columns=-1},
    ylabel={Performance (\%)},
    symbolic x coords={Method A,Method B,Method C,Proposed},
    xtick=data,
    nodes near coords,
    nodes near coords align={vertical},
    width=12cm,
    height=8cm
]
\addplot coordinates {(Method A,75) (Method B,82) (Method C,78) (Proposed,94)};
\addplot coordinates {(Method A,68) (Method B,79) (Method C,85) (Proposed,91)};
\addplot coordinates {(Method A,72) (Method B,76) (Method C,80) (Proposed,89)};
\legend{Accuracy,Precision,Recall}
\end{axis}
\end{tikzpicture}""",
    "research_methodology_flow": r"""\begin{tikzpicture}[node distance=2cm, auto]
\tikzstyle{process} = [rectangle, minimum width=3cm, minimum height=1cm, text centered, draw=black, fill=blue!20]
\tikzstyle{decision} = [diamond, minimum width=3cm, minimum height=1cm, text centered, draw=black, fill=green!20]
\tikzstyle{arrow} = [thick,->,>=stealth]

\node (start) [process] {Literature Review};
\node (design) [process, below of=start] {Research Design};
\node (collect) [process, below of=design] {Data Collection};
\node (analyze) [process, below of=collect] {Data Analysis};
\node (validate) [decision, below of=analyze] {Results Valid?};
\node (conclude) [process, below of=validate] {Conclusions};

\draw [arrow] (start) -- (design);
\draw [arrow] (design) -- (collect);
\draw [arrow] (collect) -- (analyze);
\draw [arrow] (analyze) -- (validate);
\draw [arrow] (validate) -- node[anchor=west] {Yes} (conclude);
\draw [arrow] (validate.west) -- ++(-2,0) |- (collect.west) node[anchor=south] {No};
\end{tikzpicture}""",
    "system_architecture": r"""\begin{tikzpicture}[scale=0.8]
\tikzstyle{component} = [rectangle, draw, fill=blue!20, text width=2.5cm, text centered, minimum height=1.5cm]
\tikzstyle{database} = [cylinder, draw, fill=green!20, text width=2cm, text centered, minimum height=1.5cm]
\tikzstyle{interface} = [ellipse, draw, fill=yellow!20, text width=2cm, text centered, minimum height=1cm]

\node (ui) [interface] at (0,4) {User Interface};
\node (api) [component] at (0,2) {API Gateway};
\node (auth) [component] at (-3,0) {Authentication};
\node (core) [component] at (0,0) {Core Logic};
\node (ml) [component] at (3,0) {ML Engine};
\node (db) [database] at (0,-2) {Database};

\draw[->] (ui) -- (api);
\draw[->] (api) -- (auth);
\draw[->] (api) -- (core);
\draw[->] (core) -- (ml);
\draw[->] (core) -- (db);
\draw[->] (auth) -- (db);
\end{tikzpicture}""",
}
DEFAULT_TIKZ = r"""\begin{tikzpicture}
\node[draw, rectangle, fill=blue!20] (A) at (0,0) {Component A};
\node[draw, rectangle, fill=green!20] (B) at (3,0) {Component B};
\node[draw, rectangle, fill=red!20] (C) at (1.5,-2) {Component C};
\draw[->] (A) -- (B);
\draw[->] (A) -- (C);
\draw[->] (B) -- (C);
\end{tikzpicture}"""

MERMAID_TEMPLATES = {
    "research_methodology_flow": """graph TD
    A[Literature Review] --> B[Problem Identification]
    B --> C[Research Questions]
    C --> D[Methodology Design]
    D --> E[Data Collection]
    E --> F[Data Analysis]
    F --> G{Results Valid?}
    G -->|Yes| H[Conclusions]
    G -->|No| E
    H --> I[Future Work]

    style A fill:#e1f5fe
    style H fill:#c8e6c9
    style G fill:#fff3e0""",
    "system_architecture": """graph TB
    subgraph "Frontend Layer"
        UI[User Interface]
        WEB[Web Application]
    end

    subgraph "API Layer"
        API[API Gateway]
        AUTH[Authentication]
    end

    subgraph "Business Layer"
        CORE[Core Logic]
        ML[ML Engine]
        PROC[Data Processor]
    end

    subgraph "Data Layer"
        DB[(Database)]
        CACHE[(Cache)]
        FILES[(File Storage)]
    end

    UI --> API
    WEB --> API
    API --> AUTH
    API --> CORE
    CORE --> ML
    CORE --> PROC
    CORE --> DB
    PROC --> CACHE
    ML --> FILES""",
}
DEFAULT_MERMAID = """graph LR
    A[Start] --> B[Process]
    B --> C[Decision]
    C -->|Yes| D[Success]
    C -->|No| E[Retry]
    E --> B"""

CHARTJS_TEMPLATES = {
    "performance_comparison": """{
  type: 'bar',
  data: {
    labels: ['Method A', 'Method B', 'Method C', 'Proposed Method'],
    datasets: [{
      label: 'Accuracy (%)',
      data: [75, 82, 78, 94],
      backgroundColor: 'rgba(54, 162, 235, 0.8)',
      borderColor: 'rgba(54, 162, 235, 1)',
      borderWidth: 1
    }, {
      label: 'Precision (%)',
      data: [68, 79, 85, 91],
      backgroundColor: 'rgba(255, 99, 132, 0.8)',
      borderColor: 'rgba(255, 99, 132, 1)',
      borderWidth: 1
    }]
  },
  options: {
    responsive: true,
    plugins: {
      title: {
        display: true,
        text: 'Performance Comparison Analysis'
      }
    },
    scales: {
      y: {
        beginAtZero: true,
        max: 100
      }
    }
  }
}""",
    "trend_analysis": """{
  type: 'line',
  data: {
    labels: ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun'],
    datasets: [{
      label: 'Performance Trend',
      data: [65, 72, 78, 85, 89, 94],
      borderColor: 'rgb(75, 192, 192)',
      backgroundColor: 'rgba(75, 192, 192, 0.2)',
      tension: 0.1
    }]
  },
  options: {
    responsive: true,
    plugins: {
      title: {
        display: true,
        text: 'Performance Trend Over Time'
      }
    }
  }
}""",
    "data_distribution": """{
  type: 'pie',
  data: {
    labels: ['Category A', 'Category B', 'Category C', 'Category D'],
    datasets: [{
      data: [30, 25, 25, 20],
      backgroundColor: [
        'rgba(255, 99, 132, 0.8)',
        'rgba(54, 162, 235, 0.8)',
        'rgba(255, 205, 86, 0.8)',
        'rgba(75, 192, 192, 0.8)'
      ]
    }]
  },
  options: {
    responsive: true,
    plugins: {
      title: {
        display: true,
        text: 'Data Distribution Analysis'
      }
    }
  }
}""",
}
DEFAULT_CHARTJS = CHARTJS_TEMPLATES["performance_comparison"]

CUSTOM_TIKZ = latex_template(r"""\begin{tikzpicture}
\node[draw, rectangle, fill=blue!20, text width=3cm, text centered] (A) at (0,2) {\VAR{label}...};
\node[draw, rectangle, fill=green!20, text width=3cm, text centered] (B) at (4,2) {Process};
\node[draw, rectangle, fill=red!20, text width=3cm, text centered] (C) at (2,0) {Output};
\draw[->] (A) -- (B);
\draw[->] (B) -- (C);
\end{tikzpicture}""")

STANDALONE_TIKZ = latex_template(r"""\documentclass{standalone}
\usepackage{tikz}
\usepackage{pgfplots}
\pgfplotsset{compat=1.18}
\begin{document}
\VAR{code}
\end{document}""")


def context_label(thesis_title: Optional[str] = None, chapter_title: Optional[str] = None) -> str:
    label = thesis_title or "research project"
    if chapter_title:
        label += f" - {chapter_title}"
    return label


def render_template(template_id: str, context: str = "research project") -> DiagramBundle:
    """All three dialects for one template; each dialect falls back to its own default for unknown ids."""
    template = TEMPLATES_BY_ID.get(template_id)
    if template is None:
        title, description, prompt = "Custom Graph", "", context
    else:
        title, description = template.title, template.description
        prompt = template.prompt.replace("{context}", context)
    return DiagramBundle(
        template_id=template_id,
        title=title,
        description=description,
        prompt=prompt,
        tikz=TIKZ_TEMPLATES.get(template_id, DEFAULT_TIKZ),
        mermaid=MERMAID_TEMPLATES.get(template_id, DEFAULT_MERMAID),
        chartjs=CHARTJS_TEMPLATES.get(template_id, DEFAULT_CHARTJS),
    )


def render_custom(prompt: str) -> DiagramBundle:
    tikz = CUSTOM_TIKZ.render(label=escape_latex(prompt[:20]))
    return DiagramBundle(
        template_id="custom",
        title="Custom Graph",
        description=prompt,
        prompt=prompt,
        tikz=tikz,
        mermaid=DEFAULT_MERMAID,
        chartjs=DEFAULT_CHARTJS,
    )


def export_source(bundle: DiagramBundle, dialect: str) -> Tuple[str, str, str]:
    """Returns (file name, content, media type) for downloading one dialect of a bundle."""
    if dialect not in DIALECTS:
        raise ValueError(f"Unknown diagram dialect: {dialect}")
    stem = re.sub(r"\s+", "_", bundle.title)
    if dialect == "tikz":
        return f"{stem}.tex", STANDALONE_TIKZ.render(code=bundle.tikz), "text/plain"
    if dialect == "mermaid":
        return f"{stem}.mmd", bundle.mermaid, "text/plain"
    return f"{stem}.json", bundle.chartjs, "application/json"


# --- Generic graph table: graph type x output format, TikZ styled by preset ---

GRAPH_TYPES = ("flowchart", "bar_chart", "line_chart", "pie_chart", "architecture", "timeline", "conceptual")
GRAPH_FORMATS = ("tikz", "mermaid", "chartjs")


@dataclass(frozen=True)
class TikzStyle:
    colors: Tuple[str, ...]
    node_style: str
    arrow_style: str


TIKZ_STYLES = {
    "academic": TikzStyle(
        ("blue!20", "green!20", "red!20", "yellow!20"),
        "draw, rectangle, minimum width=3cm, minimum height=1cm, text centered",
        "thick, ->, >=stealth",
    ),
    "modern": TikzStyle(
        ("cyan!30", "magenta!30", "orange!30", "purple!30"),
        "draw, rounded corners, minimum width=3cm, minimum height=1cm, text centered, drop shadow",
        "ultra thick, ->, >=stealth, rounded corners",
    ),
    "minimal": TikzStyle(
        ("gray!10", "gray!20", "gray!30", "gray!40"),
        "draw, rectangle, minimum width=2.5cm, minimum height=0.8cm, text centered",
        "->, >=stealth",
    ),
    "colorful": TikzStyle(
        ("red!40", "blue!40", "green!40", "yellow!40", "purple!40", "orange!40"),
        "draw, rounded rectangle, minimum width=3cm, minimum height=1cm, text centered, thick",
        "very thick, ->, >=stealth, rounded corners",
    ),
}

GRAPH_TIKZ = {
    "flowchart": latex_template(r"""\begin{tikzpicture}[node distance=2cm, auto]
\tikzstyle{process} = [\VAR{node}, fill=\VAR{c0}]
\tikzstyle{decision} = [diamond, \VAR{node}, fill=\VAR{c1}]
\tikzstyle{terminal} = [\VAR{node}, rounded corners, fill=\VAR{c2}]
\tikzstyle{arrow} = [\VAR{arrow}]

\node (start) [terminal] {Start};
\node (input) [process, below of=start] {Input Data};
\node (process1) [process, below of=input] {Process Step 1};
\node (decision1) [decision, below of=process1] {Decision?};
\node (process2) [process, below of=decision1, yshift=-1cm] {Process Step 2};
\node (output) [process, below of=process2] {Generate Output};
\node (end) [terminal, below of=output] {End};

\draw [arrow] (start) -- (input);
\draw [arrow] (input) -- (process1);
\draw [arrow] (process1) -- (decision1);
\draw [arrow] (decision1) -- node[anchor=west] {Yes} (process2);
\draw [arrow] (decision1.east) -- ++(2,0) |- (output.east) node[anchor=south, pos=0.25] {No};
\draw [arrow] (process2) -- (output);
\draw [arrow] (output) -- (end);
\end{tikzpicture}"""),
    "bar_chart": latex_template(r"""\begin{tikzpicture}
\begin{axis}[
    ybar,
    enlargelimits=0.15,
    legend style={at={(0.5,-0.15)},anchor=north,legend columns=-1},
    ylabel={Values},
    symbolic x coords={Category A,Category B,Category C,Category D},
    xtick=data,
    nodes near coords,
    nodes near coords align={vertical},
    width=12cm,
    height=8cm,
    bar width=20pt
]
\addplot coordinates {(Category A,85) (Category B,92) (Category C,78) (Category D,96)};
\addplot coordinates {(Category A,75) (Category B,88) (Category C,82) (Category D,89)};
\legend{Series 1,Series 2}
\end{axis}
\end{tikzpicture}"""),
    "line_chart": latex_template(r"""\begin{tikzpicture}
\begin{axis}[
    xlabel={Time},
    ylabel={Performance},
    legend pos=north west,
    grid=major,
    width=12cm,
    height=8cm
]
\addplot[color=blue,mark=*] coordinates {
    (1,65) (2,72) (3,78) (4,85) (5,89) (6,94)
};
\addplot[color=red,mark=square] coordinates {
    (1,60) (2,68) (3,75) (4,82) (5,87) (6,91)
};
\legend{Method A,Method B}
\end{axis}
\end{tikzpicture}"""),
    "pie_chart": latex_template(r"""\begin{tikzpicture}
\pie[text=legend, radius=3]{
    30/Category A,
    25/Category B,
    25/Category C,
    20/Category D
}
\end{tikzpicture}"""),
    "architecture": latex_template(r"""\begin{tikzpicture}[scale=0.8]
\tikzstyle{component} = [rectangle, \VAR{node}, fill=\VAR{c0}]
\tikzstyle{database} = [cylinder, draw, fill=\VAR{c1}, text width=2cm, text centered, minimum height=1.5cm]
\tikzstyle{interface} = [ellipse, draw, fill=\VAR{c2}, text width=2cm, text centered, minimum height=1cm]

\node (ui) [interface] at (0,4) {User Interface};
\node (api) [component] at (0,2) {API Layer};
\node (auth) [component] at (-3,0) {Authentication};
\node (core) [component] at (0,0) {Core Logic};
\node (ml) [component] at (3,0) {ML Engine};
\node (db) [database] at (0,-2) {Database};
\node (cache) [database] at (3,-2) {Cache};

\draw[\VAR{arrow}] (ui) -- (api);
\draw[\VAR{arrow}] (api) -- (auth);
\draw[\VAR{arrow}] (api) -- (core);
\draw[\VAR{arrow}] (core) -- (ml);
\draw[\VAR{arrow}] (core) -- (db);
\draw[\VAR{arrow}] (ml) -- (cache);
\end{tikzpicture}"""),
    "timeline": latex_template(r"""\begin{tikzpicture}[scale=1.2]
\draw[thick] (0,0) -- (10,0);
\foreach \x/\year/\event in {0/2020/Project Start, 2.5/2021/Phase 1, 5/2022/Phase 2, 7.5/2023/Phase 3, 10/2024/Completion} {
    \draw (\x,0) -- (\x,0.2);
    \node[above] at (\x,0.2) {\year};
    \node[below, text width=2cm, text centered] at (\x,-0.5) {\event};
}
\end{tikzpicture}"""),
    "conceptual": latex_template(r"""\begin{tikzpicture}
\node[\VAR{node}, fill=\VAR{c0}] (concept1) at (0,2) {Core Concept};
\node[\VAR{node}, fill=\VAR{c1}] (concept2) at (-3,0) {Related Idea A};
\node[\VAR{node}, fill=\VAR{c2}] (concept3) at (3,0) {Related Idea B};
\node[\VAR{node}, fill=\VAR{c3}] (concept4) at (0,-2) {Application};

\draw[\VAR{arrow}] (concept1) -- (concept2);
\draw[\VAR{arrow}] (concept1) -- (concept3);
\draw[\VAR{arrow}] (concept2) -- (concept4);
\draw[\VAR{arrow}] (concept3) -- (concept4);
\end{tikzpicture}"""),
}

GRAPH_MERMAID = {
    "flowchart": """graph TD
    A[Start] --> B[Input Data]
    B --> C[Process Data]
    C --> D{Decision Point}
    D -->|Yes| E[Path A]
    D -->|No| F[Path B]
    E --> G[Output A]
    F --> G
    G --> H[End]

    style A fill:#e1f5fe
    style H fill:#c8e6c9
    style D fill:#fff3e0""",
    "architecture": """graph TB
    subgraph "Frontend"
        UI[User Interface]
        WEB[Web App]
    end

    subgraph "Backend"
        API[API Gateway]
        AUTH[Authentication]
        CORE[Core Logic]
    end

    subgraph "Data"
        DB[(Database)]
        CACHE[(Cache)]
    end

    UI --> API
    WEB --> API
    API --> AUTH
    API --> CORE
    CORE --> DB
    CORE --> CACHE""",
    "timeline": """gantt
    title Project Timeline
    dateFormat  YYYY-MM-DD
    section Phase 1
    Research        :2024-01-01, 30d
    Analysis        :2024-02-01, 20d
    section Phase 2
    Development     :2024-03-01, 45d
    Testing         :2024-04-15, 15d
    section Phase 3
    Deployment      :2024-05-01, 10d
    Documentation   :2024-05-11, 10d""",
    "conceptual": """mindmap
  root((Central Concept))
    Branch A
      Sub-concept A1
      Sub-concept A2
    Branch B
      Sub-concept B1
      Sub-concept B2
    Branch C
      Sub-concept C1
      Sub-concept C2""",
    "bar_chart": """xychart-beta
    title "Performance Comparison"
    x-axis [Method A, Method B, Method C, Proposed]
    y-axis "Accuracy (%)" 0 --> 100
    bar [75, 82, 78, 94]""",
    "line_chart": """xychart-beta
    title "Trend Analysis"
    x-axis [Jan, Feb, Mar, Apr, May, Jun]
    y-axis "Performance" 0 --> 100
    line [65, 72, 78, 85, 89, 94]""",
    "pie_chart": """pie title Data Distribution
    "Category A" : 30
    "Category B" : 25
    "Category C" : 25
    "Category D" : 20""",
}

_CHARTJS_COLORS = """[
        'rgba(255, 99, 132, 0.8)',
        'rgba(54, 162, 235, 0.8)',
        'rgba(255, 205, 86, 0.8)',
        'rgba(75, 192, 192, 0.8)'
      ]"""
_CHARTJS_BORDERS = """[
        'rgba(255, 99, 132, 1)',
        'rgba(54, 162, 235, 1)',
        'rgba(255, 205, 86, 1)',
        'rgba(75, 192, 192, 1)'
      ]"""

CHARTJS_BAR = f"""{{
  type: 'bar',
  data: {{
    labels: ['Method A', 'Method B', 'Method C', 'Proposed Method'],
    datasets: [{{
      label: 'Performance (%)',
      data: [75, 82, 78, 94],
      backgroundColor: {_CHARTJS_COLORS},
      borderColor: {_CHARTJS_BORDERS},
      borderWidth: 1
    }}]
  }},
  options: {{
    responsive: true,
    plugins: {{
      title: {{
        display: true,
        text: 'Performance Comparison Analysis'
      }},
      legend: {{
        display: false
      }}
    }},
    scales: {{
      y: {{
        beginAtZero: true,
        max: 100,
        title: {{
          display: true,
          text: 'Performance (%)'
        }}
      }}
    }}
  }}
}}"""

CHARTJS_LINE = """{
  type: 'line',
  data: {
    labels: ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun'],
    datasets: [{
      label: 'Performance Trend',
      data: [65, 72, 78, 85, 89, 94],
      borderColor: 'rgb(75, 192, 192)',
      backgroundColor: 'rgba(75, 192, 192, 0.2)',
      tension: 0.1,
      fill: true
    }, {
      label: 'Baseline',
      data: [60, 65, 70, 75, 80, 85],
      borderColor: 'rgb(255, 99, 132)',
      backgroundColor: 'rgba(255, 99, 132, 0.2)',
      tension: 0.1,
      fill: false
    }]
  },
  options: {
    responsive: true,
    plugins: {
      title: {
        display: true,
        text: 'Performance Trend Over Time'
      }
    },
    scales: {
      y: {
        beginAtZero: true,
        title: {
          display: true,
          text: 'Performance Score'
        }
      },
      x: {
        title: {
          display: true,
          text: 'Time Period'
        }
      }
    }
  }
}"""

CHARTJS_PIE = f"""{{
  type: 'pie',
  data: {{
    labels: ['Category A', 'Category B', 'Category C', 'Category D'],
    datasets: [{{
      data: [30, 25, 25, 20],
      backgroundColor: {_CHARTJS_COLORS},
      borderColor: {_CHARTJS_BORDERS},
      borderWidth: 2
    }}]
  }},
  options: {{
    responsive: true,
    plugins: {{
      title: {{
        display: true,
        text: 'Data Distribution Analysis'
      }},
      legend: {{
        position: 'bottom'
      }}
    }}
  }}
}}"""

# Chart.js has no diagram types; those fall back to a chart.
GRAPH_CHARTJS = {
    "bar_chart": CHARTJS_BAR,
    "line_chart": CHARTJS_LINE,
    "pie_chart": CHARTJS_PIE,
    "flowchart": CHARTJS_BAR,
    "architecture": CHARTJS_BAR,
    "timeline": CHARTJS_LINE,
    "conceptual": CHARTJS_BAR,
}

GRAPH_INSTRUCTIONS = {
    "tikz": [
        "Add \\usepackage{tikz} to your LaTeX preamble",
        "For charts, also add \\usepackage{pgfplots} and \\pgfplotsset{compat=1.18}",
        "Insert the TikZ code where you want the graph to appear",
        "Compile with pdflatex or xelatex",
    ],
    "mermaid": [
        "Use in Markdown documents with ```mermaid code blocks",
        "Use online Mermaid editors for standalone diagrams",
        "Integrate with documentation platforms that support Mermaid",
        "Export as SVG or PNG for inclusion in documents",
    ],
    "chartjs": [
        'Include Chart.js library in your HTML: <script src="https://cdn.jsdelivr.net/npm/chart.js"></script>',
        'Create a canvas element: <canvas id="myChart"></canvas>',
        "Initialize the chart with the provided configuration",
        "Customize colors, labels, and data as needed",
    ],
}


def extract_title(prompt: str) -> str:
    words = " ".join(prompt.split(" ")[:5])
    return re.sub(r"[^\w\s]", "", words).strip() or "Generated Graph"


def _styled_tikz(graph_type: str, style: str) -> str:
    preset = TIKZ_STYLES.get(style, TIKZ_STYLES["academic"])
    colors = {f"c{i}": color for i, color in enumerate(preset.colors)}
    template = GRAPH_TIKZ.get(graph_type, GRAPH_TIKZ["flowchart"])
    return template.render(node=preset.node_style, arrow=preset.arrow_style, **colors)


def render_graph(prompt: str, graph_type: str, fmt: str = "tikz", style: str = "academic") -> GraphResponse:
    if fmt == "tikz":
        code = _styled_tikz(graph_type, style)
    elif fmt == "mermaid":
        code = GRAPH_MERMAID.get(graph_type, GRAPH_MERMAID["flowchart"])
    elif fmt == "chartjs":
        code = GRAPH_CHARTJS.get(graph_type, CHARTJS_BAR)
    else:
        raise ValueError(f"Unknown graph format: {fmt}")
    return GraphResponse(
        code=code,
        title=extract_title(prompt),
        description=prompt,
        format=fmt,
        instructions=list(GRAPH_INSTRUCTIONS[fmt]),
    )


def list_templates(category: Optional[str] = None) -> List[Dict[str, str]]:
    return [
        {"id": t.id, "title": t.title, "description": t.description, "category": t.category}
        for t in DIAGRAM_TEMPLATES
        if category is None or t.category == category
    ]
