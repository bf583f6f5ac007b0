"""
LaTeX source generation for a thesis record.

The document skeleton lives in ``templates/main.tex`` and is rendered with a
Jinja2 environment whose delimiters do not collide with LaTeX braces:

- Block tags: \\BLOCK{...}
- Variable tags: \\VAR{...}
- Comment tags: \\#{...}

Every user-supplied value passes through the ``tex`` filter before it lands
in the template.
"""
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict

import jinja2

from .models import ThesisRecord

MAIN_TEX = "main.tex"
REFERENCES_BIB = "references.bib"

_TEMPLATE_DIR = Path(__file__).parent / "templates"

_REPLACEMENTS = {
    "\\": r"\textbackslash{}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
    "{": r"\{",
    "}": r"\}",
    "$": r"\$",
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "_": r"\_",
}
_SPECIAL = re.compile("|".join(re.escape(char) for char in _REPLACEMENTS))


def escape_latex(text: str) -> str:
    """Neutralise LaTeX reserved characters and turn blank lines into explicit paragraph breaks."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    escaped = _SPECIAL.sub(lambda m: _REPLACEMENTS[m.group(0)], text)
    return escaped.replace("\n\n", "\n\n\\par\n")


@lru_cache(maxsize=1)
def _latex_env() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(_TEMPLATE_DIR)),
        block_start_string=r"\BLOCK{",
        block_end_string="}",
        variable_start_string=r"\VAR{",
        variable_end_string="}",
        comment_start_string=r"\#{",
        comment_end_string="}",
        trim_blocks=True,
        keep_trailing_newline=True,
        autoescape=False,
    )
    env.filters["tex"] = escape_latex
    return env


def latex_template(source: str) -> jinja2.Template:
    """Compiles an inline LaTeX snippet using the same delimiters as ``main.tex``."""
    return _latex_env().from_string(source)


def render_main_tex(record: ThesisRecord) -> str:
    return _latex_env().get_template(MAIN_TEX).render(record=record)


def generate_latex_files(record: ThesisRecord) -> Dict[str, str]:
    """Returns the two files a compile service needs, keyed by file name."""
    return {
        MAIN_TEX: render_main_tex(record),
        REFERENCES_BIB: record.bibliography,
    }
