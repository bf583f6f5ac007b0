"""
Form state for the thesis editor.

The record is owned by the browser form; every function here takes a
ThesisRecord and returns a new one with a single field replaced. Nothing is
mutated in place.
"""
import logging
from typing import Mapping, Optional

from .config import MAX_CHAPTERS, MIN_CHAPTERS
from .models import Chapter, RewriteResult, ThesisRecord

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("title", "author", "institution", "degree_program", "supervisor", "year", "bibliography")
NEW_CHAPTER = Chapter(title="New Chapter", content="Chapter content goes here...")


def sample_record() -> ThesisRecord:
    """The record the form starts with."""
    return ThesisRecord(
        title="Machine Learning Applications in Renewable Energy Systems",
        author="John Doe",
        institution="University of Technology",
        degree_program="Master of Technology",
        supervisor="Dr. Jane Smith",
        year="2024",
        chapters=[
            Chapter(
                title="Introduction",
                content="This chapter introduces the research problem and objectives. The rapid growth of "
                "renewable energy systems has created new challenges in optimization and prediction that "
                "can be addressed through machine learning techniques.",
            ),
            Chapter(
                title="Literature Review",
                content="This chapter reviews existing literature on machine learning applications in "
                "renewable energy. Previous studies have shown promising results in wind power forecasting "
                "and solar energy optimization.",
            ),
            Chapter(
                title="Methodology",
                content="This chapter describes the methodology used in the research. We employed deep "
                "learning neural networks and ensemble methods to predict energy output from weather data.",
            ),
            Chapter(
                title="Results and Analysis",
                content="This chapter presents the results of our experiments. The proposed model achieved "
                "95% accuracy in predicting solar energy output, outperforming traditional statistical methods.",
            ),
            Chapter(
                title="Conclusion",
                content="This chapter concludes the thesis with a summary of findings and future work. Our "
                "research demonstrates the potential of machine learning in optimizing renewable energy systems.",
            ),
        ],
        bibliography="""@article{smith2023ml,
  title={Machine Learning for Renewable Energy: A Comprehensive Review},
  author={Smith, Jane and Johnson, Bob},
  journal={Energy Systems Journal},
  volume={45},
  number={3},
  pages={123--145},
  year={2023},
  publisher={Academic Press}
}

@inproceedings{doe2022solar,
  title={Deep Learning Approaches for Solar Energy Prediction},
  author={Doe, John and Wilson, Alice},
  booktitle={International Conference on Renewable Energy},
  pages={67--78},
  year={2022},
  organization={IEEE}
}""",
    )


def update_field(record: ThesisRecord, field: str, value) -> ThesisRecord:
    if field not in ThesisRecord.model_fields:
        raise KeyError(f"Unknown thesis field: {field}")
    return record.model_copy(update={field: value})


def update_chapter(record: ThesisRecord, index: int, field: str, value: str) -> ThesisRecord:
    if not 0 <= index < len(record.chapters):
        return record
    chapters = list(record.chapters)
    chapters[index] = chapters[index].model_copy(update={field: value})
    return update_field(record, "chapters", chapters)


def add_chapter(record: ThesisRecord) -> ThesisRecord:
    if len(record.chapters) >= MAX_CHAPTERS:
        return record
    return update_field(record, "chapters", [*record.chapters, NEW_CHAPTER.model_copy()])


def remove_chapter(record: ThesisRecord, index: int) -> ThesisRecord:
    if len(record.chapters) <= MIN_CHAPTERS or not 0 <= index < len(record.chapters):
        return record
    chapters = [chapter for i, chapter in enumerate(record.chapters) if i != index]
    return update_field(record, "chapters", chapters)


def apply_generated_content(record: ThesisRecord, content: str, chapter_index: Optional[int] = None) -> ThesisRecord:
    """Splice assistant output into a chapter body, or into the bibliography when no chapter is given."""
    if chapter_index is None:
        return update_field(record, "bibliography", content)
    return update_chapter(record, chapter_index, "content", content)


def apply_rewrite(record: ThesisRecord, rewrite: RewriteResult) -> ThesisRecord:
    record = update_field(record, "title", rewrite.title)
    if not rewrite.chapters:
        logger.info("Rewrite response carried no chapter markers; keeping existing chapters")
        return record
    return update_field(record, "chapters", list(rewrite.chapters[:MAX_CHAPTERS]))


def record_from_form(form: Mapping[str, str]) -> ThesisRecord:
    """Rebuild the record from submitted form fields (``chapters-<i>-title`` / ``chapters-<i>-content``)."""

    def value(name: str) -> str:
        # browsers submit textarea line breaks as CRLF
        return form.get(name, "").replace("\r\n", "\n")

    values = {field: value(field) for field in RECORD_FIELDS}
    chapters = []
    for i in range(MAX_CHAPTERS):
        if f"chapters-{i}-title" not in form:
            break
        chapters.append(Chapter(title=value(f"chapters-{i}-title"), content=value(f"chapters-{i}-content")))
    if not chapters:
        chapters = [Chapter()]
    return ThesisRecord(chapters=chapters, **values)
