"""Parser for the PROVIQUIZ plain-text question format.

A question block is everything up to and including a line containing
``Correct Answer: X``::

    What does a red octagonal sign mean?
    a) Stop  b) Yield
    c) No entry
    d) Parking
    Correct Answer: a

Option markers may be written ``a)``, ``(a)``, ``a.`` or ``a )``.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator

SOURCE_NAME = "PROVIQUIZ.txt"

_CORRECT_RE = re.compile(r"Correct Answer:\s*([a-dA-D])")
_PAREN_MARKER_RE = re.compile(r"\(\s*([a-dA-D])\s*\)")
_DOT_MARKER_RE = re.compile(r"\b([a-dA-D])\s*\.")
_SPACED_MARKER_RE = re.compile(r"\b([a-dA-D])\s*\)")
_FIRST_OPTION_RE = re.compile(r"\ba\)")
_OPTION_RE = re.compile(r"\b([a-dA-D])\)\s*(.*?)(?=\b[a-dA-D]\)|$)", re.DOTALL)
_TRAILING_PUNCT_RE = re.compile(r"[ :;-]+$")


@dataclass
class ParsedQuestion:
    id: int
    question: str
    options: dict[str, str]
    correct: str
    source: str = SOURCE_NAME


@dataclass
class ParseReport:
    questions: list[ParsedQuestion] = field(default_factory=list)
    skipped_blocks: int = 0


def normalize_option_markers(text: str) -> str:
    """Rewrite every supported option marker to the ``a)`` form."""
    text = _PAREN_MARKER_RE.sub(r"\1)", text)
    text = _DOT_MARKER_RE.sub(r"\1)", text)
    return _SPACED_MARKER_RE.sub(r"\1)", text)


def build_blocks(raw: str) -> list[str]:
    """Split raw text into blocks, each ending with its "Correct Answer:" line."""
    blocks: list[str] = []
    current: list[str] = []
    for line in raw.splitlines():
        trimmed = line.rstrip()
        if not trimmed:
            # Collapse runs of blank lines
            if current and current[-1] != "":
                current.append("")
            continue
        current.append(trimmed)
        if "correct answer:" in trimmed.lower():
            blocks.append("\n".join(current).strip())
            current = []
    return [b for b in blocks if b]


def parse_block(block: str, question_id: int) -> ParsedQuestion | None:
    """Parse one block; returns None for malformed blocks."""
    lines = [line.strip() for line in block.splitlines() if line.strip()]
    correct_idx = next(
        (i for i, line in enumerate(lines) if "correct answer:" in line.lower()),
        None,
    )
    if correct_idx is None:
        return None
    match = _CORRECT_RE.search(lines[correct_idx])
    if not match:
        return None
    correct = match.group(1).lower()

    main = normalize_option_markers(" ".join(lines[:correct_idx]))
    first = _FIRST_OPTION_RE.search(main)
    if not first:
        return None

    question = _TRAILING_PUNCT_RE.sub("", main[: first.start()].strip())
    found: dict[str, str] = {}
    for key, value in _OPTION_RE.findall(main[first.start():].strip()):
        found[key.lower()] = value.strip()
    options = {key: found.get(key, "") for key in ("a", "b", "c", "d")}

    if not question:
        return None
    # Some source lines are malformed; require at least two real options
    if sum(1 for v in options.values() if v.strip()) < 2:
        return None

    return ParsedQuestion(id=question_id, question=question, options=options, correct=correct)


def iter_questions(raw: str, first_id: int = 1) -> Iterator[ParsedQuestion | None]:
    next_id = first_id
    for block in build_blocks(raw):
        parsed = parse_block(block, next_id)
        if parsed:
            next_id += 1
        yield parsed


def parse_text(raw: str, first_id: int = 1) -> ParseReport:
    """Parse a whole file; ids are assigned sequentially to the blocks that parse."""
    report = ParseReport()
    for parsed in iter_questions(raw, first_id):
        if parsed is None:
            report.skipped_blocks += 1
        else:
            report.questions.append(parsed)
    return report
