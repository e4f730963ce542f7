import logging
import re
from typing import List

from .models import PreprocessResult

logger = logging.getLogger(__name__)

LINE_BREAK_RE = re.compile(r"\r\n|\n|\r")
COMMENT_PREFIX = "#"


def split_lines(text: str) -> List[str]:
    """Split on any line-ending convention and drop blank lines."""
    return [line for line in LINE_BREAK_RE.split(text) if line.strip()]


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_PREFIX)


def preprocess_lines(text: str) -> PreprocessResult:
    """Separate ``#`` comment lines from data lines.

    The last comment seen before the first data line is kept as a header
    candidate: files exported by measurement software often carry the
    column names as ``#Name;Name;...`` right above the data. Comments after
    the data has started (end markers and the like) are only counted.
    """
    comment_header_line = None
    data_lines = []
    skipped = 0
    seen_data = False

    for line in split_lines(text):
        if is_comment(line):
            skipped += 1
            if not seen_data:
                comment_header_line = line
        else:
            seen_data = True
            data_lines.append(line)

    logger.debug("Preprocessed %d data lines, %d comment lines", len(data_lines), skipped)
    return PreprocessResult(
        comment_header_line=comment_header_line,
        data_lines=data_lines,
        comment_lines_skipped=skipped,
    )
