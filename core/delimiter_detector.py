import logging
from typing import Dict, Sequence

logger = logging.getLogger(__name__)

TAB = "\t"
SEMICOLON = ";"
COMMA = ","
DOT = "."

# Priority order: tab rarely shows up inside values, and a semicolon file
# has to be recognised before its decimal commas are mistaken for delimiters.
DELIMITER_CANDIDATES = (TAB, SEMICOLON, COMMA)
DEFAULT_DELIMITER = COMMA
SAMPLE_LINES = 5


def _count_stats(delimiter: str, sample: Sequence[str]) -> Dict[str, int]:
    counts = [line.count(delimiter) for line in sample]
    return {"min": min(counts), "max": max(counts)}


def detect_delimiter(data_lines: Sequence[str], candidates: Sequence[str] = DELIMITER_CANDIDATES) -> str:
    """Pick the delimiter with the most consistent per-line count.

    Only the first ``SAMPLE_LINES`` lines are looked at. A candidate that
    appears the same non-zero number of times on every sampled line wins
    outright, earliest in ``candidates`` first. Otherwise the candidate with
    the smallest spread (then the highest minimum) is taken.
    """
    sample = list(data_lines[:SAMPLE_LINES])
    if not sample:
        return DEFAULT_DELIMITER

    stats = [(delim, _count_stats(delim, sample)) for delim in candidates]

    for delim, s in stats:
        if s["min"] == s["max"] and s["min"] > 0:
            logger.debug("Consistent delimiter %r (%d per line)", delim, s["min"])
            return delim

    present = [(delim, s) for delim, s in stats if s["min"] > 0]
    if present:
        # sorted() is stable, so equal scores keep priority order
        present = sorted(present, key=lambda item: (item[1]["max"] - item[1]["min"], -item[1]["min"]))
        delim = present[0][0]
        logger.debug("No consistent delimiter; least-variance choice %r", delim)
        return delim

    logger.debug("No candidate delimiter present; falling back to %r", DEFAULT_DELIMITER)
    return DEFAULT_DELIMITER


def resolve_decimal_separator(delimiter: str) -> str:
    """Semicolon files come from comma-decimal locales; everything else uses a dot."""
    return COMMA if delimiter == SEMICOLON else DOT


def describe_delimiter(delimiter: str) -> str:
    names: Dict[str, str] = {TAB: "tab", SEMICOLON: "semicolon", COMMA: "comma"}
    return names.get(delimiter, repr(delimiter))
