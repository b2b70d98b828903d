import logging
import os
import re
from typing_extensions import *

logger = logging.getLogger(__name__)

NAMED_LINE = re.compile(r"^([A-Za-z]\w*):(.*)$")
PREFIXES = ("regex:", "pattern:")


def _strip_prefix(pattern: str) -> str:
    for prefix in PREFIXES:
        if pattern.lower().startswith(prefix):
            return pattern[len(prefix) :].strip()
    return pattern


def parse_patterns(content: str, default_name: str = "pattern") -> Dict[str, str]:
    """
    Read named patterns, one `NAME: pattern` per line.

    Blank lines and lines starting with '#' are skipped. Content without any
    named line is a single pattern called default_name (first line, with an
    optional `regex:` or `pattern:` prefix).
    """
    lines = [
        line.strip()
        for line in content.split("\n")
        if line.strip() and not line.strip().startswith("#")
    ]

    if not lines:
        return {}

    if lines[0].lower().startswith(PREFIXES) or not any(
        NAMED_LINE.match(line) for line in lines
    ):
        return {default_name: _strip_prefix(lines[0])}

    patterns: Dict[str, str] = {}
    for line in lines:
        match = NAMED_LINE.match(line)
        if match is None:
            raise ValueError(f"Expected 'NAME: pattern', got: {line!r}")
        name, pattern = match.group(1), match.group(2).strip()
        if name in patterns:
            raise ValueError(f"Duplicate pattern name: {name}")
        patterns[name] = pattern

    return patterns


def load_patterns(filename: str) -> Dict[str, str]:
    """Load named patterns from a file, see parse_patterns for the format."""
    with open(filename, "r", encoding="utf-8") as f:
        content = f.read()

    base_name = os.path.basename(filename).rsplit(".", 1)[0]
    patterns = parse_patterns(content, default_name=base_name)
    logger.info("loaded %d patterns from %s", len(patterns), filename)
    return patterns
