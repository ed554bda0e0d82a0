"""Parser configuration used to pick the error-rate formula for a report."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

SUMMARIZER_PARSER = "JmeterSummarizer"
IAGO_PARSER = "Iago"

_GLOB_SEPARATOR = re.compile(r"\s*[;:,]+\s*")
# Globs are written as "**/*.<ext>"
_GLOB_PREFIX_LENGTH = len("**/*.")


@dataclass
class ParserSpec:
    name: str
    glob: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserSpec":
        return cls(name=data["name"], glob=data.get("glob", ""))

    def patterns(self) -> List[str]:
        return [p for p in _GLOB_SEPARATOR.split(self.glob) if p]


class ParserModeRegistry:
    """Answers whether a report file was produced by a summarizing parser.

    Instances are passed to ``ReportAggregate`` as ``is_summarized``.
    """

    def __init__(self, parsers: Iterable[ParserSpec] = ()) -> None:
        self.parsers = list(parsers)

    def __call__(self, filename: str) -> bool:
        return self.is_summarized(filename)

    def is_summarized(self, filename: str) -> bool:
        for parser in self.parsers:
            if parser.name == SUMMARIZER_PARSER:
                for pattern in parser.patterns():
                    if filename.endswith(pattern[_GLOB_PREFIX_LENGTH:]):
                        return True
            elif parser.name == IAGO_PARSER:
                return True
        return False
