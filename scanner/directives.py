"""Recognition of #include directives in source lines."""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional


class QuoteKind(Enum):
    """Delimiter pair used around an include target."""

    QUOTED = "quoted"
    ANGLE = "angle"


# Anchored at column 0, delimiters must pair up and the target may not be empty.
# Lines that only partly match are not directives.
INCLUDE_PATTERN = re.compile(r'^#include\s*(?:"(?P<quoted>[^"]+)"|<(?P<angle>[^>]+)>)')


@dataclass(frozen=True)
class IncludeDirective:
    """A single #include found on a line."""

    raw_line: str
    target: str
    quote_kind: QuoteKind

    @property
    def is_quoted(self) -> bool:
        return self.quote_kind is QuoteKind.QUOTED


def scan_line(line: str) -> Optional[IncludeDirective]:
    """
    Parse a line as an include directive.

    Args:
        line: A line of source text, with or without its trailing newline.

    Returns:
        The directive, or None if the line is not a well-formed include.
    """
    raw_line = line.rstrip("\r\n")
    match = INCLUDE_PATTERN.match(raw_line)
    if match is None:
        return None

    if match.group("quoted") is not None:
        return IncludeDirective(raw_line, match.group("quoted"), QuoteKind.QUOTED)
    return IncludeDirective(raw_line, match.group("angle"), QuoteKind.ANGLE)


def iter_directives(lines: Iterable[str]) -> Iterator[IncludeDirective]:
    """Yield the include directives of ``lines`` in file order."""
    for line in lines:
        directive = scan_line(line)
        if directive is not None:
            yield directive
