"""Path resolution for quoted include targets."""

import os
from pathlib import Path
from typing import Union

from .directives import IncludeDirective


def resolve_include(including_file: Union[str, Path], target: str) -> Path:
    """
    Resolve a quoted include target against the including file.

    The target is joined to the directory of ``including_file`` (never the
    working directory or a search path) and normalised lexically, so
    ``sub/../b.h`` and ``b.h`` name the same file. Symlinks are not followed
    and the filesystem is not touched.

    Args:
        including_file: Path of the file containing the directive.
        target: The text between the quotes.

    Returns:
        Normalised path of the included file.
    """
    source_dir = Path(including_file).parent
    return Path(os.path.normpath(source_dir / target))


def is_followed(directive: IncludeDirective) -> bool:
    """Only quoted includes are traced into; angle-bracket includes are system headers."""
    return directive.is_quoted


def canonical_key(path: Union[str, Path]) -> str:
    """Key used for the visited set."""
    return os.path.normpath(str(path))
