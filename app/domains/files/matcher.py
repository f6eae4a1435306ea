"""Similar-file matching.

A candidate is similar to a source file when ANY of:

* the MIME types are identical;
* the MIME main types (before ``/``) and the file extensions both match;
* the extensions match and the names share a keyword.

Every criterion is symmetric, so ``is_similar(a, b) == is_similar(b, a)``.
"""

import re
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Protocol, TypeVar

_NON_ALNUM = re.compile(r"[^a-z0-9]")
MIN_KEYWORD_LENGTH = 3


class MatchableFile(Protocol):
    id: object
    original_name: str
    file_type: str


F = TypeVar("F", bound=MatchableFile)


class MatchReason(str, Enum):
    exact_type = "exact type"
    main_type_and_extension = "same main type + extension"
    extension_and_keywords = "same extension + keywords"


def get_extension(file_name: str | None) -> str:
    """Text after the last dot, lowercased; a name without a dot is its own extension."""
    return (file_name or "").rsplit(".", 1)[-1].lower()


def get_main_type(mime_type: str | None) -> str:
    """MIME main type (text before the first slash), lowercased."""
    return (mime_type or "").split("/", 1)[0].lower()


def extract_keywords(file_name: str | None) -> list[str]:
    """Lowercase, turn non-alphanumerics into spaces, keep tokens longer than two chars."""
    cleaned = _NON_ALNUM.sub(" ", (file_name or "").lower())
    return [token for token in cleaned.split() if len(token) >= MIN_KEYWORD_LENGTH]


def share_keyword(left: Iterable[str], right: Iterable[str]) -> bool:
    """True when a token of one side equals, contains or is contained in a token of the other."""
    right = list(right)
    return any(a in b or b in a for a in left for b in right)


def match_reason(source: MatchableFile, candidate: MatchableFile) -> MatchReason | None:
    """Why ``candidate`` is similar to ``source``, or None if it is not."""
    if (candidate.file_type or "") == (source.file_type or ""):
        return MatchReason.exact_type

    same_extension = get_extension(candidate.original_name) == get_extension(source.original_name)
    if not same_extension:
        return None

    if get_main_type(candidate.file_type) == get_main_type(source.file_type):
        return MatchReason.main_type_and_extension

    if share_keyword(extract_keywords(source.original_name), extract_keywords(candidate.original_name)):
        return MatchReason.extension_and_keywords

    return None


def is_similar(source: MatchableFile, candidate: MatchableFile) -> bool:
    return match_reason(source, candidate) is not None


def find_similar_files(source: MatchableFile, files: Sequence[F]) -> list[F]:
    """Files similar to ``source``, excluding the source, in collection order."""
    return [
        candidate
        for candidate in files
        if candidate.id != source.id and is_similar(source, candidate)
    ]
