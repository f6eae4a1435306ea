"""Rule-based fallback tagging.

Used whenever the Gemini call fails. The rules run in table order; each may
append tags, and a later rule that suggests a folder replaces any earlier
suggestion. Keep the order stable: tagging results must be reproducible.
"""

from dataclasses import dataclass, field

from app.schemas.tagging import FileTagging

FALLBACK_CONFIDENCE = 0.7
UNCATEGORIZED_TAG = "uncategorized"


@dataclass(frozen=True)
class SubRule:
    """Name-based refinement inside a type rule; first match wins."""

    keywords: tuple[str, ...]
    tags: tuple[str, ...]
    folder: str
    require_all: bool = False

    def matches(self, name: str) -> bool:
        check = all if self.require_all else any
        return check(keyword in name for keyword in self.keywords)


@dataclass(frozen=True)
class TypeRule:
    """Fires when the MIME type contains any of ``type_keywords``."""

    type_keywords: tuple[str, ...]
    tags: tuple[str, ...]
    default_folder: str
    refinements: tuple[SubRule, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NameRule:
    """Fires when the file name contains any of ``keywords``."""

    keywords: tuple[str, ...]
    tags: tuple[str, ...]
    folder: str | None = None


TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule(
        type_keywords=("pdf", "doc"),
        tags=("document",),
        default_folder="Documents",
        refinements=(
            SubRule(("resume", "cv"), ("resume", "personal"), "Resumes"),
            SubRule(("assignment", "homework"), ("assignment", "work"), "Assignments"),
            SubRule(("cover", "letter"), ("work", "application"), "Cover Letters", require_all=True),
            SubRule(("job", "application"), ("work", "application"), "Job Applications"),
        ),
    ),
    TypeRule(
        type_keywords=("image", "jpg", "png"),
        tags=("image",),
        default_folder="Images",
        refinements=(
            SubRule(("photo", "pic"), ("photo",), "Photos"),
            SubRule(("screenshot",), ("screenshot",), "Screenshots"),
            SubRule(("wallpaper", "background"), ("wallpaper",), "Wallpapers"),
        ),
    ),
    TypeRule(
        type_keywords=("excel", "csv", "spreadsheet"),
        tags=("spreadsheet", "data"),
        default_folder="Spreadsheets",
        refinements=(
            SubRule(("customer", "client"), ("customer",), "Customer Data"),
            SubRule(("finance", "loan", "payment"), ("finance",), "Financial Data"),
        ),
    ),
    TypeRule(
        type_keywords=("video", "mp4"),
        tags=("video",),
        default_folder="Videos",
    ),
)

NAME_RULES: tuple[NameRule, ...] = (
    NameRule(("report",), ("report",)),
    NameRule(("invoice", "receipt"), ("finance",), "Financial Documents"),
    NameRule(("project",), ("project",), "Projects"),
    NameRule(("presentation", "ppt"), ("presentation",), "Presentations"),
)


def generate_fallback_tags(file_name: str, file_type: str) -> FileTagging:
    """Tag a file from its name and MIME type alone.

    Deterministic: the same ``(file_name, file_type)`` always yields the same
    tags and folder suggestion.
    """
    name = (file_name or "").lower()
    mime = (file_type or "").lower()

    tags: list[str] = []
    suggested_folder: str | None = None

    for rule in TYPE_RULES:
        if not any(keyword in mime for keyword in rule.type_keywords):
            continue
        tags.extend(rule.tags)
        refinement = next((sub for sub in rule.refinements if sub.matches(name)), None)
        if refinement:
            tags.extend(refinement.tags)
            suggested_folder = refinement.folder
        else:
            suggested_folder = rule.default_folder

    for rule in NAME_RULES:
        if not any(keyword in name for keyword in rule.keywords):
            continue
        tags.extend(rule.tags)
        if rule.folder:
            suggested_folder = rule.folder

    return FileTagging(
        tags=tags or [UNCATEGORIZED_TAG],
        suggested_folder_name=suggested_folder,
        confidence=FALLBACK_CONFIDENCE,
    )
