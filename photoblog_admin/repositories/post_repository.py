"""Repository for album posts (Markdown files with front matter)."""
import datetime
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from photoblog_admin.models.schemas.album import AlbumLayout
from photoblog_admin.repositories.base import BaseRepository

FRONT_MATTER_RE = re.compile(r"^---\r?\n([\s\S]*?)\r?\n---")
LINE_RE = re.compile(r"^([\w-]*?):\s*(.*)$")
DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")
INT_RE = re.compile(r"^\s*([+-]?\d+)")

# Front matter key -> layout field
LAYOUT_KEYS = {
    "card-image": "card_image",
    "card-offset": "card_offset",
    "card-offset-x": "card_offset_x",
    "card-zoom": "card_zoom",
    "banner-image": "banner_image",
    "banner-offset": "banner_offset",
    "banner-offset-x": "banner_offset_x",
    "banner-zoom": "banner_zoom",
}

RawValue = Union[str, List[str]]

# Escapes used inside double-quoted values so each value stays on one line
ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
UNESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}
ESCAPE_RE = re.compile(r'\\(["\\nrt])')


def scan_front_matter(text: str) -> Optional[tuple[Dict[str, RawValue], str]]:
    """
    Split a post into raw front matter values and body.

    Each `key: value` line yields one entry. Quoted values lose their
    quotes (double-quoted ones also their backslash escapes), and unquoted
    `[a, b]` values become lists of trimmed strings.

    Returns:
        (values, body) or None when the post has no front matter block
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return None

    values: Dict[str, RawValue] = {}
    for line in re.split(r"\r?\n", match.group(1)):
        line_match = LINE_RE.match(line)
        if not line_match:
            continue
        value = line_match.group(2).strip()
        quoted = len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'")
        if quoted:
            quote = value[0]
            value = value[1:-1]
            if quote == '"':
                value = ESCAPE_RE.sub(lambda m: UNESCAPES[m.group(1)], value)
        if not quoted and value.startswith("[") and value.endswith("]"):
            values[line_match.group(1)] = [
                item.strip() for item in value[1:-1].split(",") if item.strip()
            ]
        else:
            values[line_match.group(1)] = value

    return values, text[match.end():]


def _as_text(value: Optional[RawValue]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, list):
        return ", ".join(value)
    return value


def _as_int(value: Optional[RawValue], default: int) -> int:
    match = INT_RE.match(_as_text(value) or "")
    return int(match.group(1)) if match else default


def _as_date(value: Optional[RawValue]) -> Optional[datetime.date]:
    match = DATE_RE.match(_as_text(value) or "")
    if not match:
        return None
    try:
        return datetime.date.fromisoformat(match.group(1))
    except ValueError:
        return None


def _as_tags(value: Optional[RawValue]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _quote(value: str) -> str:
    return '"' + "".join(ESCAPES.get(char, char) for char in value) + '"'


def _tag(value: str) -> str:
    # Tags are written unquoted inside a bracketed list
    return " ".join(re.sub(r"[\[\],]", " ", value).split())


@dataclass
class FrontMatter:
    """Front matter fields of an album post."""

    title: Optional[str] = None
    description: Optional[str] = None
    developer: Optional[str] = None
    date: Optional[datetime.date] = None
    slug: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    card_image: int = 0
    card_offset: int = 50
    card_offset_x: int = 50
    card_zoom: int = 100
    banner_image: int = 0
    banner_offset: int = 50
    banner_offset_x: int = 50
    banner_zoom: int = 100

    @classmethod
    def from_values(cls, values: Dict[str, RawValue]) -> "FrontMatter":
        """Build front matter from scanned values, applying per-field defaults."""
        defaults = cls()
        layout = {
            name: _as_int(values.get(key), getattr(defaults, name))
            for key, name in LAYOUT_KEYS.items()
        }
        return cls(
            title=_as_text(values.get("title")) or None,
            description=_as_text(values.get("description")) or None,
            developer=_as_text(values.get("developer")),
            date=_as_date(values.get("date")),
            slug=_as_text(values.get("slug")) or None,
            tags=_as_tags(values.get("tags")),
            **layout,
        )

    def layout(self) -> AlbumLayout:
        return AlbumLayout(**{name: getattr(self, name) for name in LAYOUT_KEYS.values()})


@dataclass
class PostDocument:
    """A parsed post file."""

    path: Path
    front_matter: FrontMatter
    body: str = ""


class PostRepository(BaseRepository):
    """Reads and writes album posts in the posts directory."""

    def __init__(
        self,
        directory: Path,
        layout: str = "post",
        category: str = "virtual-photography",
        default_description: str = "Virtual Photography",
    ):
        """
        Initialize post repository.

        Args:
            directory: Posts directory
            layout: Layout name written into every post
            category: Category written into every post
            default_description: Description written when none is given
        """
        super().__init__(directory)
        self.layout = layout
        self.category = category
        self.default_description = default_description

    def filename_for(self, slug: str, date: datetime.date) -> str:
        return f"{date.isoformat()}-{slug}.md"

    def find(self, slug: str) -> Optional[Path]:
        """
        Locate the post of an album.

        Matches `{slug}.md` or `{YYYY-MM-DD}-{slug}.md` exactly.

        Returns:
            Path of the first matching post or None
        """
        pattern = re.compile(rf"^(\d{{4}}-\d{{2}}-\d{{2}}-)?{re.escape(slug)}\.md$")
        for path in sorted(self.directory.glob("*.md")):
            if path.is_file() and pattern.match(path.name):
                return path
        return None

    def read(self, path: Path) -> Optional[PostDocument]:
        """
        Read and parse a post.

        Returns:
            Parsed post, or None when the file has no front matter block

        Raises:
            OSError: If the file cannot be read
        """
        scanned = scan_front_matter(self.read_text(path))
        if scanned is None:
            return None
        values, body = scanned
        return PostDocument(path=path, front_matter=FrontMatter.from_values(values), body=body)

    def render(self, front_matter: FrontMatter, body: str = "") -> str:
        """Render front matter (and an optional body) as post text."""
        tags = [tag for tag in (_tag(tag) for tag in front_matter.tags) if tag]
        lines = ["---", f"layout: {self.layout}"]
        # Undated posts stay undated
        if front_matter.date:
            lines.append(f"date: {front_matter.date.isoformat()}")
        lines += [
            f"title: {_quote(front_matter.title or '')}",
            f"description: {_quote(front_matter.description or self.default_description)}",
            f"developer: {_quote(front_matter.developer or '')}",
            f"categories: [{self.category}]",
            f"tags: [{', '.join(tags)}]",
            f"slug: {front_matter.slug or ''}",
        ]
        for key, name in LAYOUT_KEYS.items():
            lines.append(f"{key}: {getattr(front_matter, name)}")
        lines.append("---")
        return "\n".join(lines) + (body if body else "\n")

    def write(self, path: Path, front_matter: FrontMatter, body: str = "") -> Path:
        return self.write_text(path, self.render(front_matter, body))

    def rename(self, source: Path, target: Path) -> Path:
        """
        Move a post to a new file name.

        A missing source is skipped and the target is returned unchanged.
        """
        if source != target and source.exists():
            source.rename(target)
        return target

    def delete(self, path: Path) -> bool:
        return self.delete_file(path)


