"""Document data models."""
from dataclasses import dataclass, field
from typing import List

PAGE_DELIMITER = "--- Page {page_number} ---"


@dataclass
class PageInfo:
    """Geometry of a single page in a loaded document."""
    page_number: int  # 1-indexed
    width: float
    height: float


@dataclass
class PageText:
    """Text fragments read from one page, in reader order."""
    page_number: int
    fragments: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.fragments)

    def render(self) -> str:
        return f"{PAGE_DELIMITER.format(page_number=self.page_number)}\n{self.text}\n\n"


@dataclass
class ExtractedText:
    """Ordered per-page text of a document, with optional page geometry."""
    pages: List[PageText]
    geometry: List[PageInfo] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def to_string(self) -> str:
        return "".join(page.render() for page in self.pages)


@dataclass
class UploadedFile:
    """A file received from the client, held as raw bytes."""
    file_id: str
    name: str
    size: int
    content_type: str
    data: bytes


@dataclass
class ToolOutput:
    """Finished result of a tool action, ready to be sent back."""
    data: bytes
    filename: str
    media_type: str = "application/pdf"
