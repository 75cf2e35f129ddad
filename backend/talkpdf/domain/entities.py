"""
Domain entities - Core business objects.
These represent the business concepts, not database models.
"""
from dataclasses import dataclass
from typing import Optional
from pathlib import PurePosixPath

from ..models.document import DocumentStatus

WORD_EXTENSIONS = {".doc", ".docx"}

CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}


def infer_file_type(file_name: Optional[str]) -> str:
    """Return "word" for .doc/.docx names, "pdf" for everything else."""
    suffix = PurePosixPath((file_name or "").lower()).suffix
    return "word" if suffix in WORD_EXTENSIONS else "pdf"


def content_type_for(file_name: Optional[str]) -> str:
    suffix = PurePosixPath((file_name or "").lower()).suffix
    return CONTENT_TYPES.get(suffix, "application/pdf")


@dataclass
class Document:
    """
    Document entity - represents a document in the domain.
    This is a pure domain object, independent of persistence.
    """
    id: str
    user_id: str
    file_name: str
    file_url: Optional[str]
    status: str = DocumentStatus.UPLOADED.value
    file_size: Optional[int] = None
    summary: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> "Document":
        return cls(
            id=record["id"],
            user_id=record["user_id"],
            file_name=record.get("file_name") or "",
            file_url=record.get("file_url"),
            status=record.get("status") or DocumentStatus.UPLOADED.value,
            file_size=record.get("file_size"),
            summary=record.get("summary"),
        )

    @property
    def file_type(self) -> str:
        return infer_file_type(self.file_name)

    @property
    def content_type(self) -> str:
        return content_type_for(self.file_name)

