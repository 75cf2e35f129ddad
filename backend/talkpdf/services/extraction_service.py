"""
Extraction Stage - turns a raw document into plain text.

Text extraction is delegated to a multimodal model. Plans entitled to
page-level structure get one combined request returning pages and full
text; if that fails to parse or comes back too short, a simpler full-text
request is made. If neither yields MIN_EXTRACTED_CHARS characters the
document cannot be processed.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from .ai_service import AIService
from ..api.exceptions import ExtractionError
from ..core.plans import PlanLimits
from ..models.document import PageContent
from ..utils.json_utils import parse_model_json
from ..core.logging_config import get_logger

logger = get_logger(__name__)

MIN_EXTRACTED_CHARS = 50
EXTRACTION_MAX_TOKENS = 16000
EXTRACTION_TEMPERATURE = 0.1

BLANK_PAGE_MARKER = "[BLANK PAGE]"
UNREADABLE_MARKER = "[UNREADABLE]"

PAGE_EXTRACTION_PROMPT = """You extract text from documents. You reproduce text; you never write it.

RULES:
1. Output only text that is physically printed on each page.
2. Never paraphrase, summarize, correct, complete or invent content.
3. Never draw on outside knowledge to fill gaps.
4. A page that is empty or cannot be read is returned as {{"page": N, "text": "{blank}"}}.
5. Keep the original wording, spelling and reading order.
6. When a page carries a chapter or section heading, put it in "chapter".

Respond with JSON only, without Markdown fences:
{{"pages": [{{"page": 1, "text": "text of page 1", "chapter": "heading or null"}}], "full_text": "all page texts joined in order"}}

Return at most {max_pages} pages."""

SIMPLE_EXTRACTION_PROMPT = f"""You extract text from documents. Reproduce ALL text exactly as it appears.

RULES:
1. Output only text that exists in the document.
2. Do not add explanations, commentary or headings of your own.
3. Do not rephrase; keep the original wording and order.
4. Mark any part you cannot read as {UNREADABLE_MARKER} instead of guessing.
5. Output the extracted text and nothing else."""


@dataclass
class ExtractionResult:
    text: str
    page_contents: List[PageContent] = field(default_factory=list)
    used_page_extraction: bool = False

    @property
    def page_count(self) -> int:
        return len(self.page_contents)


class ExtractionService:
    """
    Extract plain text (and, for entitled plans, pages) from a document.
    """

    def __init__(self, ai_service: AIService, min_chars: int = MIN_EXTRACTED_CHARS):
        self.ai_service = ai_service
        self.min_chars = min_chars

    async def extract(
        self,
        file_bytes: bytes,
        file_name: str,
        mime_type: str,
        plan: PlanLimits
    ) -> ExtractionResult:
        """
        Extract text from a document.

        Args:
            file_bytes: Raw document bytes
            file_name: Declared file name
            mime_type: MIME type sent with the document
            plan: Owner's plan limits

        Returns:
            ExtractionResult with at least min_chars of text

        Raises:
            ExtractionError: If no extraction path yields enough text
        """
        if plan.page_extraction_enabled:
            logger.info(f"Extracting text + pages from {file_name} (plan: {plan.name}, max {plan.max_pages} pages)")
            result = await self._extract_pages(file_bytes, file_name, mime_type, plan.max_pages)
            if result is not None and len(result.text) >= self.min_chars:
                return result
            logger.info(f"Page extraction unusable for {file_name}, falling back to simple extraction")

        logger.info(f"Simple text extraction for {file_name}")
        raw = await self.ai_service.read_document(
            SIMPLE_EXTRACTION_PROMPT,
            "Extract all text content from this document.",
            file_bytes,
            file_name,
            mime_type,
            EXTRACTION_MAX_TOKENS,
            EXTRACTION_TEMPERATURE
        )
        text = (raw or "").strip()

        if len(text) < self.min_chars:
            raise ExtractionError(
                f"Could not extract enough text from {file_name} "
                f"({len(text)} chars, minimum {self.min_chars})"
            )

        logger.info(f"Extracted {len(text)} chars from {file_name}")
        return ExtractionResult(text=text)

    async def _extract_pages(
        self,
        file_bytes: bytes,
        file_name: str,
        mime_type: str,
        max_pages: int
    ) -> Optional[ExtractionResult]:
        raw = await self.ai_service.read_document(
            PAGE_EXTRACTION_PROMPT.format(blank=BLANK_PAGE_MARKER, max_pages=max_pages),
            "Extract all text from this document page by page.",
            file_bytes,
            file_name,
            mime_type,
            EXTRACTION_MAX_TOKENS,
            EXTRACTION_TEMPERATURE
        )
        parsed = parse_model_json(raw)
        if parsed is None:
            logger.warning(f"Page extraction response for {file_name} was not valid JSON")
            return None

        pages = parse_pages(parsed.get("pages"), max_pages)
        full_text = parsed.get("full_text")
        if not isinstance(full_text, str) or not full_text.strip():
            full_text = "\n\n".join(page.text for page in pages)

        logger.info(f"Page extraction for {file_name}: {len(pages)} pages, {len(full_text)} chars")
        return ExtractionResult(text=full_text.strip(), page_contents=pages, used_page_extraction=True)


def parse_pages(raw_pages, max_pages: int) -> List[PageContent]:
    """
    Validate the model's page array.

    Entries that are not objects are skipped; missing page numbers are
    filled from position. At most max_pages entries are kept.
    """
    if not isinstance(raw_pages, list):
        return []

    pages: List[PageContent] = []
    for position, entry in enumerate(raw_pages[:max_pages], start=1):
        if not isinstance(entry, dict):
            continue
        number = entry.get("page")
        chapter = entry.get("chapter")
        pages.append(PageContent(
            page_number=number if isinstance(number, int) and number > 0 else position,
            text=str(entry.get("text") or ""),
            chapter=chapter if isinstance(chapter, str) and chapter.strip() else None
        ))
    return pages
