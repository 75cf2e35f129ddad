"""
Summarization Stage - summary and study prompts from extracted text.

Summarization failure is recoverable: when the model output cannot be used
the first FALLBACK_SUMMARY_CHARS characters of the extracted text stand in
as a degraded summary.
"""
from dataclasses import dataclass, field
from typing import List

from .ai_service import AIService
from ..core.plans import PlanLimits
from ..models.document import StudyPrompt
from ..utils.json_utils import parse_model_json
from ..core.logging_config import get_logger

logger = get_logger(__name__)

MIN_SUMMARY_CHARS = 50
FALLBACK_SUMMARY_CHARS = 1500
SUMMARY_TEMPERATURE = 0.3

SUMMARY_PROMPT = """You are an academic content analyst preparing study material for Nigerian students.

Write a summary and study guide for the document text supplied by the user.

RULES:
1. Use ONLY the supplied text. Do not add outside knowledge.
2. Cover the document from beginning to end, not just the opening paragraphs.
3. Include every major topic and section.
4. Study prompts must test specific concepts drawn from different parts of the document.

Respond with JSON only, without Markdown fences:
{{"summary": "...", "study_prompts": [{{"topic": "concept from the document", "prompt": "question testing that concept"}}]}}

The summary should be {summary_words} words. Write {prompt_range} study prompts."""


@dataclass
class SummaryResult:
    summary: str
    study_prompts: List[StudyPrompt] = field(default_factory=list)
    degraded: bool = False


class SummarizationService:
    """Produce a plan-sized summary plus study prompts."""

    def __init__(self, ai_service: AIService):
        self.ai_service = ai_service

    async def summarize(self, extracted_text: str, plan: PlanLimits) -> SummaryResult:
        """
        Summarize extracted text.

        Args:
            extracted_text: Output of the extraction stage
            plan: Owner's plan limits

        Returns:
            SummaryResult; degraded=True when the fallback summary was used
        """
        text_for_analysis = extracted_text[:plan.analysis_chars]
        logger.info(
            f"Generating summary (plan: {plan.name}, input: {len(text_for_analysis)} of {len(extracted_text)} chars)"
        )

        raw = await self.ai_service.generate_text(
            SUMMARY_PROMPT.format(summary_words=plan.summary_words, prompt_range=plan.study_prompt_range),
            text_for_analysis,
            plan.summary_max_tokens,
            SUMMARY_TEMPERATURE
        )

        parsed = parse_model_json(raw)
        summary = ""
        prompts: List[StudyPrompt] = []
        if parsed is not None:
            if isinstance(parsed.get("summary"), str):
                summary = parsed["summary"].strip()
            prompts = parse_study_prompts(parsed.get("study_prompts"))

        if len(summary) < MIN_SUMMARY_CHARS:
            logger.warning(
                f"Summary unusable ({len(summary)} chars), falling back to the first "
                f"{FALLBACK_SUMMARY_CHARS} chars of extracted text"
            )
            return SummaryResult(
                summary=extracted_text[:FALLBACK_SUMMARY_CHARS].strip(),
                study_prompts=prompts,
                degraded=True
            )

        logger.info(f"Summary length: {len(summary)}, study prompts: {len(prompts)}")
        return SummaryResult(summary=summary, study_prompts=prompts)


def parse_study_prompts(raw_prompts) -> List[StudyPrompt]:
    """Keep only entries with non-empty string topic and prompt."""
    if not isinstance(raw_prompts, list):
        return []

    prompts = []
    for entry in raw_prompts:
        if not isinstance(entry, dict):
            continue
        topic, prompt = entry.get("topic"), entry.get("prompt")
        if isinstance(topic, str) and isinstance(prompt, str) and topic.strip() and prompt.strip():
            prompts.append(StudyPrompt(topic=topic.strip(), prompt=prompt.strip()))
    return prompts
