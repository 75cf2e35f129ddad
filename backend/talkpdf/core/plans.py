"""
Subscription plan limits.

Each tier parameterizes extraction depth, summary length, study prompt
count and the narration budget. The table is versioned so deployments can
tell which limits a processed document was produced under.
"""
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

from .logging_config import get_logger

logger = get_logger(__name__)

PLAN_LIMITS_VERSION = "2025-01"
DEFAULT_PLAN = "free"


@dataclass(frozen=True)
class PlanLimits:
    """Numeric budgets for one subscription tier."""
    name: str
    max_pages: int              # 0 disables page-level extraction
    analysis_chars: int         # extracted text fed to summarization
    summary_words: str          # target summary length, e.g. "200-350"
    study_prompt_range: str     # e.g. "3-5"
    summary_max_tokens: int
    max_tts_chars: int          # narration script cap
    max_chunks: int             # chunk cap for chunking speech providers

    @property
    def page_extraction_enabled(self) -> bool:
        return self.max_pages > 0


PLAN_LIMITS: Dict[str, PlanLimits] = {
    "free": PlanLimits(
        name="free",
        max_pages=0,
        analysis_chars=5000,
        summary_words="200-350",
        study_prompt_range="3-5",
        summary_max_tokens=2000,
        max_tts_chars=2000,
        max_chunks=1,
    ),
    "plus": PlanLimits(
        name="plus",
        max_pages=30,
        analysis_chars=8000,
        summary_words="400-700",
        study_prompt_range="5-8",
        summary_max_tokens=3000,
        max_tts_chars=6000,
        max_chunks=3,
    ),
    "pro": PlanLimits(
        name="pro",
        max_pages=50,
        analysis_chars=12000,
        summary_words="800-1200",
        study_prompt_range="8-12",
        summary_max_tokens=4000,
        max_tts_chars=15000,
        max_chunks=8,
    ),
}


def resolve_plan(
    plan_name: Optional[str],
    table: Mapping[str, PlanLimits] = PLAN_LIMITS
) -> PlanLimits:
    """
    Look up the limits for a plan name.

    Unknown or missing plan names resolve to the free tier.

    Args:
        plan_name: Value of the profile's subscription_plan column
        table: Plan table to resolve against

    Returns:
        PlanLimits for the tier
    """
    key = (plan_name or DEFAULT_PLAN).strip().lower()
    limits = table.get(key)
    if limits is None:
        logger.warning(f"Unknown subscription plan '{plan_name}', using '{DEFAULT_PLAN}' limits")
        limits = table[DEFAULT_PLAN]
    return limits
