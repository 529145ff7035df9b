from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from ..config import LlmSettings

logger = logging.getLogger(__name__)

BRIEF_IDEA_LIMIT = 200

_PROPOSAL_PROMPT_TEMPLATE = (
    "You are an event planning assistant. Generate a detailed and engaging event proposal based on the "
    "following initial details. Include a catchy title, a compelling description, key highlights, target "
    "audience, and potential benefits. Ensure the tone is professional yet exciting.\n\n"
    "Initial details:\n{details}\n\n"
    "Format the response in Markdown."
)


class ProposalError(RuntimeError):
    """Raised when a proposal could not be generated."""


class ProposalNotConfiguredError(ProposalError):
    """Raised when no LLM credentials are configured."""


class ProposalStatus(str, Enum):
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class ProposalResult:
    status: ProposalStatus
    markdown: Optional[str] = None
    error: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        return self.status is ProposalStatus.CONFIRMED

    def to_dict(self) -> dict:
        return {"status": self.status.value, "markdown": self.markdown, "error": self.error}


def build_details(
    *,
    name: Optional[str] = None,
    date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    location: Optional[str] = None,
    organizer: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    brief = (description or "")[:BRIEF_IDEA_LIMIT]
    return (
        f"Event Name: {name or '[No Name]'}\n"
        f"Date: {date or '[No Date]'}\n"
        f"Time: {start_time or '[No Start Time]'} - {end_time or '[No End Time]'}\n"
        f"Location: {location or '[No Location]'}\n"
        f"Organizer: {organizer or '[No Organizer]'}\n"
        f"Brief idea: {brief or '[No brief idea]'}"
    )


class ProposalService:
    def __init__(self, settings: LlmSettings, *, client: Optional[Any] = None) -> None:
        self.settings = settings
        self._client = client

    @property
    def is_available(self) -> bool:
        return self._client is not None or self.settings.is_configured

    def _ensure_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            missing = ", ".join(self.settings.missing_env_vars)
            raise ProposalNotConfiguredError(
                f"LLM is not configured. Set these environment variables to enable proposals: {missing}."
            )
        self._client = OpenAI(
            api_key=self.settings.api_key,
            base_url=self.settings.base_url,
            organization=self.settings.organization,
            project=self.settings.project,
        )
        return self._client

    def generate(self, details: str) -> str:
        """Return a markdown proposal for ``details`` or raise ``ProposalError``."""

        client = self._ensure_client()
        prompt = _PROPOSAL_PROMPT_TEMPLATE.format(details=details)
        try:
            completion = client.chat.completions.create(
                model=self.settings.model,
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_output_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as exc:
            raise ProposalError(f"Failed to generate proposal: {exc}") from exc

        choices = getattr(completion, "choices", None) or []
        text = (choices[0].message.content or "").strip() if choices else ""
        if not text:
            raise ProposalError("No text content received from the language model.")
        return text

    def draft(self, **fields: Optional[str]) -> ProposalResult:
        """Generate a proposal, reporting failure as a result instead of raising."""

        try:
            markdown = self.generate(build_details(**fields))
        except ProposalError as exc:
            logger.warning("Event proposal unavailable: %s", exc)
            return ProposalResult(status=ProposalStatus.FAILED, error=str(exc))
        return ProposalResult(status=ProposalStatus.CONFIRMED, markdown=markdown)


__all__ = [
    "BRIEF_IDEA_LIMIT",
    "ProposalError",
    "ProposalNotConfiguredError",
    "ProposalResult",
    "ProposalService",
    "ProposalStatus",
    "build_details",
]
