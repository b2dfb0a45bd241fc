"""Generation request - drafts one section and never raises."""

import logging
import time
from dataclasses import dataclass

from docwriter.app.llm.client import GenerationClient
from docwriter.app.llm.prompts import build_system_prompt, build_user_prompt, text_to_html
from docwriter.app.models.section import Section
from docwriter.app.utils.logging import StructuredSessionLogger
from docwriter.app.utils.metrics import generation_requests_total

logger = logging.getLogger(__name__)
structured_logger = StructuredSessionLogger()

DEFAULT_TEMPERATURE = 0.7


@dataclass(frozen=True)
class GenerationSuccess:
    """Generated section body."""

    html: str


@dataclass(frozen=True)
class GenerationError:
    """Failed generation; scoped to the section that requested it."""

    reason: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} ({self.reason})"


GenerationResult = GenerationSuccess | GenerationError


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


async def generate_section(
    section: Section,
    client: GenerationClient,
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GenerationResult:
    """Draft the body of one section.

    Args:
        section: Section whose input, notes and parameters shape the prompt
        client: Chat-completion client
        temperature: Sampling temperature

    Returns:
        GenerationSuccess with HTML, or GenerationError on empty content or
        transport/auth failure
    """
    system_prompt = build_system_prompt(section)
    user_prompt = build_user_prompt(section)

    start = time.perf_counter()
    try:
        content = await client.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=temperature,
        )
    except Exception as e:
        logger.error(f"Generation request failed for section {section.id}: {e}")
        structured_logger.log_generation(
            section.id, "request-failed", _elapsed_ms(start), error_reason=type(e).__name__
        )
        generation_requests_total.labels(outcome="request-failed").inc()
        return GenerationError(reason="request-failed", message=f"Error generating text: {e}")

    if not content or not content.strip():
        structured_logger.log_generation(section.id, "empty-response", _elapsed_ms(start))
        generation_requests_total.labels(outcome="empty-response").inc()
        return GenerationError(
            reason="empty-response", message="No content received from the generation service"
        )

    structured_logger.log_generation(section.id, "success", _elapsed_ms(start))
    generation_requests_total.labels(outcome="success").inc()
    return GenerationSuccess(html=text_to_html(content))
