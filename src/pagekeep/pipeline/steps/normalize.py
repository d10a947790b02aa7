"""NormalizeStep - cleaned HTML pipeline step."""

import logging
from typing import Optional

from ...concurrency.manager import ConcurrencyManager
from ...extraction.normalizer import HtmlNormalizer
from ...models.events import EventType, ExtractionEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class NormalizeStep:
    """
    Pipeline step that produces the cleaned, bounded HTML document.

    Runs regardless of ctx.full_content.

    Populates:
        ctx.cleaned_html: Standalone cleaned HTML document
        ctx.truncated: Whether the output was cut to the character budget

    Raises MalformedInputError if the HTML cannot be parsed.
    """

    name = "normalize"

    def __init__(
        self,
        normalizer: HtmlNormalizer,
        concurrency: Optional[ConcurrencyManager] = None,
        max_chars: Optional[int] = None,
    ) -> None:
        """
        Initialize the normalize step.

        Args:
            normalizer: HTML normalizer
            concurrency: Thread pool for parsing (runs inline if None)
            max_chars: Character budget (normalizer config default if None)
        """
        self._normalizer = normalizer
        self._concurrency = concurrency
        self._max_chars = max_chars

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the normalize step.

        Args:
            ctx: Page context with html populated
            emit: Optional callback to emit events

        Returns:
            PageContext with cleaned_html populated
        """
        try:
            if self._concurrency is not None:
                result = await self._concurrency.run_cpu_bound(
                    self._normalizer.normalize_document, ctx.html, self._max_chars
                )
            else:
                result = self._normalizer.normalize_document(ctx.html, self._max_chars)
        except Exception as e:
            if emit:
                emit(
                    ExtractionEvent(
                        type=EventType.NORMALIZE_FAILED,
                        url=ctx.url,
                        error=str(e),
                        message=f"Normalization failed: {e}",
                    )
                )
            raise

        ctx.cleaned_html = result.html
        ctx.truncated = result.truncated

        if result.truncated:
            logger.info(f"Cleaned HTML for {ctx.url} truncated to {result.text_length} chars")

        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.NORMALIZE_COMPLETED,
                    url=ctx.url,
                    text_chars=result.text_length,
                    truncated=result.truncated,
                    message=f"Cleaned HTML: {len(result.html)} bytes",
                )
            )

        return ctx
