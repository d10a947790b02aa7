"""ReadabilityStep - article extraction pipeline step."""

import logging
from typing import Optional

from ...concurrency.manager import ConcurrencyManager
from ...extraction.readability import ReadabilityExtractor
from ...models.events import EventType, ExtractionEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class ReadabilityStep:
    """
    Pipeline step that extracts the article from the page HTML.

    Parsing and scoring run in the thread pool on a parse of their own,
    so this step can run side by side with NormalizeStep.

    Populates:
        ctx.article: ArticleRecord, when the page is readable

    Leaves ctx.article unset when:
        - ctx.full_content is False
        - There is no HTML
        - The page is not readable

    Raises ExtractionError on unexpected faults inside the algorithm.

    Example:
        step = ReadabilityStep(ReadabilityExtractor(), manager)
        ctx = await step.execute(ctx)
        if ctx.article:
            print(ctx.article.title)
    """

    name = "readability"

    def __init__(
        self,
        extractor: ReadabilityExtractor,
        concurrency: Optional[ConcurrencyManager] = None,
    ) -> None:
        """
        Initialize the readability step.

        Args:
            extractor: Article extractor
            concurrency: Thread pool for parsing (runs inline if None)
        """
        self._extractor = extractor
        self._concurrency = concurrency

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the readability step.

        Args:
            ctx: Page context with html populated
            emit: Optional callback to emit events

        Returns:
            PageContext with article populated if the page was readable
        """
        if not ctx.full_content or not ctx.html:
            reason = "full content not requested" if not ctx.full_content else "no HTML"
            logger.debug(f"Skipping readability for {ctx.url}: {reason}")
            if emit:
                emit(
                    ExtractionEvent(
                        type=EventType.READABILITY_SKIPPED,
                        url=ctx.url,
                        message=f"Skipped: {reason}",
                    )
                )
            return ctx

        try:
            if self._concurrency is not None:
                article = await self._concurrency.run_cpu_bound(self._extractor.extract_html, ctx.html, ctx.url)
            else:
                article = self._extractor.extract_html(ctx.html, ctx.url)
        except Exception as e:
            if emit:
                emit(
                    ExtractionEvent(
                        type=EventType.READABILITY_FAILED,
                        url=ctx.url,
                        error=str(e),
                        message=f"Readability failed: {e}",
                    )
                )
            raise

        if article is None:
            if emit:
                emit(
                    ExtractionEvent(
                        type=EventType.READABILITY_SKIPPED,
                        url=ctx.url,
                        message="Skipped: page is not readable",
                    )
                )
            return ctx

        ctx.article = article
        logger.debug(f"Extracted article from {ctx.url}: {len(article.text_content)} chars")

        if emit:
            emit(
                ExtractionEvent(
                    type=EventType.READABILITY_COMPLETED,
                    url=ctx.url,
                    text_chars=len(article.text_content),
                    message=f"Extracted {article.title!r}",
                )
            )

        return ctx
