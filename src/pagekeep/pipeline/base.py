"""Base classes for the extraction pipeline architecture."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, runtime_checkable

from ..models.content import ArticleRecord, ExtractionMode, PageContent
from ..models.events import ExtractionEvent

logger = logging.getLogger(__name__)

# Type alias for event emitter function
EventEmitter = Callable[[ExtractionEvent], None]


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Contains all state for extracting a single page, accumulated
    as it moves through the pipeline.

    Attributes:
        url: The page URL (becomes content.link)
        mode: Server-side fetch or client-supplied HTML
        full_content: Whether the readability stage should run
        html: Decoded HTML, fetched or supplied by the client
        content: The record being built
        article: Readability output, if the page was readable
        errors: Step name -> error message for optional steps that failed
    """

    url: str
    mode: ExtractionMode = ExtractionMode.SERVER_SIDE
    full_content: bool = True

    # Source document
    html: Optional[str] = None
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    final_url: Optional[str] = None

    # Results (accumulated through pipeline)
    content: PageContent = field(init=False)
    article: Optional[ArticleRecord] = None
    cleaned_html: Optional[str] = None
    truncated: bool = False

    # Status
    errors: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.content = PageContent(link=self.url)


@runtime_checkable
class PipelineStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a PageContext, processes it, and returns
    the (possibly modified) context.

    Error Handling Contract:
    - For expected "nothing to do" outcomes (page not readable,
      readability disabled): leave the context unchanged and return it
    - For failures: raise an exception
    - Critical step failures reach the caller; optional step failures
      are recorded in ctx.errors and leave their fields absent

    Example implementation:
        class NormalizeStep:
            name = "normalize"

            async def execute(
                self,
                ctx: PageContext,
                emit: Optional[EventEmitter] = None
            ) -> PageContext:
                ctx.cleaned_html = self.normalizer.normalize(ctx.html)
                return ctx
    """

    name: str

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


@dataclass
class ExtractionPipeline:
    """
    Pipeline for extracting a single page.

    Critical steps run first, in order; an exception from any of them
    propagates to the caller. Optional steps then run concurrently on the
    shared context. They must only touch their own context fields; an
    exception from one is recorded in ctx.errors and never affects the
    others.

    Example:
        pipeline = ExtractionPipeline(
            critical_steps=[FetchStep(http_client)],
            optional_steps=[ReadabilityStep(extractor, manager), NormalizeStep(normalizer, manager)],
        )

        ctx = await pipeline.execute(PageContext(url=url), emit=log_event)
        print(ctx.content.to_json())
    """

    critical_steps: list[PipelineStep] = field(default_factory=list)
    optional_steps: list[PipelineStep] = field(default_factory=list)

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the pipeline for a page.

        Args:
            ctx: Initial context for the page
            emit: Optional callback for emitting events

        Returns:
            PageContext with final state (check ctx.errors for degraded stages)
        """
        for step in self.critical_steps:
            ctx = await step.execute(ctx, emit)

        if self.optional_steps:
            results = await asyncio.gather(
                *(step.execute(ctx, emit) for step in self.optional_steps),
                return_exceptions=True,
            )
            for step, result in zip(self.optional_steps, results):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                if isinstance(result, BaseException):
                    ctx.errors[step.name] = str(result) or type(result).__name__
                    logger.warning(f"{step.name} failed for {ctx.url}: {ctx.errors[step.name]}")

        return ctx

    def add_step(self, step: PipelineStep, critical: bool = False) -> "ExtractionPipeline":
        """
        Add a step to the pipeline (fluent API).

        Args:
            step: The step to add
            critical: Add to the critical (sequential, fatal) steps

        Returns:
            Self for chaining
        """
        (self.critical_steps if critical else self.optional_steps).append(step)
        return self
