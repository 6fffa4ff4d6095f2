"""Viewer session: the call site that drives overlay passes.

Holds the inputs a document view changes over time (active filter,
current page, user annotations, selected annotation) and re-runs the
overlay whenever they change. Each input change bumps a generation
counter; a pass started under an older generation has its result
discarded, so the last input always wins.

A page change alone reuses the highlighted markup of the previous pass
and only re-applies page visibility.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from clauselens.clause_types import to_hyphenated
from clauselens.config import get_settings
from clauselens.errors import MalformedDocumentError
from clauselens.models.annotation import Annotation
from clauselens.models.catalog import DEFAULT_CLAUSE_CATALOG
from clauselens.overlay.click import ClickTarget, resolve_click_target
from clauselens.overlay.markup import apply_page_visibility, count_pages
from clauselens.overlay.orchestrator import OverlayResult, apply_overlay

if TYPE_CHECKING:
    from clauselens.config import Settings
    from clauselens.input_pipeline.analysis import StructuredDocument
    from clauselens.models.catalog import ClauseCatalog
    from clauselens.overlay.diagnostics import DiagnosticSink

logger = logging.getLogger(__name__)

_HighlightKey: TypeAlias = tuple[tuple[Annotation, ...], frozenset[str]]


@dataclass(frozen=True)
class PassTicket:
    """Snapshot of the inputs a pass was started with."""

    generation: int
    annotations: tuple[Annotation, ...]
    active_filter: frozenset[str]
    page: int

    @property
    def highlight_key(self) -> _HighlightKey:
        return self.annotations, self.active_filter


class OverlaySession:
    """Drive overlay passes for one document view.

    Args:
        document: Markup plus AI-detected clauses.
        catalog: Display metadata; its keys are the filterable types.
        active_filter: Initially enabled types; defaults to the catalog.
        sink: Diagnostic sink passed to every pass.
        settings: Defaults to ``get_settings()``.
    """

    def __init__(
        self,
        document: StructuredDocument,
        *,
        catalog: ClauseCatalog = DEFAULT_CLAUSE_CATALOG,
        active_filter: Iterable[str] | None = None,
        sink: DiagnosticSink | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.document = document
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.sink = sink
        types = catalog if active_filter is None else active_filter
        self.active_filter: set[str] = {to_hyphenated(t) for t in types}
        self.user_annotations: list[Annotation] = []
        self.page = 1
        self.selected: Annotation | None = None
        self.last_result: OverlayResult | None = None

        self._generation = 0
        self._highlighted: tuple[_HighlightKey, OverlayResult] | None = None
        self._page_count = (
            count_pages(document.content, self.settings.overlay.page_selector)
            if self.is_structured
            else 0
        )

    # -- inputs ---------------------------------------------------------

    @property
    def is_structured(self) -> bool:
        return (
            self.document.content_type
            in self.settings.overlay.structured_content_types
        )

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def annotations(self) -> list[Annotation]:
        """AI-detected followed by user-authored annotations."""
        return [*self.document.clauses, *self.user_annotations]

    def _changed(self) -> None:
        self._generation += 1

    def toggle_filter(self, clause_type: str) -> bool:
        """Flip a type in the active filter; return whether it is now enabled."""
        key = to_hyphenated(clause_type)
        if key in self.active_filter:
            self.active_filter.discard(key)
            enabled = False
        else:
            self.active_filter.add(key)
            enabled = True
        self._changed()
        return enabled

    def set_page(self, page: int) -> int:
        """Select a page, clamped to ``1..page_count``; return the page set."""
        self.page = min(max(page, 1), max(self._page_count, 1))
        self._changed()
        return self.page

    def next_page(self) -> int:
        return self.set_page(self.page + 1)

    def previous_page(self) -> int:
        return self.set_page(self.page - 1)

    def add_user_annotation(self, text: str, start: int, end: int) -> Annotation:
        """Record a review comment for a host-resolved selection."""
        annotation = Annotation.from_selection(text, start, end)
        self.user_annotations.append(annotation)
        self._changed()
        logger.info("Added review comment at %d-%d", start, end)
        return annotation

    def select(self, attrs: Mapping[str, str | None]) -> Annotation | None:
        """Resolve a click on a rendered span and remember the selection.

        A click outside any highlight, or on a stale one, selects nothing
        and leaves the previous selection untouched.
        """
        target = ClickTarget.from_attributes(attrs)
        if target is None:
            return None
        annotation = resolve_click_target(target, self.annotations)
        if annotation is None:
            logger.debug("No annotation for clicked highlight %s", target.identifier)
            return None
        self.selected = annotation
        return annotation

    # -- passes ---------------------------------------------------------

    def begin_pass(self) -> PassTicket:
        return PassTicket(
            generation=self._generation,
            annotations=tuple(self.annotations),
            active_filter=frozenset(self.active_filter),
            page=self.page,
        )

    def _highlight(self, ticket: PassTicket) -> OverlayResult:
        cached = self._highlighted
        if cached is not None and cached[0] == ticket.highlight_key:
            return cached[1]
        result = apply_overlay(
            self.document.content,
            ticket.annotations,
            ticket.active_filter,
            None,
            catalog=self.catalog,
            sink=self.sink,
            settings=self.settings,
        )
        self._highlighted = (ticket.highlight_key, result)
        return result

    def _run(self, ticket: PassTicket) -> OverlayResult:
        if not self.is_structured:
            return OverlayResult(markup=self.document.content)
        try:
            highlighted = self._highlight(ticket)
        except MalformedDocumentError:
            logger.exception(
                "Overlay pass failed for document %r; showing raw content",
                self.document.document_id,
            )
            return OverlayResult(markup=self.document.content)

        markup, page, page_count = apply_page_visibility(
            highlighted.markup, ticket.page, self.settings.overlay.page_selector
        )
        return OverlayResult(
            markup=markup,
            page=page,
            page_count=page_count,
            highlights=highlighted.highlights,
            skipped=highlighted.skipped,
        )

    def complete_pass(self, ticket: PassTicket) -> OverlayResult | None:
        """Run the pass for *ticket*; None if newer inputs superseded it."""
        result = self._run(ticket)
        if ticket.generation != self._generation:
            logger.debug(
                "Discarding pass %d; inputs now at generation %d",
                ticket.generation,
                self._generation,
            )
            return None
        self.last_result = result
        return result

    def render(self) -> OverlayResult:
        """Run a pass synchronously against the current inputs."""
        result = self.complete_pass(self.begin_pass())
        if result is None:  # pragma: no cover - inputs cannot change mid-call
            msg = "Overlay pass superseded during synchronous render"
            raise RuntimeError(msg)
        return result

    async def refresh(self) -> OverlayResult | None:
        """Run a pass in a worker thread without blocking the event loop.

        Returns None when another input change arrived while the pass was
        running; the caller should wait for the newer pass instead.
        """
        ticket = self.begin_pass()
        return await asyncio.to_thread(self.complete_pass, ticket)
