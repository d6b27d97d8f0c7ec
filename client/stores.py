"""State containers for a paper session.

``PaperStore`` owns the upload, the user's options and the generated
artifacts. ``PromptStore`` watches it and keeps the instruction previews in
sync. Both must be driven from a running asyncio event loop.

Every request carries a generation number; a response or error that arrives
after a newer request for the same slot was issued is dropped, so a slow
early response can never overwrite a fresh one.
"""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import httpx

from backend.models.request import ModelTier, PaperKind
from backend.models.section import Section
from client.api import ApiError, PaperCriticApi, PaperFile

logger = logging.getLogger(__name__)

Listener = Callable[[frozenset], None]

# Fields whose change invalidates the instruction previews
PROMPT_FIELDS = frozenset(
    {"file", "kind", "work_in_progress", "has_page_limit", "page_limit", "current_pages"}
)

PAPER_KINDS: list[tuple[str, PaperKind]] = [
    ("Full Conference Paper", PaperKind.FULL_CONFERENCE_PAPER),
    ("Short Conference Paper", PaperKind.SHORT_CONFERENCE_PAPER),
    ("Journal Paper", PaperKind.JOURNAL_PAPER),
    ("Bachelor thesis", PaperKind.BACHELOR_THESIS),
    ("Master thesis", PaperKind.MASTER_THESIS),
    ("University Seminar Paper", PaperKind.SEMINAR_PAPER),
]

_STALE = object()


class Operation(str, Enum):
    SECTIONS = "sections"
    OVERALL_ANALYSIS = "overall_analysis"
    REVIEW = "review"
    SECTION_ANALYSIS = "section_analysis"


@dataclass(frozen=True)
class PaperOptions:
    kind: PaperKind = PaperKind.FULL_CONFERENCE_PAPER
    work_in_progress: bool = False
    has_page_limit: bool = False
    page_limit: int = 0
    current_pages: int = 0
    api_key: str = ""
    model_tier: ModelTier = ModelTier.FLASH

    def form_fields(self) -> dict:
        return {
            "kind": self.kind,
            "workInProgress": self.work_in_progress,
            "hasPageLimit": self.has_page_limit,
            "pageLimit": self.page_limit,
            "currentPages": self.current_pages,
            "apiKey": self.api_key,
            "modelTier": self.model_tier,
        }


class AnnotatedSection(Section):
    analysis: Optional[str] = None


class PaperStore:
    def __init__(self, api: PaperCriticApi):
        self.api = api
        self.file: Optional[PaperFile] = None
        self.options = PaperOptions()

        self.sections: list[AnnotatedSection] = []
        self.overall_analysis = ""
        self.review = ""

        self.errors: dict[Operation, Optional[Exception]] = {op: None for op in Operation}
        self.loading_by_operation: dict[Operation, bool] = {op: False for op in Operation}

        self._generations: dict[str, int] = defaultdict(int)
        self._listeners: list[Listener] = []

    @property
    def loading(self) -> bool:
        return any(self.loading_by_operation.values())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the names of changed fields. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self, *changed: str):
        names = frozenset(changed)
        for listener in list(self._listeners):
            listener(names)

    # Inputs

    def load_file(self, name: str, data: bytes):
        self._reset_results()
        self.file = PaperFile(name=name, data=data)
        self._notify("file", "sections")

    def read_paper_from_file(self, path):
        path = Path(path)
        self.load_file(path.name, path.read_bytes())

    def update_options(self, **changes: Any):
        known = {f.name for f in fields(PaperOptions)}
        unknown = set(changes) - known
        if unknown:
            raise TypeError(f"Unknown paper options: {', '.join(sorted(unknown))}")
        if "kind" in changes:
            changes["kind"] = PaperKind(changes["kind"])
        if "model_tier" in changes:
            changes["model_tier"] = ModelTier(changes["model_tier"])

        changed = [name for name, value in changes.items() if getattr(self.options, name) != value]
        if not changed:
            return
        self.options = replace(self.options, **changes)
        self._notify(*changed)

    def reset(self):
        self._reset_results()
        self.file = None
        self.options = PaperOptions()
        self._notify("file", "sections", *(f.name for f in fields(PaperOptions)))

    def _reset_results(self):
        # Invalidate everything in flight for the previous file
        for key in list(self._generations):
            self._generations[key] += 1
        self.sections = []
        self.overall_analysis = ""
        self.review = ""
        for op in Operation:
            self.errors[op] = None
            self.loading_by_operation[op] = False

    # Generation

    async def _run(self, operation: Operation, call: Callable[[], Awaitable[Any]], key: Optional[str] = None):
        key = key or operation.value
        self._generations[key] += 1
        generation = self._generations[key]
        self.loading_by_operation[operation] = True
        try:
            result = await call()
        except Exception as e:
            if self._generations[key] != generation:
                logger.debug(f"Dropping stale {key} error (generation {generation}): {e}")
                return _STALE
            self.errors[operation] = e
            raise
        finally:
            if self._generations[key] == generation:
                self.loading_by_operation[operation] = False

        if self._generations[key] != generation:
            logger.debug(f"Dropping stale {key} response (generation {generation})")
            return _STALE
        self.errors[operation] = None
        return result

    async def get_section_titles(self) -> Optional[list[AnnotatedSection]]:
        if self.file is None:
            return None
        file, form = self.file, self.options.form_fields()
        result = await self._run(Operation.SECTIONS, lambda: self.api.sections(form, file))
        if result is _STALE:
            return None
        self.sections = [AnnotatedSection.model_validate(s.model_dump()) for s in result]
        self._notify("sections")
        return self.sections

    async def get_overall_analysis(self) -> Optional[str]:
        if self.file is None:
            return None
        file, form = self.file, self.options.form_fields()
        result = await self._run(Operation.OVERALL_ANALYSIS, lambda: self.api.overall_analysis(form, file))
        if result is _STALE:
            return None
        self.overall_analysis = result
        self._notify("overall_analysis")
        return result

    async def get_review(self) -> Optional[str]:
        if self.file is None:
            return None
        file, form = self.file, self.options.form_fields()
        result = await self._run(Operation.REVIEW, lambda: self.api.review(form, file))
        if result is _STALE:
            return None
        self.review = result
        self._notify("review")
        return result

    def find_section(self, title: str) -> Optional[AnnotatedSection]:
        return next((s for s in self.sections if s.title == title), None)

    async def enrich_with_section_analysis(self, section_title: str) -> Optional[str]:
        if self.file is None or not section_title:
            return None
        if self.find_section(section_title) is None:
            raise KeyError(f"Unknown section: {section_title}")

        file, form = self.file, self.options.form_fields()
        result = await self._run(
            Operation.SECTION_ANALYSIS,
            lambda: self.api.section_analysis(form, file, section_title),
            key=f"{Operation.SECTION_ANALYSIS.value}:{section_title}",
        )
        section = self.find_section(section_title)
        if result is _STALE or section is None:
            return None
        section.analysis = result
        self._notify("analysis")
        return result


class PromptStore:
    """Instruction previews derived from a ``PaperStore``.

    Refreshes are grouped: ``overall`` and ``review`` follow PROMPT_FIELDS,
    ``sections`` also follows the section list. Within a group a new refresh
    cancels the one in flight, and each refresh waits ``debounce`` seconds
    before calling the service.
    """

    def __init__(self, paper_store: PaperStore, debounce: float = 0.3):
        self.paper_store = paper_store
        self.api = paper_store.api
        self.debounce = debounce

        self.overall_analysis_system_prompt = ""
        self.overall_analysis_message_part = ""
        self.review_system_prompt = ""
        self.review_message_part = ""
        self.section_analysis_system_prompt: dict[str, str] = {}
        self.section_analysis_message_part: dict[str, str] = {}
        self.sections_system_prompt = ""

        self.errors: dict[str, Optional[Exception]] = {
            name: None
            for name in (
                "overall_analysis_system_prompt",
                "overall_analysis_message_part",
                "review_system_prompt",
                "review_message_part",
                "section_analysis_system_prompt",
                "section_analysis_message_part",
                "sections_system_prompt",
            )
        }

        self._tasks: dict[str, asyncio.Task] = {}
        self._generations: dict[str, int] = defaultdict(int)
        self._unsubscribe = paper_store.subscribe(self._on_change)

    def _on_change(self, changed: frozenset):
        if changed & PROMPT_FIELDS:
            self._schedule("overall", self._refresh_overall)
            self._schedule("review", self._refresh_review)
        if changed & (PROMPT_FIELDS | {"sections"}):
            self._schedule("sections", self._refresh_sections)

    def _schedule(self, group: str, refresh: Callable[[Callable[[], bool]], Awaitable[None]]):
        previous = self._tasks.get(group)
        if previous is not None and not previous.done():
            previous.cancel()
        self._generations[group] += 1
        generation = self._generations[group]

        def is_current() -> bool:
            return self._generations[group] == generation

        self._tasks[group] = asyncio.get_running_loop().create_task(self._debounced(refresh, is_current))

    async def _debounced(self, refresh, is_current: Callable[[], bool]):
        if self.debounce > 0:
            await asyncio.sleep(self.debounce)
        await refresh(is_current)

    async def _fetch(self, name: str, call: Callable[[], Awaitable[str]], is_current: Callable[[], bool]):
        """Fetch one preview. On failure the previous value stays and the error is recorded."""
        try:
            value = await call()
        except (ApiError, httpx.HTTPError) as e:
            if is_current():
                logger.warning(f"Refreshing {name} failed: {e}")
                self.errors[name] = e
            return _STALE
        if not is_current():
            return _STALE
        self.errors[name] = None
        return value

    async def _refresh_overall(self, is_current):
        store = self.paper_store
        if store.file is None:
            return
        file, form = store.file, store.options.form_fields()
        for name in ("overall_analysis_system_prompt", "overall_analysis_message_part"):
            call = getattr(self.api, name)
            value = await self._fetch(name, lambda: call(form, file), is_current)
            if value is not _STALE:
                setattr(self, name, value)

    async def _refresh_review(self, is_current):
        value = await self._fetch("review_system_prompt", self.api.review_system_prompt, is_current)
        if value is not _STALE:
            self.review_system_prompt = value

        store = self.paper_store
        if store.file is None:
            return
        file, form = store.file, store.options.form_fields()
        value = await self._fetch(
            "review_message_part", lambda: self.api.review_message_part(form, file), is_current
        )
        if value is not _STALE:
            self.review_message_part = value

    async def _refresh_sections(self, is_current):
        store = self.paper_store
        titles = [s.title for s in store.sections if s.title] if store.file is not None else []
        # Previews only ever cover the sections currently present
        for name in ("section_analysis_system_prompt", "section_analysis_message_part"):
            setattr(self, name, {t: v for t, v in getattr(self, name).items() if t in titles})
        file, form = store.file, store.options.form_fields()
        for title in titles:
            for name in ("section_analysis_system_prompt", "section_analysis_message_part"):
                call = getattr(self.api, name)
                value = await self._fetch(name, lambda: call(form, title, file), is_current)
                if value is not _STALE:
                    setattr(self, name, {**getattr(self, name), title: value})

    async def load_static(self):
        """Fetch the previews that do not depend on the paper."""
        for name in ("sections_system_prompt", "review_system_prompt"):
            value = await self._fetch(name, getattr(self.api, name), lambda: True)
            if value is not _STALE:
                setattr(self, name, value)

    async def wait_idle(self):
        while True:
            pending = [task for task in self._tasks.values() if not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self):
        self._unsubscribe()
        for task in self._tasks.values():
            task.cancel()
