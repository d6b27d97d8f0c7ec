"""Tests for the paper and prompt state stores."""

import asyncio

import httpx
import pytest
from pydantic import ValidationError

from backend.models.request import ModelTier, PaperKind
from client.api import ApiError, PaperCriticApi
from client.stores import Operation, PaperOptions, PaperStore, PromptStore


def make_api(handler) -> PaperCriticApi:
    transport = httpx.MockTransport(handler)
    return PaperCriticApi(client=httpx.AsyncClient(transport=transport, base_url="http://test"))


def sent_kind(request: httpx.Request) -> str:
    for kind in PaperKind:
        if kind.value.encode() in request.content:
            return kind.value
    return ""


SECTIONS_JSON = [{"title": "Abstract"}, {"title": "Introduction", "sectionNumber": "1"}]


class TestPaperOptions:
    def test_form_fields_use_wire_names(self):
        fields = PaperOptions(has_page_limit=True, page_limit=8, current_pages=10).form_fields()

        assert fields["kind"] is PaperKind.FULL_CONFERENCE_PAPER
        assert fields["hasPageLimit"] is True
        assert fields["pageLimit"] == 8
        assert fields["modelTier"] is ModelTier.FLASH


class TestPaperStore:
    def test_update_options_notifies_only_changed_fields(self):
        store = PaperStore(make_api(lambda request: httpx.Response(200)))
        changes = []
        store.subscribe(changes.append)

        store.update_options(kind="full conference paper")
        store.update_options(kind="master thesis", work_in_progress=True)

        assert changes == [frozenset({"kind", "work_in_progress"})]
        assert store.options.kind is PaperKind.MASTER_THESIS

    def test_update_options_rejects_unknown_values(self):
        store = PaperStore(make_api(lambda request: httpx.Response(200)))

        with pytest.raises(TypeError):
            store.update_options(colour="blue")
        with pytest.raises(ValueError):
            store.update_options(kind="poster")
        with pytest.raises(ValueError):
            store.update_options(model_tier="turbo")

    def test_no_request_without_file(self):
        requests = []
        store = PaperStore(make_api(lambda request: requests.append(request) or httpx.Response(200)))

        assert asyncio.run(store.get_overall_analysis()) is None
        assert requests == []

    def test_stale_response_is_dropped(self):
        async def scenario():
            started = asyncio.Event()
            release = asyncio.Event()
            kinds = []

            async def handler(request):
                await request.aread()
                kinds.append(sent_kind(request))
                if len(kinds) == 1:
                    started.set()
                    await release.wait()
                    return httpx.Response(200, text="stale analysis")
                return httpx.Response(200, text="fresh analysis")

            store = PaperStore(make_api(handler))
            store.load_file("paper.pdf", b"%PDF")
            first = asyncio.create_task(store.get_overall_analysis())
            await started.wait()

            store.update_options(kind=PaperKind.JOURNAL_PAPER)
            assert await store.get_overall_analysis() == "fresh analysis"

            release.set()
            assert await first is None
            return store, kinds

        store, kinds = asyncio.run(scenario())

        assert store.overall_analysis == "fresh analysis"
        assert kinds == ["full conference paper", "journal paper"]
        assert store.loading is False

    def test_stale_error_is_dropped(self):
        async def scenario():
            started = asyncio.Event()
            release = asyncio.Event()
            calls = []

            async def handler(request):
                calls.append(request)
                if len(calls) == 1:
                    started.set()
                    await release.wait()
                    return httpx.Response(502, json={"detail": "old failure"})
                return httpx.Response(200, text="fresh review")

            store = PaperStore(make_api(handler))
            store.load_file("paper.pdf", b"%PDF")
            first = asyncio.create_task(store.get_review())
            await started.wait()

            store.update_options(kind=PaperKind.JOURNAL_PAPER)
            assert await store.get_review() == "fresh review"

            release.set()
            assert await first is None
            return store

        store = asyncio.run(scenario())

        assert store.review == "fresh review"
        assert store.errors[Operation.REVIEW] is None
        assert store.loading is False

    def test_cancelled_request_clears_loading(self):
        async def scenario():
            started = asyncio.Event()

            async def handler(request):
                started.set()
                await asyncio.Event().wait()

            store = PaperStore(make_api(handler))
            store.load_file("paper.pdf", b"%PDF")
            pending = asyncio.create_task(store.get_review())
            await started.wait()
            assert store.loading_by_operation[Operation.REVIEW] is True

            pending.cancel()
            with pytest.raises(asyncio.CancelledError):
                await pending
            return store

        store = asyncio.run(scenario())

        assert store.loading_by_operation[Operation.REVIEW] is False
        assert store.loading is False
        assert store.errors[Operation.REVIEW] is None

    def test_malformed_sections_payload_is_recorded(self):
        async def handler(request):
            return httpx.Response(200, json=[{"sectionNumber": "1"}])

        async def scenario():
            store = PaperStore(make_api(handler))
            store.load_file("paper.pdf", b"%PDF")
            with pytest.raises(ValidationError):
                await store.get_section_titles()
            return store

        store = asyncio.run(scenario())

        assert isinstance(store.errors[Operation.SECTIONS], ValidationError)
        assert store.loading_by_operation[Operation.SECTIONS] is False
        assert store.sections == []

    def test_new_file_discards_inflight_results(self):
        async def scenario():
            started = asyncio.Event()
            release = asyncio.Event()

            async def handler(request):
                started.set()
                await release.wait()
                return httpx.Response(200, text="review of the old file")

            store = PaperStore(make_api(handler))
            store.load_file("old.pdf", b"%PDF old")
            pending = asyncio.create_task(store.get_review())
            await started.wait()

            store.load_file("new.pdf", b"%PDF new")
            release.set()
            assert await pending is None
            return store

        store = asyncio.run(scenario())

        assert store.review == ""
        assert store.file.name == "new.pdf"
        assert store.loading is False

    def test_errors_are_scoped_per_operation(self):
        async def handler(request):
            if request.url.path == "/review":
                return httpx.Response(502, json={"detail": "Quota exceeded for model"})
            return httpx.Response(200, text="overall feedback")

        async def scenario():
            store = PaperStore(make_api(handler))
            store.load_file("paper.pdf", b"%PDF")
            with pytest.raises(ApiError):
                await store.get_review()
            await store.get_overall_analysis()
            return store

        store = asyncio.run(scenario())

        error = store.errors[Operation.REVIEW]
        assert isinstance(error, ApiError)
        assert error.status_code == 502
        assert error.detail == "Quota exceeded for model"
        assert store.errors[Operation.OVERALL_ANALYSIS] is None
        assert store.overall_analysis == "overall feedback"
        assert store.loading_by_operation[Operation.REVIEW] is False

    def test_sections_and_section_analysis(self):
        async def handler(request):
            if request.url.path == "/sections":
                return httpx.Response(200, json=SECTIONS_JSON)
            await request.aread()
            assert b"Introduction" in request.content
            return httpx.Response(200, text="section feedback")

        async def scenario():
            store = PaperStore(make_api(handler))
            changes = []
            store.subscribe(changes.append)
            store.load_file("paper.tex.txt", b"\\section{Introduction}")

            await store.get_section_titles()
            await store.enrich_with_section_analysis("Introduction")
            with pytest.raises(KeyError):
                await store.enrich_with_section_analysis("Appendix")
            return store, changes

        store, changes = asyncio.run(scenario())

        assert [s.title for s in store.sections] == ["Abstract", "Introduction"]
        assert store.sections[1].section_number == "1"
        assert store.sections[1].analysis == "section feedback"
        assert store.sections[0].analysis is None
        assert frozenset({"sections"}) in changes
        assert frozenset({"analysis"}) in changes

    def test_reset_restores_defaults(self):
        store = PaperStore(make_api(lambda request: httpx.Response(200)))
        store.load_file("paper.pdf", b"%PDF")
        store.update_options(kind=PaperKind.BACHELOR_THESIS, has_page_limit=True)

        store.reset()

        assert store.file is None
        assert store.options == PaperOptions()


class TestPromptStore:
    def test_rapid_changes_collapse_into_one_refresh(self):
        async def scenario():
            paths = []

            async def handler(request):
                await request.aread()
                paths.append(request.url.path)
                return httpx.Response(200, text=f"{request.url.path} for {sent_kind(request)}")

            paper = PaperStore(make_api(handler))
            prompts = PromptStore(paper, debounce=0.01)
            paper.load_file("paper.pdf", b"%PDF")
            paper.update_options(kind=PaperKind.MASTER_THESIS)
            paper.update_options(has_page_limit=True, page_limit=8, current_pages=10)
            await prompts.wait_idle()
            return paths, prompts

        paths, prompts = asyncio.run(scenario())

        assert paths.count("/overall_analysis_system_prompt") == 1
        assert paths.count("/overall_analysis_message_part") == 1
        assert paths.count("/review_message_part") == 1
        assert "/section_analysis_system_prompt" not in paths
        assert prompts.overall_analysis_system_prompt == "/overall_analysis_system_prompt for master thesis"
        assert prompts.review_message_part == "/review_message_part for master thesis"
        assert prompts.review_system_prompt.startswith("/review_system_prompt")

    def test_inflight_refresh_is_cancelled_by_newer_change(self):
        async def scenario():
            started = asyncio.Event()
            blocked = []

            async def handler(request):
                await request.aread()
                kind = sent_kind(request)
                if request.url.path == "/overall_analysis_system_prompt" and kind == "full conference paper":
                    blocked.append(kind)
                    started.set()
                    await asyncio.Event().wait()
                return httpx.Response(200, text=kind)

            paper = PaperStore(make_api(handler))
            prompts = PromptStore(paper, debounce=0)
            paper.load_file("paper.pdf", b"%PDF")
            await started.wait()

            paper.update_options(kind=PaperKind.JOURNAL_PAPER)
            await prompts.wait_idle()
            return prompts, blocked

        prompts, blocked = asyncio.run(scenario())

        assert blocked == ["full conference paper"]
        assert prompts.overall_analysis_system_prompt == "journal paper"
        assert prompts.overall_analysis_message_part == "journal paper"

    def test_failed_refresh_keeps_previous_value(self):
        async def scenario():
            failing = False

            async def handler(request):
                if failing:
                    return httpx.Response(500, text="boom")
                return httpx.Response(200, text="first preview")

            paper = PaperStore(make_api(handler))
            prompts = PromptStore(paper, debounce=0)
            paper.load_file("paper.pdf", b"%PDF")
            await prompts.wait_idle()

            failing = True
            paper.update_options(work_in_progress=True)
            await prompts.wait_idle()
            return prompts

        prompts = asyncio.run(scenario())

        assert prompts.overall_analysis_system_prompt == "first preview"
        error = prompts.errors["overall_analysis_system_prompt"]
        assert isinstance(error, ApiError)
        assert error.status_code == 500

    def test_section_previews_cover_every_section(self):
        async def scenario():
            async def handler(request):
                if request.url.path == "/sections":
                    return httpx.Response(200, json=SECTIONS_JSON)
                await request.aread()
                title = next((t for t in ("Abstract", "Introduction") if t.encode() in request.content), "")
                return httpx.Response(200, text=f"{request.url.path}:{title}")

            paper = PaperStore(make_api(handler))
            prompts = PromptStore(paper, debounce=0)
            paper.load_file("paper.pdf", b"%PDF")
            await paper.get_section_titles()
            await prompts.wait_idle()
            return prompts

        prompts = asyncio.run(scenario())

        assert prompts.section_analysis_system_prompt == {
            "Abstract": "/section_analysis_system_prompt:Abstract",
            "Introduction": "/section_analysis_system_prompt:Introduction",
        }
        assert set(prompts.section_analysis_message_part) == {"Abstract", "Introduction"}

    def test_section_previews_follow_the_current_paper(self):
        async def scenario():
            async def handler(request):
                if request.url.path == "/sections":
                    return httpx.Response(200, json=[{"title": "Old Section"}])
                return httpx.Response(200, text="preview")

            paper = PaperStore(make_api(handler))
            prompts = PromptStore(paper, debounce=0)
            paper.load_file("old.pdf", b"%PDF old")
            await paper.get_section_titles()
            await prompts.wait_idle()
            before = dict(prompts.section_analysis_system_prompt)

            paper.load_file("new.pdf", b"%PDF new")
            await prompts.wait_idle()
            return before, prompts

        before, prompts = asyncio.run(scenario())

        assert before == {"Old Section": "preview"}
        assert prompts.section_analysis_system_prompt == {}
        assert prompts.section_analysis_message_part == {}

    def test_load_static(self):
        async def handler(request):
            return httpx.Response(200, text=f"{request.method} {request.url.path}")

        async def scenario():
            prompts = PromptStore(PaperStore(make_api(handler)))
            await prompts.load_static()
            return prompts

        prompts = asyncio.run(scenario())

        assert prompts.sections_system_prompt == "GET /sections_system_prompt"
        assert prompts.review_system_prompt == "POST /review_system_prompt"
