"""Tests for subpaths.processing.subpath — peeling and subpath resolution."""

import pytest

from subpaths.aliases import AliasPathProcessor
from subpaths.config import LanguageNegotiationConfig, SubpathConfig
from subpaths.errors import ConfigurationError
from subpaths.http.request import Request
from subpaths.language import StaticLanguageManager
from subpaths.processing.subpath import SubpathProcessor, peel


class RecordingAliases:
    """Alias processor that records every prefix it is asked about."""

    def __init__(
        self,
        inbound: dict[str, str] | None = None,
        outbound: dict[str, str] | None = None,
    ) -> None:
        self.inbound = inbound or {}
        self.outbound = outbound or {}
        self.calls: list[str] = []

    def process_inbound(self, path: str, request: Request) -> str:
        self.calls.append(path)
        return self.inbound.get(path, path)

    def process_outbound(self, path: str, options: dict, request: Request | None = None) -> str:
        self.calls.append(path)
        return self.outbound.get(path, path)


class FakeValidator:
    """Validity oracle over a fixed set of paths."""

    def __init__(self, valid: set[str] | None = None) -> None:
        self.valid = valid or set()
        self.checked: list[str] = []

    def match_without_access_check(self, path: str) -> object | None:
        self.checked.append(path)
        return path if path in self.valid else None


def _processor(
    inbound: dict[str, str] | None = None,
    valid: set[str] | None = None,
    max_depth: int = 0,
) -> tuple[SubpathProcessor, RecordingAliases, FakeValidator]:
    aliases = RecordingAliases(inbound=inbound)
    validator = FakeValidator(valid)
    processor = SubpathProcessor(aliases, SubpathConfig(max_depth=max_depth), validator=validator)
    return processor, aliases, validator


def _inbound(processor: SubpathProcessor, path: str) -> str:
    return processor.process_inbound(path, Request.for_path(path))


class TestPeel:
    def test_longest_prefix_first(self) -> None:
        seen: list[str] = []

        def translate(prefix: str) -> str:
            seen.append(prefix)
            return prefix

        assert peel("/a/b/c/d", translate) is None
        assert seen == ["/a/b/c", "/a/b", "/a"]

    def test_suffix_restored_in_order(self) -> None:
        result = peel("/blog/post-1/comments/5", lambda p: "/node/5" if p == "/blog/post-1" else p)
        assert result == "/node/5/comments/5"

    def test_first_change_wins(self) -> None:
        aliases = {"/a/b": "/x", "/a": "/y"}
        assert peel("/a/b/c", lambda p: aliases.get(p, p)) == "/x/c"

    def test_single_segment_never_translated(self) -> None:
        seen: list[str] = []
        assert peel("/blog", lambda p: seen.append(p) or "/changed") is None
        assert seen == []

    @pytest.mark.parametrize("path", ["", "/", "//"])
    def test_degenerate_paths(self, path: str) -> None:
        assert peel(path, lambda p: "/changed") is None

    def test_max_depth_limits_iterations(self) -> None:
        seen: list[str] = []

        def translate(prefix: str) -> str:
            seen.append(prefix)
            return prefix

        peel("/a/b/c/d/e", translate, max_depth=2)
        assert seen == ["/a/b/c/d", "/a/b/c"]

    def test_max_depth_zero_is_unbounded(self) -> None:
        seen: list[str] = []

        def translate(prefix: str) -> str:
            seen.append(prefix)
            return prefix

        peel("/a/b/c/d/e", translate, max_depth=0)
        assert seen[-1] == "/a"
        assert len(seen) == 4

    def test_match_beyond_depth_not_found(self) -> None:
        assert peel("/a/b/c", lambda p: "/x" if p == "/a" else p, max_depth=1) is None
        assert peel("/a/b/c", lambda p: "/x" if p == "/a" else p, max_depth=2) == "/x/b/c"


class TestInbound:
    def test_resolves_subpath(self) -> None:
        processor, _, validator = _processor(
            inbound={"/blog/post-1": "/node/5"}, valid={"/node/5/comments"}
        )
        assert _inbound(processor, "/blog/post-1/comments") == "/node/5/comments"
        assert validator.checked == ["/node/5/comments"]

    def test_invalid_candidate_returns_original(self) -> None:
        processor, _, _ = _processor(inbound={"/blog/post-1": "/node/5"})
        assert _inbound(processor, "/blog/post-1/comments") == "/blog/post-1/comments"

    def test_no_backtracking_after_invalid_candidate(self) -> None:
        processor, aliases, validator = _processor(
            inbound={"/a/b": "/x", "/a": "/y"},
            valid={"/y/b/c"},
        )
        assert _inbound(processor, "/a/b/c") == "/a/b/c"
        assert aliases.calls == ["/a/b"]
        assert validator.checked == ["/x/c"]

    def test_single_segment_unchanged(self) -> None:
        processor, aliases, _ = _processor(inbound={"/blog": "/node/1"})
        assert _inbound(processor, "/blog") == "/blog"
        assert aliases.calls == []

    def test_unchanged_when_nothing_translates(self) -> None:
        processor, aliases, validator = _processor()
        assert _inbound(processor, "/a/b/c") == "/a/b/c"
        assert aliases.calls == ["/a/b", "/a"]
        assert validator.checked == []

    def test_depth_budget(self) -> None:
        processor, aliases, _ = _processor(inbound={"/a": "/x"}, valid={"/x/b/c/d"}, max_depth=2)
        assert _inbound(processor, "/a/b/c/d") == "/a/b/c/d"
        assert aliases.calls == ["/a/b/c", "/a/b"]

    def test_deep_subpath(self) -> None:
        processor, _, _ = _processor(inbound={"/a": "/x"}, valid={"/x/b/c/d"})
        assert _inbound(processor, "/a/b/c/d") == "/x/b/c/d"

    def test_skips_path_already_rewritten(self) -> None:
        processor, aliases, _ = _processor(inbound={"/blog/post-1": "/node/5"}, valid={"/node/5/comments"})
        request = Request.for_path("/something/else")
        path = "/blog/post-1/comments"
        assert processor.process_inbound(path, request) == path
        assert aliases.calls == []

    def test_request_path_is_decoded_and_trimmed(self) -> None:
        processor, _, _ = _processor(inbound={"/blog/café": "/node/5"}, valid={"/node/5/comments"})
        request = Request(
            method="GET",
            path="/blog/café/comments/",
            raw_path=b"/blog/caf%C3%A9/comments/",
        )
        assert processor.process_inbound("/blog/café/comments", request) == "/node/5/comments"

    def test_idempotent_on_own_output(self) -> None:
        processor, _, _ = _processor(inbound={"/blog/post-1": "/node/5"}, valid={"/node/5/comments"})
        request = Request.for_path("/blog/post-1/comments")
        resolved = processor.process_inbound("/blog/post-1/comments", request)
        assert resolved == "/node/5/comments"
        assert processor.process_inbound(resolved, request) == resolved

    def test_locale_prefix_stripped_from_request(self) -> None:
        config = SubpathConfig(language=LanguageNegotiationConfig(prefixes={"fr": "fr", "en": ""}))
        aliases = AliasPathProcessor()
        aliases.add("/node/5", "/blog/post-1")
        processor = SubpathProcessor(
            aliases,
            config,
            validator=FakeValidator({"/node/5/comments"}),
            languages=StaticLanguageManager("fr"),
        )
        request = Request.for_path("/fr/blog/post-1/comments")
        # The language processor upstream has already removed the prefix.
        assert processor.process_inbound("/blog/post-1/comments", request) == "/node/5/comments"

    def test_locale_prefix_ignored_when_not_prefix_source(self) -> None:
        config = SubpathConfig(
            language=LanguageNegotiationConfig(source="domain", prefixes={"fr": "fr"})
        )
        processor = SubpathProcessor(
            RecordingAliases({"/blog/post-1": "/node/5"}),
            config,
            validator=FakeValidator({"/node/5/comments"}),
            languages=StaticLanguageManager("fr"),
        )
        request = Request.for_path("/fr/blog/post-1/comments")
        assert processor.process_inbound("/blog/post-1/comments", request) == "/blog/post-1/comments"


class TestValidityCheck:
    def test_missing_validator_raises(self) -> None:
        processor = SubpathProcessor(RecordingAliases({"/a/b": "/x"}))
        with pytest.raises(ConfigurationError, match="no path validator"):
            _inbound(processor, "/a/b/c")

    def test_set_path_validator(self) -> None:
        processor = SubpathProcessor(RecordingAliases({"/a/b": "/x"}))
        assert processor.set_path_validator(FakeValidator({"/x/c"})) is processor
        assert _inbound(processor, "/a/b/c") == "/x/c"

    def test_nested_call_short_circuits(self) -> None:
        aliases = RecordingAliases({"/blog/post-1": "/node/5"})
        processor = SubpathProcessor(aliases)
        nested: list[str] = []
        flags: list[bool] = []

        class ReentrantValidator:
            def match_without_access_check(self, path: str) -> object | None:
                flags.append(processor.in_validation)
                nested.append(_inbound(processor, path))
                # Would resolve again if the guard did not stop it.
                nested.append(_inbound(processor, "/blog/post-1/x"))
                return object()

        processor.set_path_validator(ReentrantValidator())
        assert _inbound(processor, "/blog/post-1/comments") == "/node/5/comments"
        assert flags == [True]
        assert nested == ["/node/5/comments", "/blog/post-1/x"]
        assert aliases.calls == ["/blog/post-1"]
        assert processor.in_validation is False

    def test_flag_cleared_when_validator_raises(self) -> None:
        class BrokenValidator:
            def match_without_access_check(self, path: str) -> object | None:
                raise RuntimeError("route table unavailable")

        processor = SubpathProcessor(RecordingAliases({"/a/b": "/x"}), validator=BrokenValidator())
        with pytest.raises(RuntimeError, match="route table unavailable"):
            _inbound(processor, "/a/b/c")
        assert processor.in_validation is False

        processor.set_path_validator(FakeValidator({"/x/c"}))
        assert _inbound(processor, "/a/b/c") == "/x/c"

    def test_is_valid(self) -> None:
        processor, _, _ = _processor(valid={"/node/5"})
        assert processor.is_valid("/node/5") is True
        assert processor.is_valid("/node/6") is False


class TestOutbound:
    def _processor(
        self, outbound: dict[str, str], max_depth: int = 0
    ) -> tuple[SubpathProcessor, RecordingAliases]:
        aliases = RecordingAliases(outbound=outbound)
        return SubpathProcessor(aliases, SubpathConfig(max_depth=max_depth)), aliases

    def test_resolves_subpath(self) -> None:
        processor, _ = self._processor({"/node/5": "/blog/post-1"})
        assert processor.process_outbound("/node/5/comments", {}) == "/blog/post-1/comments"

    def test_no_validation_needed(self) -> None:
        # No validator configured; outbound must not ask for one.
        processor, _ = self._processor({"/node/5": "/blog/post-1"})
        assert processor.process_outbound("/node/5/does/not/route") == "/blog/post-1/does/not/route"

    def test_unchanged_when_nothing_translates(self) -> None:
        processor, aliases = self._processor({})
        assert processor.process_outbound("/node/5/comments") == "/node/5/comments"
        assert aliases.calls == ["/node/5", "/node"]

    def test_single_segment_unchanged(self) -> None:
        processor, aliases = self._processor({"/node": "/content"})
        assert processor.process_outbound("/node") == "/node"
        assert aliases.calls == []

    def test_depth_budget(self) -> None:
        processor, _ = self._processor({"/node": "/content"}, max_depth=1)
        assert processor.process_outbound("/node/5/comments") == "/node/5/comments"

    def test_no_reentrancy_guard(self) -> None:
        processor, _ = self._processor({"/node/5": "/blog/post-1"})
        with processor._guard:
            assert processor.process_outbound("/node/5/comments") == "/blog/post-1/comments"

    def test_options_passed_through(self) -> None:
        received: list[dict] = []

        class OptionAliases(RecordingAliases):
            def process_outbound(self, path: str, options: dict, request: Request | None = None) -> str:
                received.append(options)
                return super().process_outbound(path, options, request)

        processor = SubpathProcessor(OptionAliases(outbound={"/node/5": "/blog/post-1"}))
        options = {"language": "fr"}
        processor.process_outbound("/node/5/comments", options)
        assert received == [options]
        assert received[0] is options
