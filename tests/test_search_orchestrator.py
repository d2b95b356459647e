"""Tests for the reference search orchestrator.

Uses FakeBackend so no search processes are spawned.
"""

import threading
from pathlib import Path

import pytest

from quickref.errors import InvalidArgumentError
from quickref.search.models import MAX_RESULTS, InvocationOutput, SearchRequest
from quickref.search.orchestrator import build_invocations, search

from conftest import FakeBackend


def _request(text="abc123guid", roots=("/proj/Assets",), exts=("prefab",)):
    return SearchRequest(
        search_text=text,
        root_directories=tuple(Path(r) for r in roots),
        file_extensions=tuple(exts),
    )


def _resolver(mapping: dict[str, str]):
    def resolve(path, line):
        return mapping.get(path)

    return resolve


class TestValidation:
    """Tests for the minimum search length."""

    @pytest.mark.parametrize("text", ["", "a", "ab"])
    def test_rejects_short_text_without_spawning(self, text):
        """Text under 3 characters is rejected before any invocation."""
        backend = FakeBackend()

        with pytest.raises(InvalidArgumentError):
            search(_request(text=text), _resolver({}), backend=backend)

        assert backend.calls == []

    def test_accepts_three_characters(self):
        """Exactly 3 characters is a valid search."""
        backend = FakeBackend()
        result = search(_request(text="abc"), _resolver({}), backend=backend)

        assert result.search_text == "abc"
        assert len(backend.calls) == 1

    def test_invalid_argument_is_value_error(self):
        """InvalidArgumentError can be caught as ValueError."""
        with pytest.raises(ValueError):
            search(_request(text="x"), _resolver({}), backend=FakeBackend())


class TestInvocations:
    """Tests for invocation fan-out."""

    def test_one_invocation_per_root_and_extension(self):
        """Invocations cover roots x extensions in root-major order."""
        request = _request(roots=("/p/Assets", "/p/Packages"), exts=("prefab", "mat"))
        invocations = build_invocations(request, FakeBackend())

        assert [(str(i.root), i.extension) for i in invocations] == [
            ("/p/Assets", "prefab"),
            ("/p/Assets", "mat"),
            ("/p/Packages", "prefab"),
            ("/p/Packages", "mat"),
        ]

    def test_leading_dot_stripped_from_extensions(self):
        """'.prefab' and 'prefab' are the same extension."""
        request = _request(exts=(".prefab", "mat"))
        assert request.file_extensions == ("prefab", "mat")


class TestAggregation:
    """Tests for parsing, resolving and de-duplication."""

    def test_end_to_end_two_prefabs(self):
        """Two hits in two prefabs give two matched entities."""
        backend = FakeBackend(
            outputs={
                ("/proj/Assets", "prefab"): (
                    "/proj/Assets/A.prefab:10:  guid: abc123guid\n"
                    "/proj/Assets/B.prefab:7:  guid: abc123guid\n"
                )
            }
        )
        resolve = _resolver({"Assets/A.prefab": "A", "Assets/B.prefab": "B"})

        result = search(_request(), resolve, backend=backend)

        assert result.matched == ["A", "B"]
        assert result.unresolved == []
        assert result.truncated is False

    def test_resolves_hit_to_project_path(self):
        """A hit line is resolved through its project-relative path."""
        backend = FakeBackend(
            outputs={
                ("/root/Assets", "prefab"): (
                    "/root/Assets/foo.prefab:42:  m_Value: {fileID: 123}\n"
                )
            }
        )
        result = search(
            _request(roots=("/root/Assets",)),
            _resolver({"Assets/foo.prefab": "E"}),
            backend=backend,
        )

        assert result.matched == ["E"]
        assert result.hit_lines == {"E": [42]}

    def test_same_entity_listed_once(self):
        """Several hits in one file give one entity with every line recorded."""
        backend = FakeBackend(
            outputs={
                ("/proj/Assets", "prefab"): (
                    "/proj/Assets/A.prefab:3:x abc123guid\n"
                    "/proj/Assets/A.prefab:9:y abc123guid\n"
                )
            }
        )
        result = search(
            _request(), _resolver({"Assets/A.prefab": "A"}), backend=backend
        )

        assert result.matched == ["A"]
        assert result.hit_lines["A"] == [3, 9]

    def test_unresolved_paths_deduplicated(self):
        """Identical raw path:line strings appear once in unresolved."""
        backend = FakeBackend(
            outputs={
                ("/proj/Assets", "prefab"): "/proj/Assets/x.prefab:1:abc\n",
                ("/proj/Assets", "mat"): "/proj/Assets/x.prefab:1:abc\n",
            }
        )
        result = search(
            _request(exts=("prefab", "mat")), _resolver({}), backend=backend
        )

        assert result.unresolved == ["/proj/Assets/x.prefab:1"]

    def test_malformed_lines_skipped(self):
        """Lines without a line number are skipped silently."""
        backend = FakeBackend(
            outputs={
                ("/proj/Assets", "prefab"): (
                    "/proj/Assets/foo.prefab\n"
                    "garbage without separators\n"
                    "/proj/Assets/bar.prefab:notanumber:x\n"
                )
            }
        )
        result = search(_request(), _resolver({}), backend=backend)

        assert result.matched == []
        assert result.unresolved == []

    def test_outputs_joined_in_scheduling_order(self):
        """Results follow root order, not completion order."""
        backend = FakeBackend(
            outputs={
                ("/p/Packages", "prefab"): "/p/Packages/b.prefab:1:abc\n",
                ("/p/Assets", "prefab"): "/p/Assets/a.prefab:1:abc\n",
            }
        )
        result = search(
            _request(roots=("/p/Assets", "/p/Packages")),
            _resolver({"Assets/a.prefab": "a", "Packages/b.prefab": "b"}),
            backend=backend,
        )

        assert result.matched == ["a", "b"]

    def test_target_lookup(self):
        """The search text is resolved to its target entity."""
        result = search(
            _request(),
            _resolver({}),
            lookup_target=lambda text: "TARGET" if text == "abc123guid" else None,
            backend=FakeBackend(),
        )

        assert result.target == "TARGET"


class TestResultCap:
    """Tests for the result cap."""

    def _many_hits(self, count: int) -> FakeBackend:
        lines = "".join(f"/proj/Assets/f{i}.prefab:1:abc\n" for i in range(count))
        return FakeBackend(outputs={("/proj/Assets", "prefab"): lines})

    def test_cap_truncates_at_500(self):
        """501 distinct resolvable hits give exactly 500 and a truncation flag."""
        result = search(
            _request(),
            lambda path, line: path,
            backend=self._many_hits(MAX_RESULTS + 1),
        )

        assert result.total == MAX_RESULTS
        assert len(result.matched) == MAX_RESULTS
        assert result.truncated is True

    def test_exactly_500_is_not_truncated(self):
        """Reaching the cap with nothing left over is a complete result."""
        result = search(
            _request(),
            lambda path, line: path,
            backend=self._many_hits(MAX_RESULTS),
        )

        assert result.total == MAX_RESULTS
        assert result.truncated is False

    def test_cap_counts_both_lists(self):
        """Matched and unresolved entries share the cap."""
        backend = self._many_hits(10)
        result = search(
            _request(),
            lambda path, line: path if path.endswith(("0.prefab", "2.prefab")) else None,
            backend=backend,
            max_results=5,
        )

        assert result.total == 5
        assert result.truncated is True

    def test_duplicates_after_cap_do_not_truncate(self):
        """Leftover lines that repeat earlier hits leave the result complete."""
        lines = (
            "/proj/Assets/a.prefab:1:abc\n"
            "/proj/Assets/b.prefab:1:abc\n"
            "/proj/Assets/c.prefab:1:abc\n"
            "/proj/Assets/a.prefab:1:abc\n"
        )
        backend = FakeBackend(outputs={("/proj/Assets", "prefab"): lines})

        matched = search(
            _request(), lambda path, line: path, backend=backend, max_results=3
        )
        unresolved = search(
            _request(), _resolver({}), backend=backend, max_results=3
        )

        assert matched.total == 3
        assert matched.truncated is False
        assert unresolved.total == 3
        assert unresolved.truncated is False


class TestFailures:
    """Tests for invocation failures and missing tools."""

    def test_one_failure_does_not_blank_others(self):
        """A failed invocation is treated as empty output."""
        backend = FakeBackend(
            outputs={("/p/Packages", "prefab"): "/p/Packages/b.prefab:1:abc\n"},
            failures={("/p/Assets", "prefab"): "No such file or directory"},
        )
        result = search(
            _request(roots=("/p/Assets", "/p/Packages")),
            _resolver({"Packages/b.prefab": "b"}),
            backend=backend,
        )

        assert result.matched == ["b"]
        assert result.failed_invocations == 1
        assert result.unavailable is False

    def test_failure_logged_as_warning(self, caplog):
        """Each failed invocation logs a warning naming its root."""
        backend = FakeBackend(failures={("/proj/Assets", "prefab"): "boom"})

        with caplog.at_level("WARNING"):
            search(_request(), _resolver({}), backend=backend)

        assert "/proj/Assets" in caplog.text
        assert "boom" in caplog.text

    def test_unavailable_tool_returns_empty_result(self, caplog):
        """A missing tool gives one warning and an empty result."""
        backend = FakeBackend(available=False)

        with caplog.at_level("WARNING"):
            result = search(
                _request(roots=("/p/Assets", "/p/Packages"), exts=("prefab", "mat")),
                _resolver({}),
                backend=backend,
            )

        assert result.unavailable is True
        assert result.total == 0
        assert backend.calls == []
        assert len(caplog.records) == 1

    def test_tool_missing_on_every_invocation_is_one_warning(self, caplog):
        """Spawn failures for a missing tool are folded into one warning."""
        backend = FakeBackend(tool_missing=True)

        with caplog.at_level("WARNING"):
            result = search(
                _request(roots=("/p/Assets", "/p/Packages"), exts=("prefab", "mat")),
                _resolver({}),
                backend=backend,
            )

        assert result.unavailable is True
        assert result.failed_invocations == 4
        assert len(caplog.records) == 1


class TestCancellation:
    """Tests for caller-driven cancellation."""

    def test_cancelled_before_start(self):
        """A pre-set cancel event runs nothing and returns a cancelled result."""
        backend = FakeBackend(
            outputs={("/proj/Assets", "prefab"): "/proj/Assets/a.prefab:1:abc\n"}
        )
        cancel = threading.Event()
        cancel.set()

        result = search(
            _request(), lambda p, l: p, backend=backend, cancel_event=cancel
        )

        assert result.cancelled is True
        assert result.total == 0
        assert backend.calls == []

    def test_cancelled_while_running(self):
        """Cancelling during an invocation returns a cancelled, empty result."""
        backend = BlockingBackend(
            outputs={("/proj/Assets", "prefab"): "/proj/Assets/a.prefab:1:abc\n"}
        )
        cancel = threading.Event()

        def cancel_once_started():
            backend.started.wait(timeout=5)
            cancel.set()

        canceller = threading.Thread(target=cancel_once_started)
        canceller.start()
        result = search(
            _request(), lambda p, l: p, backend=backend, cancel_event=cancel
        )
        canceller.join()

        assert backend.started.is_set()
        assert result.cancelled is True
        assert result.total == 0


class BlockingBackend(FakeBackend):
    """Holds each invocation open until the search is cancelled."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.started = threading.Event()

    def run(self, invocation, cancel_event=None):
        self.calls.append(invocation)
        self.started.set()
        if cancel_event is not None and cancel_event.wait(timeout=5):
            return InvocationOutput(invocation, ok=False, error="cancelled")
        return super().run(invocation, cancel_event)
