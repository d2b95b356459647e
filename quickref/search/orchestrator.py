"""Reference search orchestration.

A search fans out one search-tool process per (root directory, file
extension) pair, waits for all of them, then parses the combined output
and sorts each hit into either a resolved entity or an unresolved raw
path. Accumulation happens on the calling thread after the join, so no
locking is needed.
"""

import logging
import threading
import time
from collections.abc import Callable, Hashable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from quickref.errors import InvalidArgumentError

from .backends import SearchBackend, default_backend
from .models import (
    MAX_RESULTS,
    MIN_SEARCH_LENGTH,
    Invocation,
    InvocationOutput,
    SearchRequest,
    SearchResult,
)
from .parsing import parse_output, to_logical_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8

Resolver = Callable[[str, int], Hashable | None]
TargetLookup = Callable[[str], Hashable | None]


def validate_request(request: SearchRequest) -> None:
    """Reject search text that is empty or too short.

    Raises:
        InvalidArgumentError: If the search text is under MIN_SEARCH_LENGTH.
    """
    if len(request.search_text) < MIN_SEARCH_LENGTH:
        raise InvalidArgumentError(
            f"Search text must be at least {MIN_SEARCH_LENGTH} characters "
            f"(got {len(request.search_text)})"
        )


def build_invocations(
    request: SearchRequest, backend: SearchBackend
) -> list[Invocation]:
    """One invocation per root x extension, root-major."""
    return [
        backend.invocation(request.search_text, root, ext)
        for root in request.root_directories
        for ext in request.file_extensions
    ]


def run_invocations(
    invocations: list[Invocation],
    backend: SearchBackend,
    *,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> list[InvocationOutput]:
    """Run all invocations concurrently and return outputs in input order."""
    if not invocations:
        return []

    def run_one(invocation: Invocation) -> InvocationOutput:
        if cancel_event is not None and cancel_event.is_set():
            return InvocationOutput(invocation, ok=False, error="cancelled")
        return backend.run(invocation, cancel_event)

    workers = min(max_workers or DEFAULT_MAX_WORKERS, len(invocations))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(run_one, inv) for inv in invocations]
        return [future.result() for future in futures]


def search(
    request: SearchRequest,
    resolve: Resolver,
    *,
    lookup_target: TargetLookup | None = None,
    backend: SearchBackend | None = None,
    max_results: int = MAX_RESULTS,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
) -> SearchResult:
    """Find every occurrence of the search text under the request's roots.

    Args:
        request: Search text, roots and extensions.
        resolve: Maps a logical project path and line number to an entity,
            or None when the file isn't a tracked entity.
        lookup_target: Maps the search text to the entity it identifies.
        backend: Search tool to run; defaults to the platform's.
        max_results: Cap on matched + unresolved entries. The entry that
            reaches the cap is kept, then processing stops.
        max_workers: Concurrent search processes.
        cancel_event: When set, running processes are killed and a
            cancelled, empty result is returned.

    Returns:
        The populated SearchResult. Invocation failures, malformed lines
        and truncation never raise; they are reflected in the result.

    Raises:
        InvalidArgumentError: If the search text is too short.
    """
    validate_request(request)
    backend = backend or default_backend()
    started = time.perf_counter()

    result = SearchResult(search_text=request.search_text)
    if lookup_target is not None:
        result.target = lookup_target(request.search_text)

    if not backend.is_available():
        logger.warning(
            "%s not found on PATH; reference search unavailable", backend.tool
        )
        result.unavailable = True
        return _finish(result, started)

    invocations = build_invocations(request, backend)
    logger.debug(
        "Searching for %r with %d invocations", request.search_text, len(invocations)
    )
    outputs = run_invocations(
        invocations, backend, max_workers=max_workers, cancel_event=cancel_event
    )

    if cancel_event is not None and cancel_event.is_set():
        logger.info("Search for %r cancelled", request.search_text)
        result.cancelled = True
        return _finish(result, started)

    _report_failures(outputs, result)
    if result.unavailable:
        return _finish(result, started)

    combined = "\n".join(output.stdout for output in outputs)
    _aggregate(combined, request, resolve, max(1, max_results), result)

    return _finish(result, started)


def _report_failures(outputs: list[InvocationOutput], result: SearchResult) -> None:
    """Log failed invocations, folding missing-tool errors into one warning."""
    failed = [output for output in outputs if not output.ok]
    result.failed_invocations = len(failed)

    missing = [output for output in failed if output.tool_missing]
    if missing:
        logger.warning(
            "Search tool could not be started for %d of %d invocations: %s",
            len(missing),
            len(outputs),
            missing[0].error,
        )
        if len(missing) == len(outputs):
            result.unavailable = True

    for output in failed:
        if output.tool_missing:
            continue
        inv = output.invocation
        logger.warning(
            "Search in %s (*.%s) failed: %s", inv.root, inv.extension, output.error
        )


def _aggregate(
    text: str,
    request: SearchRequest,
    resolve: Resolver,
    max_results: int,
    result: SearchResult,
) -> None:
    roots = list(request.root_directories)
    seen_entities: set = set()
    seen_unresolved: set[str] = set()

    def classify(hit):
        return resolve(to_logical_path(hit.path, roots), hit.line)

    def adds_entry(hit) -> bool:
        entity = classify(hit)
        if entity is not None:
            return entity not in seen_entities
        return hit.raw not in seen_unresolved

    hits = parse_output(text)
    for hit in hits:
        entity = classify(hit)

        if entity is not None:
            result.hit_lines.setdefault(entity, []).append(hit.line)
            if entity in seen_entities:
                continue
            seen_entities.add(entity)
            result.matched.append(entity)
        else:
            raw = hit.raw
            if raw in seen_unresolved:
                continue
            seen_unresolved.add(raw)
            result.unresolved.append(raw)

        if result.total >= max_results:
            # Only lines that would add an entry make the result incomplete
            result.truncated = any(adds_entry(rest) for rest in hits)
            if result.truncated:
                logger.info("Result cap of %d reached; stopping", max_results)
            return


def _finish(result: SearchResult, started: float) -> SearchResult:
    result.duration = time.perf_counter() - started
    logger.debug(
        "Search for %r finished in %.2fs: %d matched, %d unresolved",
        result.search_text,
        result.duration,
        len(result.matched),
        len(result.unresolved),
    )
    return result


def make_request(
    search_text: str, roots: list[Path], extensions: list[str]
) -> SearchRequest:
    """Build a SearchRequest from plain lists."""
    return SearchRequest(
        search_text=search_text,
        root_directories=tuple(roots),
        file_extensions=tuple(extensions),
    )
