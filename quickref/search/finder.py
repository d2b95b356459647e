"""Project-bound reference search.

ReferenceFinder ties the generic search to a Unity project: roots are
resolved under the project directory, hits are resolved through the
project's AssetIndex, and asset paths given as targets are turned into
their GUIDs before searching.
"""

import threading
from pathlib import Path

from quickref.config import BUILTIN_DEFAULTS
from quickref.project import AssetIndex

from .backends import SearchBackend, default_backend
from .models import MAX_RESULTS, SearchResult
from .orchestrator import make_request, search


class ReferenceFinder:
    """Finds references to assets within one project.

    Each call to ``find`` builds its own result, so one finder can serve
    several searches, including overlapping ones from different threads.

    Example:
        finder = ReferenceFinder(Path("~/Projects/Game").expanduser())
        result = finder.find("Assets/Materials/Floor.mat")
        for asset in result.matched:
            print(asset.path)
    """

    def __init__(
        self,
        project_dir: Path,
        *,
        roots: list[str] | None = None,
        extensions: list[str] | None = None,
        backend: SearchBackend | None = None,
        max_results: int = MAX_RESULTS,
        max_workers: int | None = None,
        index: AssetIndex | None = None,
    ):
        self.project_dir = Path(project_dir).expanduser().resolve()
        self.roots = list(roots or BUILTIN_DEFAULTS["roots"])
        self.extensions = list(extensions or BUILTIN_DEFAULTS["extensions"])
        self.backend = backend or default_backend()
        self.max_results = max_results
        self.max_workers = max_workers
        self.index = index or AssetIndex(self.project_dir)

    def root_directories(self) -> list[Path]:
        """Absolute root directories, in configured order."""
        return [self.project_dir / root for root in self.roots]

    def find(
        self,
        target: str,
        *,
        cancel_event: threading.Event | None = None,
    ) -> SearchResult:
        """Search for references to ``target``.

        Args:
            target: A GUID, a project-relative asset path, or a filesystem
                path to an asset. Asset paths are searched by GUID; any
                other text is searched literally.
            cancel_event: Set from another thread to stop the search.

        Raises:
            InvalidArgumentError: If the resulting search text is too short.
        """
        search_text = self.index.resolve_target(target.strip())
        request = make_request(search_text, self.root_directories(), self.extensions)
        return search(
            request,
            self.index.resolve,
            lookup_target=self.index.asset_for_guid,
            backend=self.backend,
            max_results=self.max_results,
            max_workers=self.max_workers,
            cancel_event=cancel_event,
        )
