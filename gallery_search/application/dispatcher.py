from logly import logger

from gallery_search.application.backends import ScriptRunner, SearchBackend
from gallery_search.application.capability import select_backend
from gallery_search.core.gallery_types import SearchOutcome, SearchQuery
from gallery_search.core.result_projection import project_results


class GallerySearchDispatcher:
    """Translates a query into one registry call and projects the hits.

    The backend is chosen once (see `select_backend`) and injected, so every
    search made through one dispatcher uses the same primitive.
    """

    def __init__(self, backend: SearchBackend, warnings: tuple[str, ...] = ()):
        """Initializes the dispatcher.

        Args:
            backend: Search primitive used for every call.
            warnings: Warnings raised while selecting the backend.
        """
        self._backend = backend
        self._warnings = tuple(warnings)

    @classmethod
    def create(
        cls, runner: ScriptRunner, repository: str = "PSGallery"
    ) -> "GallerySearchDispatcher":
        """Probes the registry capability and builds a dispatcher around it."""
        selection = select_backend(runner, repository)
        warnings = (selection.warning,) if selection.warning else ()
        return cls(selection.backend, warnings)

    @property
    def backend(self) -> SearchBackend:
        return self._backend

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._warnings

    def search(self, query: SearchQuery) -> SearchOutcome:
        """Runs the query and projects at most `query.max_results` records.

        Raises:
            RegistryError: If the registry call fails. It is not retried.
        """
        logger.info(f"Dispatching {type(query.mode).__name__} query via {self._backend.label}")
        raw_results = self._backend.search(query)
        records = project_results(raw_results, query.max_results)
        logger.info(f"Registry returned {len(raw_results)} hit(s), projected {len(records)}")

        return SearchOutcome(records=tuple(records))
