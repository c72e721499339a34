"""HTTP client for the graph store's document API."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from docrecon.adapters.http_resilience import ResilientClient

from .schema import BULK_WRITE_ADAPTER, DocumentWriteResult, ErrorResponse

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    import httpx

    from docrecon.adapters.records import Record
    from docrecon.config.graph_store import GraphStoreConfig

log = getLogger(__name__)


def _default_client_factory(config: GraphStoreConfig) -> ResilientClient:
    return ResilientClient(config.resilience, auth=config.auth)


class GraphStoreAPIError(RuntimeError):
    """Raised when the graph store rejects a request."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(slots=True)
class GraphStoreClient:
    config: GraphStoreConfig
    client_factory: Callable[[GraphStoreConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def collection_path(self, collection: str) -> str:
        return f"/_db/{self.config.database}/_api/document/{collection}"

    async def insert(self, collection: str, records: Sequence[Record]) -> list[DocumentWriteResult]:
        """Insert or replace ``records`` in ``collection`` in one request."""

        if not records:
            return []
        async with self.client_factory(self.config) as client:
            response = await client.post(
                self.collection_path(collection),
                params={"overwriteMode": "replace"},
                json=list(records),
            )
        return self._parse_bulk_response(collection, response)

    def _parse_bulk_response(
        self, collection: str, response: httpx.Response
    ) -> list[DocumentWriteResult]:
        if response.is_error:
            error = self._parse_error(response)
            log.error(
                f"Graph store error {error.error_num} writing {collection}: {error.error_message}"
            )
            raise GraphStoreAPIError(
                error.error_message or f"HTTP {response.status_code}", code=error.error_num
            )

        entries = BULK_WRITE_ADAPTER.validate_python(response.json())
        results: list[DocumentWriteResult] = []
        failures: list[ErrorResponse] = []
        for entry in entries:
            if entry.get("error"):
                failures.append(ErrorResponse.model_validate(entry))
            else:
                results.append(DocumentWriteResult.model_validate(entry))
        if failures:
            first = failures[0]
            raise GraphStoreAPIError(
                f"{len(failures)} of {len(entries)} {collection} record(s) rejected: "
                f"{first.error_message}",
                code=first.error_num,
            )
        return results

    @staticmethod
    def _parse_error(response: httpx.Response) -> ErrorResponse:
        try:
            return ErrorResponse.model_validate(response.json())
        except ValueError:
            return ErrorResponse(code=response.status_code, errorMessage=response.text)
