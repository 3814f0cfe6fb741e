"""HTTP client for the question bank backend.

Endpoints:
    GET    /questions            list, filtered by predicate, optional page/limit
    POST   /questions            create, returns the assigned id
    PUT    /questions/{id}       update
    DELETE /questions/{id}       delete
    POST   /questions/export     render {"ids": [...]} to a PDF

Reads are retried on transport errors; writes and exports are sent once.
Failures are translated to the catalog error types.
"""

from typing import Any, Dict, List, Optional, Tuple
from pathlib import Path
import sys

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import config
from config.constants import EXPORT_ENDPOINT, PDF_CONTENT_TYPE, QUESTIONS_ENDPOINT
from config.logging_config import get_logger
from src.catalog.errors import BackendError, ExportFailed, QueryFailed
from src.catalog.models import QuestionRecord
from src.catalog.query import RequestDescriptor

logger = get_logger("client")


class QuestionBankClient:
    """Async client for the question backend API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_wait_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root (defaults to config).
            timeout: Request timeout in seconds.
            max_retries: Attempts for idempotent reads.
            retry_wait_seconds: Base of the exponential backoff.
            transport: Custom httpx transport (tests use MockTransport).
        """
        self.base_url = (base_url or config.backend.base_url).rstrip("/")
        self.timeout = timeout or config.backend.timeout
        self.max_retries = max(1, max_retries or config.backend.max_retries)
        self.retry_wait_seconds = (
            config.backend.retry_wait_seconds
            if retry_wait_seconds is None
            else retry_wait_seconds
        )
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
        )
        self._request_count = 0

    async def __aenter__(self) -> "QuestionBankClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    @property
    def request_count(self) -> int:
        """Number of HTTP requests sent, including retries."""
        return self._request_count

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    async def list_questions(self, descriptor: RequestDescriptor) -> List[QuestionRecord]:
        """
        Fetch the records described by a request descriptor.

        Args:
            descriptor: Predicate and optional page/limit.

        Returns:
            Records in backend order.

        Raises:
            QueryFailed: On network, HTTP or payload errors.
        """
        params = descriptor.to_params()
        try:
            response = await self._get(QUESTIONS_ENDPOINT, params)
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Question query #{descriptor.sequence} failed: HTTP {e.response.status_code}")
            raise QueryFailed(f"Backend returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Question query #{descriptor.sequence} failed: {e}")
            raise QueryFailed(f"Could not reach question backend: {e}") from e
        except ValueError as e:
            raise QueryFailed(f"Backend returned invalid JSON: {e}") from e

        rows = self._extract_rows(data)
        try:
            records = [QuestionRecord.from_dict(row) for row in rows]
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Question query #{descriptor.sequence} returned a malformed row: {e}")
            raise QueryFailed(f"Backend returned a malformed question: {e}") from e

        logger.debug(f"Query #{descriptor.sequence} returned {len(records)} rows")
        return records

    async def _get(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_wait_seconds, max=10),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.warning(
                        f"Retrying GET {path} (attempt {attempt.retry_state.attempt_number})"
                    )
                self._request_count += 1
                response = await self._client.get(path, params=params)
                response.raise_for_status()
                return response

    @staticmethod
    def _extract_rows(data: Any) -> List[Dict[str, Any]]:
        """Accept a bare array or an object wrapping one."""
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            for key in ("items", "questions", "results"):
                if isinstance(data.get(key), list):
                    return data[key]
        raise QueryFailed(f"Unexpected question list payload: {type(data).__name__}")

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_question(self, record: QuestionRecord) -> int:
        """
        Create a question.

        Returns:
            Identifier assigned by the backend.

        Raises:
            BackendError: If the backend rejects the request.
        """
        response = await self._send("POST", QUESTIONS_ENDPOINT, json=record.to_payload())
        try:
            data = response.json()
            new_id = int(data["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise BackendError(f"Create response did not include an id: {e}") from e

        logger.info(f"Created question {new_id}")
        return new_id

    async def update_question(self, record: QuestionRecord) -> bool:
        """
        Update an existing question with its full attribute payload.

        Raises:
            ValueError: If the record has no identifier.
            BackendError: If the backend rejects the request.
        """
        if record.id is None:
            raise ValueError("Cannot update a question without an id")
        await self._send("PUT", f"{QUESTIONS_ENDPOINT}/{record.id}", json=record.to_payload())
        logger.info(f"Updated question {record.id}")
        return True

    async def delete_question(self, record_id: int) -> None:
        """
        Delete a question.

        Raises:
            BackendError: If the backend did not confirm the deletion.
        """
        await self._send("DELETE", f"{QUESTIONS_ENDPOINT}/{record_id}")
        logger.info(f"Deleted question {record_id}")

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            self._request_count += 1
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.HTTPStatusError as e:
            logger.error(f"{method} {path} failed: HTTP {e.response.status_code}")
            raise BackendError(f"{method} {path} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise BackendError(f"{method} {path} failed: {e}") from e

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    async def export_questions(self, ids: List[int]) -> Tuple[bytes, str]:
        """
        Render questions to a printable document.

        Args:
            ids: Ordered question identifiers.

        Returns:
            Tuple of (document bytes, content type).

        Raises:
            ExportFailed: If the backend cannot render (e.g. unknown ids).
        """
        try:
            self._request_count += 1
            response = await self._client.post(EXPORT_ENDPOINT, json={"ids": list(ids)})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Export of {len(ids)} questions failed: HTTP {e.response.status_code}")
            raise ExportFailed(f"Backend could not render export (HTTP {e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.error(f"Export of {len(ids)} questions failed: {e}")
            raise ExportFailed(f"Export request failed: {e}") from e

        content_type = response.headers.get("content-type", PDF_CONTENT_TYPE)
        return response.content, content_type.split(";")[0].strip()
