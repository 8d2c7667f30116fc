"""Client for the Typesense search index."""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.config import get_settings
from app.utils.exceptions import SearchIndexError

logger = logging.getLogger(__name__)

COLLECTION_FIELDS = [
    {"name": "title", "type": "string"},
    {"name": "content", "type": "string"},
    {"name": "tags", "type": "string[]", "facet": True},
    {"name": "createdAt", "type": "int64", "sort": True},
    {"name": "answerCount", "type": "int32"},
    {"name": "hasAcceptedAnswer", "type": "bool"},
]


class SearchIndexClient:
    """Thin wrapper over the Typesense REST API.

    Write operations are synchronous (used from the Celery worker); search
    has an async variant for the HTTP API.
    """

    API_KEY_HEADER = "X-TYPESENSE-API-KEY"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        collection: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.typesense_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.typesense_api_key
        self.collection = collection or settings.typesense_collection
        self.timeout = timeout or settings.typesense_timeout
        self._transport = transport
        self._async_transport = async_transport

    @property
    def _headers(self) -> Dict[str, str]:
        return {self.API_KEY_HEADER: self.api_key}

    @property
    def _documents_path(self) -> str:
        return f"/collections/{self.collection}/documents"

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers=self._headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    def _request(self, method: str, path: str, ok_statuses=(200, 201), **kwargs) -> httpx.Response:
        try:
            with self._client() as client:
                response = client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Search index request {method} {path} failed: {e}")
            raise SearchIndexError() from e

        if response.status_code not in ok_statuses:
            logger.error(f"Search index returned {response.status_code} for {method} {path}: {response.text}")
            raise SearchIndexError(f"Search index returned {response.status_code}")
        return response

    def ensure_collection(self) -> bool:
        """Create the questions collection if it does not exist.

        Returns:
            True if the collection was created, False if it already existed.
        """
        response = self._request("GET", f"/collections/{self.collection}", ok_statuses=(200, 404))
        if response.status_code == 200:
            return False

        self._request(
            "POST",
            "/collections",
            json={"name": self.collection, "fields": COLLECTION_FIELDS},
        )
        logger.info(f"Created search collection '{self.collection}'")
        return True

    def create_document(self, document: Dict[str, Any]) -> bool:
        """Create a document. Returns False if one with the same id already exists."""
        response = self._request("POST", self._documents_path, ok_statuses=(200, 201, 409), json=document)
        return response.status_code != 409

    def update_document(self, document_id: str, fields: Dict[str, Any]) -> bool:
        """Set the given fields on an existing document.

        Never creates a document. Returns False when the document is not
        indexed (not created yet, or already deleted).
        """
        response = self._request(
            "PATCH",
            f"{self._documents_path}/{document_id}",
            ok_statuses=(200, 404),
            json=fields,
        )
        return response.status_code == 200

    def delete_document(self, document_id: str) -> bool:
        """Delete a document. Returns False if it was already gone."""
        response = self._request("DELETE", f"{self._documents_path}/{document_id}", ok_statuses=(200, 404))
        return response.status_code == 200

    async def search(
        self,
        query: str,
        query_by: str = "title,content",
        filter_by: Optional[str] = None,
        sort_by: Optional[str] = None,
        per_page: int = 20,
    ) -> List[Dict[str, Any]]:
        """Run a search and return the matching documents."""
        params: Dict[str, Any] = {"q": query or "*", "query_by": query_by, "per_page": per_page}
        if filter_by:
            params["filter_by"] = filter_by
        if sort_by:
            params["sort_by"] = sort_by

        path = f"{self._documents_path}/search"
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self.timeout,
                transport=self._async_transport,
            ) as client:
                response = await client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Search request failed: {e}")
            raise SearchIndexError() from e

        if response.status_code != 200:
            logger.error(f"Search index returned {response.status_code}: {response.text}")
            raise SearchIndexError(f"Search index returned {response.status_code}")

        return [hit["document"] for hit in response.json().get("hits", [])]
