"""
Federal Register API client for executive order ingestion.

The API is public and does not require an API key. Executive orders are
listed through the paged ``documents.json`` endpoint and their full text is
served as plain text at each document's ``raw_text_url``.
"""

import requests
from datetime import date
from typing import List, Optional, Dict, Any
import structlog
from pydantic import ValidationError

from ..core.config import settings, FetchConfig
from ..core.exceptions import FetchError
from ..core.models import ExecutiveOrder

logger = structlog.get_logger(__name__)

ORDER_FIELDS = [
    "document_number",
    "executive_order_number",
    "raw_text_url",
    "pdf_url",
    "president",
    "publication_date",
    "signing_date",
    "title",
    "type",
]

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class FederalRegisterClient:
    """Client for the Federal Register documents API."""

    def __init__(self,
                 base_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 config: Optional[FetchConfig] = None):
        self.base_url = base_url or settings.federal_register_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.config = config or settings.fetch_config()

        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": "ExecutiveOrderMonitor/1.0",
            "Accept": "application/json, text/plain"
        })

    def fetch_executive_orders(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[ExecutiveOrder]:
        """
        Retrieve every executive order published in a date window.

        Args:
            start_date: First publication date (defaults to the configured start)
            end_date: Last publication date (defaults to today)

        Returns:
            Orders in the order the API lists them

        Raises:
            FetchError: If any page cannot be retrieved
        """
        start_date = start_date or self.config.start_date
        end_date = end_date or date.today()

        params = {
            "fields[]": ORDER_FIELDS,
            "per_page": self.config.per_page,
            "order": "newest",
            "conditions[publication_date][gte]": start_date.isoformat(),
            "conditions[publication_date][lte]": end_date.isoformat(),
            "conditions[presidential_document_type][]": "executive_order",
        }

        orders = []
        url = self.base_url + "documents.json"
        page = 1

        while url:
            data = self._get_json(url, params=params, page=page)
            # next_page_url already carries the query string
            params = None

            for doc_data in data.get("results") or []:
                order = self._parse_order(doc_data)
                if order:
                    orders.append(order)

            url = data.get("next_page_url")
            if not url or (self.config.max_pages and page >= self.config.max_pages):
                break
            page += 1

        logger.info("Retrieved executive orders",
                    count=len(orders),
                    pages=page,
                    start_date=start_date.isoformat(),
                    end_date=end_date.isoformat())
        return orders

    def fetch_raw_text(self, url: str) -> str:
        """
        Retrieve the plain-text body of a document.

        Raises:
            FetchError: If the request fails or returns a non-success status
        """
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error("Failed to fetch raw text", url=url, error=str(e))
            raise FetchError(f"Failed to fetch raw text from {url}: {e}") from e

        return response.text

    def _get_json(self, url: str, params: Optional[Dict[str, Any]], page: int) -> Dict[str, Any]:
        try:
            response = self.session.get(
                url,
                params=params,
                headers=NO_CACHE_HEADERS,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error("Failed to fetch orders", page=page, error=str(e))
            raise FetchError(f"Failed to fetch orders (page {page}): {e}") from e
        except ValueError as e:
            logger.error("Invalid JSON from Federal Register", page=page, error=str(e))
            raise FetchError(f"Invalid JSON in orders response (page {page})") from e

    def _parse_order(self, doc_data: Dict[str, Any]) -> Optional[ExecutiveOrder]:
        """Normalize one API result, or None if it is unusable."""
        president = doc_data.get("president")
        if isinstance(president, dict):
            president = president.get("name")

        try:
            return ExecutiveOrder(
                document_number=doc_data["document_number"],
                executive_order_number=doc_data.get("executive_order_number"),
                title=doc_data.get("title") or "",
                president=president,
                publication_date=doc_data["publication_date"],
                signing_date=doc_data.get("signing_date"),
                raw_text_url=doc_data.get("raw_text_url"),
                pdf_url=doc_data.get("pdf_url"),
                document_type=doc_data.get("type"),
            )
        except (KeyError, ValidationError) as e:
            logger.error("Failed to parse order",
                         document_number=doc_data.get("document_number"),
                         error=str(e))
            return None

    def health_check(self) -> bool:
        """Check that the documents endpoint answers."""
        try:
            response = self.session.get(
                self.base_url + "documents.json",
                params={"per_page": 1},
                timeout=10
            )
            return response.status_code == 200
        except requests.RequestException as e:
            logger.error("Federal Register health check failed", error=str(e))
            return False
