"""HTTP client for the Primary booking API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from bookfix.adapters.documents import booking_from_document, payment_from_document
from bookfix.adapters.documents.schema import (
    BookingListResponse,
    BookingResponse,
    CancelResponse,
    DocumentModel,
    PaymentHistoryResponse,
)
from bookfix.adapters.http_resilience import ResilientClient
from bookfix.domain.errors import TransientUnavailableError
from bookfix.domain.ports import CancellationReceipt

if TYPE_CHECKING:
    from collections.abc import Callable

    from bookfix.config.http_resilience import ResilienceConfig
    from bookfix.config.primary import PrimaryConfig
    from bookfix.domain.model import Booking, BookingStatus, Payment

log = getLogger(__name__)

BOOKINGS_PATH = "bookings"
PAYMENT_HISTORY_PATH = "payments/history"


class PrimaryUnavailableError(TransientUnavailableError):
    """Raised when the Primary API cannot be reached or answers unexpectedly."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def should_cache_payment_history(payload: object) -> bool:
    """Only well-formed, non-empty payment histories are worth caching."""

    try:
        response = PaymentHistoryResponse.model_validate(payload)
    except ValidationError:
        return False
    return bool(response.payments)


class PrimaryBookingClient:
    """Synchronous facade over the async Primary endpoints."""

    def __init__(
        self,
        *,
        config: PrimaryConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient

    @property
    def base_url(self) -> str:
        return self._config.base_url

    def fetch_booking(self, booking_id: str) -> Booking | None:
        return asyncio.run(self._fetch_booking_async(booking_id))

    def cancel_booking(self, remote_key: str, *, reason: str) -> CancellationReceipt:
        return asyncio.run(self._cancel_booking_async(remote_key, reason=reason))

    def list_bookings(self, *, status: BookingStatus | None = None) -> list[Booking]:
        return asyncio.run(self._list_bookings_async(status=status))

    def fetch_payment_history(self) -> list[Payment]:
        return asyncio.run(self._fetch_payment_history_async())

    async def _fetch_booking_async(self, booking_id: str) -> Booking | None:
        async with self._client_factory(self._config.bookings) as client:
            response = await self._perform(client, "GET", f"{BOOKINGS_PATH}/{booking_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            log.debug("Primary has no booking %s", booking_id)
            return None
        self._raise_for_status(response)
        document = self._parse(response, BookingResponse)
        if document.booking is None:
            return None
        return booking_from_document(document.booking)

    async def _cancel_booking_async(self, remote_key: str, *, reason: str) -> CancellationReceipt:
        async with self._client_factory(self._config.bookings) as client:
            response = await self._perform(
                client,
                "PUT",
                f"{BOOKINGS_PATH}/{remote_key}/cancel",
                json={"reason": reason},
            )
        self._raise_for_status(response)
        document = self._parse(response, CancelResponse)
        return CancellationReceipt(
            refund_amount=document.refund_info.refund_amount if document.refund_info else None,
            booking=booking_from_document(document.booking) if document.booking else None,
        )

    async def _list_bookings_async(self, *, status: BookingStatus | None) -> list[Booking]:
        params: dict[str, str] = {"sortBy": "createdAt", "sortOrder": "desc"}
        if status is not None:
            params["status"] = str(status)
        async with self._client_factory(self._config.bookings) as client:
            response = await self._perform(client, "GET", BOOKINGS_PATH, params=params)
        self._raise_for_status(response)
        document = self._parse(response, BookingListResponse)
        return [booking_from_document(item) for item in document.bookings]

    async def _fetch_payment_history_async(self) -> list[Payment]:
        async with self._client_factory(self._config.payment_history) as client:
            response = await self._perform(client, "GET", PAYMENT_HISTORY_PATH)
        self._raise_for_status(response)
        document = self._parse(response, PaymentHistoryResponse)
        return [payment_from_document(item) for item in document.payments]

    async def _perform(
        self,
        client: ResilientClient,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
    ) -> httpx.Response:
        try:
            return await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            raise PrimaryUnavailableError(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        log.warning(
            "Primary answered %s for %s %s",
            response.status_code,
            response.request.method,
            response.request.url.path,
        )
        raise PrimaryUnavailableError(
            f"Primary API error: {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def _parse[M: DocumentModel](
        response: httpx.Response,
        model: type[M],
    ) -> M:
        try:
            return model.model_validate(response.json())
        except ValueError as exc:  # includes ValidationError and JSON decode errors
            raise PrimaryUnavailableError(f"Unexpected Primary response payload: {exc}") from exc
