"""
API Client Module

HTTP client for the Mantle app API. Every endpoint validates its own
arguments, shapes a camelCase body with absent fields left out, and hands
the result to ``MantleClient.request``.

Each call is attempted once. Responses are returned exactly as decoded,
including ``{"error": ...}`` payloads reported by the API; callers inspect
those themselves.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from urllib.parse import quote

import httpx

from ..config import ClientConfig, config
from ..exceptions import ParseError, TransportError, UnsupportedMethodError, ValidationError
from .casing import build_path, camelize_keys, compact
from .models import UsageEvent, format_timestamp


logger = logging.getLogger(__name__)


SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
IDENTIFIER_PLATFORMS = ("web", "mantle")
REPORT_PERIODS = ("daily", "weekly", "monthly", "yearly")


class MantleClient:
    """
    Client for the Mantle app API.

    Authenticates with the server-side ``api_key`` or the per-customer
    ``customer_api_token``. The API key must never be shipped to a browser;
    construction fails if one is supplied while ``is_browser_context`` is
    set or the interpreter runs inside a browser runtime.

    Args:
        app_id: Mantle application id, sent on every request.
        api_key: Server-side API key.
        customer_api_token: Customer-scoped token, safe for client-side use.
        api_url: Base URL that endpoint paths are resolved beneath;
            defaults to ``config.api.base_url``.
        is_browser_context: Declare that this code runs in a browser.
        timeout: Transport timeout in seconds.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.

    Raises:
        ConfigError: If the credentials are unusable.
    """

    def __init__(
        self,
        app_id: str,
        api_key: Optional[str] = None,
        customer_api_token: Optional[str] = None,
        api_url: Optional[str] = None,
        is_browser_context: bool = False,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = ClientConfig(
            app_id=app_id,
            api_key=api_key,
            customer_api_token=customer_api_token,
            api_url=api_url or config.api.base_url,
            is_browser_context=is_browser_context,
        )
        self.timeout = config.api.timeout_seconds if timeout is None else timeout
        self._transport = transport
        logger.info(f"MantleClient initialized (api_url: {self.api_url})")

    @classmethod
    def from_config(
        cls,
        client_config: ClientConfig,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "MantleClient":
        """Build a client from an existing ``ClientConfig``."""
        return cls(
            app_id=client_config.app_id,
            api_key=client_config.api_key,
            customer_api_token=client_config.customer_api_token,
            api_url=client_config.api_url,
            is_browser_context=client_config.is_browser_context,
            timeout=timeout,
            transport=transport,
        )

    @property
    def app_id(self) -> str:
        return self.config.app_id

    @property
    def api_key(self) -> Optional[str]:
        return self.config.api_key

    @property
    def customer_api_token(self) -> Optional[str]:
        return self.config.customer_api_token

    @property
    def api_url(self) -> str:
        return self.config.api_url

    def _headers(self) -> Dict[str, str]:
        """Standard and authentication headers for one request."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": config.api.user_agent,
            "X-Mantle-App-Id": self.app_id,
        }
        if self.api_key:
            headers["X-Mantle-App-Api-Key"] = self.api_key
        if self.customer_api_token:
            headers["X-Mantle-Customer-Api-Token"] = self.customer_api_token
        return headers

    def request(self, path: str, method: str = "GET", body: Optional[Any] = None) -> Any:
        """
        Make a request to the Mantle API.

        Args:
            path: Endpoint path relative to ``api_url``; may carry a query string.
            method: One of GET, POST, PUT, DELETE.
            body: JSON-serializable payload, sent when not None.

        Returns:
            The decoded JSON response body.

        Raises:
            UnsupportedMethodError: If ``method`` is not supported.
            TransportError: If the request fails in transit.
            ParseError: If the response body is not JSON.
        """
        if method not in SUPPORTED_METHODS:
            raise UnsupportedMethodError(method)

        logger.debug(f"{method} {path}")

        try:
            with httpx.Client(
                base_url=self.api_url,
                headers=self._headers(),
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = client.request(method, path, json=body)
        except httpx.HTTPError as e:
            logger.error(f"[request] {path} error: {e}")
            raise TransportError(path, str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            # Malformed JSON or a body that is not valid UTF-8
            logger.error(f"[request] {path} error: {e}")
            raise ParseError(path, f"Invalid JSON response: {e}", body=response.text) from e

    def identify(
        self,
        platform_id: Optional[str] = None,
        myshopify_domain: Optional[str] = None,
        platform: str = "shopify",
        access_token: Optional[str] = None,
        name: Optional[str] = None,
        email: Optional[str] = None,
        custom_fields: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Identify a customer with Mantle.

        Shopify customers need ``platform_id`` or ``myshopify_domain``;
        web and mantle customers need ``platform_id``.

        Raises:
            ValidationError: If the platform's identifier is missing.
        """
        if platform == "shopify" and platform_id is None and myshopify_domain is None:
            raise ValidationError("platform_id or myshopify_domain is required for the shopify platform")
        if platform in IDENTIFIER_PLATFORMS and platform_id is None:
            raise ValidationError("platform_id is required for web and mantle platforms")

        return self.request("identify", method="POST", body=compact({
            "platformId": platform_id,
            "myshopifyDomain": myshopify_domain,
            "platform": platform,
            "accessToken": access_token,
            "name": name,
            "email": email,
            "customFields": custom_fields,
        }))

    def get_customer(self) -> Optional[Dict[str, Any]]:
        """
        Return the ``customer`` object for the authenticated customer.

        Returns None when the response is not a JSON object or carries no
        ``customer`` key, e.g. an ``{"error": ...}`` payload.
        """
        response = self.request("customer")
        if not isinstance(response, dict):
            return None
        return response.get("customer")

    def subscribe(
        self,
        plan_id: Optional[str] = None,
        plan_ids: Optional[List[str]] = None,
        discount_id: Optional[str] = None,
        return_url: Optional[str] = None,
        billing_provider: str = "shopify",
    ) -> Any:
        """
        Subscribe to a single plan or to several plans at once.

        Raises:
            ValidationError: Unless exactly one of ``plan_id``/``plan_ids`` is given.
        """
        if plan_id is None and plan_ids is None:
            raise ValidationError("Either plan_id or plan_ids must be provided")
        if plan_id is not None and plan_ids is not None:
            raise ValidationError("Cannot provide both plan_id and plan_ids")

        return self.request("subscriptions", method="POST", body=compact({
            "planId": plan_id,
            "planIds": plan_ids,
            "discountId": discount_id,
            "returnUrl": return_url,
            "billingProvider": billing_provider,
        }))

    def cancel_subscription(self, cancel_reason: Optional[str] = None) -> Any:
        """Cancel the current subscription."""
        return self.request(
            "subscriptions",
            method="DELETE",
            body=compact({"cancelReason": cancel_reason}),
        )

    def update_subscription_capped_amount(self, id: Optional[str], capped_amount: Optional[float]) -> Any:
        """
        Change the usage billing ceiling of a subscription.

        Raises:
            ValidationError: If ``id`` or ``capped_amount`` is missing.
        """
        if id is None:
            raise ValidationError("id is required")
        if capped_amount is None:
            raise ValidationError("capped_amount is required")

        return self.request("subscriptions", method="PUT", body={
            "id": id,
            "cappedAmount": capped_amount,
        })

    def send_usage_event(
        self,
        event_name: Optional[str],
        customer_id: Optional[str] = None,
        timestamp=None,
        event_id: Optional[str] = None,
        properties: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Send a single usage event.

        Args:
            event_name: Name of the metered event.
            customer_id: Customer the event belongs to.
            timestamp: When it happened; a datetime or an ISO-8601 string.
            event_id: Idempotency key for the event.
            properties: Event metadata, sent as given.

        Raises:
            ValidationError: If ``event_name`` is missing.
        """
        if event_name is None:
            raise ValidationError("event_name is required")

        return self.request("usage_events", method="POST", body=compact({
            "eventId": event_id,
            "eventName": event_name,
            "customerId": customer_id,
            "timestamp": format_timestamp(timestamp),
            "properties": dict(properties) if properties is not None else {},
        }))

    def send_usage_events(self, events: Optional[Iterable[Union[UsageEvent, Mapping[str, Any]]]]) -> Any:
        """
        Send several usage events in one request.

        Mappings have their top-level keys converted to camelCase
        (``event_name`` -> ``eventName``); nested values are sent unchanged.
        A datetime ``timestamp`` is sent as ISO-8601.

        Raises:
            ValidationError: If ``events`` is None.
        """
        if events is None:
            raise ValidationError("events is required")

        formatted = [
            event.to_payload() if isinstance(event, UsageEvent) else self._format_event(event)
            for event in events
        ]
        return self.request("usage_events", method="POST", body={"events": formatted})

    @staticmethod
    def _format_event(event: Mapping[str, Any]) -> Dict[str, Any]:
        formatted = camelize_keys(event)
        if "timestamp" in formatted:
            formatted["timestamp"] = format_timestamp(formatted["timestamp"])
        return formatted

    def get_invoices(self, page: int = 0, limit: int = 10, customer_id: Optional[str] = None) -> Any:
        """List invoices, optionally for one customer."""
        path = build_path("invoices", {
            "page": page,
            "limit": limit,
            "customerId": customer_id,
        })
        return self.request(path, method="GET")

    def usage_metric_report(
        self,
        id: Optional[str] = None,
        customer_id: Optional[str] = None,
        period: str = "daily",
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Any:
        """
        Fetch the aggregated report for a usage metric.

        Raises:
            ValidationError: If ``id`` is missing or ``period`` is not one of
                daily, weekly, monthly, yearly.
        """
        if id is None:
            raise ValidationError("id is required")
        if period not in REPORT_PERIODS:
            raise ValidationError(f"period must be one of {', '.join(REPORT_PERIODS)}")

        path = build_path(f"usage_metric/{quote(str(id), safe='')}/report", {
            "period": period,
            "startDate": start_date,
            "endDate": end_date,
            "customerId": customer_id,
        })
        return self.request(path, method="GET")
