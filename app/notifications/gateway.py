"""
Apple Push Notification service (APNs) gateway.

ApnsGateway owns one HTTP/2 connection to APNs and the provider token used
to authenticate on it. The connection is opened lazily by the first send
(or an explicit init()) and released by shutdown().

Initialization is single-flight: concurrent first callers block on one lock
and observe exactly one connection attempt. Missing credentials raise
ConfigurationError at that point, never at import or startup.

Configuration (via settings):
- APNS_KEY: PEM text or base64-encoded PEM of the .p8 signing key
- APNS_KEY_PATH: Path to the .p8 file (takes precedence over APNS_KEY)
- APNS_KEY_ID / APNS_TEAM_ID: Provider token identifiers
- APNS_BUNDLE_ID: Topic for every notification
- APNS_PRODUCTION: Use the production host instead of the sandbox

Usage:
    from notifications.gateway import get_gateway

    result = get_gateway().send(device_token, sanitized)
    if not result.sent and result.is_invalid_device:
        ...
"""

from __future__ import annotations

import atexit
import base64
import binascii
import logging
import re
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx
import jwt
from celery.signals import worker_shutdown
from django.conf import settings

from core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from notifications.types import SanitizedNotification

logger = logging.getLogger(__name__)

PRODUCTION_HOST = "https://api.push.apple.com"
SANDBOX_HOST = "https://api.sandbox.push.apple.com"

# APNs rejects provider tokens older than an hour
PROVIDER_TOKEN_TTL_SECONDS = 50 * 60

DEFAULT_SOUND = "default"
ALERT_PRIORITY = "10"

UNREGISTERED_STATUS = 410
BAD_DEVICE_TOKEN_REASON = "BadDeviceToken"

BASE64_PEM_RE = re.compile(r"^[A-Za-z0-9+/=\r\n]+$")


def truncate_token(token: str) -> str:
    """Log-safe prefix of a device token or account id."""
    return f"{token[:12]}..."


@dataclass(frozen=True)
class ApnsCredentials:
    key: str
    key_id: str
    team_id: str
    bundle_id: str
    production: bool = False

    @property
    def host(self) -> str:
        return PRODUCTION_HOST if self.production else SANDBOX_HOST

    @classmethod
    def from_settings(cls) -> ApnsCredentials:
        """
        Read and validate credentials from Django settings.

        Raises:
            ConfigurationError: A required value is missing or unreadable
        """
        key_text = (getattr(settings, "APNS_KEY", "") or "").strip()
        key_path = (getattr(settings, "APNS_KEY_PATH", "") or "").strip()
        key_id = getattr(settings, "APNS_KEY_ID", "") or ""
        team_id = getattr(settings, "APNS_TEAM_ID", "") or ""
        bundle_id = getattr(settings, "APNS_BUNDLE_ID", "") or ""

        missing = []
        if not key_text and not key_path:
            missing.append("APNS_KEY or APNS_KEY_PATH")
        if not key_id:
            missing.append("APNS_KEY_ID")
        if not team_id:
            missing.append("APNS_TEAM_ID")
        if not bundle_id:
            missing.append("APNS_BUNDLE_ID")
        if missing:
            raise ConfigurationError(
                f"Missing required APNs configuration: {', '.join(missing)}",
                details={"missing": missing},
            )

        return cls(
            key=load_signing_key(key_text, key_path),
            key_id=key_id,
            team_id=team_id,
            bundle_id=bundle_id,
            production=bool(getattr(settings, "APNS_PRODUCTION", False)),
        )


def load_signing_key(key_text: str, key_path: str) -> str:
    """
    Resolve the PEM signing key.

    A key file wins over inline text. Inline text may be the PEM itself or
    the PEM encoded as base64 (which starts with ``LS0t``, i.e. ``---``).
    """
    if key_path:
        try:
            with open(key_path, encoding="utf-8") as f:
                return f.read()
        except OSError as exc:
            raise ConfigurationError(
                f"Failed to read APNS_KEY_PATH file at {key_path}: {exc}"
            ) from exc

    if BASE64_PEM_RE.match(key_text) and "LS0t" in key_text:
        try:
            return base64.b64decode(key_text).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ConfigurationError(
                "APNS_KEY looked like base64 but failed to decode"
            ) from exc

    return key_text


@dataclass(frozen=True)
class PushResult:
    """Per-device outcome of a send."""

    device_token: str
    sent: bool
    status: int | None = None
    reason: str | None = None

    @property
    def is_invalid_device(self) -> bool:
        """The device is gone: its registration should be deleted."""
        return self.status == UNREGISTERED_STATUS or self.reason == BAD_DEVICE_TOKEN_REASON


def build_apns_payload(notification: SanitizedNotification) -> dict[str, Any]:
    """APNs JSON body: the ``aps`` dictionary plus the sanitized data keys."""
    aps: dict[str, Any] = {
        "alert": {"title": notification.title, "body": notification.body},
        "sound": notification.sound or DEFAULT_SOUND,
    }
    if notification.badge is not None:
        aps["badge"] = notification.badge

    payload: dict[str, Any] = dict(notification.data or {})
    payload["aps"] = aps
    return payload


class ApnsGateway:
    """
    Lifecycle-managed APNs connection.

    Args:
        credentials: Fixed credentials; read from settings on init() if omitted
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        credentials: ApnsCredentials | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self._credentials = credentials
        self._transport = transport
        self._client: httpx.Client | None = None
        self._lock = threading.Lock()
        self._token_lock = threading.Lock()
        self._provider_token: str | None = None
        self._provider_token_issued_at = 0.0

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    @property
    def credentials(self) -> ApnsCredentials:
        if self._credentials is None:
            raise ConfigurationError("APNs gateway has not been initialized")
        return self._credentials

    def init(self) -> httpx.Client:
        """
        Open the connection once.

        Raises:
            ConfigurationError: Credentials are missing or invalid
        """
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is None:
                self._client = self._connect()
        return self._client

    def _connect(self) -> httpx.Client:
        if self._credentials is None:
            self._credentials = ApnsCredentials.from_settings()
        credentials = self._credentials

        # Fail fast on an unusable key rather than on every send
        self._issue_provider_token(credentials)

        client = httpx.Client(
            base_url=credentials.host,
            http2=self._transport is None,
            transport=self._transport,
            timeout=httpx.Timeout(10.0),
        )
        logger.info(
            f"APNs gateway initialized (host={credentials.host}, "
            f"topic={credentials.bundle_id})"
        )
        return client

    def shutdown(self) -> None:
        """Close the connection; the next send reconnects."""
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None
                logger.info("APNs gateway shut down")

    def _issue_provider_token(self, credentials: ApnsCredentials) -> str:
        try:
            token = jwt.encode(
                {"iss": credentials.team_id, "iat": int(time.time())},
                credentials.key,
                algorithm="ES256",
                headers={"kid": credentials.key_id},
            )
        except (ValueError, TypeError, jwt.PyJWTError) as exc:
            raise ConfigurationError(f"Invalid APNs signing key: {exc}") from exc

        self._provider_token = token
        self._provider_token_issued_at = time.monotonic()
        return token

    def provider_token(self) -> str:
        """Current provider JWT, reissued when it is about to expire."""
        with self._token_lock:
            age = time.monotonic() - self._provider_token_issued_at
            if self._provider_token is None or age >= PROVIDER_TOKEN_TTL_SECONDS:
                return self._issue_provider_token(self.credentials)
            return self._provider_token

    def send(self, device_token: str, notification: SanitizedNotification) -> PushResult:
        """
        Send one alert notification to one device.

        Transport errors are reported as an unsent PushResult.

        Raises:
            ConfigurationError: On first use with missing credentials
        """
        client = self.init()
        credentials = self.credentials

        try:
            response = client.post(
                f"/3/device/{device_token}",
                json=build_apns_payload(notification),
                headers={
                    "authorization": f"bearer {self.provider_token()}",
                    "apns-topic": credentials.bundle_id,
                    "apns-push-type": "alert",
                    "apns-priority": ALERT_PRIORITY,
                },
            )
        except httpx.HTTPError as exc:
            return PushResult(device_token=device_token, sent=False, reason=str(exc))

        if response.status_code == 200:
            return PushResult(device_token=device_token, sent=True, status=200)

        try:
            body = response.json()
        except ValueError:
            body = None
        reason = body.get("reason") if isinstance(body, dict) else response.text or None

        return PushResult(
            device_token=device_token,
            sent=False,
            status=response.status_code,
            reason=reason,
        )


# =============================================================================
# Process-wide instance
# =============================================================================

_gateway = ApnsGateway()


def get_gateway() -> ApnsGateway:
    return _gateway


@worker_shutdown.connect
def shutdown_gateway(**kwargs) -> None:
    _gateway.shutdown()


atexit.register(_gateway.shutdown)
