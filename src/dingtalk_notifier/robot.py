"""DingTalk custom robot client."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from dingtalk_notifier.errors import (
    DecodingError,
    EncodingError,
    RemoteError,
    TransportError,
)
from dingtalk_notifier.models import (
    AtDirective,
    LinkMessage,
    MarkdownMessage,
    Message,
    ResponseStatus,
    TextMessage,
)

if TYPE_CHECKING:
    from dingtalk_notifier.config import NotifierSettings

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class Notifier(Protocol):
    """Protocol for anything that can send the three robot message kinds."""

    def send_text(
        self, content: str, at_mobiles: Iterable[str] | None, is_at_all: bool
    ) -> None:
        """Send a text message."""
        ...

    def send_link(self, title: str, text: str, message_url: str, pic_url: str) -> None:
        """Send a link card message."""
        ...

    def send_markdown(
        self,
        title: str,
        text: str,
        at_mobiles: Iterable[str] | None,
        is_at_all: bool,
    ) -> None:
        """Send a markdown message."""
        ...


class Robot:
    """DingTalk custom robot that posts messages to a group webhook.

    Each send makes exactly one POST and raises on failure; retries are
    left to the caller. The robot holds no mutable state, so a single
    instance can be shared between threads.

    Example:
        >>> robot = Robot("https://oapi.dingtalk.com/robot/send?access_token=...")
        >>> robot.send_markdown("Build", "### Build #42 passed", ["13800000000"], False)
    """

    def __init__(self, webhook_url: str, *, timeout: float | None = None) -> None:
        """Initialize the robot.

        Args:
            webhook_url: Robot webhook URL including its access token.
            timeout: HTTP timeout in seconds. The httpx default applies when None.
        """
        self._webhook_url = webhook_url
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: NotifierSettings) -> Robot:
        """Create a robot from loaded settings."""
        return cls(settings.webhook_url.get_secret_value(), timeout=settings.timeout)

    @property
    def webhook_url(self) -> str:
        return self._webhook_url

    @property
    def timeout(self) -> float | None:
        return self._timeout

    def send_text(
        self, content: str, at_mobiles: Iterable[str] | None, is_at_all: bool
    ) -> None:
        """Send a text message.

        Raises:
            NotifierError: On any encoding, transport, decoding or remote failure.
        """
        self.send(TextMessage(content=content, at=AtDirective.of(at_mobiles, is_at_all)))

    def send_link(self, title: str, text: str, message_url: str, pic_url: str) -> None:
        """Send a link card message.

        Raises:
            NotifierError: On any encoding, transport, decoding or remote failure.
        """
        self.send(
            LinkMessage(title=title, text=text, message_url=message_url, pic_url=pic_url)
        )

    def send_markdown(
        self,
        title: str,
        text: str,
        at_mobiles: Iterable[str] | None,
        is_at_all: bool,
    ) -> None:
        """Send a markdown message.

        Raises:
            NotifierError: On any encoding, transport, decoding or remote failure.
        """
        self.send(
            MarkdownMessage(title=title, text=text, at=AtDirective.of(at_mobiles, is_at_all))
        )

    def send(self, message: Message) -> None:
        """POST a message to the webhook and check the returned status.

        Args:
            message: Any robot message variant.

        Raises:
            EncodingError: If the message cannot be serialized.
            TransportError: If the request fails or the body cannot be read.
            DecodingError: If the body is not a valid status document.
            RemoteError: If the webhook returns a non-zero errcode.
        """
        body = _encode(message)
        logger.debug(f"Sending {message.msgtype} message to DingTalk robot")

        data = self._post(body)
        status = _decode(data)

        if not status.ok:
            raise RemoteError(status.errcode, status.errmsg)

        logger.info(f"DingTalk {message.msgtype} message delivered")

    def _post(self, body: bytes) -> bytes:
        """Make a single POST and return the full response body."""
        client_kwargs: dict[str, Any] = {}
        if self._timeout is not None:
            client_kwargs["timeout"] = self._timeout

        try:
            with (
                httpx.Client(**client_kwargs) as client,
                client.stream(
                    "POST", self._webhook_url, content=body, headers=JSON_HEADERS
                ) as response,
            ):
                return response.read()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"DingTalk webhook request failed: {e}") from e


def new(webhook_url: str) -> Notifier:
    """Return a robot for the given webhook URL."""
    return Robot(webhook_url)


def _encode(message: Message) -> bytes:
    try:
        return json.dumps(message.to_dict(), ensure_ascii=False, allow_nan=False).encode(
            "utf-8"
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot encode {message.msgtype} message: {e}") from e


def _decode(data: bytes) -> ResponseStatus:
    try:
        parsed = json.loads(data)
    except (ValueError, RecursionError) as e:
        raise DecodingError(f"Response is not valid JSON: {e}") from e
    return ResponseStatus.from_dict(parsed)
