"""Data models for DingTalk robot messages and responses."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from dingtalk_notifier.errors import DecodingError

MSGTYPE_TEXT = "text"
MSGTYPE_LINK = "link"
MSGTYPE_MARKDOWN = "markdown"


@dataclass(frozen=True)
class AtDirective:
    """Mobile numbers to mention, and whether to mention the whole group."""

    at_mobiles: tuple[str, ...] = ()
    is_at_all: bool = False

    @classmethod
    def of(cls, at_mobiles: Iterable[str] | None, is_at_all: bool) -> AtDirective:
        """Build a directive from caller input, treating None as no mentions."""
        return cls(at_mobiles=tuple(at_mobiles or ()), is_at_all=is_at_all)

    def to_dict(self) -> dict[str, Any]:
        return {"atMobiles": list(self.at_mobiles), "isAtAll": self.is_at_all}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AtDirective:
        return cls(
            at_mobiles=tuple(data.get("atMobiles") or ()),
            is_at_all=bool(data.get("isAtAll", False)),
        )


@dataclass(frozen=True)
class TextMessage:
    """Plain text message.

    Attributes:
        content: Message body.
        at: Mention directive.
    """

    msgtype: ClassVar[str] = MSGTYPE_TEXT

    content: str
    at: AtDirective = field(default_factory=AtDirective)

    def to_dict(self) -> dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "text": {"content": self.content},
            "at": self.at.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TextMessage:
        return cls(
            content=data["text"]["content"],
            at=AtDirective.from_dict(data.get("at", {})),
        )


@dataclass(frozen=True)
class LinkMessage:
    """Link card message. None of the fields are validated locally.

    Attributes:
        title: Card title.
        text: Card body text.
        message_url: URL opened when the card is clicked.
        pic_url: Preview image URL.
    """

    msgtype: ClassVar[str] = MSGTYPE_LINK

    title: str
    text: str
    message_url: str
    pic_url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "link": {
                "title": self.title,
                "text": self.text,
                "messageUrl": self.message_url,
                "picUrl": self.pic_url,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LinkMessage:
        link = data["link"]
        return cls(
            title=link["title"],
            text=link["text"],
            message_url=link["messageUrl"],
            pic_url=link["picUrl"],
        )


@dataclass(frozen=True)
class MarkdownMessage:
    """Markdown message.

    Attributes:
        title: Title shown in the conversation list.
        text: Markdown body.
        at: Mention directive.
    """

    msgtype: ClassVar[str] = MSGTYPE_MARKDOWN

    title: str
    text: str
    at: AtDirective = field(default_factory=AtDirective)

    def to_dict(self) -> dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "markdown": {"title": self.title, "text": self.text},
            "at": self.at.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MarkdownMessage:
        markdown = data["markdown"]
        return cls(
            title=markdown["title"],
            text=markdown["text"],
            at=AtDirective.from_dict(data.get("at", {})),
        )


Message = TextMessage | LinkMessage | MarkdownMessage

_MESSAGE_TYPES: dict[str, type[TextMessage] | type[LinkMessage] | type[MarkdownMessage]] = {
    MSGTYPE_TEXT: TextMessage,
    MSGTYPE_LINK: LinkMessage,
    MSGTYPE_MARKDOWN: MarkdownMessage,
}


def message_from_dict(data: dict[str, Any]) -> Message:
    """Decode a wire document into the message variant named by its msgtype.

    Raises:
        DecodingError: If the msgtype is unknown or a required field is missing.
    """
    msgtype = data.get("msgtype")
    message_cls = _MESSAGE_TYPES.get(msgtype) if isinstance(msgtype, str) else None
    if message_cls is None:
        raise DecodingError(f"Unknown msgtype: {msgtype!r}")
    try:
        return message_cls.from_dict(data)
    except (KeyError, TypeError) as e:
        raise DecodingError(f"Malformed {msgtype} message: {e}") from e


@dataclass(frozen=True)
class ResponseStatus:
    """Status returned by the webhook for every send."""

    errcode: int
    errmsg: str = ""

    @property
    def ok(self) -> bool:
        return self.errcode == 0

    @classmethod
    def from_dict(cls, data: Any) -> ResponseStatus:
        """Create a ResponseStatus from a decoded JSON body.

        A body without an integer errcode, such as `{}` or `null`, is rejected
        instead of being read as a zero errcode and reported as success.

        Raises:
            DecodingError: If the body is not an object with an integer errcode
                and an optional string errmsg.
        """
        if not isinstance(data, dict):
            raise DecodingError(f"Expected a JSON object, got {type(data).__name__}")

        errcode = data.get("errcode")
        if isinstance(errcode, bool) or not isinstance(errcode, int):
            raise DecodingError(f"Invalid errcode: {errcode!r}")

        errmsg = data.get("errmsg", "")
        if not isinstance(errmsg, str):
            raise DecodingError(f"Invalid errmsg: {errmsg!r}")

        return cls(errcode=errcode, errmsg=errmsg)
