"""DingTalk custom robot client.

Sends text, link and markdown messages to a group webhook.
"""

from dingtalk_notifier.errors import (
    DecodingError,
    EncodingError,
    NotifierError,
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
    message_from_dict,
)
from dingtalk_notifier.robot import Notifier, Robot, new

__version__ = "0.1.0"

__all__ = [
    "AtDirective",
    "DecodingError",
    "EncodingError",
    "LinkMessage",
    "MarkdownMessage",
    "Message",
    "Notifier",
    "NotifierError",
    "RemoteError",
    "ResponseStatus",
    "Robot",
    "TextMessage",
    "TransportError",
    "message_from_dict",
    "new",
]
