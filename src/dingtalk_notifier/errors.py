"""Exceptions raised by the DingTalk robot client."""

from __future__ import annotations


class NotifierError(Exception):
    """Base exception for robot send failures."""


class EncodingError(NotifierError):
    """Raised when an outgoing message cannot be serialized to JSON."""


class TransportError(NotifierError):
    """Raised when the HTTP exchange with the webhook fails.

    Covers connection failures, I/O errors during the request and
    failures while reading the response body.
    """


class DecodingError(NotifierError):
    """Raised when a response body does not match the status shape."""


class RemoteError(NotifierError):
    """Raised when the webhook reports a non-zero errcode."""

    def __init__(self, errcode: int, errmsg: str) -> None:
        super().__init__(f"dingtalk send failed: {errmsg}")
        self.errcode = errcode
        self.errmsg = errmsg
