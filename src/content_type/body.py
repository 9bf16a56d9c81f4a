"""
Body Reader
===========

This module reads an HTTP message body the way the classifier says it should
be read. The ``Content-Type`` value picks the decoder and the charset:

- JSON bodies are parsed with :mod:`json`
- XML bodies are parsed with :mod:`xml.etree.ElementTree`
- URL-encoded form bodies become ``dict[str, list[str]]``
- multipart bodies (``form-data`` and ``mixed``) become ``dict[str, list]``
  keyed by field name; file parts stay ``bytes``, plain fields become text
- anything else is returned as text

The classifier never raises; this module does. Bodies that cannot be decoded
raise :class:`BodyDecodeError`, chained to the underlying parser error.

XML bodies come from untrusted peers and go through the stdlib expat parser,
which expands entities declared in an internal DTD. Bodies carrying a
``<!DOCTYPE`` declaration are therefore rejected before parsing. The check
looks at the raw bytes, so it only sees ASCII-compatible encodings.
"""

from __future__ import annotations

import json
import re
import xml.etree.ElementTree as ET
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any
from urllib.parse import parse_qs

import requests
import structlog

from .classifier import (
    MediaTypeClass,
    classify,
    get_charset,
    get_type_only,
    is_supported_charset,
)

log = structlog.get_logger(__name__)

DOCTYPE_PATTERN = re.compile(rb"<!DOCTYPE", re.IGNORECASE)


class BodyDecodeError(ValueError):
    """Raised when a message body does not decode as its Content-Type says."""

    def __init__(self, message: str, content_type: str | None = None):
        super().__init__(message)
        self.content_type = content_type


def decode_body(content: bytes, content_type: str | None) -> Any:
    """
    Decode *content* according to *content_type*.

    Parameters are stripped before classification, so
    ``application/json; charset=utf-8`` is read as JSON. Empty bodies of a
    structured type decode to None.
    """
    media_class = classify(get_type_only(content_type))
    charset = get_charset(content_type)

    if media_class is None:
        return _decode_text(content, charset, content_type)
    if not content:
        return None

    log.debug(
        "Decoding body",
        media_class=media_class.value,
        charset=charset,
        size=len(content),
    )

    if media_class is MediaTypeClass.JSON:
        text = _decode_text(content, charset, content_type)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise _failure(f"Invalid JSON body: {e}", content_type) from e

    if media_class is MediaTypeClass.XML:
        if DOCTYPE_PATTERN.search(content):
            raise _failure("XML body with a DOCTYPE is not accepted", content_type)
        try:
            return ET.fromstring(content)
        except ET.ParseError as e:
            raise _failure(f"Invalid XML body: {e}", content_type) from e

    if media_class is MediaTypeClass.FORM_URL_ENCODED:
        text = _decode_text(content, charset, content_type)
        return parse_qs(text, keep_blank_values=True, encoding=charset)

    return _decode_multipart(content, content_type, charset)


def read_response(response: requests.Response) -> Any:
    """Decode the body of a ``requests`` response using its Content-Type header."""
    return decode_body(response.content, response.headers.get("Content-Type"))


def _decode_text(content: bytes, charset: str, content_type: str | None) -> str:
    try:
        return content.decode(charset)
    except UnicodeError as e:
        raise _failure(f"Body is not valid {charset}: {e}", content_type) from e


def _decode_multipart(
    content: bytes, content_type: str | None, charset: str
) -> dict[str, list[str | bytes]]:
    """
    Split a multipart body into its named parts.

    The email parser needs the full header (with its boundary), so the
    original Content-Type value is prepended as a header block.
    """
    header = f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n"
    message = BytesParser(policy=policy.HTTP).parsebytes(
        header.encode("utf-8") + content
    )
    if not message.is_multipart():
        raise _failure("Multipart body has no boundary or no parts", content_type)

    fields: dict[str, list[str | bytes]] = {}
    for index, part in enumerate(message.iter_parts()):
        name = part.get_param("name", header="content-disposition") or f"part-{index}"
        fields.setdefault(name, []).append(_part_value(part, charset, content_type))
    return fields


def _part_value(
    part: EmailMessage, charset: str, content_type: str | None
) -> str | bytes:
    if part.is_multipart():
        return part.as_bytes()
    payload = part.get_payload(decode=True) or b""
    if part.get_filename() is not None:
        return payload
    part_charset = part.get_content_charset()
    if not is_supported_charset(part_charset):
        part_charset = charset
    return _decode_text(payload, part_charset, content_type)


def _failure(message: str, content_type: str | None) -> BodyDecodeError:
    log.warning("Failed to decode body", error=message, content_type=content_type)
    return BodyDecodeError(message, content_type)
