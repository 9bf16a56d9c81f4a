"""
Content-Type Classifier
=======================

This module answers the questions a body-handling layer asks about a raw
``Content-Type`` header value before it reads a message body:

- is the body JSON, XML, URL-encoded form data or multipart form data?
- which charset should be used to turn the raw bytes into text?
- which ``;attribute=value`` parameters were sent along with the media type?
- what is the bare media type once the parameters are stripped?

Every function is pure. Malformed or missing header values never raise; they
produce a negative or empty result instead.

Note that :func:`is_json` and :func:`is_xml` match against the *whole* header
value. ``application/json; charset=utf-8`` is therefore not JSON for these
predicates; strip the parameters with :func:`get_type_only` first.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from types import MappingProxyType

import structlog

log = structlog.get_logger(__name__)

DEFAULT_CHARSET = "UTF-8"
CHARSET_PARAMETER = "charset"

# These patterns must match the media type only, WITHOUT any parameters.
JSON_PATTERN = re.compile(r"(?:application|text)/(?:.+\+)?json")
XML_PATTERN = re.compile(r"(?:application|text)/(?:.+\+)?xml")
CHARSET_PATTERN = re.compile(r"(?:charset=)(.*)")
PARAMETERS_PATTERN = re.compile(r"; ?([^;\s]+)=([^;\s]+)", re.ASCII)
# Legal charset name characters (RFC 2978 subset accepted by most registries)
CHARSET_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9\-+:_.]*")

FORM_URL_ENCODED_PREFIX = "application/x-www-form-urlencoded"
MULTIPART_PREFIXES = ("multipart/form-data", "multipart/mixed")


class MediaTypeClass(enum.Enum):
    """Body families a Content-Type value can be classified into."""

    JSON = "json"
    XML = "xml"
    FORM_URL_ENCODED = "form-urlencoded"
    MULTIPART_FORM_DATA = "multipart-form-data"


def is_supported_charset(name: str | None) -> bool:
    """
    Return True if *name* is a legal charset name known to Python as a text encoding.

    Binary transforms registered as codecs (``base64``, ``zlib``, ...) and
    codecs that refuse all input (``undefined``) are rejected.
    """
    if not name or CHARSET_NAME_PATTERN.fullmatch(name) is None:
        return False
    try:
        "".encode(name)
    except (LookupError, ValueError):
        return False
    return True


def is_json(content_type: str | None) -> bool:
    """True if the whole value is ``(application|text)/json`` or ``.../*+json``."""
    if content_type is None:
        return False
    return JSON_PATTERN.fullmatch(content_type.lower()) is not None


def is_xml(content_type: str | None) -> bool:
    """True if the whole value is ``(application|text)/xml`` or ``.../*+xml``."""
    if content_type is None:
        return False
    return XML_PATTERN.fullmatch(content_type.lower()) is not None


def is_form_url_encoded(content_type: str | None) -> bool:
    if content_type is None:
        return False
    return content_type.lower().startswith(FORM_URL_ENCODED_PREFIX)


def is_multipart_form_data(content_type: str | None) -> bool:
    """True for ``multipart/form-data`` and ``multipart/mixed``, parameters allowed."""
    if content_type is None:
        return False
    return content_type.lower().startswith(MULTIPART_PREFIXES)


def classify(content_type: str | None) -> MediaTypeClass | None:
    """
    Return the body family of *content_type*, or None when it is none of them.

    The predicates are tried in order: JSON, XML, form-urlencoded, multipart.
    """
    if is_json(content_type):
        return MediaTypeClass.JSON
    if is_xml(content_type):
        return MediaTypeClass.XML
    if is_form_url_encoded(content_type):
        return MediaTypeClass.FORM_URL_ENCODED
    if is_multipart_form_data(content_type):
        return MediaTypeClass.MULTIPART_FORM_DATA
    return None


def get_charset(content_type: str | None) -> str:
    """
    Return the charset declared in *content_type*.

    Falls back to ``"UTF-8"`` when the value is missing, declares no charset,
    or declares one Python does not support.
    """
    charset = get_charset_or_none(content_type)
    return charset if charset is not None else DEFAULT_CHARSET


def get_charset_or_none(content_type: str | None) -> str | None:
    """Like :func:`get_charset`, but return None instead of the default."""
    if content_type is None:
        return None

    match = CHARSET_PATTERN.search(content_type)
    if match:
        charset = match.group(1).strip()
        if is_supported_charset(charset):
            return charset
        log.debug("Ignoring unsupported charset", charset=charset)

    return None


def get_parameters(content_type: str | None) -> Mapping[str, str]:
    """
    Return all ``;attribute=value`` parameters of *content_type*.

    Attributes and values are lower-cased. Pairs with an empty attribute or
    value, or with embedded whitespace, are skipped. A ``charset`` pair is
    kept only when the charset is supported. For repeated attributes the
    last one wins. The result is read-only.

    A None value yields an empty mapping.
    """
    parameters: dict[str, str] = {}
    if content_type is None:
        return MappingProxyType(parameters)

    for attribute, value in PARAMETERS_PATTERN.findall(content_type.lower()):
        if attribute != CHARSET_PARAMETER or is_supported_charset(value):
            parameters[attribute] = value

    return MappingProxyType(parameters)


def get_type_only(content_type: str | None) -> str | None:
    """
    Return the lower-cased media type with its parameters stripped.

    Everything from the first ``;`` on is removed. Whitespace before the
    semicolon is kept as-is.
    """
    if content_type is None:
        return None
    return content_type.split(";", 1)[0].lower()
