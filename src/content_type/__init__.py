"""
Content-Type classification for HTTP body handling.

This package contains:

- the stateless classifier (media-type families, charset, parameters)
- a body reader that decodes message bodies according to their Content-Type
- configuration and logging set-up
"""

from .body import BodyDecodeError, decode_body, read_response
from .classifier import (
    DEFAULT_CHARSET,
    MediaTypeClass,
    classify,
    get_charset,
    get_charset_or_none,
    get_parameters,
    get_type_only,
    is_form_url_encoded,
    is_json,
    is_multipart_form_data,
    is_supported_charset,
    is_xml,
)

__all__ = [
    "BodyDecodeError",
    "DEFAULT_CHARSET",
    "MediaTypeClass",
    "classify",
    "decode_body",
    "get_charset",
    "get_charset_or_none",
    "get_parameters",
    "get_type_only",
    "is_form_url_encoded",
    "is_json",
    "is_multipart_form_data",
    "is_supported_charset",
    "is_xml",
    "read_response",
]
