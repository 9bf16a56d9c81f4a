import xml.etree.ElementTree as ET

import pytest
import requests

from content_type.body import BodyDecodeError, decode_body, read_response

MULTIPART_BODY = (
    b"--XyZ\r\n"
    b'Content-Disposition: form-data; name="title"\r\n'
    b"\r\n"
    b"Caf\xc3\xa9\r\n"
    b"--XyZ\r\n"
    b'Content-Disposition: form-data; name="upload"; filename="a.bin"\r\n'
    b"Content-Type: application/octet-stream\r\n"
    b"\r\n"
    b"\x00\x01\x02\r\n"
    b"--XyZ\r\n"
    b'Content-Disposition: form-data; name="title"\r\n'
    b"\r\n"
    b"second\r\n"
    b"--XyZ--\r\n"
)


def test_decode_json_with_charset_parameter():
    body = '{"name": "Zoë"}'.encode("utf-8")

    assert decode_body(body, "application/json; charset=utf-8") == {"name": "Zoë"}


def test_decode_json_uses_declared_charset():
    body = '{"name": "Zoë"}'.encode("latin-1")

    assert decode_body(body, "application/json; charset=ISO-8859-1") == {"name": "Zoë"}


def test_decode_vendor_json():
    assert decode_body(b"[1, 2]", "application/problem+json") == [1, 2]


def test_decode_invalid_json_raises():
    with pytest.raises(BodyDecodeError, match="Invalid JSON body") as exc_info:
        decode_body(b"{not json", "application/json")

    assert exc_info.value.content_type == "application/json"
    assert exc_info.value.__cause__ is not None


def test_decode_undecodable_bytes_raises():
    with pytest.raises(BodyDecodeError, match="not valid utf-8"):
        decode_body(b'{"a": "\xff"}', "application/json; charset=utf-8")


def test_decode_xml():
    root = decode_body(b"<pet><name>Rex</name></pet>", "text/xml; charset=utf-8")

    assert isinstance(root, ET.Element)
    assert root.tag == "pet"
    assert root.findtext("name") == "Rex"


def test_decode_invalid_xml_raises():
    with pytest.raises(BodyDecodeError, match="Invalid XML body"):
        decode_body(b"<pet>", "application/xml")


def test_decode_form_url_encoded():
    body = b"name=Rex&tag=a&tag=b&empty="

    assert decode_body(body, "application/x-www-form-urlencoded") == {
        "name": ["Rex"],
        "tag": ["a", "b"],
        "empty": [""],
    }


def test_decode_multipart_form_data():
    fields = decode_body(MULTIPART_BODY, "multipart/form-data; boundary=XyZ")

    assert fields == {
        "title": ["Café", "second"],
        "upload": [b"\x00\x01\x02"],
    }


def test_decode_multipart_mixed_names_unnamed_parts():
    body = (
        b"--b\r\n"
        b"Content-Type: text/plain; charset=ISO-8859-1\r\n"
        b"\r\n"
        b"Caf\xe9\r\n"
        b"--b--\r\n"
    )

    assert decode_body(body, "multipart/mixed; boundary=b") == {"part-0": ["Café"]}


def test_decode_multipart_without_boundary_raises():
    with pytest.raises(BodyDecodeError, match="no boundary"):
        decode_body(MULTIPART_BODY, "multipart/form-data")


def test_decode_empty_structured_body_is_none():
    assert decode_body(b"", "application/json") is None
    assert decode_body(b"", "multipart/form-data; boundary=x") is None


def test_decode_unclassified_body_as_text():
    assert decode_body(b"hello", "text/plain") == "hello"
    assert decode_body(b"hello", None) == "hello"
    assert decode_body("Café".encode("cp1252"), "text/plain; charset=cp1252") == "Café"


def test_read_response(requests_mock):
    requests_mock.get(
        "http://api.test/pets/1",
        content=b'{"id": 1}',
        headers={"Content-Type": "application/json;charset=UTF-8"},
    )

    response = requests.get("http://api.test/pets/1")

    assert read_response(response) == {"id": 1}


def test_read_response_without_content_type(requests_mock):
    requests_mock.get("http://api.test/health", content=b"ok", headers={})

    response = requests.get("http://api.test/health")

    assert read_response(response) == "ok"


def test_decode_multipart_uses_quoted_part_charset():
    body = (
        b"--b\r\n"
        b'Content-Disposition: form-data; name="greeting"\r\n'
        b'Content-Type: text/plain; charset="windows-1252"\r\n'
        b"\r\n"
        b"Caf\xe9 \x80\r\n"
        b"--b\r\n"
        b'Content-Disposition: form-data; name="note"\r\n'
        b"Content-Type: text/plain; charset=no-such-charset\r\n"
        b"\r\n"
        b"Caf\xc3\xa9\r\n"
        b"--b--\r\n"
    )

    fields = decode_body(body, "multipart/form-data; boundary=b")

    assert fields == {"greeting": ["Café €"], "note": ["Café"]}


def test_decode_xml_with_doctype_is_rejected():
    body = (
        b'<?xml version="1.0"?>\n'
        b'<!doctype pet [<!ENTITY name "Rex">]>\n'
        b"<pet>&name;</pet>"
    )

    with pytest.raises(BodyDecodeError, match="DOCTYPE"):
        decode_body(body, "application/xml")


def test_decode_body_with_undefined_charset_falls_back_to_utf8():
    assert decode_body(b'{"a": 1}', "application/json; charset=undefined") == {"a": 1}
