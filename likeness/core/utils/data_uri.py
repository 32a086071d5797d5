"""
Data URI utility functions.

Every media payload crossing a component boundary uses the self-contained
``data:<mimetype>;base64,<encoded_data>`` form.
"""
import base64
import binascii
import re
from typing import NamedTuple

from likeness.core.exceptions import InvalidDataUriError

_DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime>[^;,]+)(?:;[^;,=]+=[^;,]*)*;base64,(?P<data>.*)$", re.DOTALL
)


class DecodedDataUri(NamedTuple):
    """Media type and raw bytes of a data URI."""
    mime_type: str
    data: bytes


def content_type_of(uri: str) -> str:
    """Get the MIME type declared by a data URI.

    Args:
        uri: Data URI

    Returns:
        str: MIME type without parameters, e.g. ``video/mp4`` for
        ``data:video/mp4;codecs=avc1;base64,...``

    Raises:
        InvalidDataUriError: If the URI is not a base64 data URI
    """
    match = _DATA_URI_PATTERN.match(uri or "")
    if match is None:
        raise InvalidDataUriError("Could not determine content type from data URI.")
    return match.group("mime")


def decode_data_uri(uri: str) -> DecodedDataUri:
    """Decode a base64 data URI.

    Args:
        uri: Data URI

    Returns:
        DecodedDataUri: MIME type and payload bytes

    Raises:
        InvalidDataUriError: If the URI is malformed or the payload is not base64
    """
    mime_type = content_type_of(uri)
    payload = uri.split(",", 1)[1]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidDataUriError(f"Invalid base64 payload in data URI: {e}") from e
    return DecodedDataUri(mime_type=mime_type, data=data)


def encode_data_uri(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 data URI."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
