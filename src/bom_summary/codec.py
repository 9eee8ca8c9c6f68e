"""
Share-token encoding for ProcessedData.

A share token carries a whole aggregate inside a URL fragment. Two formats
exist and both are read:

* Legacy (no marker): base64 of the UTF-8 JSON text.
* Current ("z:" marker): base64 of the zlib-compressed JSON text.

Only the current format is written. Decoders are looked up by marker, so a
new format only needs a new entry in `_DECODERS`.
"""

import base64
import binascii
import json
import logging
import zlib
from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs, quote, unquote, urlsplit

from src.bom_summary import constants as C
from src.bom_summary.errors import ShareTokenError
from src.bom_summary.types import PartData, ProcessedData
from src.bom_summary.utils import sort_file_ids

logger = logging.getLogger(__name__)

CORRUPT_MESSAGE = "This share link is corrupted or invalid."


def _read_plain(raw: bytes) -> bytes:
    return raw


def _inflate(raw: bytes) -> bytes:
    """Decompresses a zlib stream, refusing truncated or oversized output."""
    limit = C.SHARE_MAX_DECODED_BYTES
    inflater = zlib.decompressobj()
    out = inflater.decompress(raw, limit + 1)
    if len(out) > limit:
        raise zlib.error(f"decompressed payload exceeds {limit} bytes")
    if not inflater.eof:
        raise zlib.error("incomplete or truncated stream")
    return out


# Marker -> bytes transform applied after base64 decoding
_DECODERS: dict[str, Callable[[bytes], bytes]] = {
    C.SHARE_CURRENT_PREFIX: _inflate,
}
_LEGACY_DECODER = _read_plain


def to_canonical_json(data: ProcessedData) -> str:
    """Serializes the aggregate deterministically (sorted keys, no spaces)."""
    return json.dumps(
        data.to_dict(), ensure_ascii=False, separators=(",", ":"), sort_keys=True
    )


def encode_share_token(data: ProcessedData) -> str:
    """
    Encodes an aggregate as a current-format share token.

    Args:
        data: The aggregate to share.

    Returns:
        "z:" followed by base64 of the deflated canonical JSON.
    """
    compressed = zlib.compress(to_canonical_json(data).encode("utf-8"), 9)
    return C.SHARE_CURRENT_PREFIX + base64.b64encode(compressed).decode("ascii")


def _split_marker(token: str) -> tuple[str, Callable[[bytes], bytes]]:
    for marker, decoder in _DECODERS.items():
        if token.startswith(marker):
            return token[len(marker) :], decoder
    return token, _LEGACY_DECODER


def _b64decode(body: str) -> bytes:
    # Query-string handling can turn "+" into " "; padding is often dropped
    body = body.strip().replace(" ", "+")
    body += "=" * (-len(body) % 4)
    return base64.b64decode(body, validate=True)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _validate_part(part_number: str, part: Any, file_ids: set[str]) -> PartData:
    if not isinstance(part, dict):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (part {part_number!r} malformed)")

    description = part.get("description")
    total = part.get("total_quantity")
    file_quantities = part.get("file_quantities")
    tier = part.get("tier")

    if description is not None and not isinstance(description, str):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (bad description on {part_number!r})")
    if tier not in (C.TIER_1, C.TIER_2):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (bad tier on {part_number!r})")
    if not _is_int(total) or not isinstance(file_quantities, dict) or not file_quantities:
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (bad quantities on {part_number!r})")
    if not all(_is_int(q) for q in file_quantities.values()):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (bad quantities on {part_number!r})")
    if sum(file_quantities.values()) != total:
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (totals do not add up on {part_number!r})")
    if not set(file_quantities).issubset(file_ids):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (unknown file on {part_number!r})")

    return {
        "description": description,
        "total_quantity": total,
        "file_quantities": dict(file_quantities),
        "tier": tier,
    }


def from_payload(payload: Any) -> ProcessedData:
    """
    Rebuilds ProcessedData from its decoded JSON shape.

    File identifiers are deduplicated and put back in natural order, since
    older links were written with a plain lexicographic sort.

    Raises:
        ShareTokenError: If `parts` or `fileIds` is missing or malformed.
    """
    if not isinstance(payload, dict) or "parts" not in payload or "fileIds" not in payload:
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (missing parts or fileIds)")

    parts = payload["parts"]
    file_ids = payload["fileIds"]
    if not isinstance(parts, dict) or not isinstance(file_ids, list):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (malformed parts or fileIds)")
    if not all(isinstance(f, str) for f in file_ids):
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (malformed fileIds)")
    if not parts:
        raise ShareTokenError(f"{CORRUPT_MESSAGE} (no parts)")

    known = set(file_ids)
    return ProcessedData(
        parts={key: _validate_part(key, part, known) for key, part in parts.items()},
        file_ids=sort_file_ids(file_ids),
    )


def decode_share_token(token: str) -> ProcessedData:
    """
    Decodes a share token in either supported format.

    Args:
        token: A bare token (see `extract_share_token` for URLs).

    Returns:
        A fresh ProcessedData.

    Raises:
        ShareTokenError: If the token does not decode, decompress or parse,
            or lacks the required fields.
    """
    body, decoder = _split_marker(token.strip())
    try:
        text = decoder(_b64decode(body)).decode("utf-8")
        payload = json.loads(text)
    except (
        binascii.Error, zlib.error, UnicodeDecodeError, ValueError, RecursionError
    ) as e:
        raise ShareTokenError(CORRUPT_MESSAGE) from e

    return from_payload(payload)


def is_token_too_long(token: str) -> bool:
    """True when the token may not survive being pasted or sent as a link."""
    return len(token) > C.SHARE_TOKEN_WARN_LENGTH


def build_share_url(base_url: str, data: ProcessedData) -> tuple[str, bool]:
    """
    Builds a link carrying the aggregate in its fragment.

    Args:
        base_url: Page URL; any existing fragment is replaced.
        data: The aggregate to share.

    Returns:
        (url, too_long). `too_long` is advisory only.
    """
    token = encode_share_token(data)
    too_long = is_token_too_long(token)
    if too_long:
        logger.warning(
            f"Share token is {len(token)} characters "
            f"(> {C.SHARE_TOKEN_WARN_LENGTH}); the link may not work everywhere"
        )
    page = base_url.split("#", 1)[0]
    return f"{page}#{C.SHARE_FRAGMENT_KEY}={quote(token, safe=':')}", too_long


def extract_share_token(text: str) -> str:
    """
    Pulls the token out of pasted text.

    Accepts a full link carrying the token in its fragment ("#data=...") or
    its query string ("?data=..."), a bare fragment, or a bare token. The
    fragment wins when both are present.
    """
    text = text.strip()
    url = urlsplit(text)

    for section in (url.fragment, url.query):
        values = parse_qs(section).get(C.SHARE_FRAGMENT_KEY)
        if values:
            return values[0]
    return unquote(text)
