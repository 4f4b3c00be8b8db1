"""
Character card extraction from PNG ``tEXt`` metadata.

Cards are stored base64-encoded under the ``chara`` (V2) or ``ccv3``
(V3) keyword. When both are present V3 wins.
"""

import base64
import binascii
import struct
from typing import Dict, Optional

from pydantic import ValidationError

from ..errors import DecodingError
from ..models.character import CharacterCard

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
CARD_KEYWORDS = ("ccv3", "chara")


class CharacterCardError(DecodingError):
    """The image is not a PNG or carries no readable character card."""
    default_message = "Invalid character card"


def read_text_chunks(data: bytes) -> Dict[str, str]:
    """
    Collect ``tEXt`` chunks as a keyword -> text mapping.

    A truncated trailing chunk ends the walk; chunks before it are kept.

    Raises:
        CharacterCardError: if ``data`` does not start with the PNG signature
    """
    if len(data) < len(PNG_SIGNATURE) or data[:len(PNG_SIGNATURE)] != PNG_SIGNATURE:
        raise CharacterCardError("Not a PNG image")

    chunks: Dict[str, str] = {}
    offset = len(PNG_SIGNATURE)
    while offset + 8 <= len(data):
        (length,) = struct.unpack(">I", data[offset:offset + 4])
        chunk_type = data[offset + 4:offset + 8]
        data_start = offset + 8
        data_end = data_start + length
        chunk_end = data_end + 4  # CRC
        if chunk_end > len(data):
            break

        if chunk_type == b"tEXt":
            text = data[data_start:data_end].decode("latin-1")
            keyword, sep, value = text.partition("\0")
            if sep:
                chunks[keyword] = value

        if chunk_type == b"IEND":
            break
        offset = chunk_end
    return chunks


def _find_card_text(chunks: Dict[str, str]) -> Optional[str]:
    lowered = {key.lower(): value for key, value in chunks.items()}
    for keyword in CARD_KEYWORDS:
        if keyword in lowered:
            return lowered[keyword]
    return None


def read_character_card(data: bytes) -> CharacterCard:
    """
    Parse a character card embedded in PNG image bytes.

    Args:
        data: Raw PNG file contents

    Returns:
        The decoded CharacterCard

    Raises:
        CharacterCardError: invalid signature, undecodable payload, or no card
    """
    encoded = _find_card_text(read_text_chunks(data))
    if encoded is None:
        raise CharacterCardError("No character data in image")

    try:
        text = base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise CharacterCardError("Character data is not valid base64 UTF-8", original_error=e) from e

    try:
        return CharacterCard.model_validate_json(text)
    except ValidationError as e:
        raise CharacterCardError(
            f"Character data is not a valid card: {e.error_count()} validation error(s)",
            original_error=e,
        ) from e
