import logging
from typing import Union

import chardet

logger = logging.getLogger(__name__)

SNIFF_BYTES = 10000
MIN_CONFIDENCE = 0.7


def decode_text(data: Union[bytes, str]) -> str:
    """Decode an uploaded buffer, UTF-8 first.

    Exports from older spreadsheet tools are often Latin-1 or cp1252, so a
    buffer that is not valid UTF-8 goes through chardet. Low-confidence
    guesses fall back to UTF-8 with replacement characters.
    """
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    result = chardet.detect(data[:SNIFF_BYTES])
    encoding = result.get("encoding")
    if encoding and (result.get("confidence") or 0) > MIN_CONFIDENCE:
        try:
            text = data.decode(encoding)
            logger.warning("Input is not valid UTF-8; decoded as %s (confidence %.2f)", encoding, result["confidence"])
            return text
        except (LookupError, UnicodeDecodeError) as e:
            logger.warning("Decoding as detected %s failed: %s", encoding, e)

    logger.warning("Could not detect input encoding; decoding as UTF-8 with replacement")
    return data.decode("utf-8", errors="replace")
