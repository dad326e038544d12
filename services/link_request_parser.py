from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, Tuple

from models.link_request import ID_KEY, LinkRequest
from utils.errors import (
    DuplicateKeyError,
    MultipleIdValuesError,
    TooManyPartsError,
    must_not_be_blank,
)

logger = logging.getLogger(__name__)

PAIR_DELIMITER = "|"
KEY_VALUE_DELIMITER = "="

MULTIPLE_IDS_MESSAGE = (
    f"Multiple values found for '{ID_KEY}'. A keyless value is treated as '{ID_KEY}'. "
    f"If it is present, there is no need to supply a value with '{ID_KEY}' key explicitly."
)
TOO_MANY_PARTS_MESSAGE = (
    "A key-value pair delimited by an equal sign produced by splitting the request "
    "must contain 2 parts at the most."
)
DUPLICATE_KEY_MESSAGE = (
    "A key-value pair delimited by an equal sign produced by splitting the request "
    "must have a unique key."
)


def _split(value: str, delimiter: str) -> List[str]:
    return [piece for piece in value.split(delimiter) if piece]


def _sanitize_pairs(pairs: List[List[str]]) -> Iterator[Tuple[str, str]]:
    existing_keys = set()
    for pair in pairs:
        if not pair:
            continue

        if len(pair) > 2:
            raise TooManyPartsError(TOO_MANY_PARTS_MESSAGE)

        if len(pair) == 2:
            key = pair[0].strip()
            if key in existing_keys:
                if key == ID_KEY:
                    raise MultipleIdValuesError(MULTIPLE_IDS_MESSAGE)
                raise DuplicateKeyError(f"{DUPLICATE_KEY_MESSAGE} Duplicate key: '{key}'")

            existing_keys.add(key)
            yield key, pair[1].strip()
            continue

        # keyless value
        if ID_KEY in existing_keys:
            raise MultipleIdValuesError(MULTIPLE_IDS_MESSAGE)

        existing_keys.add(ID_KEY)
        yield ID_KEY, pair[0].strip()


def parse_link_request(raw: str) -> Dict[str, str]:
    """
    Parse a pipe-delimited link request into its key/value parts.

    ``"person|templated=true"`` -> ``{"id": "person", "templated": "true"}``.
    A segment without an equal sign is the value of ``id``; keys and values
    are trimmed. Any ambiguity fails the whole parse.
    """
    must_not_be_blank(raw, "request")

    pairs = [_split(segment, KEY_VALUE_DELIMITER) for segment in _split(raw, PAIR_DELIMITER)]

    # materialize before returning so a late error leaves no partial result
    return dict(_sanitize_pairs(pairs))


def format_link_request(parts: Mapping[str, object]) -> str:
    return PAIR_DELIMITER.join(f"{key}{KEY_VALUE_DELIMITER}{value}" for key, value in parts.items())


class PipeDelimitedLinkRequestParser:

    def parse(self, raw: str) -> LinkRequest:
        parts = parse_link_request(raw)
        logger.debug("Parsed link request %r into %s", raw, parts)
        return LinkRequest(parts)
