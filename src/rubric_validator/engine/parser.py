"""Verdict parsing for model output.

The model is instructed to answer with a bare JSON object. Output is parsed
as-is after trimming whitespace: prose, truncated JSON and markdown fences
all fail with ParseError. No repair or retry is attempted, and the raw text
only ever goes to the server log.
"""

import json

from pydantic import ValidationError

from ..logging import logger
from ..schemas.verdict import Verdict
from .errors import ParseError


def parse_verdict(raw: str) -> Verdict:
    text = raw.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        logger.error(f"Error parsing model response: {e}")
        logger.error(f"Failed to parse text: {raw}")
        raise ParseError() from e

    if not isinstance(data, dict):
        logger.error(f"Model response is not a JSON object: {raw}")
        raise ParseError()

    try:
        return Verdict.model_validate(data)
    except ValidationError as e:
        logger.error(f"Model response does not match verdict shape: {e}")
        logger.error(f"Failed to parse text: {raw}")
        raise ParseError() from e
