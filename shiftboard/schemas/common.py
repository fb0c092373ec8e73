from datetime import time
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer

from ..services.timerange import format_clock, parse_clock


def _coerce_clock(value):
    if isinstance(value, str):
        return parse_clock(value)
    return value


ClockTime = Annotated[
    time,
    BeforeValidator(_coerce_clock),
    PlainSerializer(format_clock, return_type=str),
]
