"""Parse ``archive.speedtest`` payloads into a single sample.

Depending on the controller family and firmware the report comes back in
one of three shapes:

* ``{"meta": {"rc": "ok"}, "data": [...]}`` from the classic Network API,
* a bare ``[...]`` array from some UniFi OS releases,
* ``{"errorCode": 0, "message": "", "data": [...]}`` from the v2 API.

Each shape is an independent parser tried in that order; the first one
whose structure matches decides the outcome.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from .errors import APIError, NoValidSamplesError, UnrecognizedFormatError
from .models import SpeedtestResult
from .utils import coerce_float, coerce_int, shorten

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ShapeMatch:
    """Samples extracted by the first matching response shape."""

    shape: str
    samples: List[Any]


class _ResponseShape(ABC):
    name = ""

    @abstractmethod
    def match(self, payload: Any, body: str) -> Optional[ShapeMatch]:
        """Return the samples when ``payload`` has this shape, else ``None``."""


class MetaWrappedShape(_ResponseShape):
    """Classic ``{meta: {rc, msg}, data: [...]}`` envelope."""

    name = "meta"

    def match(self, payload: Any, body: str) -> Optional[ShapeMatch]:
        if not isinstance(payload, dict):
            return None
        meta = payload.get("meta")
        if not isinstance(meta, dict):
            return None
        rc = meta.get("rc")
        if not isinstance(rc, str) or not rc:
            return None
        data = payload.get("data", [])
        if data is None:
            data = []
        if not isinstance(data, list):
            return None

        if rc != "ok":
            msg = meta.get("msg")
            if rc == "error":
                message = msg if isinstance(msg, str) and msg else "Unknown error from controller"
                raise APIError(f"API error: {message}", code=rc, body=shorten(body))
            raise APIError(f"API returned status: {rc}", code=rc, body=shorten(body))
        return ShapeMatch(self.name, list(data))


class BareArrayShape(_ResponseShape):
    """Un-wrapped list of samples."""

    name = "array"

    def match(self, payload: Any, body: str) -> Optional[ShapeMatch]:
        if isinstance(payload, list) and payload:
            return ShapeMatch(self.name, list(payload))
        return None


class ErrorCodeShape(_ResponseShape):
    """v2 ``{errorCode, message, data}`` envelope."""

    name = "v2"

    def match(self, payload: Any, body: str) -> Optional[ShapeMatch]:
        if not isinstance(payload, dict):
            return None
        code = payload.get("errorCode", 0)
        if code is None:
            code = 0
        if isinstance(code, bool) or not isinstance(code, int):
            return None
        if code != 0:
            message = payload.get("message")
            if not isinstance(message, str) or not message:
                message = "Unknown error from v2 API"
            raise APIError(
                f"v2 API error (code {code}): {message}", code=code, body=shorten(body)
            )
        data = payload.get("data")
        if isinstance(data, list) and data:
            return ShapeMatch(self.name, list(data))
        return None


DEFAULT_SHAPES: Sequence[_ResponseShape] = (
    MetaWrappedShape(),
    BareArrayShape(),
    ErrorCodeShape(),
)


def select_latest(samples: Sequence[Any]) -> SpeedtestResult:
    """Return the most recent sample with a non-zero download or upload.

    Zero-valued rows are placeholders the gateway writes when a run did not
    complete. On equal timestamps the first row wins.
    """

    best: Optional[SpeedtestResult] = None
    for entry in samples:
        if not isinstance(entry, dict):
            continue
        download = coerce_float(entry.get("xput_download"))
        upload = coerce_float(entry.get("xput_upload"))
        if not (download > 0 or upload > 0):
            continue
        timestamp = coerce_int(entry.get("time")) or 0
        if best is None or timestamp > best.timestamp:
            best = SpeedtestResult(
                download_mbps=download,
                upload_mbps=upload,
                latency_ms=coerce_float(entry.get("latency")),
                timestamp=timestamp,
            )
    if best is None:
        raise NoValidSamplesError(
            "No valid speedtest results found (all results have zero values)"
        )
    return best


class ResponseNormalizer:
    """Turn a raw response body into a :class:`SpeedtestResult`."""

    def __init__(self, shapes: Sequence[_ResponseShape] = DEFAULT_SHAPES) -> None:
        self._shapes = tuple(shapes)

    def parse_shape(self, body: str) -> ShapeMatch:
        try:
            payload = json.loads(body)
        except ValueError:
            payload = None
        else:
            for shape in self._shapes:
                matched = shape.match(payload, body)
                if matched is not None:
                    _LOGGER.debug(
                        "Speedtest payload matched %s shape with %d entries",
                        matched.shape,
                        len(matched.samples),
                    )
                    return matched
        raise UnrecognizedFormatError(
            "Failed to parse speedtest response in any known format. "
            f"Raw response: {shorten(body, 512)}",
            body=body,
        )

    def normalize(self, body: str) -> SpeedtestResult:
        matched = self.parse_shape(body)
        return select_latest(matched.samples)


__all__ = [
    "BareArrayShape",
    "DEFAULT_SHAPES",
    "ErrorCodeShape",
    "MetaWrappedShape",
    "ResponseNormalizer",
    "ShapeMatch",
    "select_latest",
]
