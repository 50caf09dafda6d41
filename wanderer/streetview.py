"""Street View coverage checks and embed URL utilities."""

import asyncio
import itertools
import json
import math
import os
import re
from decimal import Decimal
from typing import Any, Callable, Dict, Optional
from urllib.parse import quote, urlencode

import aiohttp
from dotenv import load_dotenv

from .models import Location

load_dotenv()

EMBED_URL = "https://www.google.com/maps/embed/v1/streetview"
GEOPHOTO_URL = "https://maps.googleapis.com/maps/api/js/GeoPhotoService.SingleImageSearch"

DEFAULT_RADIUS_M = 1000
DEFAULT_TIMEOUT_MS = 5000

_NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?")


class CoverageError(Exception):
    """Raised by a transport when the coverage service cannot be reached."""


def build_street_view_url(location: Location) -> str:
    """Generate a Street View Embed API URL for a location.

    Args:
        location: Panorama location

    Returns:
        Complete embed URL using GOOGLE_MAPS_API_KEY
    """
    params = {
        "key": os.getenv("GOOGLE_MAPS_API_KEY", ""),
        "location": f"{location.lat},{location.lon}",
        "fov": "90",
    }
    return f"{EMBED_URL}?{urlencode(params)}"


def is_api_key_configured() -> bool:
    return len(os.getenv("GOOGLE_MAPS_API_KEY", "")) > 0


def _format_number(value: float) -> str:
    """Render a number the way a browser prints it (``5e-05`` -> ``0.00005``)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Not a number: {value!r}")
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return "NaN" if math.isnan(value) else ("Infinity" if value > 0 else "-Infinity")
    if value == 0:
        return "0"

    magnitude = abs(value)
    if 1e-7 <= magnitude < 1e21:
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)), "f")

    mantissa, exponent = repr(value).split("e")
    exp = int(exponent)
    return f"{mantissa}e{'+' if exp > 0 else '-'}{abs(exp)}"


def _to_json_text(data: Any) -> str:
    """Compact JSON text with numbers rendered by _format_number."""
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "true" if data else "false"
    if isinstance(data, (int, float)):
        if isinstance(data, float) and not math.isfinite(data):
            return "null"
        return _format_number(data)
    if isinstance(data, str):
        return json.dumps(data, ensure_ascii=False)
    if isinstance(data, (list, tuple)):
        return "[" + ",".join(_to_json_text(item) for item in data) + "]"
    if isinstance(data, dict):
        return "{" + ",".join(
            f"{json.dumps(str(key), ensure_ascii=False)}:{_to_json_text(value)}"
            for key, value in data.items()
        ) + "}"
    raise TypeError(f"Cannot serialize {type(data).__name__}")


def build_coverage_query(lat: float, lon: float, radius: float = DEFAULT_RADIUS_M) -> str:
    """Build the protobuf-style ``pb`` parameter for a SingleImageSearch request.

    The layout is fixed by the service; only latitude, longitude and search
    radius (metres) vary.
    """
    return (
        "!1m5!1sapiv3!5sUS!11m2!1m1!1b0"
        f"!2m4!1m2!3d{_format_number(lat)}!4d{_format_number(lon)}!2d{_format_number(radius)}"
        "!3m18!2m2!1sen!2sUS!9m1!1e2"
        "!11m12!1m3!1e2!2b1!3e2!1m3!1e3!2b1!3e2!1m3!1e10!2b1!3e2"
        "!4m6!1e1!1e2!1e3!1e4!1e8!1e6"
    )


def build_coverage_url(lat: float, lon: float, radius: float = DEFAULT_RADIUS_M) -> str:
    pb = quote(build_coverage_query(lat, lon, radius), safe="!~*'()")
    return f"{GEOPHOTO_URL}?pb={pb}"


class JsonpTransport:
    """Fetches JSONP responses from the coverage service.

    Every request registers a uniquely named callback in ``pending``. The
    callback receives the decoded payload at most once and is removed when the
    request finishes, whether it succeeded, failed or timed out.
    """

    _counter = itertools.count()

    def __init__(self, session_factory: Optional[Callable[..., aiohttp.ClientSession]] = None):
        self.session_factory = session_factory or aiohttp.ClientSession
        self.pending: Dict[str, Callable[[Any], None]] = {}

    async def fetch(self, url: str, timeout_ms: int = DEFAULT_TIMEOUT_MS) -> Any:
        """Request ``url`` and return the payload passed to the callback.

        Raises:
            CoverageError: On HTTP errors, timeouts or unreadable responses
        """
        name = f"_sv_cb_{next(self._counter)}"
        received = []

        def handler(data: Any) -> None:
            if not received:
                received.append(data)

        self.pending[name] = handler

        try:
            timeout = aiohttp.ClientTimeout(total=timeout_ms / 1000)
            async with self.session_factory(timeout=timeout) as session:
                async with session.get(f"{url}&callback={name}") as response:
                    if response.status >= 400:
                        raise CoverageError(f"HTTP {response.status}: {response.reason}")
                    try:
                        body = await response.text()
                    except (UnicodeError, LookupError) as e:
                        raise CoverageError(f"Undecodable response body: {e}") from e

            self._dispatch(name, body)
            if not received:
                raise CoverageError(f"Callback {name} was never invoked")
            return received[0]

        except asyncio.TimeoutError as e:
            raise CoverageError("JSONP timeout") from e
        except aiohttp.ClientError as e:
            raise CoverageError(f"JSONP request error: {e}") from e
        finally:
            self.pending.pop(name, None)

    def _dispatch(self, name: str, body: str) -> None:
        """Invoke the callback named in a ``name(payload)`` response body."""
        start = body.find(f"{name}(")
        end = body.rfind(")")
        if start < 0 or end < start:
            raise CoverageError(f"Response does not call {name}")

        try:
            payload = json.loads(body[start + len(name) + 1:end])
        except (json.JSONDecodeError, RecursionError) as e:
            raise CoverageError(f"Malformed JSONP payload: {e}") from e

        handler = self.pending.pop(name, None)
        if handler is not None:
            handler(payload)


def _panorama_description(data: Any) -> Any:
    """Follow the known path to the panorama description, or return None."""
    node = data
    for index in (1, 3, 2, 1, 0):
        if not isinstance(node, (list, tuple)) or index >= len(node):
            return None
        node = node[index]
    return node


def parse_coverage_response(data: Any, lat: float, lon: float) -> Optional[Location]:
    """Extract the snapped panorama location from a SingleImageSearch response.

    The response is an undocumented nested array. A panorama is only assumed
    when the description field is present. Its coordinates are then found by
    scanning every number in the serialized response for the first adjacent
    pair that lies within 0.1 degrees of the queried latitude and longitude.
    This can miss real panoramas and can match unrelated numbers.

    Args:
        data: Decoded response
        lat: Queried latitude
        lon: Queried longitude

    Returns:
        Panorama location, or None if no coverage was recognised
    """
    if not _panorama_description(data):
        return None

    text = _to_json_text(data)
    numbers = [float(match.group(0)) for match in _NUMBER_PATTERN.finditer(text)]

    nearby = [x for x in numbers if abs(x - lat) < 1 or abs(x - lon) < 1]

    for a, b in zip(nearby, nearby[1:]):
        if abs(a - lat) < 0.1 and abs(b - lon) < 0.1:
            return Location(lat=a, lon=b)

    return None


async def check_coverage(
    lat: float,
    lon: float,
    radius: float = DEFAULT_RADIUS_M,
    transport: Optional[Any] = None,
    timeout_ms: int = DEFAULT_TIMEOUT_MS,
    verbose: bool = False,
) -> Optional[Location]:
    """Check Street View coverage near a location.

    Uses the unofficial GeoPhotoService endpoint. Any failure to reach the
    service or to read its response is treated as no coverage.

    Args:
        lat: Latitude
        lon: Longitude
        radius: Search radius in metres
        transport: Object with a ``fetch(url, timeout_ms)`` coroutine.
            Defaults to a new JsonpTransport
        timeout_ms: Request timeout in milliseconds
        verbose: If True, print why a check failed

    Returns:
        Snapped panorama location if coverage exists, None otherwise
    """
    transport = transport or JsonpTransport()
    url = build_coverage_url(lat, lon, radius)

    try:
        data = await transport.fetch(url, timeout_ms)
        return parse_coverage_response(data, lat, lon)
    except Exception as e:
        if verbose:
            print(f"Error checking coverage for ({lat}, {lon}): {e}")
        return None
