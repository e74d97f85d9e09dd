"""HTTP client + relay helpers for the placename gazetteer gateway."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter

logger = logging.getLogger(__name__)

# gateway origin and endpoint paths (fixed, not configurable)
BASE_URL = "http://timespace-china.fudan.edu.cn"
SEARCH_PATH = "/gateway/geom-name/placename-object/home/placename"
DETAIL_PATH = "/gateway/geom-name/placename-object/home/placename/json/{sys_id}"

# stands in for a response body that could not be read
UNREADABLE_BODY = "<unable to read response body>"

EMPTY_SYS_ID = "sysId must not be empty"

# limit, page and year are unsigned 32-bit on the gateway side
MAX_QUERY_INT = 0xFFFFFFFF

# connections kept per host, sized for a handful of concurrent commands
POOL_MAXSIZE = 10


class PlacenameError(Exception):
    """Relay failure; the message is the text shown to the user."""


@dataclass
class PlacenameQuery:
    """Search criteria for the placename search endpoint. Every field is optional."""

    limit: int | None = None
    name: str | None = None
    page: int | None = None
    kind: str | None = None  # sent as "type"
    year: int | None = None

    def to_payload(self) -> dict:
        """Build the JSON body, leaving out absent fields."""
        fields = {
            "limit": self.limit,
            "name": self.name,
            "page": self.page,
            "type": self.kind,
            "year": self.year,
        }
        return {key: value for key, value in fields.items() if value is not None}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PlacenameQuery":
        """Build a query from the front-end's argument mapping (wire names)."""
        # unknown keys are ignored, known keys must carry the right type
        values = {}
        for wire_name, attr, expected in _QUERY_FIELDS:
            value = data.get(wire_name)
            if value is None:
                continue
            if expected is int:
                # bool is an int subclass, reject it explicitly
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise PlacenameError(
                        f"Invalid query: {wire_name} must be a non-negative integer")
                if value > MAX_QUERY_INT:
                    raise PlacenameError(
                        f"Invalid query: {wire_name} must not exceed {MAX_QUERY_INT}")
            elif not isinstance(value, str):
                raise PlacenameError(f"Invalid query: {wire_name} must be a string")
            values[attr] = value
        return cls(**values)


# (wire name, attribute name, expected type)
_QUERY_FIELDS = (
    ("limit", "limit", int),
    ("name", "name", str),
    ("page", "page", int),
    ("type", "kind", str),
    ("year", "year", int),
)


def create_session() -> requests.Session:
    """Create the shared HTTP session (default settings, reused for every call)."""
    session = requests.Session()
    # one adapter for both schemes, pools shared by the worker threads
    adapter = HTTPAdapter(pool_maxsize=POOL_MAXSIZE)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


def describe_status(response: requests.Response) -> str:
    """Format the status line as "<code> <reason>"."""
    return f"{response.status_code} {response.reason or ''}".strip()


def read_body_text(response: requests.Response) -> str:
    """Read the response body as text, falling back to a placeholder."""
    try:
        return response.text
    except (requests.RequestException, UnicodeDecodeError, LookupError) as err:
        logger.warning("Could not read response body: %s", err)
        return UNREADABLE_BODY


def handle_response(response: requests.Response, failure_prefix: str) -> Any:
    """Check the status and parse the JSON body, raising PlacenameError on failure.

    The body is streamed, so reading it here can still fail. On an error
    status that degrades to a placeholder body; on a 2xx it is a parse
    failure. The response is closed either way.
    """
    with response:
        # any non-2xx status is a failure (no 4xx / 5xx distinction)
        if not 200 <= response.status_code < 300:
            body = read_body_text(response)
            status = describe_status(response)
            logger.warning("%s with status %s", failure_prefix, status)
            raise PlacenameError(f"{failure_prefix} ({status}): {body}")

        try:
            return response.json()
        except (requests.RequestException, ValueError) as err:
            logger.warning("Could not parse response from %s: %s", response.url, err)
            raise PlacenameError(f"Failed to parse response: {err}") from err


class PlacenameClient:
    """Relays search and detail requests to the gazetteer gateway."""

    def __init__(self, session: requests.Session, base_url: str = BASE_URL):
        self.session = session
        self.base_url = base_url.rstrip("/")

    @property
    def search_url(self) -> str:
        return self.base_url + SEARCH_PATH

    def detail_url(self, sys_id: str) -> str:
        """Build the detail URL for one (already trimmed) identifier."""
        # encode everything outside the unreserved set, including "/"
        return self.base_url + DETAIL_PATH.format(sys_id=quote(sys_id, safe=""))

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.debug("%s %s", method, url)
        try:
            # headers only; the body is read in handle_response
            return self.session.request(method, url, stream=True, **kwargs)
        except requests.RequestException as err:
            logger.warning("Network request to %s failed: %s", url, err)
            raise PlacenameError(f"Network request failed: {err}") from err

    def search_placenames(self, query: PlacenameQuery | Mapping[str, Any]) -> Any:
        """Search placenames and return the gateway's JSON response unchanged."""
        if not isinstance(query, PlacenameQuery):
            query = PlacenameQuery.from_mapping(query)
        response = self._send("POST", self.search_url, json=query.to_payload())
        return handle_response(response, "Query failed")

    def get_placename(self, sys_id: str) -> Any:
        """Fetch one placename record by sysId."""
        trimmed = sys_id.strip()
        # validate before touching the network
        if not trimmed:
            raise PlacenameError(EMPTY_SYS_ID)
        response = self._send("GET", self.detail_url(trimmed))
        return handle_response(response, "Detail fetch failed")
