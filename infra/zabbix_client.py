"""JSON-RPC client for the Zabbix ``action.*`` API methods.

Authentication uses a pre-issued API token sent as a bearer header. There is
no session login and no retry: a failed call surfaces as ``RemoteError`` (or
``NotFound`` when the server reports a missing object) and the caller decides.
"""

from __future__ import annotations

import copy
import itertools
import json
import logging
import ssl
from collections.abc import Mapping, Set
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from contracts.errors import NotFound, RemoteError
from contracts.typed_dicts import ActionWireFormat
from infra.config import Settings, ZabbixConfig, get_settings
from version import ENGINE_NAME, ENGINE_VERSION

logger = logging.getLogger(__name__)

_NOT_FOUND_MARKERS = (
    "does not exist",
    "no permissions to referred object",
)
# Fields the server accepts on create only.
_CREATE_ONLY_FIELDS = ("eventsource",)


def _is_not_found(message: str, data: str) -> bool:
    text = f"{message} {data}".lower()
    return any(marker in text for marker in _NOT_FOUND_MARKERS)


def _target_id(params: Any) -> str:
    if isinstance(params, Mapping):
        return str(params.get("actionid", ""))
    if isinstance(params, list) and params:
        return str(params[0])
    return ""


def _strip_empty_ids(action: Mapping[str, Any]) -> dict[str, Any]:
    """Drop identifier keys that are still empty, at both levels."""
    payload = copy.deepcopy(dict(action))
    if not payload.get("actionid"):
        payload.pop("actionid", None)
    for operation in payload.get("operations", []):
        for key in ("actionid", "operationid"):
            if not operation.get(key):
                operation.pop(key, None)
    return payload


class ZabbixActionClient:
    """Remote client for one Zabbix server."""

    def __init__(
        self,
        *,
        url: str,
        api_token: str,
        timeout: float = 30.0,
        verify_tls: bool = True,
    ) -> None:
        if not url:
            raise ValueError("url is required")
        self._url = url
        self._api_token = api_token
        self._timeout = timeout
        self._ssl_context: ssl.SSLContext | None = None
        if not verify_tls:
            self._ssl_context = ssl.create_default_context()
            self._ssl_context.check_hostname = False
            self._ssl_context.verify_mode = ssl.CERT_NONE
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: ZabbixConfig) -> ZabbixActionClient:
        return cls(
            url=config.url,
            api_token=config.api_token.get_secret_value(),
            timeout=float(config.timeout),
            verify_tls=config.verify_tls,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ZabbixActionClient:
        return cls.from_config((settings or get_settings()).zabbix)

    # -- action API ---------------------------------------------------------

    def create(self, action: ActionWireFormat) -> str:
        result = self.call("action.create", _strip_empty_ids(action))
        ids = result.get("actionids") if isinstance(result, Mapping) else None
        if not ids:
            raise RemoteError("action.create returned no identifier", data=json.dumps(result))
        return str(ids[0])

    def fetch(self, actionid: str) -> ActionWireFormat:
        result = self.call(
            "action.get",
            {
                "actionids": [actionid],
                "output": "extend",
                "selectOperations": "extend",
                "selectFilter": "extend",
            },
        )
        if not result:
            raise NotFound(actionid)
        return result[0]

    def update(self, action: ActionWireFormat) -> None:
        payload = _strip_empty_ids(action)
        if not payload.get("actionid"):
            raise RemoteError("action.update requires an action identifier")
        for key in _CREATE_ONLY_FIELDS:
            payload.pop(key, None)
        self.call("action.update", payload)

    def delete(self, actionids: Set[str]) -> None:
        self.call("action.delete", sorted(actionids))

    # -- transport ----------------------------------------------------------

    def call(self, method: str, params: Any) -> Any:
        """Send one JSON-RPC request and return its ``result`` member."""
        request_id = next(self._ids)
        body = json.dumps(
            {"jsonrpc": "2.0", "method": method, "params": params, "id": request_id}
        ).encode("utf-8")
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json-rpc",
            "User-Agent": f"{ENGINE_NAME}/{ENGINE_VERSION}",
        }
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        request = Request(url=self._url, method="POST", headers=headers, data=body)

        logger.debug("Calling %s (request %s)", method, request_id)
        try:
            with urlopen(request, timeout=self._timeout, context=self._ssl_context) as resp:
                raw = resp.read().decode("utf-8")
        except HTTPError as exc:
            raise RemoteError(f"{method}: HTTP {exc.code}", code=exc.code) from exc
        except URLError as exc:
            raise RemoteError(f"{method}: connection error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise RemoteError(f"{method}: timed out after {self._timeout}s") from exc

        try:
            payload = json.loads(raw) if raw else {}
        except json.JSONDecodeError as exc:
            raise RemoteError(f"{method}: response is not valid JSON") from exc
        if not isinstance(payload, Mapping):
            raise RemoteError(f"{method}: unexpected response shape")

        error = payload.get("error")
        if error:
            message = str(error.get("message", "")) if isinstance(error, Mapping) else str(error)
            data = str(error.get("data", "")) if isinstance(error, Mapping) else ""
            code = error.get("code") if isinstance(error, Mapping) else None
            if _is_not_found(message, data):
                raise NotFound(_target_id(params))
            raise RemoteError(f"{method}: {message}", code=code, data=data)
        if "result" not in payload:
            raise RemoteError(f"{method}: response has no result")
        return payload["result"]


__all__ = ["ZabbixActionClient"]
