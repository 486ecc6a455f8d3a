"""aiohttp clients for the Nuki bridge HTTP API and the Nuki Web API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from nuki_lib import LockAction

from .const import REQUEST_TIMEOUT

_LOGGER = logging.getLogger(__name__)

WEB_API_URL = "https://api.nuki.io"


class NukiApiError(aiohttp.ClientError):
    """The bridge or the web API answered with an error."""


class NukiAuthError(NukiApiError):
    """The token was rejected."""


class NukiBridgeApi:
    """Bridge HTTP API client; also the bridge handle used by the core."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        host: str,
        port: int,
        token: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._host = host
        self._port = port
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    @property
    def base_url(self) -> str:
        return f"http://{self._host}:{self._port}"

    async def _request(self, path: str, **params: Any) -> Any:
        query = {key: value for key, value in params.items() if value is not None}
        query["token"] = self._token
        _LOGGER.debug("Bridge request %s %s", path, {k: v for k, v in query.items() if k != "token"})
        async with self._session.get(
            f"{self.base_url}{path}", params=query, timeout=self._timeout
        ) as resp:
            if resp.status == 401:
                raise NukiAuthError("bridge rejected the token")
            if resp.status >= 400:
                raise NukiApiError(f"{path} returned HTTP {resp.status}")
            return await resp.json(content_type=None)

    async def _command(self, path: str, **params: Any) -> Any:
        """Request that must answer {"success": true}."""
        body = await self._request(path, **params)
        if isinstance(body, dict) and body.get("success") is False:
            raise NukiApiError(body.get("message") or f"{path} was not successful")
        return body

    async def list_devices(self) -> list[NukiDeviceApi]:
        body = await self._request("/list")
        devices: list[NukiDeviceApi] = []
        for item in body or []:
            nuki_id = item.get("nukiId")
            if nuki_id is None:
                continue
            devices.append(
                NukiDeviceApi(
                    self,
                    nuki_id=int(nuki_id),
                    name=item.get("name") or str(nuki_id),
                    device_type=int(item.get("deviceType") or 0),
                    last_known_state=item.get("lastKnownState"),
                )
            )
        return devices

    async def lock_state(self, nuki_id: int, device_type: int) -> Any:
        return await self._command("/lockState", nukiId=nuki_id, deviceType=device_type)

    async def lock_action(self, nuki_id: int, device_type: int, action: LockAction) -> Any:
        return await self._request(
            "/lockAction",
            nukiId=nuki_id,
            deviceType=device_type,
            action=int(action),
            noWait=0,
        )

    # Bridge handle

    async def reboot(self) -> Any:
        return await self._request("/reboot")

    async def firmware_update(self) -> Any:
        return await self._request("/fwupdate")

    async def info(self) -> Any:
        return await self._request("/info")

    async def read_log(self, offset: int | None = None, count: int | None = None) -> Any:
        return await self._request("/log", offset=offset, count=count)

    async def clear_log(self) -> Any:
        return await self._request("/clearlog")

    async def register_callback(self, url: str) -> Any:
        return await self._command("/callback/add", url=url)

    async def list_callbacks(self) -> Any:
        return await self._request("/callback/list")

    async def remove_callback(self, callback_id: int) -> Any:
        return await self._command("/callback/remove", id=callback_id)


class NukiDeviceApi:
    """Device handle; callbacks are bridge-wide so those calls go to the bridge."""

    def __init__(
        self,
        bridge: NukiBridgeApi,
        *,
        nuki_id: int,
        name: str,
        device_type: int = 0,
        last_known_state: dict[str, Any] | None = None,
    ) -> None:
        self._bridge = bridge
        self.nuki_id = nuki_id
        self.device_id = str(nuki_id)
        self.name = name
        self.device_type = device_type
        self.last_known_state = last_known_state

    async def current_state(self) -> Any:
        return await self._bridge.lock_state(self.nuki_id, self.device_type)

    async def perform_action(self, action: LockAction) -> Any:
        return await self._bridge.lock_action(self.nuki_id, self.device_type, action)

    async def register_callback(self, url: str) -> Any:
        return await self._bridge.register_callback(url)

    async def list_callbacks(self) -> Any:
        return await self._bridge.list_callbacks()

    async def remove_callback(self, callback_id: int) -> Any:
        return await self._bridge.remove_callback(callback_id)


class NukiWebApi:
    """Nuki Web API client used for the web state of a lock."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        token: str,
        *,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._session = session
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def _get(self, path: str) -> Any:
        headers = {"Authorization": f"Bearer {self._token}", "Accept": "application/json"}
        async with self._session.get(
            f"{WEB_API_URL}{path}", headers=headers, timeout=self._timeout
        ) as resp:
            if resp.status == 401:
                raise NukiAuthError("web api rejected the token")
            if resp.status >= 400:
                raise NukiApiError(f"web api {path} returned HTTP {resp.status}")
            return await resp.json(content_type=None)

    async def smartlocks(self) -> list[dict[str, Any]]:
        return list(await self._get("/smartlock") or [])

    async def web_state(self, device_id: str) -> dict[str, Any]:
        """
        Return the web record of a bridge device.

        The web id is the device type followed by the hex nuki id, so the
        record is matched on its hex suffix.
        """
        suffix = format(int(device_id), "x").lower()
        for smartlock in await self.smartlocks():
            web_id = format(int(smartlock.get("smartlockId", 0)), "x").lower()
            if web_id.endswith(suffix):
                return smartlock
        raise NukiApiError(f"device {device_id} not found in web api")
