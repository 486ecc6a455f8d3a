"""Admin listing endpoint for the device roster of a bridge."""

from __future__ import annotations

from aiohttp import web

from homeassistant.helpers.http import KEY_HASS, HomeAssistantView

from .const import DATA_HUB, DOMAIN
from .hub import NukiHub


class NukiDeviceListView(HomeAssistantView):
    """GET /api/nuki_bridge/{entry_id}/list."""

    url = "/api/nuki_bridge/{entry_id}/list"
    name = "api:nuki_bridge:list"
    requires_auth = True

    async def get(self, request: web.Request, entry_id: str) -> web.Response:
        hass = request.app[KEY_HASS]
        data = hass.data.get(DOMAIN, {}).get(entry_id)
        if data is None:
            return self.json(
                {"state": "error", "msg": "bridge not found", "items": []},
                status_code=404,
            )
        hub: NukiHub = data[DATA_HUB]
        return self.json(hub.bridge.device_roster())
