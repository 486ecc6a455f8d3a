"""Constants for nuki_bridge."""

from logging import Logger, getLogger

LOGGER: Logger = getLogger(__package__)

DOMAIN = "nuki_bridge"
MANUFACTURER = "Nuki"

DEFAULT_PORT = 8080
DEFAULT_SCAN_INTERVAL = 30
REQUEST_TIMEOUT = 10

CONF_WEB_TOKEN = "web_token"
CONF_CALLBACK_BASE_URL = "callback_base_url"
CONF_DEVICE_WEBHOOK_ID = "device_webhook_id"
CONF_BRIDGE_WEBHOOK_ID = "bridge_webhook_id"

DATA_HUB = "hub"
DATA_COORDINATOR = "coordinator"

EVENT_MESSAGE = "nuki_bridge_message"

SERVICE_SEND_MESSAGE = "send_message"
ATTR_TOPIC = "topic"
ATTR_PAYLOAD = "payload"
ATTR_DEVICE_ID = "device_id"
ATTR_ENTRY_ID = "entry_id"

DEVICE_TYPE_MODELS = {
    0: "Smart Lock",
    2: "Opener",
    3: "Smart Door",
    4: "Smart Lock 3.0",
}
