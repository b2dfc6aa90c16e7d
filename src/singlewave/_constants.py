"""Internal constants shared across the library."""

BASE_URL = "https://backend.singlewave.io"
PLATFORM = "mobile-ios"
USER_AGENT = "singlewave-python"

REGISTER_ENDPOINT = "/v1/subscribers/register"
OPEN_ENDPOINT = "/v1/subscribers/open"

# Persisted key names are shared with the mobile SDKs; do not rename.
USER_DATA_KEY = "__swSDKUserData"
DEVICE_TOKEN_KEY = "__swSDKDeviceToken"
OUTBOX_KEY = "__swSDKOutbox"

DEFAULT_LANGUAGE = "en"
