from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Logging configuration
LOG_LEVEL = config.get("LOG_LEVEL", "warning")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "toyotactl_debug.log")

# HTTP configuration
# Total timeout applied by the shared httpx client to every request
HTTP_TIMEOUT = config.get("HTTP_TIMEOUT", 30.0)

# Device configuration
# Locale reported when ForgeRock asks for "ui_locales"
DEVICE_LOCALE = config.get("DEVICE_LOCALE", "en-US")

# Credential storage (system keyring)
KEYRING_SERVICE = config.get("KEYRING_SERVICE", "toyotactl")
CREDENTIALS_ENTRY = config.get("CREDENTIALS_ENTRY", "OAuth2 Credentials")

# API gateway key for the vendor API.
# Supplied explicitly (environment or .env); there is no automatic discovery.
API_GATEWAY_KEY = config.get("API_GATEWAY_KEY", "")
