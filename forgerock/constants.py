"""
ForgeRock AM constants for the Toyota (TMNA) OneApp realm
"""

# Identity provider host and realm
FORGEROCK_HOST = "https://login.toyotadriverslogin.com"
REALM_PATH = "realms/root/realms/tmna-native"

# Custom authentication tree ("authenticate" in ForgeRock terms)
AUTHENTICATE_ENDPOINT = f"{FORGEROCK_HOST}/json/{REALM_PATH}/authenticate"
# "service" index with "OneAppSignIn" logs in; "OneAppSignUp" would register
AUTH_INDEX_TYPE = "service"
AUTH_INDEX_VALUE = "OneAppSignIn"
ACCEPT_API_VERSION = "resource=2.1, protocol=1.0"

# OAuth2 endpoints
AUTHORIZE_ENDPOINT = f"{FORGEROCK_HOST}/oauth2/{REALM_PATH}/authorize"
ACCESS_TOKEN_ENDPOINT = f"{FORGEROCK_HOST}/oauth2/{REALM_PATH}/access_token"

# OAuth2 client registration shared across all requests
CLIENT_ID = "oneappsdkclient"
REDIRECT_URI = "com.toyota.oneapp:/oauth2Callback"
SCOPE = "openid profile write"

# The OneApp client sends a fixed "plain" PKCE pair
CODE_CHALLENGE = "plain"
CODE_CHALLENGE_METHOD = "plain"
CODE_VERIFIER = "plain"

# Cookie carrying the session token into the authorize request
SESSION_COOKIE = "iPlanetDirectoryPro"

# Upper bound on authenticate requests in a single attempt
MAX_AUTH_ROUNDS = 15
