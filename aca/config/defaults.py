# ACA Default Configuration
# Default server and credential settings

DEFAULT_SERVER_URL = "https://agent-config-adapter.prashamhtrivedi.workers.dev"

# Every API key issued by the server starts with this prefix
API_KEY_PREFIX = "aca_"

# Server page where API keys are created
PROFILE_PATH = "/profile"

DEFAULT_TIMEOUT = 30.0

DEFAULT_OWNER_ID = "local"
