from datetime import timedelta

BASE_URL = "https://api.easee.cloud"

LOGIN_PATH = "/api/accounts/login"
REFRESH_TOKEN_PATH = "/api/accounts/refresh_token"
CHARGERS_PATH = "/api/chargers"
CHARGER_STATE_PATH = "/api/chargers/{charger_id}/state"
CHARGER_CONFIG_PATH = "/api/chargers/{charger_id}/config"
CHARGER_SITE_PATH = "/api/chargers/{charger_id}/site"
CHARGER_PAIR_PATH = "/api/chargers/{charger_id}/pair"
CHARGER_UNPAIR_PATH = "/api/chargers/{charger_id}/unpair"
CHARGER_COMMAND_PATH = "/api/chargers/{charger_id}/commands/{command}"

CMD_PAUSE_CHARGING = "pause_charging"
CMD_RESUME_CHARGING = "resume_charging"
CMD_POLL_LIFETIME_ENERGY = "poll_lifetimeenergy"

TOKENS_CACHE_KEY = "easee.auth.tokens"
REFRESHED_TOKENS_TTL = timedelta(days=1)

DEFAULT_API_TIMEOUT = 15

# errorCode values the login endpoint returns for a rejected user name/password
INVALID_CREDENTIALS_ERROR_CODES = frozenset({100, 727})

# API gateway rejections arrive with this header instead of a clean 403
GATEWAY_ERROR_HEADER = "X-Amzn-Errortype"
GATEWAY_FORBIDDEN = "ForbiddenException"

MAX_LOGGED_BODY_LEN = 512
