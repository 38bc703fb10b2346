"""Константы клиента."""

from typing import Final, Tuple

# ===== HTTP =====
CONTENT_TYPE_TEXT: Final[str] = "text/plain"

# ===== TIMEOUTS =====
DEFAULT_API_TIMEOUT: Final[int] = 30

# ===== TOKEN EXPIRY =====
DEFAULT_EXPIRY_BUFFER_SECONDS: Final[int] = 300

# ===== LOCALSTORAGE KEYS =====
STORAGE_AUTH_TOKEN_KEY: Final[str] = "auth_token"
STORAGE_AUTH_USER_KEY: Final[str] = "auth_user"
STORAGE_TOKEN_EXPIRES_AT_KEY: Final[str] = "token_expires_at"
DEFAULT_STORAGE_FILENAME: Final[str] = "storage.json"

# ===== REQUEST PARAMETERS =====
PARAM_ACTION: Final[str] = "action"
PARAM_TOKEN: Final[str] = "token"
PARAM_KEY: Final[str] = "key"
RESERVED_PARAMS: Final[Tuple[str, ...]] = (PARAM_ACTION, PARAM_TOKEN, PARAM_KEY)

# ===== AUTH ERRORS =====
DEFAULT_AUTH_ERROR_MARKERS: Final[Tuple[str, ...]] = ("token",)
AUTH_REQUIRED_MESSAGE: Final[str] = "Authorization required"
MSG_NOT_AUTHENTICATED: Final[str] = "Not authenticated"

# ===== ACTIONS: AUTH =====
ACTION_REGISTER: Final[str] = "register"
ACTION_LOGIN: Final[str] = "login"
ACTION_LOGOUT: Final[str] = "logout"

# ===== ACTIONS: EXERCISES =====
ACTION_GET_EXERCISES: Final[str] = "getExercises"
ACTION_ADD_EXERCISE: Final[str] = "addExercise"

# ===== ACTIONS: WORKOUTS =====
ACTION_ADD_WORKOUT: Final[str] = "addWorkout"
ACTION_ADD_WORKOUTS: Final[str] = "addWorkouts"
ACTION_GET_WORKOUTS: Final[str] = "getWorkouts"
ACTION_DELETE_WORKOUT: Final[str] = "deleteWorkout"

# ===== ACTIONS: STATS =====
ACTION_GET_STATS: Final[str] = "getStats"

# ===== ACTIONS: BODY METRICS =====
ACTION_GET_BODY_METRICS: Final[str] = "getBodyMetrics"
ACTION_ADD_BODY_METRIC: Final[str] = "addBodyMetric"
ACTION_DELETE_BODY_METRIC: Final[str] = "deleteBodyMetric"
