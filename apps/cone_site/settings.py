import os

APP_FOLDER = os.path.dirname(__file__)
UPLOADS_FOLDER = os.path.join(APP_FOLDER, 'uploads')
T_FOLDER = os.path.join(APP_FOLDER, 'translations')

if not os.path.exists(UPLOADS_FOLDER):
    os.makedirs(UPLOADS_FOLDER)

if not os.path.exists(T_FOLDER):
    os.makedirs(T_FOLDER)

def _env(key, default):
    return os.environ.get(f"CONE_SITE_{key}", default)

# Detector defaults, overridable per request
AREA_THRESHOLD = float(_env("AREA_THRESHOLD", "5.0"))
KERNEL_SIZE = int(_env("KERNEL_SIZE", "5"))
STEERING_STRATEGY = _env("STEERING_STRATEGY", "zero")
LOG_LEVEL = _env("LOG_LEVEL", "INFO")
SESSION_SECRET = _env("SESSION_SECRET", "my_secret_key")
HISTORY_LIMIT = 20
