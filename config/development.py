from config.config import *  # noqa: F401,F403
from config.config import _flag

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "1")
ENABLE_ABSENCE_SWEEP = _flag("ENABLE_ABSENCE_SWEEP", "1")
