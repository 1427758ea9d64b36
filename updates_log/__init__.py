# updates_log/__init__.py

from dotenv import load_dotenv

# Load .env file at module import time
# This makes UPDATES_LOG_DATA_DIR and friends available to configs.settings
load_dotenv()
