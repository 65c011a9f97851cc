import os
from pathlib import Path

from dotenv import load_dotenv

# .env があれば環境変数として読み込む
load_dotenv()

# e-Gov API v2
EGOV_API_BASE_URL = os.getenv("LEGALLINK_API_BASE_URL", "https://laws.e-gov.go.jp")
EGOV_LAWS_PATH = "/api/2/laws"
EGOV_LAW_DATA_PATH = "/api/2/law_data"

# Output / state files (relative to the working directory)
DEFAULT_OUTPUT_DIR = Path(os.getenv("LEGALLINK_OUTPUT_DIR", "laws"))
DEFAULT_DICT_PATH = Path(os.getenv("LEGALLINK_DICT_PATH", "data/law_name_dict.json"))
DEFAULT_UNRESOLVED_PATH = Path(os.getenv("LEGALLINK_UNRESOLVED_PATH", "data/unresolved_refs.json"))

# Crawl
DEFAULT_MAX_DEPTH = 2
LISTING_PAGE_SIZE = 100

# Transport
REQUEST_TIMEOUT_SEC = 30.0
REQUEST_RETRIES = 3
RETRY_BACKOFF_SEC = 0.4
RATE_LIMIT_SEC = 0.5

# User Agent
USER_AGENT = "LegalLink/0.1.0"
