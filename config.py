"""Runner configuration and constants."""
import os
from logging_config import logging, LOG_PATH as DEFAULT_LOG_PATH


logger: 'logging.Logger' = logging.getLogger("runner")

# Directories, overridable from the environment
INPUT_DIR: str = os.environ.get("KMP_INPUT_DIR", os.path.join("data", "input"))
OUTPUT_DIR: str = os.environ.get("KMP_OUTPUT_DIR", os.path.join("data", "output"))
LOG_PATH: str = os.environ.get("KMP_LOG_PATH", DEFAULT_LOG_PATH)

INPUT_SUFFIX: str = ".json"
OUTPUT_SUFFIX: str = "_output.json"

# Written to reports in place of an index when the pattern is not found
NOT_FOUND_INDEX: int = -1
# Limit on a case text in UTF-8 bytes, for inline text and text files alike
MAX_ALLOWED_TEXT_SIZE: int = 10 * 1024 * 1024  # 10 MB size
