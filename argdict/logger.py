# argdict — (c) 2025 rtj.dev LLC — MIT Licensed
"""Package-wide logger for argdict."""
import logging

logger: logging.Logger = logging.getLogger("argdict")
