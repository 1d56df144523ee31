"""
logger.py
----------
📄 Centralized logging utility for the electricity billing engine.

Purpose:
--------
Provides a consistent logging setup for every calculator (reading
validation, late fees, invoicing, history analysis) and for the
record store and billing run.

Outputs:
---------
✅ Logs to console
✅ Logs to file at <LOG_DIR>/electricity_billing.log (when LOG_TO_FILE is set)

Usage Example:
---------------
from billing_engine.utils.logger import get_logger
logger = get_logger(__name__)
logger.info("Bill calculated.")
"""

import os
import logging

from billing_engine.utils.config import LOG_DIR, LOG_LEVEL, LOG_TO_FILE

# ----------------------------------------------------------------------
# 1️⃣ Log file location
# ----------------------------------------------------------------------
LOG_FILE = os.path.join(LOG_DIR, "electricity_billing.log")

# ----------------------------------------------------------------------
# 2️⃣ Configure logging format
# ----------------------------------------------------------------------
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ----------------------------------------------------------------------
# 3️⃣ Logging setup function
# ----------------------------------------------------------------------
def get_logger(name: str = "billing_engine") -> logging.Logger:
    """
    Returns a configured logger instance that logs to console and,
    optionally, to file.

    Parameters
    ----------
    name : str
        The name of the logger (typically the module name).

    Returns
    -------
    logging.Logger
        Configured logger object.
    """
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVEL)

    # Avoid duplicate handlers
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if LOG_TO_FILE:
            os.makedirs(LOG_DIR, exist_ok=True)
            file_handler = logging.FileHandler(LOG_FILE, mode="a")
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger


# ----------------------------------------------------------------------
# 4️⃣ Self-test block (runs only if executed directly)
# ----------------------------------------------------------------------
if __name__ == "__main__":
    test_logger = get_logger("logger_test")
    test_logger.info("✅ Logger initialized successfully.")
    test_logger.warning("⚠️ This is a sample warning.")
    test_logger.error("❌ Example error message.")
    if LOG_TO_FILE:
        print(f"Logs saved to: {LOG_FILE}")
