# bookdigest/logging/tags.py
"""
Logging subsystem tags.

Prefix log messages with these so output stays searchable:
    logger.info(f"{ENGINE} Chapter 3/12 summarized")
"""

ENGINE = "[ENGINE]"
CHAT = "[CHAT]"
RETRY = "[RETRY]"
INGEST = "[INGEST]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
API = "[API]"
