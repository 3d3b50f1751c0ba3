import logging
import os
import sys

from .resume_schema import TemplateId

LOG_LEVEL = os.getenv("RESUMEAI_LOG_LEVEL", "INFO").upper()

TEMPLATES = [{"id": t.value, "name": t.value.capitalize()} for t in TemplateId]


def setup_logging() -> None:
    """
    Configure the root logger once: stderr stream handler, ISO-8601
    timestamps, level from RESUMEAI_LOG_LEVEL.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    formatter = logging.Formatter(
        fmt="[%(asctime)s - %(name)s - %(levelname)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.addHandler(handler)
