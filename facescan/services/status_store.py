import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger("facescan")

MAX_LOG_LINES = 200

@dataclass
class StatusStore:
    busy: bool = False
    logs: List[str] = field(default_factory=list)

    def set_busy(self, v: bool):
        self.busy = v

    def log(self, msg: str, level: str = "info"):
        # Mirror into stdlib logging so uvicorn and pytest see the same lines
        logger.log(logging.getLevelName(level.upper()), msg)
        self.logs.append(msg)
        if len(self.logs) > MAX_LOG_LINES:
            self.logs = self.logs[-MAX_LOG_LINES:]
