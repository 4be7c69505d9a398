import json
import logging
import sys
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    SUCCESS = "SUCCESS"


# SUCCESS sits between INFO and WARNING so it survives an INFO threshold
SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.SUCCESS: SUCCESS_LEVEL,
}


class Colors:
    """ANSI color codes for console output"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

    WHITE = '\033[37m'
    BRIGHT_BLACK = '\033[90m'
    BRIGHT_RED = '\033[91m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_CYAN = '\033[96m'


class FitSphereLogger:
    """Console logger for the FitSphere backend.

    Messages carry a service tag and an optional context tag, plus any keyword
    arguments rendered as ``key=value`` extras. Records are emitted through the
    stdlib ``fitsphere.<service>`` logger so handlers and test capture still see them.
    """

    def __init__(self, service_name: str = "FITSPHERE", enable_colors: bool = True):
        self.service_name = service_name.upper()
        self.enable_colors = enable_colors and sys.stdout.isatty()
        self._logger = logging.getLogger(f"fitsphere.{service_name.lower()}")
        _ensure_console_handler()

        self.level_colors = {
            LogLevel.DEBUG: Colors.BRIGHT_CYAN,
            LogLevel.INFO: Colors.BRIGHT_BLUE,
            LogLevel.WARNING: Colors.BRIGHT_YELLOW,
            LogLevel.ERROR: Colors.BRIGHT_RED,
            LogLevel.SUCCESS: Colors.BRIGHT_GREEN,
        }

        self.level_emojis = {
            LogLevel.DEBUG: "🔍",
            LogLevel.INFO: "ℹ️",
            LogLevel.WARNING: "⚠️",
            LogLevel.ERROR: "❌",
            LogLevel.SUCCESS: "✅",
        }

    def _get_timestamp(self) -> str:
        return datetime.now().strftime("%H:%M:%S.%f")[:-3]

    def _colorize(self, text: str, color: str) -> str:
        if not self.enable_colors:
            return text
        return f"{color}{text}{Colors.RESET}"

    def _service_tag(self, context: Optional[str]) -> str:
        service_context = self.service_name
        if context:
            service_context += f"/{context.upper()}"
        return self._colorize(f"[{service_context}]", Colors.BRIGHT_BLACK)

    def _format_message(self, level: LogLevel, message: str, context: Optional[str] = None) -> str:
        # Format: [TIMESTAMP] 🔍 [SERVICE/CONTEXT] [DEBUG] Message
        emoji = self.level_emojis.get(level, "")
        level_color = self.level_colors.get(level, Colors.WHITE)
        level_text = self._colorize(f"[{level.value}]", level_color + Colors.BOLD)
        timestamp_text = self._colorize(f"[{self._get_timestamp()}]", Colors.DIM)

        return f"{timestamp_text} {emoji} {self._service_tag(context)} {level_text} {message}"

    @staticmethod
    def _format_extras(extras: Dict[str, Any]) -> str:
        parts = []
        for key, value in extras.items():
            if isinstance(value, (dict, list)):
                value_str = json.dumps(value, default=str, separators=(',', ':'))
                if len(value_str) > 100:
                    value_str = value_str[:100] + "..."
            else:
                value_str = str(value)
            parts.append(f"{key}={value_str}")
        return ", ".join(parts)

    def _log(self, level: LogLevel, message: str, context: Optional[str] = None, **kwargs):
        formatted_message = self._format_message(level, message, context)
        if kwargs:
            formatted_message += self._colorize(f" | {self._format_extras(kwargs)}", Colors.DIM)
        self._logger.log(_STDLIB_LEVELS[level], formatted_message)

    def debug(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.ERROR, message, context, **kwargs)

    def success(self, message: str, context: Optional[str] = None, **kwargs):
        self._log(LogLevel.SUCCESS, message, context, **kwargs)

    def banner(self, message: str, context: Optional[str] = None, char: str = "═", width: int = 60):
        """Log a centered banner line."""
        content = f" {message} "
        if len(content) >= width - 4:
            banner_content = content
        else:
            padding = (width - len(content)) // 2
            banner_content = char * padding + content + char * (width - len(content) - padding)

        colored_banner = self._colorize(banner_content, Colors.BRIGHT_CYAN + Colors.BOLD)
        timestamp_text = self._colorize(f"[{self._get_timestamp()}]", Colors.DIM)
        self._logger.info(f"{timestamp_text} {self._service_tag(context)} {colored_banner}")

    def section_start(self, section_name: str, context: Optional[str] = None):
        self.banner(f"🚀 {section_name.upper()} STARTED", context, "═", 50)

    def section_end(self, section_name: str, context: Optional[str] = None, success: bool = True):
        status_emoji = "✅" if success else "❌"
        status_text = "COMPLETED" if success else "FAILED"
        self.banner(f"{status_emoji} {section_name.upper()} {status_text}", context, "═", 50)


def _ensure_console_handler() -> None:
    root = logging.getLogger("fitsphere")
    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


# Global logger instances for different services
auth_logger = FitSphereLogger("AUTH")
plan_logger = FitSphereLogger("PLAN")
db_logger = FitSphereLogger("DATABASE")
api_logger = FitSphereLogger("API")
