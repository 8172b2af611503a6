"""
CaseKeeper - Logger Module
==========================

Tree-style logging with local timestamps and daily log files.

DESIGN:
    Every moderation event is logged as a small tree so a single case can
    be read at a glance in the console or the log file:

        [02:30:45 PM GMT] 📋 CASE COMMITTED
          ├─ Case: #12
          ├─ Type: mute
          └─ User: 123456789

    Key features:
    - Tree-style formatting for structured data
    - Daily log files in dated folders with retention cleanup
    - Separate error log file
    - Session tracking with a short run ID
    - Optional Discord webhook alerts for errors
"""

import asyncio
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import aiohttp

from src.core.config import LOCAL_TZ


# =============================================================================
# Constants
# =============================================================================

LOGS_DIR = Path(os.getenv("CASEKEEPER_LOG_DIR", "logs"))
"""Directory for all log files, organized by date."""

LOG_RETENTION_DAYS = 7
"""Number of days to retain log directories before cleanup."""

Details = List[Tuple[str, str]]


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Logger with tree-style formatting.

    Attributes:
        run_id: Unique identifier for this bot session.
        log_file: Path to the main log file.
        error_file: Path to the error-only log file.
    """

    def __init__(self, name: str = "CaseKeeper") -> None:
        self.name = name
        self.run_id: str = str(uuid.uuid4())[:8]
        self._webhook_url: Optional[str] = None

        today = datetime.now(LOCAL_TZ).strftime("%Y-%m-%d")
        self.log_dir = LOGS_DIR / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"{name}-{today}.log"
        self.error_file = self.log_dir / f"{name}-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Set webhook URL for error notifications."""
        self._webhook_url = url

    # =========================================================================
    # Log Files
    # =========================================================================

    def _cleanup_old_logs(self) -> None:
        """Remove dated log directories older than the retention period."""
        if not LOGS_DIR.exists():
            return

        now = datetime.now()
        for item in LOGS_DIR.iterdir():
            if not item.is_dir():
                continue
            try:
                dir_date = datetime.strptime(item.name, "%Y-%m-%d")
            except ValueError:
                continue  # Not a dated directory
            if (now - dir_date).days > LOG_RETENTION_DAYS:
                for f in item.iterdir():
                    f.unlink()
                item.rmdir()

    def _write_session_header(self) -> None:
        header = (
            "\n============================================================\n"
            f"NEW SESSION - RUN ID: {self.run_id}\n"
            f"[{datetime.now(LOCAL_TZ).strftime('%I:%M:%S %p %Z')}]\n"
            "============================================================\n"
        )
        self._append(self.log_file, header)

    @staticmethod
    def _append(path: Path, text: str) -> None:
        with open(path, "a", encoding="utf-8") as f:
            f.write(text)

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """Write a line to console, the main log, and optionally the error log."""
        prefix = f"{emoji} " if emoji else ""
        if include_timestamp:
            stamp = datetime.now(LOCAL_TZ).strftime("[%I:%M:%S %p %Z]")
            line = f"{stamp} {prefix}{message}"
        else:
            line = f"{prefix}{message}"

        print(line)
        self._append(self.log_file, f"{line}\n")
        if is_error:
            self._append(self.error_file, f"{line}\n")

    def _write_items(self, items: Details, is_error: bool = False) -> None:
        for i, (key, value) in enumerate(items):
            branch = "└─" if i == len(items) - 1 else "├─"
            self._write(f"  {branch} {key}: {value}", include_timestamp=False, is_error=is_error)

    # =========================================================================
    # Tree Formatting
    # =========================================================================

    def tree(self, title: str, items: Details, emoji: str = "📦") -> None:
        """
        Log structured data in tree format.

        Args:
            title: Main heading for the tree.
            items: List of (key, value) tuples to display.
            emoji: Emoji prefix for the title.
        """
        self._append(self.log_file, "\n")
        self._write(title, emoji=emoji)
        self._write_items(items)
        self._append(self.log_file, "\n")

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str) -> None:
        """Log debug message (only if DEBUG env var set)."""
        if os.getenv("DEBUG"):
            self._write(msg, "🔍")

    def info(self, msg: str) -> None:
        self._write(msg, "ℹ️")

    def success(self, msg: str) -> None:
        self._write(msg, "✅")

    def warning(self, msg: str, details: Optional[Details] = None) -> None:
        self._write(msg, "⚠️")
        if details:
            self._write_items(details)

    def error(self, msg: str, details: Optional[Details] = None) -> None:
        """
        Log error message with optional structured details.

        Errors with details are also pushed to the webhook when one is
        configured and an event loop is running.
        """
        self._write(msg, "❌", is_error=True)
        if not details:
            return

        self._write_items(details, is_error=True)
        if self._webhook_url:
            try:
                asyncio.get_running_loop().create_task(self._send_webhook_error(msg, details))
            except RuntimeError:
                pass  # No running loop (startup/shutdown)

    def critical(self, msg: str) -> None:
        self._write(msg, "🚨", is_error=True)

    # =========================================================================
    # Webhook Integration
    # =========================================================================

    async def _send_webhook_error(self, title: str, details: Details) -> None:
        """Send an error embed to the configured Discord webhook."""
        if not self._webhook_url:
            return

        payload = {
            "embeds": [{
                "title": f"❌ {title}",
                "description": "\n".join(f"**{k}:** {v}" for k, v in details),
                "color": 0xFF0000,
                "timestamp": datetime.now(LOCAL_TZ).isoformat(),
                "footer": {"text": f"Run ID: {self.run_id}"},
            }]
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status != 204:
                        print(f"Webhook error: {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Global logger instance shared by every module."""


__all__ = [
    "logger",
    "TreeLogger",
]
