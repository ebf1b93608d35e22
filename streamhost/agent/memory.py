"""Memory system for persistent stream memory."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from streamhost.gateway.types import Comment, Gift
from streamhost.utils.helpers import ensure_dir


class MemoryStore:
    """Append-only interaction log: HISTORY.md, one entry per viewer event.

    Entries are separated by a blank line so they stay grep-searchable and
    the most recent ones can be fed back into prompts.
    """

    def __init__(self, workspace: Path):
        self.memory_dir = ensure_dir(workspace / "memory")
        self.history_file = self.memory_dir / "HISTORY.md"

    def append_history(self, entry: str) -> None:
        # One line per entry; a blank line inside would split it on read.
        entry = " ".join(entry.split())
        if not entry:
            return
        with open(self.history_file, "a", encoding="utf-8") as f:
            f.write(entry + "\n\n")

    def read_history(self) -> list[str]:
        if not self.history_file.exists():
            return []
        text = self.history_file.read_text(encoding="utf-8")
        return [e.strip() for e in text.split("\n\n") if e.strip()]

    def recent(self, limit: int = 10) -> list[str]:
        return self.read_history()[-limit:] if limit > 0 else []

    def get_memory_context(self, limit: int = 10) -> str:
        entries = self.recent(limit)
        return "\n".join(entries) if entries else "(no recent interactions)"

    # ------------------------------------------------------------------
    # Viewer events
    # ------------------------------------------------------------------

    @staticmethod
    def _stamp() -> str:
        return datetime.now().strftime("%Y-%m-%d %H:%M")

    def record_comment(self, comment: Comment) -> None:
        who = comment.handle or comment.user
        self.append_history(f"[{self._stamp()}] COMMENT {who} ({comment.id}): {comment.message}")

    def record_gift(self, gift: Gift) -> None:
        who = gift.handle or gift.user
        line = (
            f"[{self._stamp()}] GIFT {who}: {gift.gift_count}x {gift.gift_name} "
            f"worth {gift.coins_total} coins"
        )
        if gift.tx_hash:
            line += f" (tx {gift.tx_hash})"
        self.append_history(line)
