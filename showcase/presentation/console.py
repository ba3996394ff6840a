"""Plain-text rendering of repository cards."""

import sys
from typing import Optional, Sequence, TextIO

from showcase.domain.repository import RepoRecord


class ConsoleRenderer:
    """Writes one text card per repository to a stream."""

    def __init__(self, stream: Optional[TextIO] = None, topics_display_cap: int = 6):
        self.stream = stream or sys.stdout
        self.topics_display_cap = topics_display_cap

    def format_card(self, record: RepoRecord) -> str:
        updated = record.updated_at.date().isoformat() if record.updated_at else "—"
        lines = [
            f"{record.name}  [{record.primary_language or '—'}]",
        ]
        if record.description:
            lines.append(f"  {record.description}")
        lines.append(f"  ★ {record.star_count}  ⑂ {record.fork_count}  {updated}")
        if record.homepage:
            lines.append(f"  Demo: {record.homepage}")
        lines.append(f"  Repo: {record.url}")
        topics = record.topics[: self.topics_display_cap]
        if topics:
            lines.append("  " + " ".join(f"#{topic}" for topic in topics))
        return "\n".join(lines)

    def render(self, records: Sequence[RepoRecord], meta: str, notice: Optional[str] = None) -> None:
        out = [meta, ""]
        out.extend(self.format_card(record) + "\n" for record in records)
        if notice:
            out.append(notice)
        self.stream.write("\n".join(out) + "\n")
        self.stream.flush()
