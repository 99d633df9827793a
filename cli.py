import json
import sys
from datetime import date, datetime, timezone
from pathlib import Path

from src.narrative.assembler import generate
from src.narrative.models import ImpactEntry


def load_entries(path: Path) -> list:
    """Read entries from a JSON list (or an object with an "entries" list)."""
    data = json.loads(path.read_text(encoding="utf-8"))
    rows = data.get("entries", []) if isinstance(data, dict) else data
    entries = []
    for index, row in enumerate(rows, start=1):
        created = row.get("created_at")
        entries.append(
            ImpactEntry(
                id=str(row.get("id") or f"entry-{index}"),
                created_at=datetime.fromisoformat(created) if created else datetime.now(timezone.utc),
                week_of=date.fromisoformat(row["week_of"]) if row.get("week_of") else date.today(),
                what_you_did=row.get("what_you_did", ""),
                who_benefited=row.get("who_benefited", ""),
                problem_solved=row.get("problem_solved", ""),
                evidence=row.get("evidence", ""),
                tags=tuple(row.get("tags") or ()),
            )
        )
    return entries


def main() -> None:
    in_path = Path(sys.argv[1])
    narrative_type = sys.argv[2] if len(sys.argv) > 2 else "review"
    tone = sys.argv[3] if len(sys.argv) > 3 else "balanced"
    output = generate(load_entries(in_path), narrative_type, tone)
    if len(sys.argv) > 4:
        out_path = Path(sys.argv[4])
        out_path.write_text(output + "\n", encoding="utf-8")
        print(f"Wrote narrative → {out_path}")
    else:
        print(output)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python cli.py entries.json [review|promotion|role-change] [results|leadership|technical|balanced] [output.md]")
        sys.exit(1)
    try:
        main()
    except ValueError as exc:
        print(f"Error: {exc}")
        sys.exit(2)
