"""
Recompute genre/tag comic counts and category post counts from the source rows

Usage:
    python scripts/recount_counters.py
"""
import sys
from pathlib import Path

# Add parent directory to path to import app modules
current_dir = Path(__file__).resolve().parent
sys.path.append(str(current_dir.parent))

from app.core.database import get_session_local  # noqa: E402
from app.services.counter_service import CounterService  # noqa: E402
import app.models  # noqa: E402,F401


def main():
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        fixed = CounterService.recount_all(db)
    finally:
        db.close()

    print("Counters recomputed")
    for table, count in fixed.items():
        print(f"- {table}: {count} corrected")


if __name__ == "__main__":
    main()
