"""
Create any missing HireMe tables. Existing tables and rows are left alone.

Usage:
  python -m hireme.scripts.ensure_tables          # create whatever is missing
  python -m hireme.scripts.ensure_tables --check  # report only; exit code 1 when tables are missing
"""
import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from hireme.database import ensure_tables_exist, missing_tables


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create missing HireMe database tables")
    parser.add_argument("--check", action="store_true", help="List missing tables without creating them")
    args = parser.parse_args(argv)

    if args.check:
        missing = missing_tables()
        if missing:
            print(f"Missing tables: {', '.join(missing)}")
            return 1
        print("All HireMe tables present.")
        return 0

    created = ensure_tables_exist()
    if created:
        print(f"Created tables: {', '.join(created)}")
    else:
        print("All HireMe tables present; nothing created.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
