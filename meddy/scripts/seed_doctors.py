"""
Load the doctors directory from a CSV file.

Expected columns: name, degree, speciality, yoe, location, city, consult_fee
(``consultFee`` is accepted as well). Empty numeric cells are stored as NULL.

    python -m meddy.scripts.seed_doctors doctors.csv --init-db
"""

import argparse
import csv
from pathlib import Path

from meddy.database.core.database import init_db
from meddy.database.core.funcs import save_doctors
from meddy.utils.logger import get_logger

logger = get_logger("seed_doctors")


def _to_int(value: str | None) -> int | None:
    value = (value or "").strip()
    return int(float(value)) if value else None


def load_doctors(path: Path) -> list[dict]:
    """Read doctor rows from ``path``; rows without a name or speciality are skipped."""
    doctors = []
    with open(path, newline="", encoding="utf-8") as f:
        for line, row in enumerate(csv.DictReader(f), start=2):
            name = (row.get("name") or "").strip()
            speciality = (row.get("speciality") or "").strip()
            if not name or not speciality:
                logger.warning(f"Skipping line {line}: name and speciality are required")
                continue
            doctors.append({
                "name": name,
                "degree": (row.get("degree") or "").strip() or None,
                "speciality": speciality,
                "yoe": _to_int(row.get("yoe")),
                "location": (row.get("location") or "").strip() or None,
                "city": (row.get("city") or "").strip() or None,
                "consult_fee": _to_int(row.get("consult_fee") or row.get("consultFee")),
            })
    return doctors


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the doctors directory from a CSV file.")
    parser.add_argument("csv_path", type=Path, help="CSV file with one doctor per row")
    parser.add_argument("--init-db", action="store_true", help="create missing tables first")
    args = parser.parse_args(argv)

    if args.init_db:
        init_db()

    doctors = load_doctors(args.csv_path)
    saved = save_doctors(doctors) if doctors else 0
    logger.info(f"Saved {saved} doctor(s) from {args.csv_path}")
    return saved


if __name__ == "__main__":
    main()
