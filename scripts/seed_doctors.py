"""
scripts/seed_doctors.py
────────────────────────────────────────────────────────────────────────
Create the tables (optional) and seed a few demo doctors, plus one demo
patient per doctor.

Usage
-----

    python -m scripts.seed_doctors                    # default trio
    python -m scripts.seed_doctors --create-tables    # fresh database
    python -m scripts.seed_doctors --file doctors.json --tokens
"""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Any, List

from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select

from services.auth import create_token
from services.db import Doctor, Patient, create_all, session_scope

# ────────────────────────────────────────────────────────────────────
_DEFAULT_DOCTORS: List[dict[str, Any]] = [
    {"name": "Dr. Meera Nair", "email": "meera.nair@example.com", "specialization": "Kayachikitsa"},
    {"name": "Dr. Arjun Rao", "email": "arjun.rao@example.com", "specialization": "Swasthavritta"},
    {"name": "Dr. Leela Iyer", "email": "leela.iyer@example.com", "specialization": "Ahara Vijnana"},
]


async def _seed(doctors: list[dict[str, Any]], create_tables: bool, tokens: bool) -> None:
    if create_tables:
        await create_all()
        print("✓ tables created")

    async with session_scope() as db:
        inserted: list[Doctor] = []
        for d in doctors:
            exists = (
                await db.execute(select(Doctor).where(Doctor.email == d.get("email")))
            ).scalar_one_or_none()
            if exists:
                print(f"· skip {d.get('email')} – already present")
                continue
            doc = Doctor(**d)
            db.add(doc)
            inserted.append(doc)
        await db.flush()

        for doc in inserted:
            db.add(Patient(name=f"Demo patient of {doc.name}", doctor_id=doc.id))
        await db.commit()

    print(f"✓ inserted {len(inserted)} doctors")
    if tokens:
        for doc in inserted:
            print(f"  {doc.email}: {create_token(str(doc.id), role='doctor')}")


def _load_json(path: Path) -> list[dict[str, Any]]:
    data = json.loads(path.read_text())
    if not isinstance(data, list):
        raise ValueError("JSON file must contain a list of doctor dictionaries")
    return data


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--file",
        type=Path,
        help="optional JSON file with doctors to seed (overrides defaults)",
    )
    parser.add_argument("--create-tables", action="store_true", help="run CREATE TABLE first")
    parser.add_argument("--tokens", action="store_true", help="print a doctor JWT per new row")
    args = parser.parse_args()

    doctors = _load_json(args.file) if args.file else _DEFAULT_DOCTORS
    asyncio.run(_seed(doctors, args.create_tables, args.tokens))


if __name__ == "__main__":
    main()
