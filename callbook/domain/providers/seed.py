"""Provider provisioning - demo seed and CSV import"""

import csv
import logging
from pathlib import Path
from typing import Union

from sqlalchemy.orm import Session

from ...models import Appointment, CallLog, Provider
from ...shared.validators import normalize_phone
from .repository import ProviderRepository

logger = logging.getLogger(__name__)

DEMO_PROVIDERS = [
    {
        "name": "Smile Dental Clinic",
        "phone": "+15551234567",
        "service_type": "dentist",
        "location": "New York, NY",
        "rating": 4.8,
    },
    {
        "name": "City Hair Salon",
        "phone": "+15559876543",
        "service_type": "salon",
        "location": "New York, NY",
        "rating": 4.5,
    },
    {
        "name": "QuickFix Plumbing",
        "phone": "+15555551234",
        "service_type": "plumber",
        "location": "New York, NY",
        "rating": 4.7,
    },
    {
        "name": "Bright Eyes Optometry",
        "phone": "+15558887777",
        "service_type": "optometrist",
        "location": "New York, NY",
        "rating": 4.9,
    },
    {
        "name": "Elite Auto Repair",
        "phone": "+15552223333",
        "service_type": "mechanic",
        "location": "New York, NY",
        "rating": 4.6,
    },
]


def reset_database(db: Session) -> None:
    """Administrative reset: the only path that deletes appointments"""
    db.query(CallLog).delete(synchronize_session=False)
    db.query(Appointment).delete(synchronize_session=False)
    db.query(Provider).delete(synchronize_session=False)
    db.commit()
    logger.info("🧹 Cleared call logs, appointments and providers")


def seed_demo_providers(db: Session, reset: bool = True) -> int:
    if reset:
        reset_database(db)

    count = ProviderRepository.create_providers(db, [dict(p) for p in DEMO_PROVIDERS])
    logger.info(f"✅ Created {count} demo providers")
    return count


def import_providers_csv(db: Session, path: Union[str, Path]) -> int:
    """
    Import providers from a CSV file with columns
    name, phone, serviceType, location, rating
    """
    rows = []
    with open(path, newline="", encoding="utf-8") as f:
        for line_no, row in enumerate(csv.DictReader(f), start=2):
            name = (row.get("name") or "").strip()
            service_type = (row.get("serviceType") or "").strip()
            phone = (row.get("phone") or "").strip()
            if not name or not phone or not service_type:
                raise ValueError(f"Line {line_no}: name, phone and serviceType are required")

            rating = (row.get("rating") or "").strip()
            rows.append(
                {
                    "name": name,
                    "phone": normalize_phone(phone),
                    "service_type": service_type,
                    "location": (row.get("location") or "").strip() or None,
                    "rating": float(rating) if rating else None,
                }
            )

    count = ProviderRepository.create_providers(db, rows)
    logger.info(f"✅ Imported {count} providers from {path}")
    return count
