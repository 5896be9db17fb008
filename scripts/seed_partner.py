"""Register a partner's JustCall line so call logs resolve to it.

Usage:
    python scripts/seed_partner.py --phone "+61 2 9876 5432" --name "Acme Plumbing"
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from call_handler.core.phone import normalize_phone
from call_handler.persistence.database import AsyncSessionLocal
from call_handler.persistence.repositories.partner_repository import PartnerRepository


async def seed_partner(phone: str, name: str | None = None) -> int | None:
    """Create the partner for a JustCall line unless it already exists."""
    normalized = normalize_phone(phone)
    if not normalized:
        print(f"❌ Invalid phone number: {phone!r}")
        return None

    async with AsyncSessionLocal() as session:
        partner_repo = PartnerRepository(session)
        existing = await partner_repo.get_by_phone(normalized)
        if existing:
            print(f"Partner already exists: {existing.name or '-'} (ID: {existing.id}, phone: {existing.phone})")
            return existing.id

        partner = await partner_repo.create(name=name, phone=normalized)
        print(f"✅ Created partner: {partner.name or '-'} (ID: {partner.id}, phone: {partner.phone})")
        return partner.id


def main() -> None:
    parser = argparse.ArgumentParser(description="Register a partner JustCall line")
    parser.add_argument("--phone", required=True, help="JustCall line number in any format")
    parser.add_argument("--name", default=None, help="Partner display name")
    args = parser.parse_args()

    partner_id = asyncio.run(seed_partner(args.phone, args.name))
    sys.exit(0 if partner_id is not None else 1)


if __name__ == "__main__":
    main()
