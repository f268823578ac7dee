"""
Demo data for local development (enabled with SEED_DEMO_DATA=true).
"""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from campaigns.auth.passwords import hash_password
from campaigns.core.models import CampaignStatus, Role
from campaigns.core.utils import utc_now
from campaigns.storage import Collections, StorageProvider

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = [
    {"username": "admin", "email": "admin@campaigns.com", "full_name": "System Administrator",
     "password": "Admin@123", "role": Role.ADMIN},
    {"username": "johndoe", "email": "john@campaigns.com", "full_name": "John Doe",
     "password": "User@123", "role": Role.USER},
]

DEMO_CAMPAIGNS = [
    ("Summer Sale 2026", "Discounts across the summer catalogue", "50000", CampaignStatus.ACTIVE, -10, 60),
    ("Product Launch", "Launch campaign for the new product line", "100000", CampaignStatus.DRAFT, 30, 90),
    ("Holiday Special", "Year-end holiday promotion", "75000", CampaignStatus.PAUSED, 45, 75),
]


async def seed_demo_data(storage: StorageProvider) -> None:
    """Insert demo accounts and campaigns into an empty store."""
    metadata = storage.metadata
    if await metadata.count(Collections.ACCOUNTS) > 0:
        logger.info("Store already has accounts; skipping demo seed")
        return

    now = utc_now()
    owners = []
    for demo in DEMO_ACCOUNTS:
        doc = await metadata.insert(
            Collections.ACCOUNTS,
            {
                "username": demo["username"],
                "email": demo["email"],
                "password_hash": hash_password(demo["password"]),
                "full_name": demo["full_name"],
                "role": demo["role"],
                "is_active": True,
                "created_at": now,
                "last_login_at": None,
            },
        )
        owners.append(doc["id"])

    for name, description, budget, status, start_offset, end_offset in DEMO_CAMPAIGNS:
        await metadata.insert(
            Collections.CAMPAIGNS,
            {
                "name": name,
                "description": description,
                "budget": Decimal(budget),
                "start_date": now + timedelta(days=start_offset),
                "end_date": now + timedelta(days=end_offset),
                "status": status,
                "created_by": owners[0],
                "created_at": now,
                "updated_at": None,
                "is_deleted": False,
            },
        )

    logger.info(f"Seeded {len(DEMO_ACCOUNTS)} demo accounts and {len(DEMO_CAMPAIGNS)} campaigns")
