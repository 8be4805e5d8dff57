"""
Seed demo profiles, one per role plus a second applicant.
Run: python -m scripts.seed_profiles (from the project root, with DB running).
"""
import asyncio

from sqlalchemy import select

from database import AsyncSessionLocal, init_db
from models import Profile

PROFILES_DATA = [
    {
        "id": "prf-admin",
        "user_id": "auth-admin",
        "email": "admin@example.com",
        "first_name": "Ada",
        "last_name": "Admin",
        "role": "admin",
    },
    {
        "id": "prf-reviewer",
        "user_id": "auth-reviewer",
        "email": "reviewer@example.com",
        "first_name": "Rita",
        "last_name": "Reviewer",
        "role": "reviewer",
    },
    {
        "id": "prf-applicant",
        "user_id": "auth-applicant",
        "email": "applicant@example.com",
        "first_name": "Alan",
        "last_name": "Applicant",
        "role": "applicant",
    },
    {
        "id": "prf-applicant-2",
        "user_id": "auth-applicant-2",
        "email": "second.applicant@example.com",
        "first_name": "Bea",
        "last_name": "Second",
        "role": "applicant",
    },
]


async def seed():
    await init_db()
    async with AsyncSessionLocal() as session:
        for data in PROFILES_DATA:
            existing = await session.execute(
                select(Profile).where(Profile.user_id == data["user_id"])
            )
            if existing.scalar_one_or_none():
                print(f"Profile {data['user_id']} already exists, skipping")
                continue
            session.add(Profile(**data))
            print(f"Seeded {data['role']}: {data['email']}")
        await session.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(seed())
