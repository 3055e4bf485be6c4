import argparse
import asyncio
import os
import sys

# Add the current directory to sys.path to allow imports
sys.path.append(os.getcwd())

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hris.core.security import get_password_hash
from hris.db.session import AsyncSessionLocal
from hris.models.user import SUPER_ADMIN_ROLE, Role, User
from hris.services.user_service import RbacService


async def create_admin(db: AsyncSession, email: str, password: str, full_name: str = "Admin User") -> User:
    """Seed built-in roles and create (or reset) a super admin account."""
    await RbacService(db).seed_defaults()
    role = (await db.execute(select(Role).where(Role.name == SUPER_ADMIN_ROLE))).scalar_one()

    result = await db.execute(select(User).where(User.email == email.lower()))
    user = result.scalar_one_or_none()

    if user:
        print(f"User {email} already exists.")
        user.hashed_password = get_password_hash(password)
        user.is_active = True
        if role not in user.roles:
            user.roles.append(role)
        await db.commit()
        print(f"Updated password for {email}")
        return user

    user = User(
        email=email.lower(),
        hashed_password=get_password_hash(password),
        full_name=full_name,
        is_active=True,
        force_password_change=True,
        roles=[role],
    )
    db.add(user)
    await db.commit()
    print(f"Created super admin: {email}")
    return user


async def main(email: str, password: str) -> None:
    async with AsyncSessionLocal() as db:
        await create_admin(db, email, password)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the first HRIS super admin.")
    parser.add_argument("--email", default="admin@example.com")
    parser.add_argument("--password", default=os.environ.get("HRIS_ADMIN_PASSWORD", "Admin123!"))
    args = parser.parse_args()
    asyncio.run(main(args.email, args.password))
