# File: src/taskflow/scripts/create_user.py
"""Interactive command for creating a user account."""

import asyncio
import sys
from getpass import getpass

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.db import AsyncSessionLocal
from taskflow.core.errors import ValidationError
from taskflow.core.logging import get_logger
from taskflow.core.security import hash_password
from taskflow.models.user import User
from taskflow.models.user_schemas import UserCreate

logger = get_logger(__name__)


async def create_user_record(db: AsyncSession, data: UserCreate) -> User:
    """Insert a user. Raises ValidationError if the email is taken."""
    stmt = select(User).where(User.email == data.email)
    result = await db.execute(stmt)
    if result.scalar_one_or_none() is not None:
        raise ValidationError(
            f"User with email '{data.email}' already exists",
            details={"email": data.email},
        )

    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        name=data.name,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)

    logger.info("user.created", user_id=str(user.id), email=user.email)
    return user


def prompt_for_user() -> UserCreate:
    """Prompt until the answers pass validation."""
    while True:
        email = input("Email address: ").strip()
        name = input("Name: ").strip()
        password = getpass("Password: ")
        password_confirm = getpass("Password (confirm): ")

        if password != password_confirm:
            print("❌ Passwords don't match")
            continue

        try:
            return UserCreate(email=email, password=password, name=name)
        except PydanticValidationError as exc:
            for error in exc.errors():
                print(f"❌ {error['loc'][0]}: {error['msg']}")


async def create_user() -> None:
    """Interactive user creation."""
    print("\n" + "=" * 50)
    print("TaskFlow - Create user")
    print("=" * 50 + "\n")

    data = prompt_for_user()

    async with AsyncSessionLocal() as db:
        user = await create_user_record(db, data)
        await db.commit()

    print("\n✅ user created successfully!")
    print(f"   Email: {user.email}")
    print(f"   ID: {user.id}\n")


if __name__ == "__main__":
    try:
        asyncio.run(create_user())
    except KeyboardInterrupt:
        print("\n\n❌ Cancelled\n")
        sys.exit(1)
    except ValidationError as e:
        print(f"\n❌ {e.message}\n")
        sys.exit(1)
    except Exception as e:
        logger.error("create_user_error", error=str(e))
        print(f"\n❌ Error: {e}\n")
        sys.exit(1)
