import asyncio
import os
import sys

# Add project root to path
sys.path.append(os.getcwd())

from src.config import settings
from src.core.errors import DuplicateUserError
from src.core.users import PostgresUserRepository, UserService
from src.infra.database import close_db, init_db, get_db

# Два пользователя: автор заявок и согласующий
DEV_USERS = [
    ("Dev Requester", "requester@example.com", "dev-password"),
    ("Dev Approver", "approver@example.com", "dev-password"),
]


async def main() -> None:
    await init_db()
    print(f"Connected to {settings.database.DB_NAME}")

    service = UserService(PostgresUserRepository(get_db()))
    try:
        for name, email, password in DEV_USERS:
            try:
                user = await service.register(name, email, password)
                print(f"User {email} created: {user.id}")
            except DuplicateUserError:
                print(f"User {email} already exists")
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
