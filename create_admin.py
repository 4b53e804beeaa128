# create_admin.py
import argparse
import getpass

from sqlmodel import Session

from sweetshop.database import create_db_and_tables, engine
from sweetshop.models.user import User
from sweetshop.repositories.user_repo import UserRepository
from sweetshop.services.auth_service import hash_password, normalize_email


def main():
    parser = argparse.ArgumentParser(description="Create or promote a Sweet Shop admin")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()
    email = normalize_email(args.email)

    create_db_and_tables()
    repo = UserRepository()

    with Session(engine) as session:
        user = repo.get_by_email(session, email)
        if user is not None:
            user.role = "admin"
            repo.update(session, user)
            print(f"Promoted {args.email} to admin.")
            return

        password = getpass.getpass("Password: ")
        user = User(
            email=email,
            name=args.name or email.split("@", 1)[0],
            password_hash=hash_password(password),
            role="admin",
        )
        repo.create(session, user)
        print(f"Created admin {args.email}.")


if __name__ == "__main__":
    main()
