#!/usr/bin/env python3
"""
Database management script for the marketplace backend.
Handles migrations, table creation, schema checks and admin promotion.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent))

from alembic.config import Config
from alembic import command
from app.infrastructure.auth.supabase_auth import SupabaseAuthService
from app.infrastructure.db.database import engine, SessionLocal
from app.infrastructure.db.health import check_required_tables
from app.infrastructure.db.models import create_all_tables
from app.infrastructure.repositories.profile_repository import SQLAlchemyProfileRepository
from app.domain.models.profile import Profile, UserRole


ALEMBIC_INI = "app/infrastructure/db/migrations/alembic.ini"


def create_migration(message: str = "Auto-generated migration"):
    """Create a new migration."""
    alembic_cfg = Config(ALEMBIC_INI)
    print(f"Creating migration: {message}")
    command.revision(alembic_cfg, message=message, autogenerate=True)


def run_migrations():
    """Run pending migrations."""
    alembic_cfg = Config(ALEMBIC_INI)
    print("Running migrations...")
    command.upgrade(alembic_cfg, "head")


def rollback_migration():
    """Rollback last migration."""
    alembic_cfg = Config(ALEMBIC_INI)
    print("Rolling back migration...")
    command.downgrade(alembic_cfg, "-1")


def reset_database():
    """Reset database - WARNING: This will drop all data!"""
    response = input("This will drop ALL data. Type 'yes' to continue: ")
    if response.lower() == 'yes':
        alembic_cfg = Config(ALEMBIC_INI)
        print("Resetting database...")
        command.downgrade(alembic_cfg, "base")
        command.upgrade(alembic_cfg, "head")
    else:
        print("Database reset cancelled.")


def show_current_revision():
    """Show current database revision."""
    command.current(Config(ALEMBIC_INI))


def show_history():
    """Show migration history."""
    command.history(Config(ALEMBIC_INI))


def create_tables():
    """Create every table straight from the models, without migrations."""
    create_all_tables(engine)
    print("Tables created.")


def check_tables() -> bool:
    """Print which marketplace tables exist."""
    result = check_required_tables(engine)
    if not result.connected:
        print(f"Could not connect to the database: {result.error}")
        return False
    for table in result.present:
        print(f"  ok       {table}")
    for table in result.missing:
        print(f"  MISSING  {table}")
    print("All required tables are present." if result.healthy else "Some tables are missing.")
    return result.healthy


def make_admin(email: str) -> bool:
    """Give the admin role to the user with this email. Requires the service role key."""
    emails = SupabaseAuthService().list_user_emails()
    user_id = next((uid for uid, address in emails.items() if address.lower() == email.lower()), None)
    if user_id is None:
        print(f"No auth user with email {email}")
        return False

    session = SessionLocal()
    try:
        repository = SQLAlchemyProfileRepository(session)
        profile = repository.find_by_user_id(user_id) or Profile.create(user_id)
        profile.promote_to(UserRole.ADMIN)
        repository.save(profile)
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

    print(f"{email} is now an admin.")
    return True


def main():
    """Main CLI function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_db.py [command]")
        print("Commands:")
        print("  create [msg]         - Create new migration")
        print("  migrate              - Run pending migrations")
        print("  rollback             - Rollback last migration")
        print("  reset                - Reset database (WARNING: drops all data)")
        print("  current              - Show current revision")
        print("  history              - Show migration history")
        print("  create-tables        - Create all tables from the models")
        print("  check                - Check that all required tables exist")
        print("  make-admin <email>   - Give the admin role to a user")
        return

    command_name = sys.argv[1]

    if command_name == "create":
        message = " ".join(sys.argv[2:]) if len(sys.argv) > 2 else "Auto-generated migration"
        create_migration(message)
    elif command_name == "migrate":
        run_migrations()
    elif command_name == "rollback":
        rollback_migration()
    elif command_name == "reset":
        reset_database()
    elif command_name == "current":
        show_current_revision()
    elif command_name == "history":
        show_history()
    elif command_name == "create-tables":
        create_tables()
    elif command_name == "check":
        sys.exit(0 if check_tables() else 1)
    elif command_name == "make-admin":
        if len(sys.argv) < 3:
            print("Usage: python manage_db.py make-admin <email>")
            sys.exit(1)
        sys.exit(0 if make_admin(sys.argv[2]) else 1)
    else:
        print(f"Unknown command: {command_name}")


if __name__ == "__main__":
    main()
