#!/usr/bin/env python3
"""
User Management Utility

This script provides utilities for the demo accounts:
- List the demo users
- Issue a bearer token for a user
- Hash a password with bcrypt
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from api.auth import TokenManager, UserDirectory, hash_password
from api.config import config as api_config
from utilities.config import config
from utilities.logger import setup_logging


def list_users(users: UserDirectory):
    """List the demo users."""
    print("\n" + "="*60)
    print("👥 DEMO USERS")
    print("="*60)

    for i, user in enumerate(users.list_users(), 1):
        print(f"{i:3d}. {user.username:<10} id={user.id:<10} {user.display_name} <{user.email}>")


def issue_token(users: UserDirectory, username: str):
    """Print a bearer token for a user."""
    user = users.find_by_username(username)
    if user is None:
        print(f"❌ Unknown user: {username}")
        sys.exit(1)

    token = TokenManager().create_token(user)
    print(f"\n🔑 Token for {user.username} (id={user.id}), valid {api_config.access_token_expire_minutes} minutes:")
    print(token)


def main():
    """Main function."""
    if len(sys.argv) < 2:
        print("Usage: python manage_users.py [list|token|hash] [argument]")
        print()
        print("Commands:")
        print("  list     - List the demo users")
        print("  token    - Issue a bearer token for a username")
        print("  hash     - Hash a password with bcrypt")
        print()
        print("Examples:")
        print("  python manage_users.py list")
        print("  python manage_users.py token demo")
        print("  python manage_users.py hash 's3cret'")
        sys.exit(1)

    command = sys.argv[1].lower()

    # Setup logging
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    if command == "list":
        list_users(UserDirectory.with_demo_users(rounds=api_config.bcrypt_rounds))
    elif command == "token":
        if len(sys.argv) < 3:
            print("❌ Error: username required for token command")
            print("Usage: python manage_users.py token <username>")
            sys.exit(1)
        issue_token(UserDirectory.with_demo_users(rounds=api_config.bcrypt_rounds), sys.argv[2])
    elif command == "hash":
        if len(sys.argv) < 3:
            print("❌ Error: password required for hash command")
            print("Usage: python manage_users.py hash <password>")
            sys.exit(1)
        print(hash_password(sys.argv[2], api_config.bcrypt_rounds))
    else:
        print(f"❌ Unknown command: {command}")
        print("Available commands: list, token, hash")
        sys.exit(1)


if __name__ == "__main__":
    main()
