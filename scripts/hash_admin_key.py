"""
Script to hash the admin key
Prints the bcrypt hash to put in ADMIN_KEY_HASH
"""

import sys
from getpass import getpass
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.auth import hash_password


def main():
    if len(sys.argv) > 1:
        admin_key = sys.argv[1]
    else:
        admin_key = getpass("Admin key: ")
        if admin_key != getpass("Repeat admin key: "):
            print("Keys do not match")
            sys.exit(1)

    if len(admin_key) < 12:
        print("Use an admin key of at least 12 characters")
        sys.exit(1)

    print("\nAdd this line to your .env:\n")
    print(f"ADMIN_KEY_HASH={hash_password(admin_key)}")


if __name__ == "__main__":
    main()
