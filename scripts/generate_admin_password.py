#!/usr/bin/env python3
"""Super admin password hash generator.

Checks the password against the admin password rules and prints an Argon2
hash to put in the environment as ADMIN_PASSWORD_HASH, so the plaintext
password never has to be configured.

Usage:
    python scripts/generate_admin_password.py 'MySecure@Password123'
    python scripts/generate_admin_password.py --email admin@example.com --username SuperAdmin
"""

import argparse
import getpass
import sys

from gameads.services.credential_store import hash_password, validate_password_strength


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate an Argon2 hash for the super admin")
    parser.add_argument("password", nargs="?", help="Password to hash (prompted when omitted)")
    parser.add_argument("--email", default="admin@yourdomain.com", help="Admin email to print")
    parser.add_argument("--username", default="SuperAdmin", help="Admin username to print")
    args = parser.parse_args(argv)

    password = args.password or getpass.getpass("Admin password: ")

    problems = validate_password_strength(password)
    if problems:
        print("Password does not meet security requirements:", file=sys.stderr)
        for problem in problems:
            print(f"  - {problem}", file=sys.stderr)
        return 1

    print("Add these to your .env file:")
    print()
    print(f"ADMIN_EMAIL={args.email}")
    print(f"ADMIN_USERNAME={args.username}")
    print(f"ADMIN_PASSWORD_HASH={hash_password(password)}")
    print()
    print("Never commit your .env file to version control.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
