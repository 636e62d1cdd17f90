#!/usr/bin/env python3
"""
Produce a DEFAULT_ADMIN_PASSWORD value for production.

Uses the application's own Argon2 parameters, so the seeded admin never
needs a rehash on first login. The password is read from the terminal
unless given as an argument.
"""
import getpass
import sys

from globalpoll.core.security import get_password_hash, verify_password

MIN_LENGTH = 8


def read_password(argv):
    if len(argv) > 2:
        sys.exit("Usage: python hash_password.py ['password']")
    if len(argv) == 2:
        return argv[1]

    password = getpass.getpass("Admin password: ")
    if password != getpass.getpass("Repeat password: "):
        sys.exit("Passwords do not match")
    return password


def main(argv):
    password = read_password(argv)
    if len(password) < MIN_LENGTH:
        sys.exit(f"Password must be at least {MIN_LENGTH} characters long")

    password_hash = get_password_hash(password)
    if not verify_password(password, password_hash):
        sys.exit("Generated hash failed verification")

    print("Set this in the environment or .env before the first start:")
    print(f"DEFAULT_ADMIN_PASSWORD='{password_hash}'")
    print("It is only used to seed the admins table while it is empty.")


if __name__ == "__main__":
    main(sys.argv)
