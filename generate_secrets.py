#!/usr/bin/env python3
"""
Generate secure secrets for the bolão
Run this script to generate SECRET_KEY, WTF_CSRF_SECRET_KEY and
PICKS_ENCRYPTION_KEY
"""

import secrets

from cryptography.fernet import Fernet


def generate_secrets():
    """Generate secure random keys for the application"""
    print("🔐 Generating secure secrets for the bolão...")
    print("=" * 50)

    print(f"SECRET_KEY={secrets.token_urlsafe(32)}")
    print(f"WTF_CSRF_SECRET_KEY={secrets.token_urlsafe(32)}")
    print(f"PICKS_ENCRYPTION_KEY={Fernet.generate_key().decode()}")

    print("=" * 50)
    print("📝 Copy these values to your .env file")
    print("⚠️  Changing PICKS_ENCRYPTION_KEY later makes every stored pick unreadable!")


if __name__ == "__main__":
    generate_secrets()
