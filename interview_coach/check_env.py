#!/usr/bin/env python3
"""
Environment checker for the analysis service configuration
This script will help identify missing environment variables
"""

import os
from dotenv import load_dotenv

from .config import REQUIRED_VARS, OPTIONAL_VARS


def check_environment():
    """Check if all required environment variables are set"""
    print("=" * 60)
    print("ENVIRONMENT VARIABLES CHECKER")
    print("=" * 60)

    # Load environment variables
    load_dotenv()

    print("\nChecking required environment variables:\n")

    missing_vars = []
    set_vars = []

    for var, description in REQUIRED_VARS.items():
        value = os.getenv(var)
        if value:
            print(f"✅ {var:<22}: ***HIDDEN*** ({description})")
            set_vars.append(var)
        else:
            print(f"❌ {var:<22}: NOT SET ({description})")
            missing_vars.append(var)

    print("\nOptional environment variables (defaults apply when unset):\n")

    for var, description in OPTIONAL_VARS.items():
        value = os.getenv(var)
        print(f"   {var:<22}: {value or 'default'} ({description})")

    print("\n" + "=" * 60)

    if missing_vars:
        print(f"\n❌ Missing {len(missing_vars)} required environment variable(s):")
        for var in missing_vars:
            print(f"   - {var}")

        print("\nTo fix this:")
        print("1. Create a .env file in the project root")
        print("2. Copy the template from .env.example")
        print("3. Fill in the missing values")
        print("4. Example .env file content:")
        print()
        print("   GEMINI_API_KEY=your_api_key")
        print("   ALLOWED_ORIGIN=http://localhost:3000")

        return False
    else:
        print(f"\n✅ All {len(set_vars)} required environment variables are set!")
        return True


def main():
    raise SystemExit(0 if check_environment() else 1)


if __name__ == "__main__":
    main()
