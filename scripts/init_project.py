#!/usr/bin/env python3
"""
Initialize the freight board.

This script sets up the project by:
- Checking for required environment variables
- Validating the business configuration
- Creating the export directory
- Checking the Supabase tables are reachable
"""

import os
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv


def check_python_version() -> bool:
    """Verify Python version is 3.10 or higher."""
    if sys.version_info < (3, 10):
        print(f"❌ Python 3.10+ required. Current version: {sys.version}")
        return False
    print(f"✅ Python version: {sys.version_info.major}.{sys.version_info.minor}")
    return True


def check_env_file() -> bool:
    """Check if .env file exists."""
    env_path = Path(".env")
    if not env_path.exists():
        print("❌ .env file not found")
        print("   Run: cp .env.example .env")
        print("   Then edit .env with your Supabase project URL and key")
        return False
    print("✅ .env file exists")
    return True


def load_and_validate_env() -> bool:
    """Load environment variables and check the Supabase credentials."""
    load_dotenv()

    missing = []
    for var in ("SUPABASE_URL", "SUPABASE_KEY"):
        value = os.getenv(var)
        if not value or value.startswith("your_") or "your-project-ref" in value:
            missing.append(var)

    if missing:
        print(f"❌ Missing or placeholder variables: {', '.join(missing)}")
        print("   Edit .env with the values from the Supabase dashboard")
        return False

    print("✅ Supabase credentials set")
    return True


def check_config_file() -> bool:
    """Validate config/config.yaml parses into the pricing model."""
    path = Path("config/config.yaml")
    if not path.exists():
        print("⚠️  config/config.yaml not found, built-in defaults will be used")
        return True

    try:
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        print(f"❌ Error parsing config.yaml: {e}")
        return False

    from freightboard.core.config import PricingConfig

    try:
        pricing = PricingConfig(**config.get("pricing", {}))
    except ValueError as e:
        print(f"❌ Invalid pricing section: {e}")
        return False

    print(
        f"✅ config.yaml is valid (sack {pricing.sack_weight_kg} kg, "
        f"advance {pricing.advance_ratio:.0%}, commission {pricing.commission_per_ton}/t)"
    )
    return True


def create_data_directories() -> bool:
    """Create the CSV export directory."""
    Path("data/exports").mkdir(parents=True, exist_ok=True)
    print("✅ Created data/exports")
    return True


def check_tables() -> bool:
    """Count rows in both tables to confirm access."""
    from freightboard.core.exceptions import FreightBoardError
    from freightboard.data.store import DRIVERS_TABLE, FREIGHTS_TABLE, get_store

    try:
        store = get_store()
        drivers = store.count(DRIVERS_TABLE)
        freights = store.count(FREIGHTS_TABLE)
    except (FreightBoardError, ValueError) as e:
        print(f"❌ Could not reach Supabase tables: {e}")
        return False

    print(f"✅ Supabase reachable: {drivers} drivers, {freights} freights")
    return True


def main():
    """Run all initialization checks."""
    print("=" * 60)
    print("Freight Board - Initialization")
    print("=" * 60)

    checks = [
        ("Python version", check_python_version),
        (".env file", check_env_file),
        ("Environment variables", load_and_validate_env),
        ("Configuration file", check_config_file),
        ("Data directories", create_data_directories),
        ("Supabase tables", check_tables),
    ]

    passed = 0
    failed = 0

    for name, check_func in checks:
        print(f"\nChecking {name}...")
        if check_func():
            passed += 1
        else:
            failed += 1

    print("\n" + "=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    if failed == 0:
        print("\nReady. Try: freightboard dashboard")
        return 0
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
