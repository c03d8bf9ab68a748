#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import List, Optional

from campaign_results.config.defaults import RID_LENGTH
from campaign_results.config.loader import ConfigLoader
from campaign_results.config.validation import ConfigIssue, ConfigValidator


def validate_tracker_config(config_dir: Optional[Path] = None) -> List[ConfigIssue]:
    """Validate the merged tracker configuration."""
    loader = ConfigLoader.create(config_dir)
    config = loader.load_config()
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating tracker configuration in {loader.config_dir}...")

    errors = validate_tracker_config(config_dir)

    if errors:
        print(f"❌ Found {len(errors)} validation errors:")
        for error in errors:
            print(f"  • {error.field}: {error.message} (value: {error.value})")
        sys.exit(1)

    config = loader.build_config()
    print("✅ Configuration is valid")
    print(f"  • store: {config.store.database_path}")
    print(f"  • geo: {config.geo.database_path if config.geo.enabled else 'disabled'}")
    print(f"  • identifier: {RID_LENGTH} symbols, "
          f"{config.identifier.max_attempts} attempts")
    sys.exit(0)


if __name__ == "__main__":
    main()
