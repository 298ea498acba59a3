#!/usr/bin/env python3
"""Validate fleet YAML files against the schema."""
import json
import sys
from pathlib import Path

import yaml
from jsonschema import validate, ValidationError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def duplicate_ids(data: dict) -> list[str]:
    """Vehicle ids that appear more than once (lookups only ever find the first)."""
    seen = set()
    duplicates = []
    for vehicle in data.get("vehicles") or []:
        vehicle_id = str(vehicle.get("id"))
        if vehicle_id in seen and vehicle_id not in duplicates:
            duplicates.append(vehicle_id)
        seen.add(vehicle_id)
    return duplicates


def validate_fleet_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single fleet YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            # Unquoted YAML dates load as date objects; stringify them as the loader does
            data = json.loads(json.dumps(yaml.safe_load(f), default=str))
        validate(instance=data, schema=schema)
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except OSError as e:
        errors.append(f"Error: {e}")
    else:
        errors.extend(f"Duplicate vehicle id: {d}" for d in duplicate_ids(data))
    return errors


def collect_paths(args: list[str]) -> list[Path]:
    """Files named on the command line, or every YAML file in fleets/."""
    if args:
        return [Path(p) for p in args]
    fleets_dir = Path(__file__).parent / "fleets"
    if not fleets_dir.exists():
        raise FileNotFoundError(f"fleets directory not found: {fleets_dir}")
    return list(fleets_dir.glob("*.yaml")) + list(fleets_dir.glob("*.yml"))


def main(argv=None):
    """Validate the given fleet files and report OK/FAIL per file."""
    schema = load_schema()
    try:
        paths = collect_paths(sys.argv[1:] if argv is None else argv)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    if not paths:
        print("Warning: No fleet files to validate")
        return 0

    failed = 0
    for filepath in sorted(paths):
        errors = validate_fleet_file(filepath, schema)
        if not errors:
            print(f"OK: {filepath.name}")
            continue
        failed += 1
        print(f"FAIL: {filepath.name}")
        for error in errors:
            print(f"  {error}")

    if failed:
        print(f"{failed} of {len(paths)} file(s) failed validation")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
