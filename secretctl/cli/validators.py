"""Input validation for CLI arguments."""
import sys
from typing import Dict, List, Optional


def parse_labels(entries: Optional[List[str]]) -> Dict[str, str]:
    """
    Turn repeated --label KEY=VALUE flags into a label map.

    Later entries win over earlier ones with the same key.

    Args:
        entries: Raw flag values, may be None when the flag was not given

    Raises:
        SystemExit with code 2 if an entry is malformed
    """
    labels: Dict[str, str] = {}
    for entry in entries or []:
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            print(f"Error: Invalid label '{entry}'", file=sys.stderr)
            print("\nLabels must be given as KEY=VALUE, e.g. -l env=prod", file=sys.stderr)
            sys.exit(2)
        labels[key] = value
    return labels
