from __future__ import annotations

import json
import os
from typing import Any, Dict, List


class PreFlightCheckError(Exception):
    """Raised when the migration inputs are not usable."""
    pass


def run_pre_flight_checks(config: Dict[str, Any], kinds: List[str]) -> None:
    """
    Verify that the inputs for the requested migration kinds are present.

    Args:
        config: The application configuration dictionary.
        kinds: ``"posts"`` and/or ``"pages"``.

    Raises:
        PreFlightCheckError: If any check fails.  A missing URL map is not
            an error (the run continues without rewriting); an unreadable
            one is.
    """
    print("[INFO] Running pre-flight checks...")
    paths = config.get("paths", {})
    input_dir = paths.get("input_dir", "")

    for kind in kinds:
        path = os.path.join(input_dir, f"{kind}.json")
        if not os.path.exists(path):
            raise PreFlightCheckError(f"Input file for {kind} not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PreFlightCheckError(f"Could not read {path}: {e}")
        if not isinstance(data, list):
            raise PreFlightCheckError(f"{path} must contain a JSON list of {kind}")

    url_map = os.path.join(input_dir, paths.get("url_map", ""))
    if paths.get("url_map") and os.path.exists(url_map):
        try:
            with open(url_map, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PreFlightCheckError(f"Could not read URL map {url_map}: {e}")
        if not isinstance(data, dict):
            raise PreFlightCheckError(f"URL map {url_map} must be a JSON object")

    print("[INFO] Pre-flight checks passed successfully.")
