"""Save file store for scenario nodes.

Persists the host's scenario node (which carries the ``QUEUE`` container)
to a JSON file together with a SHA-256 hash of its canonical form, so a
truncated or hand-edited file is detected on load.
"""

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def _canonical_json(node: dict[str, Any]) -> str:
    return json.dumps(node, sort_keys=True, separators=(",", ":"))


def compute_state_hash(node: dict[str, Any]) -> str:
    """Compute the integrity hash of a scenario node."""
    return hashlib.sha256(_canonical_json(node).encode("utf-8")).hexdigest()


class SaveFileStore:
    """Reads and writes a scenario node to a save file.

    Usage:
        store = SaveFileStore("persistent.json")
        node = store.load()
        scenario.on_load(node)
        ...
        scenario.on_save(node)
        store.save(node)
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize save file store.

        Args:
            path: Location of the save file
        """
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> dict[str, Any]:
        """Load the scenario node from disk.

        Returns:
            The stored node, or an empty dict if the file does not exist

        Raises:
            ValueError: If the file is not valid JSON or the integrity check fails
        """
        if not self.path.exists():
            logger.info(f"No save file at {self.path}, starting fresh")
            return {}

        try:
            document = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in save file {self.path}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("node"), dict):
            raise ValueError(f"Save file {self.path} has no scenario node")

        node = document["node"]
        computed_hash = compute_state_hash(node)
        if computed_hash != document.get("state_hash"):
            raise ValueError(
                f"Save file integrity check failed: state hash mismatch "
                f"(expected: {document.get('state_hash')}, computed: {computed_hash})"
            )

        return node

    def save(self, node: dict[str, Any]) -> str:
        """Write the scenario node to disk, replacing the previous file.

        Args:
            node: Scenario node to persist

        Returns:
            The state hash written alongside the node
        """
        state_hash = compute_state_hash(node)
        document = {"state_hash": state_hash, "node": node}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved scenario node to {self.path} ({state_hash[:12]})")
        return state_hash
