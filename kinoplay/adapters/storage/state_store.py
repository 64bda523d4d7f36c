"""
Etat local persistant : identifiants, identifiant d'appareil et export du
fil "Reprendre la lecture".

Stockage JSON dans le repertoire d'etat de l'utilisateur. Le fichier
d'identifiants est ecrit avec les droits 0600.
"""

import json
import os
import uuid
from pathlib import Path

from loguru import logger

from kinoplay.core.entities import ShelfEntry
from kinoplay.core.ports.storage import (
    ICredentialStore,
    IShelfSnapshotStore,
    StoredCredentials,
)

_CREDENTIAL_FIELDS = ("server_url", "access_token", "user_id", "user_name")


class JsonStateStore(ICredentialStore, IShelfSnapshotStore):
    """
    Stockage de l'etat local dans des fichiers JSON.

    Attributs:
        state_file: Fichier des identifiants et de l'identifiant d'appareil
        snapshot_file: Fichier d'export du fil "Reprendre la lecture"
    """

    def __init__(self, state_file: Path, snapshot_file: Path) -> None:
        self.state_file = Path(state_file)
        self.snapshot_file = Path(snapshot_file)

    def _load(self) -> dict:
        if not self.state_file.exists():
            return {}
        try:
            data = json.loads(self.state_file.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Fichier d'etat illisible, ignore: {self.state_file} ({e})")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.state_file.parent.mkdir(parents=True, exist_ok=True)
        # Creation avec les droits 0600 avant toute ecriture du jeton
        fd = os.open(self.state_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")
        os.chmod(self.state_file, 0o600)

    # Identifiants

    def load_credentials(self) -> StoredCredentials:
        data = self._load()
        return StoredCredentials(**{field: data.get(field) for field in _CREDENTIAL_FIELDS})

    def save_credentials(self, credentials: StoredCredentials) -> None:
        data = self._load()
        for field in _CREDENTIAL_FIELDS:
            data[field] = getattr(credentials, field)
        self._save(data)

    def clear_credentials(self) -> None:
        data = self._load()
        if not any(field in data for field in _CREDENTIAL_FIELDS):
            return
        for field in _CREDENTIAL_FIELDS:
            data.pop(field, None)
        self._save(data)

    def get_device_id(self) -> str:
        """Retourne l'identifiant d'appareil, genere (uuid4) au premier appel."""
        data = self._load()
        device_id = data.get("device_id")
        if not device_id:
            device_id = str(uuid.uuid4()).upper()
            data["device_id"] = device_id
            self._save(data)
            logger.debug(f"Nouvel identifiant d'appareil: {device_id}")
        return device_id

    # Export du fil "Reprendre la lecture"

    def write_shelf_snapshot(self, entries: list[ShelfEntry]) -> None:
        self.snapshot_file.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_file.write_text(
            json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )

    def read_shelf_snapshot(self) -> list[ShelfEntry]:
        if not self.snapshot_file.exists():
            return []
        try:
            data = json.loads(self.snapshot_file.read_text(encoding="utf-8"))
            return [
                ShelfEntry(
                    id=entry["id"],
                    name=entry["name"],
                    subtitle=entry.get("subtitle"),
                    image_url=entry.get("imageURL"),
                    type=entry.get("type", ""),
                    progress=entry.get("progress", 0.0),
                )
                for entry in data
            ]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Export du fil illisible, ignore: {e}")
            return []
