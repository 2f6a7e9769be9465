"""
Bearer token persistence.

Investor and admin sessions live under separate keys so both can be signed
in at once. The file store keeps every key in one JSON document, by default
~/.dataroom/credentials.json.
"""
import json
import os
from pathlib import Path
from typing import Dict, Optional

from dataroom.core.logging_config import logger

INVESTOR_TOKEN_KEY = "access_token"
ADMIN_TOKEN_KEY = "admin_access_token"


class TokenStore:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, token: str) -> None:
        raise NotImplementedError

    def clear(self, key: str) -> None:
        raise NotImplementedError


class MemoryTokenStore(TokenStore):
    """Process-local store, used by tests and one-shot commands"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._tokens: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._tokens.get(key)

    def set(self, key: str, token: str) -> None:
        self._tokens[key] = token

    def clear(self, key: str) -> None:
        self._tokens.pop(key, None)


class FileTokenStore(TokenStore):
    """JSON file store; the file is readable by its owner only"""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read credentials file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            logger.debug(f"Could not restrict permissions on {self.path}")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, token: str) -> None:
        data = self._load()
        data[key] = token
        self._save(data)

    def clear(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
