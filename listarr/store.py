"""
JSON-backed list storage.

The data file is one document: {"lists": {name: [item, ...]}}. Every
mutation loads the document, changes it and writes it back whole.
"""

import os
import json
import logging
import tempfile
from typing import Dict, List, Optional, Tuple

from .errors import ListStoreError
from .models import ListItem, parse_id_spec

logger = logging.getLogger('listarr')


def load_json_document(path: str) -> Optional[Dict]:
    """
    Load a JSON document.

    Args:
        path: Path to the file

    Returns:
        Parsed document, or None if the file does not exist

    Raises:
        ListStoreError: If the file exists but cannot be read or parsed
    """
    if not os.path.exists(path):
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise ListStoreError(f"Could not read {path}: {e}") from e


def save_json_document(path: str, data: Dict) -> None:
    """
    Write a JSON document atomically (temp file + rename).

    Raises:
        ListStoreError: If the file cannot be written
    """
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    except OSError as e:
        raise ListStoreError(f"Could not save {path}: {e}") from e


class ListStore:
    """Named, ordered watch-lists persisted in a JSON file."""

    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict:
        if not os.path.exists(self.path):
            return {'lists': {}}
        # A file that exists must hold a lists document
        data = load_json_document(self.path)
        if not isinstance(data, dict) or not isinstance(data.get('lists'), dict):
            raise ListStoreError(f"Could not read {self.path}: expected a \"lists\" object")
        return data

    def _save(self, data: Dict) -> None:
        save_json_document(self.path, data)

    def _require(self, data: Dict, name: str) -> List[Dict]:
        if name not in data['lists']:
            raise ListStoreError(f"List not found: {name}")
        return data['lists'][name]

    def list_names(self) -> List[str]:
        return list(self._load()['lists'].keys())

    def create_list(self, name: str) -> None:
        """
        Create an empty list.

        Raises:
            ListStoreError: Empty name or a list with this name already exists
        """
        name = (name or '').strip()
        if not name:
            raise ListStoreError("List name required")
        data = self._load()
        if name in data['lists']:
            raise ListStoreError(f"List already exists: {name}")
        data['lists'][name] = []
        self._save(data)
        logger.info(f"Created list \"{name}\"")

    def get_items(self, name: str) -> Tuple[ListItem, ...]:
        """
        Return the items of a list in stored order.

        Items that cannot be parsed (unknown source, missing id) are skipped
        with a warning.

        Raises:
            ListStoreError: Unknown list
        """
        items = []
        for position, raw in enumerate(self._require(self._load(), name), 1):
            try:
                items.append(ListItem.from_dict(raw))
            except (ValueError, AttributeError) as e:
                logger.warning(f"Skipping unreadable item {position} in \"{name}\": {e}")
        return tuple(items)

    def add_item(self, name: str, spec: str, added_by: Optional[str] = None) -> ListItem:
        """
        Append an item given as 'imdb:tt123', 'tmdb:123' or a bare IMDb id.

        Raises:
            ListStoreError: Unknown list
            ValueError: Unparseable id spec
        """
        parsed = parse_id_spec(spec)
        item = ListItem(source=parsed.source, external_id=parsed.external_id, added_by=added_by)
        data = self._load()
        self._require(data, name).append(item.to_dict())
        self._save(data)
        logger.info(f"Added {item.spec} to \"{name}\"")
        return item

    def remove_item(self, name: str, index: int) -> Optional[ListItem]:
        """
        Remove the item at a 1-based position.

        Returns:
            The removed item, or None if the stored entry was unreadable

        Raises:
            ListStoreError: Unknown list or index out of range
        """
        data = self._load()
        items = self._require(data, name)
        if not 1 <= index <= len(items):
            raise ListStoreError(f"No item {index} in \"{name}\" ({len(items)} items)")
        raw = items.pop(index - 1)
        self._save(data)
        logger.info(f"Removed item {index} from \"{name}\"")
        try:
            return ListItem.from_dict(raw)
        except (ValueError, AttributeError):
            return None
