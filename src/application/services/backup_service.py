"""
Backup file format: a pretty-printed JSON array of snippet documents.

Export writes every snippet in its wire shape (owner id stripped, so a
backup can be imported into another account). Import accepts any JSON
array; entries that are not objects are skipped.
"""
from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

from src.domain.entities.snippet import Snippet
from src.domain.errors import ImportFormatError

BACKUP_PREFIX = "snippetvault-backup"


def backup_filename(today: Optional[date] = None) -> str:
    day = today or date.today()
    return f"{BACKUP_PREFIX}-{day.isoformat()}.json"


def export_snippets(snippets: Iterable[Snippet], today: Optional[date] = None) -> Tuple[str, str]:
    documents: List[Dict[str, Any]] = []
    for s in snippets:
        doc = s.to_document()
        doc.pop("userId", None)
        documents.append(doc)
    return backup_filename(today), json.dumps(documents, indent=2, ensure_ascii=False)


def parse_import(text: str | bytes) -> List[Dict[str, Any]]:
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise ImportFormatError("Invalid JSON file") from e
    if not isinstance(data, list):
        raise ImportFormatError("Backup file must contain a JSON array of snippets")
    return [item for item in data if isinstance(item, dict)]
