from __future__ import annotations

from typing import Dict, List, Optional


class RecordNotFound(ValueError):
    def __init__(self, module_name: str, record_id):
        super().__init__(f"{module_name} record {record_id} not found")
        self.module_name = module_name
        self.record_id = record_id


class DuplicateRecordError(ValueError):
    def __init__(self, duplicates: List[Dict], message: Optional[str] = None):
        super().__init__(message or "A matching record already exists")
        self.duplicates = duplicates
