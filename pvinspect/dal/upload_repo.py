import logging
from datetime import datetime
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

class UploadRepository:
    def __init__(self):
        # key: session_id, value: { image_id: record_dict }, in upload order
        self._storage: Dict[str, Dict[str, dict]] = {}

    def _get_session_store(self, session_id: str) -> Dict[str, dict]:
        if session_id not in self._storage:
            self._storage[session_id] = {}
        return self._storage[session_id]

    def save(self, image_id: str, session_id: str, filename: str, content_type: str, content: bytes, metadata: dict) -> dict:
        store = self._get_session_store(session_id)
        record = {
            "id": image_id,
            "filename": filename,
            "content_type": content_type,
            "content": content,
            "metadata": metadata,
            "uploaded_at": datetime.now().isoformat(timespec="seconds"),
            "analyses": [],
        }
        store[image_id] = record
        return record

    def get(self, image_id: str, session_id: str) -> Optional[dict]:
        # Reads never create a session store
        return self._storage.get(session_id, {}).get(image_id)

    def list_images(self, session_id: str) -> List[dict]:
        # Newest first
        return list(reversed(self._storage.get(session_id, {}).values()))

    def save_analysis(self, image_id: str, session_id: str, analysis: dict) -> bool:
        """Appends an interpretation to the upload's history. False if the upload is gone."""
        record = self.get(image_id, session_id)
        if record is None:
            return False
        record["analyses"].append(analysis)
        return True

    def get_analysis_history(self, image_id: str, session_id: str) -> Optional[List[dict]]:
        """Stored interpretations, newest first, or None if the upload does not exist."""
        record = self.get(image_id, session_id)
        if record is None:
            return None
        return list(reversed(record["analyses"]))

    def delete(self, image_id: str, session_id: str) -> bool:
        store = self._storage.get(session_id, {})
        if image_id in store:
            del store[image_id]
            return True
        return False

    def clear_session(self, session_id: str):
        if session_id in self._storage:
            del self._storage[session_id]
            logger.info(f"Cleared uploads for session {session_id}")
