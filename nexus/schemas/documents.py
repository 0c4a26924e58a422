from __future__ import annotations

from typing import Any, Dict

from nexus.models.document import Document
from nexus.schemas.common import _iso
from nexus.schemas.users import user_summary


def document_resp(d: Document) -> Dict[str, Any]:
    return {
        "id": str(d.id),
        "projectId": str(d.project_id),
        "fileName": d.file_name,
        "fileType": d.file_type,
        "fileSize": d.file_size,
        "uploadedBy": user_summary(d.uploaded_by),
        "description": d.description,
        "version": d.version,
        "uploadedAt": _iso(d.uploaded_at),
    }
