# /nexus/core/deps.py
import uuid

from fastapi import Depends

from nexus.core.errors import ValidationError
from nexus.services.blob_store import LocalBlobStore, get_blob_store
from nexus.services.documents_service import DocumentsService


def parse_uuid(raw: str, name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise ValidationError(f"{name} must be UUID.", code="invalid-id")


def get_documents_service(
    store: LocalBlobStore = Depends(get_blob_store),
) -> DocumentsService:
    return DocumentsService(store)
