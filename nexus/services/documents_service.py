# nexus/services/documents_service.py
from __future__ import annotations

import logging
import uuid
from typing import BinaryIO, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from nexus.core.errors import IntegrityError, NotFoundError, ValidationError
from nexus.models.document import Document
from nexus.models.project import Project
from nexus.services.blob_store import ALLOWED_CONTENT_TYPES, LocalBlobStore

logger = logging.getLogger(__name__)


class DocumentsService:
    def __init__(self, store: LocalBlobStore):
        self.store = store

    def upload(
        self,
        db: Session,
        *,
        project: Project,
        uploaded_by_id: uuid.UUID,
        stream: BinaryIO,
        file_name: str,
        content_type: Optional[str],
        description: str = "",
    ) -> Document:
        """
        Store the blob, then write its metadata row.

        If anything fails after the blob is written the blob is removed
        again, so no file outlives a failed upload and no row ever points
        at a missing file.
        """
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise ValidationError(
                "Invalid file type. Only PDF, Word, Excel, text and image files are allowed",
                code="invalid-file-type",
            )

        blob = self.store.save(stream, file_name)
        doc = Document(
            project_id=project.id,
            file_name=file_name,
            file_type=content_type,
            file_size=blob.size,
            file_path=blob.handle,
            uploaded_by_id=uploaded_by_id,
            description=description or "",
        )
        # only a failed commit may take the blob with it; once the row is
        # committed the blob must stay
        try:
            db.add(doc)
            db.commit()
        except Exception:
            db.rollback()
            self.store.delete(blob.handle)
            logger.warning(
                "document metadata write failed; blob removed",
                extra={"project_id": str(project.id), "handle": blob.handle},
            )
            raise
        db.refresh(doc)

        logger.info(
            "document uploaded",
            extra={
                "document_id": str(doc.id),
                "project_id": str(project.id),
                "size": blob.size,
                "type": content_type,
            },
        )
        return doc

    def get(self, db: Session, *, document_id: uuid.UUID) -> Document:
        doc = db.get(Document, document_id)
        if not doc:
            raise NotFoundError("Document", str(document_id))
        return doc

    def project_of(self, db: Session, doc: Document) -> Project:
        project = db.get(Project, doc.project_id)
        if project is None:
            raise IntegrityError(
                "Document references a missing project.",
                details={"document_id": str(doc.id), "project_id": str(doc.project_id)},
            )
        return project

    def list_for_project(self, db: Session, *, project_id: uuid.UUID) -> List[Document]:
        stmt = (
            select(Document)
            .where(Document.project_id == project_id)
            .order_by(Document.uploaded_at.desc())
        )
        return list(db.execute(stmt).scalars().all())

    def blob_path(self, doc: Document):
        if not self.store.exists(doc.file_path):
            raise NotFoundError("File", doc.file_path, message="File not found on server")
        return self.store.path_for(doc.file_path)

    def delete(self, db: Session, *, doc: Document) -> None:
        doc_id, project_id, handle = str(doc.id), str(doc.project_id), doc.file_path

        # the row is committed away before the blob is touched: a leftover
        # file is harmless, a row pointing at a missing file is not
        try:
            db.delete(doc)
            db.commit()
        except Exception:
            db.rollback()
            raise

        try:
            self.store.delete(handle)
        except OSError:
            logger.error(
                "document row deleted but blob left on disk",
                exc_info=True,
                extra={"document_id": doc_id, "handle": handle},
            )

        logger.info(
            "document deleted",
            extra={"document_id": doc_id, "project_id": project_id},
        )
