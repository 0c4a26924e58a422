# nexus/api/v1/documents.py
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from nexus.core.auth_deps import get_current_principal
from nexus.core.deps import get_documents_service, parse_uuid
from nexus.db.session import get_db
from nexus.policies.rbac import Action, Principal, require
from nexus.policies.resources import DocumentSnapshot, ProjectSnapshot
from nexus.schemas.common import ok, ok_list
from nexus.schemas.documents import document_resp
from nexus.services.documents_service import DocumentsService
from nexus.services.projects_service import ProjectsService

router = APIRouter(prefix="/documents")


@router.post("/{projectId}", status_code=201)
def upload_document(
    projectId: str,
    file: UploadFile = File(...),
    description: str = Form(default=""),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    docs: DocumentsService = Depends(get_documents_service),
):
    project = ProjectsService().get(db, project_id=parse_uuid(projectId, "projectId"))
    # authorize before anything touches the blob store
    require(principal, Action.DOCUMENT_UPLOAD, ProjectSnapshot.from_model(project))

    doc = docs.upload(
        db,
        project=project,
        uploaded_by_id=principal.id,
        stream=file.file,
        file_name=file.filename or "upload",
        content_type=file.content_type,
        description=description,
    )
    return ok(data=document_resp(doc), message="Document uploaded successfully")


@router.get("/download/{documentId}")
def download_document(
    documentId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    docs: DocumentsService = Depends(get_documents_service),
):
    doc = docs.get(db, document_id=parse_uuid(documentId, "documentId"))
    require(principal, Action.DOCUMENT_READ, ProjectSnapshot.from_model(docs.project_of(db, doc)))

    return FileResponse(
        docs.blob_path(doc),
        media_type=doc.file_type,
        filename=doc.file_name,
    )


@router.get("/info/{documentId}")
def document_info(
    documentId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    docs: DocumentsService = Depends(get_documents_service),
):
    doc = docs.get(db, document_id=parse_uuid(documentId, "documentId"))
    require(principal, Action.DOCUMENT_READ, ProjectSnapshot.from_model(docs.project_of(db, doc)))
    return ok(data=document_resp(doc))


@router.get("/{projectId}")
def list_project_documents(
    projectId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    docs: DocumentsService = Depends(get_documents_service),
):
    project = ProjectsService().get(db, project_id=parse_uuid(projectId, "projectId"))
    require(principal, Action.DOCUMENT_READ, ProjectSnapshot.from_model(project))

    rows = docs.list_for_project(db, project_id=project.id)
    return ok_list([document_resp(d) for d in rows])


@router.delete("/{documentId}")
def delete_document(
    documentId: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
    docs: DocumentsService = Depends(get_documents_service),
):
    doc = docs.get(db, document_id=parse_uuid(documentId, "documentId"))
    require(principal, Action.DOCUMENT_DELETE, DocumentSnapshot.from_model(doc))

    docs.delete(db, doc=doc)
    return ok(message="Document deleted successfully")
