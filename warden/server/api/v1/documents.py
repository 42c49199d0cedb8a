"""
Document Endpoints.

The caller's tree of folders and text documents.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from warden.core.database import get_session
from warden.core.database.entities import Document
from warden.core.database.repositories import DocumentRepository
from warden.core.logging_config import get_logger
from warden.core.models.io.documents import DocumentCreate, DocumentRead, DocumentUpdate, FolderCreate
from warden.server.services.deps import CurrentUser

logger = get_logger(__name__)

router = APIRouter(tags=["documents"])


async def _get_owned(session: AsyncSession, document_id: int, user_id: int) -> Document:
    document = await DocumentRepository(session).get_for_user(document_id, user_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return document


async def _check_parent(session: AsyncSession, parent_id: Optional[int], user_id: int) -> None:
    if parent_id is None:
        return
    parent = await DocumentRepository(session).get_for_user(parent_id, user_id)
    if parent is None or not parent.is_folder:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Parent must be one of your folders")


@router.get(
    "",
    response_model=List[DocumentRead],
    summary="List Documents",
    description="List the contents of a folder, or the root when no parent is given.",
)
async def list_documents(
    user: CurrentUser,
    parent_id: Optional[int] = None,
    session: AsyncSession = Depends(get_session),
) -> List[DocumentRead]:
    documents = await DocumentRepository(session).list_children(user.id, parent_id)
    return [DocumentRead.model_validate(document) for document in documents]


@router.post(
    "/folder",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Folder",
    responses={400: {"description": "Parent is not one of the caller's folders"}},
)
async def create_folder(
    payload: FolderCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DocumentRead:
    await _check_parent(session, payload.parent_id, user.id)
    folder = await DocumentRepository(session).create(
        Document(name=payload.name, user_id=user.id, parent_id=payload.parent_id, is_folder=True)
    )
    return DocumentRead.model_validate(folder)


@router.post(
    "/document",
    response_model=DocumentRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Document",
    responses={400: {"description": "Parent is not one of the caller's folders"}},
)
async def create_document(
    payload: DocumentCreate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DocumentRead:
    await _check_parent(session, payload.parent_id, user.id)
    document = await DocumentRepository(session).create(
        Document(
            name=payload.name,
            content=payload.content,
            user_id=user.id,
            parent_id=payload.parent_id,
            mime_type=payload.mime_type,
            size=len(payload.content.encode("utf-8")),
        )
    )
    return DocumentRead.model_validate(document)


@router.get(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Get Document",
    responses={404: {"description": "Document not found"}},
)
async def get_document(
    document_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DocumentRead:
    return DocumentRead.model_validate(await _get_owned(session, document_id, user.id))


@router.put(
    "/{document_id}",
    response_model=DocumentRead,
    summary="Update Document",
    description="Rename, move or edit a document. Folders cannot hold content.",
    responses={
        400: {"description": "Invalid parent or content on a folder"},
        404: {"description": "Document not found"},
    },
)
async def update_document(
    document_id: int,
    payload: DocumentUpdate,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
) -> DocumentRead:
    document = await _get_owned(session, document_id, user.id)
    changes = payload.model_dump(exclude_unset=True)

    if "parent_id" in changes:
        await _check_parent(session, changes["parent_id"], user.id)
        if await DocumentRepository(session).is_within(document, changes["parent_id"]):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A folder cannot contain itself")
        document.parent_id = changes["parent_id"]
    if changes.get("name"):
        document.name = changes["name"]
    if changes.get("content") is not None:
        if document.is_folder:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Folders have no content")
        document.content = changes["content"]
        document.size = len(document.content.encode("utf-8"))

    document = await DocumentRepository(session).update(document)
    return DocumentRead.model_validate(document)


@router.delete(
    "/{document_id}",
    summary="Delete Document",
    description="Delete a document, or a folder together with everything inside it.",
    responses={404: {"description": "Document not found"}},
)
async def delete_document(
    document_id: int,
    user: CurrentUser,
    session: AsyncSession = Depends(get_session),
):
    document = await _get_owned(session, document_id, user.id)
    deleted = await DocumentRepository(session).delete_tree(document)
    logger.info(f"User {user.id} deleted document {document_id} ({deleted} rows)")
    return {"success": True, "deleted": deleted}
