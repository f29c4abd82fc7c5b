# uploads.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from devhub.config import settings
from devhub.database import get_db
from devhub.models.project import Project
from devhub.models.upload import Upload
from devhub.models.user import User
from devhub.routers.dependencies import get_current_user, is_owner_or_admin, user_or_admin
from devhub.schemas.common import Envelope
from devhub.schemas.upload import (
    DeletedFile,
    DeletedFileData,
    FileType,
    FileTypeCounts,
    ProjectFilesData,
    UploadRead,
    UploadStats,
)
from devhub.services.upload_storage import (
    FileTooLargeError,
    classify_mime,
    is_allowed,
    public_path,
    remove_stored_file,
    save_upload,
)
from devhub.utils.rate_limit import upload_limit


router = APIRouter()

logger = logging.getLogger(__name__)


def _get_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project


def _get_modifiable_project(db: Session, project_id: int, user: User) -> Project:
    project = _get_project(db, project_id)
    if not is_owner_or_admin(user, project.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to modify this project")
    return project


@router.get("/project/{project_id}", response_model=Envelope[ProjectFilesData])
def read_project_files(project_id: int, type: Optional[FileType] = None, db: Session = Depends(get_db)) -> Envelope[ProjectFilesData]:
    project = _get_project(db, project_id)

    query = db.query(Upload).filter(Upload.project_id == project.id)
    if type:
        query = query.filter(Upload.file_type == type)
    files = query.order_by(Upload.is_featured.desc(), Upload.created_at.desc(), Upload.id.desc()).all()

    counts = FileTypeCounts(
        images=sum(1 for f in files if f.file_type == "image"),
        videos=sum(1 for f in files if f.file_type == "video"),
        documents=sum(1 for f in files if f.file_type == "document"),
        other=sum(1 for f in files if f.file_type == "other"),
    )
    return Envelope(
        data=ProjectFilesData(
            files=[UploadRead.model_validate(f) for f in files],
            stats=UploadStats(total_files=len(files), total_size=sum(f.file_size for f in files), file_types=counts),
        )
    )


@router.post(
    "/project/{project_id}",
    response_model=Envelope[List[UploadRead]],
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(get_current_user)],
)
@upload_limit()
def upload_project_files(
    request: Request,
    project_id: int,
    files: Optional[List[UploadFile]] = File(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Envelope[List[UploadRead]]:
    files = [f for f in (files or []) if f.filename]
    if not files:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No files uploaded")

    project = _get_project(db, project_id)
    if not is_owner_or_admin(current_user, project.user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to upload files for this project")

    if len(files) > settings.max_upload_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Too many files. Maximum is {settings.max_upload_files} files per upload",
        )
    for upload in files:
        if not is_allowed(upload.content_type):
            logger.info("uploads.rejected project_id=%s mime=%s", project.id, upload.content_type)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid file type: {upload.content_type}. Allowed types: images, videos, PDF, and text files.",
            )

    stored: list[str] = []
    records: list[Upload] = []
    try:
        for upload in files:
            name, size = save_upload(upload, settings.max_upload_size)
            stored.append(public_path(name))
            records.append(
                Upload(
                    project_id=project.id,
                    file_name=upload.filename,
                    file_path=public_path(name),
                    file_type=classify_mime(upload.content_type),
                    file_size=size,
                    is_featured=False,
                )
            )

        has_featured = db.query(Upload.id).filter(Upload.project_id == project.id, Upload.is_featured.is_(True)).first()
        first_image = next((r for r in records if r.file_type == "image"), None)
        if first_image is not None and not has_featured:
            first_image.is_featured = True

        db.add_all(records)
        db.commit()
    except FileTooLargeError as exc:
        for path in stored:
            remove_stored_file(path)
        logger.info("uploads.rejected project_id=%s reason=%s", project.id, exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except SQLAlchemyError:
        db.rollback()
        for path in stored:
            remove_stored_file(path)
        logger.exception("uploads.persist failed project_id=%s", project.id)
        raise

    for record in records:
        db.refresh(record)
    logger.info("uploads.stored project_id=%s count=%s", project.id, len(records))
    return Envelope(
        message=f"{len(records)} file(s) uploaded successfully",
        data=[UploadRead.model_validate(r) for r in records],
    )


@router.put(
    "/project/{project_id}/featured/{file_id}",
    response_model=Envelope[UploadRead],
    dependencies=[Depends(get_current_user)],
)
def set_featured_file(
    project_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(user_or_admin),
) -> Envelope[UploadRead]:
    project = _get_modifiable_project(db, project_id, current_user)

    upload = db.query(Upload).filter(Upload.id == file_id, Upload.project_id == project.id).first()
    if not upload:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found in this project")
    if upload.file_type != "image":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only images can be set as featured")

    db.query(Upload).filter(Upload.project_id == project.id, Upload.id != upload.id).update(
        {Upload.is_featured: False}, synchronize_session=False
    )
    upload.is_featured = True
    db.commit()
    db.refresh(upload)
    return Envelope(message="Featured image updated successfully", data=UploadRead.model_validate(upload))


@router.delete(
    "/project/{project_id}/file/{file_id}",
    response_model=Envelope[DeletedFileData],
    dependencies=[Depends(get_current_user)],
)
def delete_project_file(
    project_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(user_or_admin),
) -> Envelope[DeletedFileData]:
    project = _get_modifiable_project(db, project_id, current_user)

    upload = db.query(Upload).filter(Upload.id == file_id, Upload.project_id == project.id).first()
    if not upload:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="File not found")

    deleted = DeletedFile(id=upload.id, file_name=upload.file_name, file_type=upload.file_type)
    was_featured = upload.is_featured
    file_path = upload.file_path
    db.delete(upload)
    db.flush()

    if was_featured:
        next_image = (
            db.query(Upload)
            .filter(Upload.project_id == project.id, Upload.file_type == "image")
            .order_by(Upload.created_at.asc(), Upload.id.asc())
            .first()
        )
        if next_image is not None:
            next_image.is_featured = True
    db.commit()

    remove_stored_file(file_path)
    return Envelope(message="File deleted successfully", data=DeletedFileData(deleted_file=deleted))
