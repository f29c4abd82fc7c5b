# upload.py
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from devhub.schemas.common import CamelModel


FileType = Literal["image", "video", "document", "other"]


class UploadRead(CamelModel):
    id: int
    project_id: int
    file_name: str
    file_path: str
    file_type: str
    file_size: int
    is_featured: bool
    alt_text: Optional[str] = None
    file_extension: str
    formatted_size: str
    file_url: str
    created_at: datetime


class FileTypeCounts(CamelModel):
    images: int = 0
    videos: int = 0
    documents: int = 0
    other: int = 0


class UploadStats(CamelModel):
    total_files: int
    total_size: int
    file_types: FileTypeCounts


class ProjectFilesData(CamelModel):
    files: List[UploadRead]
    stats: UploadStats


class DeletedFile(CamelModel):
    id: int
    file_name: str
    file_type: str


class DeletedFileData(CamelModel):
    deleted_file: DeletedFile
