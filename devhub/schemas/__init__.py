# __init__.py
from devhub.schemas.auth import AuthData, CheckEmailRequest, EmailCheck, LoginRequest, RefreshRequest, RegisterRequest
from devhub.schemas.comment import CommentCreate, CommentRead, CommentThread, CommentUpdate
from devhub.schemas.common import CamelModel, Envelope, FieldError, Pagination
from devhub.schemas.news import NewsCreate, NewsRead, NewsSummary, NewsUpdate
from devhub.schemas.project import ProjectCreate, ProjectRead, ProjectStats, ProjectUpdate
from devhub.schemas.skill import SkillCreate, SkillRead, SkillStats, SkillUpdate
from devhub.schemas.upload import UploadRead, UploadStats
from devhub.schemas.user import AccountDelete, Location, PasswordChange, PublicUser, UserRead, UserUpdate

__all__ = [
	"AuthData",
	"CheckEmailRequest",
	"EmailCheck",
	"LoginRequest",
	"RefreshRequest",
	"RegisterRequest",
	"CommentCreate",
	"CommentRead",
	"CommentThread",
	"CommentUpdate",
	"CamelModel",
	"Envelope",
	"FieldError",
	"Pagination",
	"NewsCreate",
	"NewsRead",
	"NewsSummary",
	"NewsUpdate",
	"ProjectCreate",
	"ProjectRead",
	"ProjectStats",
	"ProjectUpdate",
	"SkillCreate",
	"SkillRead",
	"SkillStats",
	"SkillUpdate",
	"UploadRead",
	"UploadStats",
	"AccountDelete",
	"Location",
	"PasswordChange",
	"PublicUser",
	"UserRead",
	"UserUpdate",
]
