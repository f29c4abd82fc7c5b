# __init__.py
from devhub.models.comment import Comment
from devhub.models.news import News
from devhub.models.project import Project
from devhub.models.skills import Skill
from devhub.models.upload import Upload
from devhub.models.user import User

__all__ = [
	"Comment",
	"News",
	"Project",
	"Skill",
	"Upload",
	"User",
]
