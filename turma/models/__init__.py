"""SQLAlchemy models."""

from turma.models.channel import Channel
from turma.models.message import Message
from turma.models.notification import Notification
from turma.models.project import Project, ProjectPhase
from turma.models.quotation import Quotation, QuotationItem
from turma.models.task import Task
from turma.models.team import Team
from turma.models.team_member import TeamMember
from turma.models.user import User

__all__ = [
    "Channel",
    "Message",
    "Notification",
    "Project",
    "ProjectPhase",
    "Quotation",
    "QuotationItem",
    "Task",
    "Team",
    "TeamMember",
    "User",
]
