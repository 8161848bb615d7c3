"""Pydantic schemas for request/response validation."""

from turma.schemas.auth import (
    LoginRequest,
    OAuthRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
)
from turma.schemas.message import (
    ChannelCreate,
    ChannelRead,
    ChannelUpdate,
    MessageCreate,
    MessageRead,
    MessageUpdate,
)
from turma.schemas.notification import NotificationList, NotificationRead
from turma.schemas.project import (
    PhaseCreate,
    PhaseRead,
    PhaseUpdate,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
)
from turma.schemas.quotation import (
    ClientInfo,
    QuotationCreate,
    QuotationItemInput,
    QuotationRead,
    QuotationUpdate,
)
from turma.schemas.task import SubtaskCreate, TaskCreate, TaskRead, TaskUpdate
from turma.schemas.team import (
    TeamCreate,
    TeamDetail,
    TeamMemberCreate,
    TeamMemberRead,
    TeamMemberUpdate,
    TeamRead,
    TeamUpdate,
)

__all__ = [
    "ChannelCreate",
    "ChannelRead",
    "ChannelUpdate",
    "ClientInfo",
    "LoginRequest",
    "MessageCreate",
    "MessageRead",
    "MessageUpdate",
    "NotificationList",
    "NotificationRead",
    "OAuthRequest",
    "PhaseCreate",
    "PhaseRead",
    "PhaseUpdate",
    "ProjectCreate",
    "ProjectDetail",
    "ProjectRead",
    "ProjectUpdate",
    "QuotationCreate",
    "QuotationItemInput",
    "QuotationRead",
    "QuotationUpdate",
    "RegisterRequest",
    "SubtaskCreate",
    "TaskCreate",
    "TaskRead",
    "TaskUpdate",
    "TeamCreate",
    "TeamDetail",
    "TeamMemberCreate",
    "TeamMemberRead",
    "TeamMemberUpdate",
    "TeamRead",
    "TeamUpdate",
    "TokenResponse",
    "UserRead",
]
