"""
Pydantic модели запросов и ответов API

Поля на проводе в camelCase; запросы принимают и snake_case.
"""

from datetime import date, datetime
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from beaver_task.core.models import (
    HabitFrequency,
    PomodoroType,
    ProjectStatus,
    TaskPriority,
    TaskSeverity,
    TaskStatus,
    Theme,
)
from beaver_task.utils.datetime_utils import as_utc

# Время из БД (naive UTC) отдается с явной зоной UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    message: str


class HealthCheck(CamelModel):
    status: str
    service: str
    version: str
    timestamp: float
    data: Dict[str, Any] = {}


# ===== АВТОРИЗАЦИЯ И ПОЛЬЗОВАТЕЛИ =====

class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name is required')
        return v


class RegisterResponse(CamelModel):
    message: str
    user_id: str


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserBrief(CamelModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None


class LoginResponse(CamelModel):
    token: str
    expires_at: UTCDateTime
    user: UserBrief


class UserSettingsModel(CamelModel):
    theme: Theme = Theme.SYSTEM
    email_notifications: bool = True
    push_notifications: bool = True


class ProfileUpdate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    image: Optional[str] = None
    settings: Optional[UserSettingsModel] = None

    @field_validator('image')
    @classmethod
    def validate_image(cls, v):
        # Пустая строка означает "без аватара"
        if v and not v.startswith(("http://", "https://")):
            raise ValueError('Image must be a URL')
        return v or None


class UserProfile(CamelModel):
    id: str
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    settings: Dict[str, Any]


class ProfileResponse(CamelModel):
    user: UserProfile


class PasswordChangeRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


# ===== ССЫЛКИ НА СВЯЗАННЫЕ СУЩНОСТИ =====

class ProjectRef(CamelModel):
    id: str
    name: str


class OrganizationRef(CamelModel):
    id: str
    name: str


class TaskRef(CamelModel):
    id: str
    title: str
    status: str


# ===== ОРГАНИЗАЦИИ =====

class OrganizationCreate(CamelModel):
    name: str = Field(..., min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = None
    department: Optional[str] = None
    categories: List[str] = []
    website: Optional[str] = None
    documents: List[str] = []
    order: Optional[int] = Field(None, ge=0)


class OrganizationUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    description: Optional[str] = None
    color: Optional[str] = None
    department: Optional[str] = None
    categories: Optional[List[str]] = None
    website: Optional[str] = None
    documents: Optional[List[str]] = None
    order: Optional[int] = Field(None, ge=0)


class OrganizationRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    color: Optional[str] = None
    department: Optional[str] = None
    categories: List[str] = []
    website: Optional[str] = None
    documents: List[str] = []
    order: Optional[int] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    projects: List[ProjectRef] = []

    @field_validator('categories', 'documents', mode='before')
    @classmethod
    def none_as_empty(cls, v):
        return v or []


class ReorderRequest(CamelModel):
    source_index: int = Field(..., ge=0)
    destination_index: int = Field(..., ge=0)
    # Только для колонок: доска проекта; None - общая доска
    project_id: Optional[str] = None


# ===== ПРОЕКТЫ =====

class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    color: Optional[str] = None
    due_date: Optional[datetime] = None
    organization_id: Optional[str] = None


class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    color: Optional[str] = None
    due_date: Optional[datetime] = None
    organization_id: Optional[str] = None


class ProjectRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    status: str
    color: Optional[str] = None
    due_date: Optional[UTCDateTime] = None
    organization_id: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    organization: Optional[OrganizationRef] = None
    tasks: List[TaskRef] = []


# ===== ЗАДАЧИ И КАНБАН =====

class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.P1
    severity: TaskSeverity = TaskSeverity.S1
    due_date: Optional[datetime] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    severity: Optional[TaskSeverity] = None
    due_date: Optional[datetime] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None


class TaskRead(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    severity: str
    due_date: Optional[UTCDateTime] = None
    project_id: Optional[str] = None
    parent_id: Optional[str] = None
    column_id: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    project: Optional[ProjectRef] = None


class TaskMoveRequest(CamelModel):
    column_id: str = Field(..., min_length=1)


class ColumnCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=32)
    order: int = Field(..., ge=0)
    project_id: Optional[str] = None


class ColumnUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, min_length=1, max_length=32)
    order: Optional[int] = Field(None, ge=0)


class ColumnRead(CamelModel):
    id: str
    name: str
    color: str
    order: int
    project_id: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ===== ПРИВЫЧКИ =====

def _validate_weekdays(v):
    if v is None:
        return v
    for day in v:
        if not 0 <= day <= 6:
            raise ValueError('customDays must contain weekday numbers 0-6')
    return sorted(set(v))


WeekdayList = Annotated[List[int], AfterValidator(_validate_weekdays)]


class HabitCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    frequency: HabitFrequency = HabitFrequency.DAILY
    target: int = Field(1, ge=1)
    color: Optional[str] = None
    custom_days: Optional[WeekdayList] = None
    custom_period: Optional[str] = None


class HabitUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    frequency: Optional[HabitFrequency] = None
    target: Optional[int] = Field(None, ge=1)
    color: Optional[str] = None
    custom_days: Optional[WeekdayList] = None
    custom_period: Optional[str] = None


class HabitRead(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    frequency: str
    target: int
    color: Optional[str] = None
    custom_days: Optional[List[int]] = None
    custom_period: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime
    streak: int = 0
    longest_streak: int = 0
    completed_today: bool = False
    weekly_progress: List[bool] = []
    completion_rate: float = 0.0
    total_completed_days: int = 0


class HabitToggleRequest(CamelModel):
    completed: bool


class HabitEntryRead(CamelModel):
    id: str
    habit_id: str
    day: date = Field(..., serialization_alias="date")
    completed: bool
    value: int
    created_at: UTCDateTime


# ===== ЗАМЕТКИ =====

def _normalize_tags(v):
    """Теги приходят списком или строкой через запятую"""
    if v is None:
        return v
    if isinstance(v, str):
        v = v.split(",")
    return [str(tag).strip() for tag in v if str(tag).strip()]


TagList = Annotated[Union[List[str], str], AfterValidator(_normalize_tags)]


class NoteCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    tags: Optional[TagList] = None
    project_id: Optional[str] = None
    task_id: Optional[str] = None


class NoteUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    tags: Optional[TagList] = None
    project_id: Optional[str] = None
    task_id: Optional[str] = None


class NoteRead(CamelModel):
    id: str
    title: str
    content: str
    tags: List[str] = []
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    project_name: Optional[str] = None
    task_name: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


# ===== ПОМОДОРО =====

class PomodoroCreate(CamelModel):
    duration: int = Field(..., gt=0, le=24 * 60)
    type: PomodoroType = PomodoroType.FOCUS
    task_id: Optional[str] = None


class PomodoroUpdate(CamelModel):
    completed: bool = True


class PomodoroRead(CamelModel):
    id: str
    duration: int
    type: str
    completed: bool
    start_time: UTCDateTime
    end_time: Optional[UTCDateTime] = None
    task_id: Optional[str] = None
    created_at: UTCDateTime
    updated_at: UTCDateTime


class FocusStats(CamelModel):
    hours: float
    minutes: int
    sessions: int


class TimerCommand(CamelModel):
    seconds: Optional[int] = Field(None, ge=0)
    session_id: Optional[str] = None


class TimerState(CamelModel):
    time_left: int
    is_active: bool
    session_id: Optional[str] = None


# ===== КАЛЕНДАРЬ И ДАШБОРД =====

class CalendarEvent(CamelModel):
    id: str
    title: str
    start: UTCDateTime
    end: Optional[UTCDateTime] = None
    all_day: bool = False
    background_color: str
    border_color: str
    text_color: str = "#ffffff"
    extended_props: Dict[str, Any] = {}


class DashboardSummary(CamelModel):
    tasks_total: int
    tasks_by_status: Dict[str, int]
    projects_total: int
    active_projects: int
    organizations_total: int
    habits_total: int
    habits_completed_today: int
    notes_total: int
    focus_hours_today: float
