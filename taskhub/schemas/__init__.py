from .user import UserCreate, UserLogin, UserUpdate, UserOut, UserSummary
from .tokens import AuthResponse
from .task import TaskCreate, TaskUpdate, TaskOut, TaskList, TaskUpdateResult, DashboardOut
