from app.schemas.auth import NormalizedProfile, ProfileResponse
from app.schemas.user import UserCreate, UserUpdate, UserResponse, UserStats
