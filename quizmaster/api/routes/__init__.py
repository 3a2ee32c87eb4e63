from fastapi import APIRouter

from .auth import router as auth
from .users import router as users
from .questions import router as questions
from .quiz_sessions import router as quiz_sessions

api_router = APIRouter()

api_router.include_router(auth)
api_router.include_router(users)
api_router.include_router(questions)
api_router.include_router(quiz_sessions)
