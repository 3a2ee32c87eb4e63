from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from quizmaster.api.errors import register_exception_handlers
from quizmaster.api.routes import api_router
from quizmaster.core.config import settings
from quizmaster.core.logging_config import configure_logging
from quizmaster.crud import crud_quiz
from quizmaster.db.base import Base
from quizmaster.db.session import SessionLocal, engine

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create the DB tables (no migrations yet)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        crud_quiz.purge_expired_quizzes(db)
    finally:
        db.close()
    logger.info("%s started (%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    logger.info("Shutting down %s", settings.PROJECT_NAME)


app = FastAPI(title=settings.PROJECT_NAME, version="1.0.0", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/")
def root():
    return {"message": "Welcome to the Quiz Platform API"}
