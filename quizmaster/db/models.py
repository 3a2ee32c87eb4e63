import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean, Float, JSON, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.types import Text

from quizmaster.db.base import Base


def utcnow():
    """Function to return current UTC time with timezone info"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; treat those as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class QuestionLevel(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionCategory(str, enum.Enum):
    MATH = "math"
    SCIENCE = "science"
    COMPUTER = "computer"
    SPORT = "sport"
    HISTORY = "history"
    GENERAL = "general"


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(20), unique=True, nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)
    is_active = Column(Boolean, default=True, nullable=False)
    password_changed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    active_quiz = relationship(
        "ActiveQuiz", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    quiz_results = relationship(
        "QuizResult", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value


class Question(Base):
    __tablename__ = "questions"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    question_text = Column(Text, unique=True, nullable=False)
    option_a = Column(Text, nullable=False)
    option_b = Column(Text, nullable=False)
    option_c = Column(Text, nullable=False)
    option_d = Column(Text, nullable=False)
    correct_answer = Column(Text, nullable=False)
    level = Column(String(20), nullable=False)
    category = Column(String(20), nullable=False, index=True)
    created_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    @property
    def options(self):
        return [self.option_a, self.option_b, self.option_c, self.option_d]

    @options.setter
    def options(self, values):
        self.option_a, self.option_b, self.option_c, self.option_d = values


class ActiveQuiz(Base):
    """The single live quiz of a user.

    ``question_ids`` holds the issued ids in order; full question content is
    looked up again when the quiz is scored. ``version`` changes every time the
    question set is replaced and guards the compare-and-delete on submit.
    """
    __tablename__ = "active_quizzes"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    question_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    user = relationship("User", back_populates="active_quiz")


class QuizResult(Base):
    __tablename__ = "quiz_results"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # The active quiz is gone once the result exists, so no foreign key here.
    active_quiz_id = Column(Uuid, nullable=True)
    user_name = Column(String(20), nullable=False)
    user_email = Column(String(150), nullable=False)
    score = Column(Float, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False)
    attempted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="quiz_results")
    quiz_answers = relationship(
        "QuizResultAnswer",
        back_populates="result",
        order_by="QuizResultAnswer.answer_order",
        cascade="all, delete-orphan",
    )


class QuizResultAnswer(Base):
    __tablename__ = "quiz_result_answers"
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    result_id = Column(Uuid, ForeignKey("quiz_results.id", ondelete="CASCADE"), nullable=False)
    question_id = Column(Uuid, nullable=False)
    user_answer = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    correct_answer = Column(Text, nullable=False)
    answer_order = Column(Integer, nullable=False)

    result = relationship("QuizResult", back_populates="quiz_answers")
