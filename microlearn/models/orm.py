import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer, String, Text, Boolean, ForeignKey, JSON, DateTime

def _uuid() -> str: return str(uuid.uuid4())
def utcnow() -> datetime: return datetime.now(timezone.utc).replace(tzinfo=None)

class Base(DeclarativeBase): pass

class Student(Base):
    __tablename__ = "students"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    nisn: Mapped[str] = mapped_column(String, unique=True)
    full_name: Mapped[str] = mapped_column(String)
    major: Mapped[str] = mapped_column(String)
    grade_level: Mapped[int] = mapped_column(Integer)
    school: Mapped[str | None] = mapped_column(String, nullable=True, default="Unknown")
    teacher_id: Mapped[str | None] = mapped_column(String, nullable=True)
    teacher_name: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class Material(Base):
    __tablename__ = "materials"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    title: Mapped[str] = mapped_column(String)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[str] = mapped_column(Text)
    major_target: Mapped[str | None] = mapped_column(String, nullable=True)
    target_grade: Mapped[int | None] = mapped_column(Integer, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)

class Quiz(Base):
    __tablename__ = "quizzes"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    material_id: Mapped[str] = mapped_column(String, ForeignKey("materials.id", ondelete="CASCADE"))
    title: Mapped[str] = mapped_column(String)
    passing_score: Mapped[int] = mapped_column(Integer)
    style: Mapped[str | None] = mapped_column(String, nullable=True, default="millionaire")
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    created_by: Mapped[str | None] = mapped_column(String, nullable=True)
    use_bank: Mapped[bool] = mapped_column(Boolean, default=False)
    question_count: Mapped[int | None] = mapped_column(Integer, nullable=True, default=10)
    difficulty_mix: Mapped[dict | None] = mapped_column(JSON, nullable=True)

class Question(Base):
    """Fixed question attached to a single quiz."""
    __tablename__ = "questions"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    quiz_id: Mapped[str] = mapped_column(String, ForeignKey("quizzes.id", ondelete="CASCADE"))
    question_text: Mapped[str] = mapped_column(Text)
    question_type: Mapped[str] = mapped_column(String)
    options: Mapped[list] = mapped_column(JSON)
    correct_answer: Mapped[str] = mapped_column(Text)

class QuestionBankItem(Base):
    """Reusable question, global when material_id is NULL."""
    __tablename__ = "question_bank"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    material_id: Mapped[str | None] = mapped_column(String, ForeignKey("materials.id", ondelete="SET NULL"), nullable=True)
    question_text: Mapped[str] = mapped_column(Text)
    question_type: Mapped[str] = mapped_column(String)
    options: Mapped[list] = mapped_column(JSON)
    correct_answer: Mapped[str] = mapped_column(Text)
    difficulty: Mapped[str] = mapped_column(String)
    tags: Mapped[list | None] = mapped_column(JSON, nullable=True, default=list)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class QuizResult(Base):
    __tablename__ = "quiz_results"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String, ForeignKey("students.id", ondelete="CASCADE"))
    quiz_id: Mapped[str] = mapped_column(String, ForeignKey("quizzes.id", ondelete="CASCADE"))
    score: Mapped[int] = mapped_column(Integer)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class QuestionResult(Base):
    __tablename__ = "question_results"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    quiz_id: Mapped[str] = mapped_column(String, ForeignKey("quizzes.id", ondelete="CASCADE"))
    question_id: Mapped[str] = mapped_column(String)
    student_id: Mapped[str] = mapped_column(String, ForeignKey("students.id", ondelete="CASCADE"))
    is_correct: Mapped[bool] = mapped_column(Boolean)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

class StudentActivity(Base):
    __tablename__ = "student_activity"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String, ForeignKey("students.id", ondelete="CASCADE"))
    material_id: Mapped[str] = mapped_column(String, ForeignKey("materials.id", ondelete="CASCADE"))
    started_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)

class Reflection(Base):
    __tablename__ = "reflections"
    id: Mapped[str] = mapped_column(String, primary_key=True, default=_uuid)
    student_id: Mapped[str] = mapped_column(String, ForeignKey("students.id", ondelete="CASCADE"))
    content: Mapped[str] = mapped_column(Text)
    mood: Mapped[str | None] = mapped_column(String, nullable=True)
    topic: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
