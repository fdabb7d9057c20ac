import logging
from fastapi import APIRouter, HTTPException, Depends, Header
from pydantic import BaseModel, Field, constr
from typing import List, Optional, Literal
from sqlalchemy.orm import Session
from sqlalchemy import select
from microlearn.core.config import Settings, get_settings
from microlearn.core.database import get_db
from microlearn.models.orm import Material, Quiz, Student, QuizResult, QuestionResult
from microlearn.services import repository as repo
from microlearn.services.sampler import sample_questions
from microlearn.services.scoring import grade, quiz_score

logger = logging.getLogger(__name__)
router = APIRouter()

class DifficultyMix(BaseModel):
  easy: Optional[int] = Field(default=None, ge=0)
  medium: Optional[int] = Field(default=None, ge=0)
  hard: Optional[int] = Field(default=None, ge=0)

class QuizCreate(BaseModel):
  material_id: constr(min_length=1)
  title: constr(min_length=1)
  passing_score: int = Field(ge=0, le=100)
  style: Literal["millionaire","classic"] = "millionaire"
  image_url: Optional[str] = None
  created_by: Optional[str] = None
  use_bank: bool = False
  question_count: int = Field(ge=1, default=10)
  difficulty_mix: Optional[DifficultyMix] = None

class AnswerIn(BaseModel):
  question_id: constr(min_length=1)
  user_answer: str

class QuizSubmit(BaseModel):
  student_id: constr(min_length=1)
  quiz_id: constr(min_length=1)
  answers: List[AnswerIn]

class QuizSubmitted(BaseModel):
  message: str
  score: int
  total_questions: int
  correct_answers: int
  passed: bool
  result_id: str

def served_bank_questions(db: Session, quiz: Quiz, student_id: Optional[str]) -> list:
  pool = [repo.bank_item_payload(q) for q in repo.get_bank_candidates(db, quiz.material_id)]
  served = sample_questions(repo.quiz_payload(quiz), pool, student_id)
  logger.debug("quiz %s: sampled %d of %d bank questions", quiz.id, len(served), len(pool))
  return served

def quiz_with_questions(db: Session, quiz: Quiz, student_id: Optional[str]) -> dict:
  payload = repo.quiz_payload(quiz)
  if quiz.use_bank:
    payload["questions"] = served_bank_questions(db, quiz, student_id)
  else:
    payload["questions"] = [repo.question_payload(q) for q in repo.get_fixed_questions(db, quiz.id)]
  return payload

@router.get("")
def list_quizzes(db: Session = Depends(get_db)):
  return [repo.quiz_payload(q) for q in db.scalars(select(Quiz)).all()]

@router.post("", status_code=201)
def create_quiz(payload: QuizCreate, db: Session = Depends(get_db)):
  if not db.get(Material, payload.material_id): raise HTTPException(404, "Material not found")
  data = payload.model_dump()
  if payload.difficulty_mix is not None:
    data["difficulty_mix"] = payload.difficulty_mix.model_dump(exclude_none=True)
  quiz = Quiz(**data)
  db.add(quiz); db.commit(); db.refresh(quiz)
  logger.info("Created quiz %s for material %s (use_bank=%s)", quiz.id, quiz.material_id, quiz.use_bank)
  return repo.quiz_payload(quiz)

@router.post("/submit-quiz", response_model=QuizSubmitted)
def submit_quiz(payload: QuizSubmit, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
  quiz = repo.get_quiz_config(db, payload.quiz_id)
  if not quiz: raise HTTPException(404, "Quiz has no questions or not found")
  if not db.get(Student, payload.student_id): raise HTTPException(404, "Student not found")
  answers = [a.model_dump() for a in payload.answers]
  if quiz.use_bank:
    key = {q["id"]: q["correct_answer"] for q in served_bank_questions(db, quiz, payload.student_id)}
  else:
    key = {q.id: q.correct_answer for q in repo.get_fixed_questions(db, quiz.id)}
  correct, graded = grade(key, answers)
  total = len(key)
  if total == 0: raise HTTPException(404, "Quiz has no questions or not found")
  score = quiz_score(correct, total)
  result = QuizResult(student_id=payload.student_id, quiz_id=quiz.id, score=score)
  db.add(result)
  for g in graded:
    db.add(QuestionResult(quiz_id=quiz.id, question_id=g["question_id"], student_id=payload.student_id, is_correct=g["is_correct"]))
  db.commit()
  passing = quiz.passing_score if quiz.passing_score is not None else settings.DEFAULT_PASSING_SCORE
  logger.info("Student %s scored %d on quiz %s (%d/%d)", payload.student_id, score, quiz.id, correct, total)
  return QuizSubmitted(message="Quiz submitted successfully", score=score, total_questions=total,
                       correct_answers=correct, passed=score >= passing, result_id=result.id)

@router.get("/{quiz_id}")
def get_quiz(quiz_id: str, x_student_id: Optional[str] = Header(default=None), db: Session = Depends(get_db)):
  quiz = repo.get_quiz_config(db, quiz_id)
  if not quiz: raise HTTPException(404, "Quiz not found")
  return quiz_with_questions(db, quiz, x_student_id)
