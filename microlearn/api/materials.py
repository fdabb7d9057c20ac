from fastapi import APIRouter, HTTPException, Depends, Header
from typing import Optional
from sqlalchemy.orm import Session
from microlearn.core.database import get_db
from microlearn.api.quizzes import quiz_with_questions
from microlearn.services import repository as repo

router = APIRouter()

@router.get("/{material_id}/quiz")
def material_quiz(material_id: str, x_student_id: Optional[str] = Header(default=None), db: Session = Depends(get_db)):
  quiz = repo.get_quiz_for_material(db, material_id)
  if not quiz: raise HTTPException(404, "No quiz found for this material")
  return quiz_with_questions(db, quiz, x_student_id)
