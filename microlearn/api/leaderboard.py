from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from microlearn.core.config import Settings, get_settings
from microlearn.core.database import get_db
from microlearn.models.orm import QuizResult, Student

router = APIRouter()

class LeaderRow(BaseModel):
    student_id: str; student_name: Optional[str] = None; total_score: int

@router.get("", response_model=List[LeaderRow])
def leaderboard(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    total = func.sum(QuizResult.score).label("total_score")
    stmt = (select(QuizResult.student_id, Student.full_name, total)
            .select_from(QuizResult).outerjoin(Student, Student.id == QuizResult.student_id)
            .group_by(QuizResult.student_id, Student.full_name)
            .order_by(total.desc(), QuizResult.student_id)
            .limit(settings.LEADERBOARD_SIZE))
    return [LeaderRow(student_id=r[0], student_name=r[1], total_score=int(r[2] or 0)) for r in db.execute(stmt).all()]
