from datetime import datetime, time
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from microlearn.core.config import Settings, get_settings
from microlearn.core.database import get_db
from microlearn.models.orm import (Material, Quiz, Question, QuestionBankItem, QuestionResult, QuizResult,
                                   Reflection, Student, StudentActivity, utcnow)
from microlearn.services.analytics import at_risk_students, average_score, hardest_questions, material_rollup

router = APIRouter()

def _teacher_filter(teacher_id: Optional[str], teacher_name: Optional[str]):
    if teacher_id: return Student.teacher_id == teacher_id
    if teacher_name: return Student.teacher_name.like(f"%{teacher_name}%")
    return None

@router.get("")
def overview(teacher_id: Optional[str] = Query(None), teacher_name: Optional[str] = Query(None),
             db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    cond = _teacher_filter(teacher_id, teacher_name)

    students_q = select(func.count()).select_from(Student)
    results_q = select(QuizResult.student_id, QuizResult.score, Student.full_name).select_from(QuizResult).outerjoin(Student, Student.id == QuizResult.student_id)
    recent_q = (select(Reflection, Student).select_from(Reflection).join(Student, Student.id == Reflection.student_id)
                .order_by(Reflection.created_at.desc()).limit(settings.RECENT_REFLECTIONS_LIMIT))
    today_start = datetime.combine(utcnow().date(), time.min)
    today_q = (select(func.count()).select_from(Reflection).join(Student, Student.id == Reflection.student_id)
               .where(Reflection.created_at >= today_start))
    if cond is not None:
        students_q, results_q = students_q.where(cond), results_q.where(cond)
        recent_q, today_q = recent_q.where(cond), today_q.where(cond)

    rows = [{"student_id": r[0], "score": r[1], "student_name": r[2]} for r in db.execute(results_q).all()]
    recent = [{
        "id": ref.id, "student_id": ref.student_id, "content": ref.content, "mood": ref.mood, "topic": ref.topic,
        "created_at": ref.created_at.isoformat(),
        "student": {"full_name": st.full_name, "grade_level": st.grade_level, "major": st.major},
    } for ref, st in db.execute(recent_q).all()]
    return {
        "total_students": db.scalar(students_q) or 0,
        "average_score": average_score(r["score"] for r in rows),
        "today_reflections": db.scalar(today_q) or 0,
        "recent_reflections": recent,
        "at_risk_students": at_risk_students(rows, settings.AT_RISK_THRESHOLD),
    }

def _total_for(material: Material, students_by_major: dict, total_all: int) -> int:
    return students_by_major.get(material.major_target, 0) if material.major_target else total_all

def _student_counts(db: Session):
    by_major = dict(db.execute(select(Student.major, func.count()).group_by(Student.major)).all())
    return by_major, sum(by_major.values())

def _quiz_rows(db: Session, material_id: Optional[str] = None):
    stmt = (select(Quiz.material_id, QuizResult.score, Quiz.passing_score, QuizResult.student_id)
            .select_from(QuizResult).join(Quiz, Quiz.id == QuizResult.quiz_id))
    if material_id is not None: stmt = stmt.where(Quiz.material_id == material_id)
    return [{"material_id": r[0], "score": r[1], "passing_score": r[2], "student_id": r[3]} for r in db.execute(stmt).all()]

@router.get("/materials")
def materials_overview(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    by_major, total_all = _student_counts(db)
    engaged: dict = {}
    for mid, sid in db.execute(select(StudentActivity.material_id, StudentActivity.student_id)).all():
        engaged.setdefault(mid, set()).add(sid)
    results: dict = {}
    for r in _quiz_rows(db):
        results.setdefault(r["material_id"], []).append(r)
    out = []
    for m in db.scalars(select(Material)).all():
        roll = material_rollup(_total_for(m, by_major, total_all), engaged.get(m.id, set()),
                               results.get(m.id, []), settings.DEFAULT_PASSING_SCORE)
        out.append({"material_id": m.id, "title": m.title, **roll})
    return out

@router.get("/materials/{material_id}")
def material_detail(material_id: str, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    material = db.get(Material, material_id)
    if not material: raise HTTPException(404, "Material not found")
    by_major, total_all = _student_counts(db)
    engaged = set(db.scalars(select(StudentActivity.student_id).where(StudentActivity.material_id == material_id)).all())
    roll = material_rollup(_total_for(material, by_major, total_all), engaged, _quiz_rows(db, material_id),
                           settings.DEFAULT_PASSING_SCORE)

    quiz_ids = list(db.scalars(select(Quiz.id).where(Quiz.material_id == material_id)).all())
    hardest = []
    if quiz_ids:
        rows = db.execute(select(QuestionResult.question_id, QuestionResult.is_correct)
                          .where(QuestionResult.quiz_id.in_(quiz_ids))
                          .order_by(QuestionResult.created_at, QuestionResult.id)).all()
        qids = {r[0] for r in rows}
        texts = dict(db.execute(select(Question.id, Question.question_text).where(Question.id.in_(qids))).all()) if qids else {}
        texts.update(dict(db.execute(select(QuestionBankItem.id, QuestionBankItem.question_text)
                                     .where(QuestionBankItem.id.in_(qids))).all()) if qids else {})
        hardest = hardest_questions([{"question_id": r[0], "is_correct": r[1]} for r in rows], texts,
                                    settings.HARDEST_QUESTIONS_LIMIT)
    return {"material_id": material.id, "title": material.title, **roll, "hardest_questions": hardest}
