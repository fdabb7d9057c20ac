"""Queries the quiz endpoints need; callers pass the session explicitly."""
from typing import Any, Dict, List, Optional

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from microlearn.models.orm import Quiz, Question, QuestionBankItem


def quiz_payload(q: Quiz) -> Dict[str, Any]:
    return {
        "id": q.id, "material_id": q.material_id, "title": q.title, "passing_score": q.passing_score,
        "style": q.style, "image_url": q.image_url, "created_by": q.created_by, "use_bank": bool(q.use_bank),
        "question_count": q.question_count, "difficulty_mix": q.difficulty_mix,
    }


def question_payload(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id, "question_text": q.question_text, "question_type": q.question_type,
        "options": q.options or [], "correct_answer": q.correct_answer, "difficulty": None, "image_url": None,
    }


def bank_item_payload(q: QuestionBankItem) -> Dict[str, Any]:
    return {
        "id": q.id, "question_text": q.question_text, "question_type": q.question_type,
        "options": q.options or [], "correct_answer": q.correct_answer, "difficulty": q.difficulty,
        "image_url": q.image_url,
    }


def get_quiz_config(db: Session, quiz_id: str) -> Optional[Quiz]:
    return db.get(Quiz, quiz_id)


def get_quiz_for_material(db: Session, material_id: str) -> Optional[Quiz]:
    return db.scalar(select(Quiz).where(Quiz.material_id == material_id).order_by(Quiz.id).limit(1))


def get_bank_candidates(db: Session, material_id: Optional[str]) -> List[QuestionBankItem]:
    # Stable order: the sampler's output depends on candidate order.
    cond = QuestionBankItem.material_id.is_(None)
    if material_id is not None:
        cond = or_(QuestionBankItem.material_id == material_id, cond)
    stmt = select(QuestionBankItem).where(cond).order_by(QuestionBankItem.created_at, QuestionBankItem.id)
    return list(db.scalars(stmt).all())


def get_fixed_questions(db: Session, quiz_id: str) -> List[Question]:
    return list(db.scalars(select(Question).where(Question.quiz_id == quiz_id)).all())
