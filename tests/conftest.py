import pytest
from fastapi.testclient import TestClient

from microlearn.core.config import Settings
from microlearn.main import create_app
from microlearn.models.orm import Material, Quiz, QuestionBankItem, Student


@pytest.fixture
def client(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}", ENVIRONMENT="testing")
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def db(client):
    session = client.app.state.db.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def bank_quiz(db):
    """Material with a bank quiz: 5 easy + 5 medium local items, 2 global hard items, 1 foreign item."""
    m = Material(title="Linear equations", content="...", major_target="RPL")
    other = Material(title="Geometry", content="...")
    db.add_all([m, other]); db.flush()
    for i in range(1, 6):
        db.add(QuestionBankItem(id=f"e{i}", material_id=m.id, question_text=f"easy {i}", question_type="multiple_choice",
                                options=["a", "b"], correct_answer="a", difficulty="easy"))
        db.add(QuestionBankItem(id=f"m{i}", material_id=m.id, question_text=f"medium {i}", question_type="multiple_choice",
                                options=["a", "b"], correct_answer="b", difficulty="medium"))
    for i in range(1, 3):
        db.add(QuestionBankItem(id=f"h{i}", material_id=None, question_text=f"hard {i}", question_type="multiple_choice",
                                options=["a", "b"], correct_answer="a", difficulty="hard"))
    db.add(QuestionBankItem(id="x1", material_id=other.id, question_text="elsewhere", question_type="multiple_choice",
                            options=["a", "b"], correct_answer="a", difficulty="easy"))
    q = Quiz(id="quiz-1", material_id=m.id, title="Bank quiz", passing_score=70, use_bank=True, question_count=6)
    db.add(q)
    db.add(Student(id="s1", nisn="001", full_name="Ayu", major="RPL", grade_level=10, teacher_id="t1", teacher_name="Pak Budi"))
    db.add(Student(id="s2", nisn="002", full_name="Bima", major="TKJ", grade_level=11, teacher_id="t2", teacher_name="Bu Sari"))
    db.commit()
    return {"material_id": m.id, "other_material_id": other.id, "quiz_id": q.id}
