import pytest

from microlearn.models.orm import QuestionResult, QuizResult, Reflection, StudentActivity


@pytest.fixture
def activity(db, bank_quiz):
    db.add_all([
        QuizResult(student_id="s1", quiz_id="quiz-1", score=40),
        QuizResult(student_id="s1", quiz_id="quiz-1", score=50),
        QuizResult(student_id="s2", quiz_id="quiz-1", score=95),
        StudentActivity(student_id="s1", material_id=bank_quiz["material_id"]),
        Reflection(student_id="s1", content="Slopes finally clicked", mood="happy"),
        QuestionResult(quiz_id="quiz-1", question_id="e1", student_id="s1", is_correct=True),
        QuestionResult(quiz_id="quiz-1", question_id="e1", student_id="s2", is_correct=False),
        QuestionResult(quiz_id="quiz-1", question_id="m1", student_id="s1", is_correct=False),
    ])
    db.commit()
    return bank_quiz


def test_overview(client, activity):
    body = client.get("/analytics").json()
    assert body["total_students"] == 2
    assert body["average_score"] == 61.7
    assert body["today_reflections"] == 1
    assert body["recent_reflections"][0]["student"] == {"full_name": "Ayu", "grade_level": 10, "major": "RPL"}
    assert body["at_risk_students"] == [{"name": "Ayu", "average": 45}]


def test_overview_filtered_by_teacher(client, activity):
    body = client.get("/analytics", params={"teacher_id": "t2"}).json()
    assert body["total_students"] == 1 and body["average_score"] == 95
    assert body["today_reflections"] == 0 and body["recent_reflections"] == [] and body["at_risk_students"] == []
    body = client.get("/analytics", params={"teacher_name": "Budi"}).json()
    assert body["total_students"] == 1 and body["at_risk_students"] == [{"name": "Ayu", "average": 45}]


def test_materials_overview(client, activity):
    rows = {r["material_id"]: r for r in client.get("/analytics/materials").json()}
    main = rows[activity["material_id"]]
    assert main["total_students"] == 1 and main["active_students"] == 1
    assert main["average_score"] == 61.7 and main["pass_rate"] == 33
    other = rows[activity["other_material_id"]]
    assert other == {"material_id": activity["other_material_id"], "title": "Geometry", "progress_rate": 0,
                     "average_score": 0, "pass_rate": 0, "active_students": 0, "total_students": 2}


def test_material_detail_ranks_hardest_questions(client, activity):
    body = client.get(f"/analytics/materials/{activity['material_id']}").json()
    assert body["title"] == "Linear equations"
    assert [(q["question_id"], q["question_text"], q["correct_rate"], q["attempts"]) for q in body["hardest_questions"]] == [
        ("m1", "medium 1", 0, 1),
        ("e1", "easy 1", 50, 2),
    ]


def test_material_detail_missing(client, bank_quiz):
    r = client.get("/analytics/materials/missing")
    assert r.status_code == 404 and r.json() == {"error": "Material not found"}


def test_leaderboard(client, activity):
    rows = client.get("/leaderboard").json()
    assert rows == [
        {"student_id": "s2", "student_name": "Bima", "total_score": 95},
        {"student_id": "s1", "student_name": "Ayu", "total_score": 90},
    ]
