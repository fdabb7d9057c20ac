from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from microlearn.services.analytics import half_up


def answers_match(expected: Optional[str], given: Optional[str]) -> bool:
    if not expected or given is None:
        return False
    return expected.strip().lower() == given.strip().lower()


def grade(answer_key: Mapping[str, str], answers: Iterable[Mapping]) -> Tuple[int, List[Dict]]:
    """Mark each answer whose question is in ``answer_key``; a question counts once."""
    graded, seen = [], set()
    for a in answers:
        qid = a["question_id"]
        if qid not in answer_key or qid in seen:
            continue
        seen.add(qid)
        graded.append({"question_id": qid, "is_correct": answers_match(answer_key[qid], a.get("user_answer"))})
    return sum(1 for g in graded if g["is_correct"]), graded


def quiz_score(correct: int, total: int) -> int:
    return half_up(correct / total * 100) if total else 0
