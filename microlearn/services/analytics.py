"""In-memory rollups over already-fetched quiz/activity rows.

Rounding follows the dashboards the numbers were first shown on: halves
round up (``half_up``) rather than to even.
"""
import math
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping, Optional, Set

MISSING_QUESTION_TEXT = "Question not found"


def half_up(x: float) -> int:
    return math.floor(x + 0.5)


def round1(x: float) -> float:
    return math.floor(x * 10 + 0.5) / 10


def average_score(scores: Iterable[Optional[float]]) -> float:
    vals = [s for s in scores if s is not None]
    return round1(sum(vals) / len(vals)) if vals else 0


def at_risk_students(rows: Iterable[Mapping], threshold: int) -> List[Dict]:
    """Students whose rounded mean score is below ``threshold``.

    ``rows`` carry ``student_id``, ``score`` and ``student_name``; rows
    without a student are ignored. First-seen order is kept.
    """
    per_student: "OrderedDict[str, Dict]" = OrderedDict()
    for r in rows:
        sid = r.get("student_id")
        if not sid:
            continue
        entry = per_student.setdefault(sid, {"total": 0, "count": 0, "name": r.get("student_name") or "Unknown"})
        entry["total"] += r.get("score") or 0
        entry["count"] += 1
    out = [{"name": e["name"], "average": half_up(e["total"] / e["count"])} for e in per_student.values()]
    return [s for s in out if s["average"] < threshold]


def material_rollup(total_students: int, engaged: Set[str], results: Iterable[Mapping],
                    default_passing: int) -> Dict:
    """Progress/pass-rate numbers for one material.

    ``results`` are quiz results joined with their quiz: ``score``,
    ``passing_score`` and ``student_id``.
    """
    total = count = passed = 0
    takers: Set[str] = set()
    for r in results:
        score = r.get("score") or 0
        passing = r.get("passing_score")
        total += score
        count += 1
        if score >= (default_passing if passing is None else passing):
            passed += 1
        takers.add(r.get("student_id"))
    avg = round1(total / count) if count else 0
    pass_rate = half_up(passed / count * 100) if count else 0
    progress = half_up((len(engaged) / total_students + len(takers) / total_students) / 2 * 100) if total_students > 0 else 0
    return {
        "progress_rate": progress,
        "average_score": avg,
        "pass_rate": pass_rate,
        "active_students": len(engaged),
        "total_students": total_students,
    }


def hardest_questions(results: Iterable[Mapping], texts: Mapping[str, str], limit: int = 5) -> List[Dict]:
    agg: "OrderedDict[str, Dict[str, int]]" = OrderedDict()
    for r in results:
        entry = agg.setdefault(r["question_id"], {"correct": 0, "total": 0})
        if r.get("is_correct"):
            entry["correct"] += 1
        entry["total"] += 1
    ranked = [
        {
            "question_id": qid,
            "question_text": texts.get(qid, MISSING_QUESTION_TEXT),
            "correct_rate": half_up(d["correct"] / d["total"] * 100) if d["total"] else 0,
            "attempts": d["total"],
        }
        for qid, d in agg.items()
    ]
    ranked.sort(key=lambda q: q["correct_rate"])
    return ranked[:limit]
