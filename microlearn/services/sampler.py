"""Reproducible per-student question sampling for bank-sourced quizzes.

The shuffle uses the LCG ``state = (state * 9301 + 49297) % 233280`` seeded
with the sum of the seed's UTF-16 code units. Keep it unchanged: existing
deployments rely on it to hand the same student the same questions.
"""
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

DIFFICULTIES = ("easy", "medium", "hard")
_SUFFIX = {"easy": "_e", "medium": "_m", "hard": "_h"}
_LCG_A, _LCG_C, _LCG_M = 9301, 49297, 233280


def _seed_value(seed: str) -> int:
    raw = seed.encode("utf-16-le", "surrogatepass")
    return sum(int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2))


def seeded_shuffle(items: Sequence[Any], seed: str) -> List[Any]:
    out = list(items)
    state = _seed_value(seed)
    for i in range(len(out) - 1, 0, -1):
        state = (state * _LCG_A + _LCG_C) % _LCG_M
        j = math.floor(state / _LCG_M * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out


def _count(value: Any) -> Optional[int]:
    # bool is an int subclass; a JSON true is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return math.floor(value) if value >= 0 else None


def difficulty_targets(question_count: Any, difficulty_mix: Any = None) -> Dict[str, int]:
    count = _count(question_count) or 0
    if count <= 0:
        return {d: 0 for d in DIFFICULTIES}
    mix = difficulty_mix if isinstance(difficulty_mix, Mapping) else {}
    easy = _count(mix.get("easy"))
    medium = _count(mix.get("medium"))
    hard = _count(mix.get("hard"))
    easy = math.floor(0.4 * count) if easy is None else easy
    medium = math.floor(0.4 * count) if medium is None else medium
    if hard is None:
        hard = max(0, count - easy - medium)
    return {"easy": easy, "medium": medium, "hard": hard}


def sample_seed(quiz_id: Any, student_id: Any = None) -> str:
    if student_id:
        return f"{student_id}_{quiz_id}"
    return f"{quiz_id}_anon"


def sample_questions(quiz: Mapping[str, Any], candidates: Sequence[Mapping[str, Any]],
                     student_id: Any = None) -> List[Mapping[str, Any]]:
    """Pick ``min(question_count, len(pool))`` distinct candidates for one student.

    Each difficulty bucket is shuffled and cut to its target; shortfalls are
    backfilled from everything left over (unknown difficulties included) and
    the result is shuffled once more so ordering hides the buckets.
    """
    count = _count(quiz.get("question_count")) or 0
    pool, seen = [], set()
    for item in candidates:
        if item["id"] in seen:
            continue
        seen.add(item["id"])
        pool.append(item)
    if count <= 0 or not pool:
        return []

    targets = difficulty_targets(count, quiz.get("difficulty_mix"))
    seed = sample_seed(quiz.get("id"), student_id)

    selected: List[Mapping[str, Any]] = []
    for d in DIFFICULTIES:
        bucket = [it for it in pool if it.get("difficulty") == d]
        selected.extend(seeded_shuffle(bucket, seed + _SUFFIX[d])[:targets[d]])

    if len(selected) < count:
        chosen = {it["id"] for it in selected}
        remaining = [it for it in pool if it["id"] not in chosen]
        selected.extend(seeded_shuffle(remaining, seed + "_r")[:count - len(selected)])

    return seeded_shuffle(selected[:count], seed + "_final")
