"""Per-domain scoring of an exam attempt."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from exam_sync.models import ExamAnswer


def calculate_domain_breakdown(
    answers: Iterable[ExamAnswer],
    question_domains: Mapping[str, str],
    domain_ids: Iterable[str] = (),
) -> list[dict[str, int | str]]:
    """Count correct and total answers per exam domain.

    Args:
        answers: Answers recorded for one attempt.
        question_domains: Question id -> domain id. Answers to questions not
            in the mapping are ignored.
        domain_ids: Configured domains, reported with zero counts when no
            answer falls into them.

    Returns:
        A list of `{"domainId", "correct", "total"}` dicts, configured
        domains first, then any other domain in first-seen order.
    """
    stats: dict[str, dict[str, int]] = {
        domain_id: {"correct": 0, "total": 0} for domain_id in domain_ids
    }

    for answer in answers:
        domain_id = question_domains.get(answer.question_id)
        if domain_id is None:
            continue
        bucket = stats.setdefault(domain_id, {"correct": 0, "total": 0})
        bucket["total"] += 1
        if answer.is_correct is True:
            bucket["correct"] += 1

    return [
        {"domainId": domain_id, "correct": counts["correct"], "total": counts["total"]}
        for domain_id, counts in stats.items()
    ]
