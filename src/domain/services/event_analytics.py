"""
Event analytics aggregation.

Derives registration trends, session check-in rates, weighted score
distributions and judge participation from raw event records, and combines
them into a single report for organizers.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import structlog
from src.core.config import AnalyticsThresholds, get_settings
from src.domain.errors import EventNotFoundError
from src.domain.models import Registration, RegistrationStatus, Rubric, Submission
from src.domain.reports import (
    AnalyticsReport,
    EventSummary,
    JudgeParticipation,
    RegistrationOverTime,
    ScoreDistribution,
    SessionCheckInRate,
)
from src.domain.services.fanout import gather_branches, guard_read
from src.domain.services.scoring import (
    SCORE_BUCKETS,
    bucket_label,
    final_scores,
    validate_rubric,
)
from src.domain.stores import EventRecordStore, JudgeAssignmentLookup

logger = structlog.get_logger(__name__)

OVERALL_SESSION_NAME = "Overall Event"


def _percentage(part: int | float, whole: int | float) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


class EventAnalyticsService:
    """Service computing derived statistics for a single event."""

    def __init__(
        self,
        store: EventRecordStore,
        *,
        assignment_lookup: JudgeAssignmentLookup | None = None,
        thresholds: AnalyticsThresholds | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.assignment_lookup = assignment_lookup
        self.thresholds = thresholds or get_settings().analytics
        self._clock = clock or (lambda: datetime.now(UTC))

    async def calculate_registrations_over_time(self, event_id: str) -> list[RegistrationOverTime]:
        """Registration counts per UTC day with a running total."""
        registrations = await self.store.list_registrations(event_id)

        per_day: dict[str, int] = {}
        for registration in registrations:
            day = _utc_day(registration.registered_at)
            per_day[day] = per_day.get(day, 0) + 1

        trend: list[RegistrationOverTime] = []
        cumulative = 0
        for day in sorted(per_day):
            cumulative += per_day[day]
            trend.append(
                RegistrationOverTime(date=day, count=per_day[day], cumulative_count=cumulative)
            )
        return trend

    async def calculate_check_in_rates_by_session(self, event_id: str) -> list[SessionCheckInRate]:
        """
        Check-in rate for the event overall and for each observed session.

        Counts distinct registrations, so repeat check-ins for the same session
        are only counted once. Every row shares the confirmed-registration total
        as its denominator.
        """
        registrations = await self.store.list_registrations(
            event_id, status=RegistrationStatus.CONFIRMED
        )
        total = len(registrations)

        overall: set[str] = set()
        by_session: dict[str, set[str]] = {}
        for registration in registrations:
            for attendance in registration.attendance:
                overall.add(registration.id)
                if attendance.session_id is not None:
                    by_session.setdefault(attendance.session_id, set()).add(registration.id)

        rates = [
            SessionCheckInRate(
                session_id=None,
                session_name=OVERALL_SESSION_NAME,
                total_registrations=total,
                checked_in=len(overall),
                check_in_rate=_percentage(len(overall), total),
            )
        ]
        for session_id, checked_in in by_session.items():
            rates.append(
                SessionCheckInRate(
                    session_id=session_id,
                    session_name=f"Session {session_id}",
                    total_registrations=total,
                    checked_in=len(checked_in),
                    check_in_rate=_percentage(len(checked_in), total),
                )
            )
        return rates

    async def calculate_score_distributions(self, event_id: str) -> list[ScoreDistribution]:
        """Bucket weighted final scores into five fixed 20-point ranges."""
        rubric = await self.store.get_rubric(event_id)
        if rubric is None:
            return []

        submissions = await self.store.list_submissions(event_id)
        scores = self._final_scores(submissions, rubric)
        if not scores:
            return []

        counts = {label: 0 for label, _, _ in SCORE_BUCKETS}
        for score in scores:
            counts[bucket_label(score)] += 1

        total = len(scores)
        return [
            ScoreDistribution(
                range=label,
                count=counts[label],
                percentage=_percentage(counts[label], total),
            )
            for label, _, _ in SCORE_BUCKETS
        ]

    async def aggregate_judge_participation(self, event_id: str) -> list[JudgeParticipation]:
        """
        Scoring progress for every judge who scored at least one submission.

        Without an assignment lookup every judge is assumed to be assigned every
        submission of the event.
        """
        submissions = await self.store.list_submissions(event_id)
        total_submissions = len(submissions)

        names: dict[str, str] = {}
        scored: dict[str, set[str]] = {}
        for submission in submissions:
            for score in submission.scores:
                names.setdefault(score.judge_id, score.judge.name)
                scored.setdefault(score.judge_id, set()).add(submission.id)

        participation: list[JudgeParticipation] = []
        for judge_id, judge_name in names.items():
            if self.assignment_lookup is not None:
                assigned = await self.assignment_lookup.count_assigned(event_id, judge_id)
            else:
                assigned = total_submissions
            scored_count = len(scored[judge_id])
            participation.append(
                JudgeParticipation(
                    judge_id=judge_id,
                    judge_name=judge_name,
                    assigned_submissions=assigned,
                    scored_submissions=scored_count,
                    completion_rate=_percentage(scored_count, assigned),
                )
            )
        return participation

    async def get_comprehensive_report(self, event_id: str) -> AnalyticsReport:
        """Combine every event analytic plus a summary block into one report."""
        event = await guard_read("get_event", self.store.get_event(event_id))
        if event is None:
            await logger.awarning("event_report_not_found", event_id=event_id)
            raise EventNotFoundError(event_id)

        results = await gather_branches(
            {
                "registration_over_time": self.calculate_registrations_over_time(event_id),
                "session_check_in_rates": self.calculate_check_in_rates_by_session(event_id),
                "score_distributions": self.calculate_score_distributions(event_id),
                "judge_participation": self.aggregate_judge_participation(event_id),
                "registrations": self.store.list_registrations(event_id),
                "submissions": self.store.list_submissions(event_id),
                "rubric": self.store.get_rubric(event_id),
            }
        )

        summary = self._build_summary(
            results["registrations"], results["submissions"], results["rubric"]
        )
        report = AnalyticsReport(
            event_id=event.id,
            event_name=event.name,
            generated_at=self._clock(),
            registration_over_time=results["registration_over_time"],
            session_check_in_rates=results["session_check_in_rates"],
            score_distributions=results["score_distributions"],
            judge_participation=results["judge_participation"],
            summary=summary,
        )

        await logger.ainfo(
            "event_report_generated",
            event_id=event_id,
            total_registrations=summary.total_registrations,
            total_submissions=summary.total_submissions,
        )
        return report

    def _build_summary(
        self,
        registrations: Sequence[Registration],
        submissions: Sequence[Submission],
        rubric: Rubric | None,
    ) -> EventSummary:
        confirmed = sum(1 for r in registrations if r.status == RegistrationStatus.CONFIRMED)
        attended = sum(1 for r in registrations if r.attendance)

        average_score = 0.0
        if rubric is not None:
            scores = self._final_scores(submissions, rubric)
            if scores:
                average_score = sum(scores) / len(scores)

        judges = {score.judge_id for submission in submissions for score in submission.scores}

        return EventSummary(
            total_registrations=len(registrations),
            confirmed_registrations=confirmed,
            total_attendance=attended,
            overall_check_in_rate=_percentage(attended, confirmed),
            average_score=average_score,
            total_submissions=len(submissions),
            total_judges=len(judges),
        )

    def _final_scores(self, submissions: Sequence[Submission], rubric: Rubric) -> list[float]:
        validate_rubric(rubric, expected_weight_total=self.thresholds.rubric_weight_total)
        return final_scores(submissions, rubric)


def _utc_day(moment: datetime) -> str:
    # Naive timestamps are stored as UTC
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return moment.date().isoformat()
