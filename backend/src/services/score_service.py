"""
Score service for judge score submission and administrator corrections.

Design:
- One score per (judge, performance), enforced by uq_scores_judge_performance
- Judges may only score performances of events they are assigned to
- A submitted score is immutable for the judge; administrators may update
  or delete it, and every such change is logged with its reason
- Withdrawn performances accept no new scores; existing ones are kept
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.src.middleware.auth import ActorContext
from backend.src.models import (
    Judge,
    Performance,
    Score,
    SCORE_COMPONENTS,
    SCORE_COMPONENT_MAX,
)
from backend.src.services.exceptions import (
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from backend.src.services.judge_assignment_service import JudgeAssignmentService
from backend.src.services.lookup import get_by_guid
from backend.src.utils.logging_config import get_logger


logger = get_logger("services")


class ScoreService:
    """
    Service for scores.

    Usage:
        >>> service = ScoreService(db_session)
        >>> score = service.submit_score(
        ...     ctx, "jdg_...", "prf_...",
        ...     {"technical_score": 17, "musical_score": 16, "performance_score": 18,
        ...      "styling_score": 17, "overall_impression_score": 18},
        ... )
        >>> score.total
        86
    """

    def __init__(self, db: Session):
        """
        Initialize score service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def submit_score(
        self,
        actor: ActorContext,
        judge_guid: str,
        performance_guid: str,
        components: Dict[str, float],
        comments: Optional[str] = None,
    ) -> Score:
        """
        Submit a judge's score for a performance.

        Args:
            actor: Authenticated actor; must be the judge or an administrator
            judge_guid: Judge GUID (jdg_xxx)
            performance_guid: Performance GUID (prf_xxx)
            components: The five component scores, 0-20 each
            comments: Optional comments

        Returns:
            Created Score

        Raises:
            UnauthorizedError: If the actor may not score as this judge, or the
                judge is not assigned to the performance's event
            NotFoundError: If the judge or performance does not exist
            ValidationError: If the performance is withdrawn or a component is
                missing or out of range
            ConflictError: If the judge already scored the performance
        """
        if not actor.acts_as(judge_guid):
            raise UnauthorizedError("Judges may only submit their own scores")

        judge = get_by_guid(self.db, Judge, judge_guid)
        performance = get_by_guid(self.db, Performance, performance_guid)

        if not JudgeAssignmentService(self.db).is_assigned(judge.id, performance.event_id):
            raise UnauthorizedError(
                f"Judge {judge.guid} is not assigned to event {performance.event.guid}"
            )

        if performance.withdrawn_from_judging:
            raise ValidationError(
                f"Performance {performance.guid} is withdrawn from judging",
                field="performanceId",
            )

        values = self._validate_components(components, partial=False)

        if self._find(judge.id, performance.id) is not None:
            raise ConflictError(
                f"Judge {judge.guid} has already scored performance {performance.guid}"
            )

        score = Score(
            judge_id=judge.id,
            performance_id=performance.id,
            comments=comments,
            submitted_at=datetime.utcnow(),
            **values,
        )
        try:
            self.db.add(score)
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate score rejected by store: {e}")
            raise ConflictError(
                f"Judge {judge_guid} has already scored performance {performance_guid}"
            )

        self.db.refresh(score)
        logger.info(
            f"Judge {judge.guid} scored performance {performance.guid}: {score.total}"
        )
        return score

    def get_performance_scores(self, performance_guid: str) -> List[Score]:
        """List the scores of a performance, including withdrawn ones."""
        performance = get_by_guid(self.db, Performance, performance_guid)
        return (
            self.db.query(Score)
            .filter(Score.performance_id == performance.id)
            .order_by(Score.submitted_at, Score.id)
            .all()
        )

    def admin_update_score(
        self,
        actor: ActorContext,
        performance_guid: str,
        judge_guid: str,
        components: Dict[str, float],
        reason: str,
        comments: Optional[str] = None,
    ) -> Score:
        """
        Overwrite components of an existing score (administrators only).

        Components not supplied keep their value.

        Raises:
            UnauthorizedError: If the actor is not an administrator
            NotFoundError: If the score does not exist
            ValidationError: If a component is out of range or no reason is given
        """
        self._require_admin(actor)
        self._require_reason(reason)
        score = self._get(performance_guid, judge_guid)

        values = self._validate_components(components, partial=True)
        before = score.total
        for name, value in values.items():
            setattr(score, name, value)
        if comments is not None:
            score.comments = comments
        score.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(score)

        logger.info(
            f"Administrator {actor.judge_guid} updated score {score.guid} "
            f"({before} -> {score.total}): {reason}"
        )
        return score

    def admin_delete_score(
        self,
        actor: ActorContext,
        performance_guid: str,
        judge_guid: str,
        reason: str,
    ) -> None:
        """
        Delete a score (administrators only).

        Raises:
            UnauthorizedError: If the actor is not an administrator
            NotFoundError: If the score does not exist
            ValidationError: If no reason is given
        """
        self._require_admin(actor)
        self._require_reason(reason)
        score = self._get(performance_guid, judge_guid)
        score_guid, total = score.guid, score.total

        self.db.delete(score)
        self.db.commit()

        logger.info(
            f"Administrator {actor.judge_guid} deleted score {score_guid} "
            f"(total {total}): {reason}"
        )

    @staticmethod
    def _validate_components(components: Dict[str, float], partial: bool) -> Dict[str, float]:
        components = components or {}
        unknown = set(components) - set(SCORE_COMPONENTS)
        if unknown:
            raise ValidationError(
                f"Unknown score components: {', '.join(sorted(unknown))}",
                field="scores",
            )

        values = {}
        for name in SCORE_COMPONENTS:
            value = components.get(name)
            if value is None:
                if partial:
                    continue
                raise ValidationError(f"{name} is required", field=name)
            if not 0 <= value <= SCORE_COMPONENT_MAX:
                raise ValidationError(
                    f"{name} must be between 0 and {SCORE_COMPONENT_MAX:g}",
                    field=name,
                )
            values[name] = float(value)

        if partial and not values:
            raise ValidationError("At least one score component is required", field="scores")
        return values

    @staticmethod
    def _require_admin(actor: ActorContext) -> None:
        if not actor.is_admin:
            raise UnauthorizedError()

    @staticmethod
    def _require_reason(reason: str) -> None:
        if not reason or not reason.strip():
            raise ValidationError("A reason is required for score changes", field="reason")

    def _find(self, judge_id: int, performance_id: int) -> Optional[Score]:
        return (
            self.db.query(Score)
            .filter(Score.judge_id == judge_id, Score.performance_id == performance_id)
            .first()
        )

    def _get(self, performance_guid: str, judge_guid: str) -> Score:
        performance = get_by_guid(self.db, Performance, performance_guid)
        judge = get_by_guid(self.db, Judge, judge_guid)
        score = self._find(judge.id, performance.id)
        if score is None:
            raise NotFoundError("Score", f"{performance_guid}/{judge_guid}")
        return score
