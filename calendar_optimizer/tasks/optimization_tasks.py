# calendar_optimizer/tasks/optimization_tasks.py
"""
Celery tasks for calendar optimization.

- expire_optimization_suggestions: periodic sweep of stale pending suggestions
- generate_weekly_optimizations: on-demand analysis for one coach and week
"""

from datetime import date, datetime, timezone
import logging
from typing import Any, Callable, Dict, TypeVar, cast

from celery import shared_task
from sqlalchemy.orm import Session

from ..database import SessionLocal
from ..services.optimization_suggestion_service import OptimizationSuggestionService

logger = logging.getLogger(__name__)


TaskCallable = TypeVar("TaskCallable", bound=Callable[..., Any])


def typed_shared_task(
    *task_args: Any, **task_kwargs: Any
) -> Callable[[TaskCallable], TaskCallable]:
    return cast(Callable[[TaskCallable], TaskCallable], shared_task(*task_args, **task_kwargs))


@typed_shared_task(
    name="expire_optimization_suggestions",
    bind=True,
    autoretry_for=(Exception,),
    retry_kwargs={"max_retries": 3, "countdown": 60},
)
def expire_optimization_suggestions(self: Any) -> Dict[str, Any]:
    """
    Periodic task expiring pending suggestions past their expiry timestamp.

    Safe to run repeatedly; later runs only pick up newly stale suggestions.
    """
    logger.info(f"Starting suggestion expiry sweep at {datetime.now(timezone.utc)}")

    db: Session = SessionLocal()
    try:
        expired = OptimizationSuggestionService(db).expire_old_suggestions()
        logger.info(f"Suggestion expiry sweep completed, expired {expired}")
        return {"status": "success", "expired": expired}
    finally:
        db.close()


@typed_shared_task(name="generate_weekly_optimizations", bind=True)
def generate_weekly_optimizations(self: Any, coach_id: str, week_start: str) -> Dict[str, Any]:
    """
    Analyze one coach's week and store the top suggestions.

    Args:
        coach_id: The coach
        week_start: ISO date of the first day of the week
    """
    db: Session = SessionLocal()
    try:
        created = OptimizationSuggestionService(db).generate_weekly_suggestions(
            coach_id, date.fromisoformat(week_start)
        )
        logger.info(f"Generated {created} optimization suggestions for {coach_id} week {week_start}")
        return {"status": "success", "coach_id": coach_id, "suggestions_count": created}
    finally:
        db.close()
