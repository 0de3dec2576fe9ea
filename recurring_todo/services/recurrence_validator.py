"""Recurrence Validator."""
from datetime import datetime
from typing import Any, Dict, Optional

from recurring_todo.models.recurring_task import EndType, Frequency, Priority
from recurring_todo.models.recurrence_exception import ExceptionAction
from recurring_todo.utils.dates import WEEKDAY_TO_INT


def _result() -> Dict[str, Any]:
    return {"valid": True, "errors": [], "warnings": []}


def _fail(result: Dict[str, Any], message: str) -> None:
    result["valid"] = False
    result["errors"].append(message)


class RecurrenceValidator:
    """Validate recurring task templates and their exceptions."""

    @staticmethod
    def validate_rule(
        frequency: str,
        interval: Optional[int] = 1,
        by_week_day: Optional[list] = None,
        by_month_day: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Validate the rule part of a template.

        Args:
            frequency: DAILY, WEEKLY, MONTHLY or YEARLY
            interval: Repeat every N periods
            by_week_day: Weekday codes (WEEKLY only)
            by_month_day: Day of month (MONTHLY only)

        Returns:
            Dict with validation result
        """
        result = _result()

        if frequency not in [f.value for f in Frequency]:
            _fail(result, "Frequency must be one of: DAILY, WEEKLY, MONTHLY, YEARLY")
            return result

        if not isinstance(interval, int) or isinstance(interval, bool) or interval < 1:
            _fail(result, f"Interval must be a positive integer, got: {interval}")

        if by_week_day:
            invalid = [code for code in by_week_day if str(code).upper() not in WEEKDAY_TO_INT]
            if invalid:
                _fail(result, f"Invalid weekday codes: {invalid}; use MO, TU, WE, TH, FR, SA, SU")
            elif frequency != Frequency.WEEKLY.value:
                result["warnings"].append("by_week_day is only used by WEEKLY rules and will be ignored")

        if by_month_day is not None:
            if not isinstance(by_month_day, int) or not 1 <= by_month_day <= 31:
                _fail(result, f"by_month_day must be between 1 and 31, got: {by_month_day}")
            elif frequency != Frequency.MONTHLY.value:
                result["warnings"].append("by_month_day is only used by MONTHLY rules and will be ignored")

        return result

    @staticmethod
    def validate_termination(
        start_date: datetime,
        end_type: str,
        end_date: Optional[datetime] = None,
        count: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Validate end_type together with end_date / count."""
        result = _result()

        if end_type not in [e.value for e in EndType]:
            _fail(result, "End type must be one of: NEVER, ON_DATE, AFTER_COUNT")
            return result

        if end_type == EndType.ON_DATE.value:
            if end_date is None:
                _fail(result, "ON_DATE recurrence requires an end_date")
            elif end_date < start_date:
                _fail(result, "end_date must not be before start_date")
        elif end_date is not None:
            result["warnings"].append("end_date is ignored unless end_type is ON_DATE")

        if end_type == EndType.AFTER_COUNT.value:
            if count is None:
                _fail(result, "AFTER_COUNT recurrence requires a count")
            elif not isinstance(count, int) or count < 1:
                _fail(result, f"count must be a positive integer, got: {count}")
        elif count is not None:
            result["warnings"].append("count is ignored unless end_type is AFTER_COUNT")

        return result

    @staticmethod
    def validate_template(template_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate a full template payload.

        Args:
            template_data: Template fields as keyword values

        Returns:
            Dict with validation result
        """
        result = _result()

        title = template_data.get("title")
        if not title or not isinstance(title, str) or not title.strip():
            _fail(result, "Title is required")

        priority = template_data.get("priority")
        if priority and priority not in [p.value for p in Priority]:
            _fail(result, f"Priority must be one of: high, medium, low, got: {priority}")

        start_date = template_data.get("start_date")
        if not isinstance(start_date, datetime):
            _fail(result, "start_date is required")

        for validation in (
            RecurrenceValidator.validate_rule(
                template_data.get("frequency"),
                template_data.get("interval", 1),
                template_data.get("by_week_day"),
                template_data.get("by_month_day"),
            ),
            RecurrenceValidator.validate_termination(
                start_date if isinstance(start_date, datetime) else datetime.min,
                template_data.get("end_type", EndType.NEVER.value),
                template_data.get("end_date"),
                template_data.get("count"),
            ),
        ):
            if not validation["valid"]:
                result["valid"] = False
            result["errors"].extend(validation["errors"])
            result["warnings"].extend(validation["warnings"])

        return result

    @staticmethod
    def validate_exception(action: str, new_date: Optional[datetime] = None) -> Dict[str, Any]:
        """Validate a skip / reschedule override."""
        result = _result()

        if action not in [a.value for a in ExceptionAction]:
            _fail(result, "Action must be one of: skip, reschedule")
            return result

        if action == ExceptionAction.RESCHEDULE.value and new_date is None:
            _fail(result, "new_date is required for reschedule action")
        elif action == ExceptionAction.SKIP.value and new_date is not None:
            result["warnings"].append("new_date is ignored for skip action")

        return result
