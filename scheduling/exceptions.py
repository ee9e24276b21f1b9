"""
exceptions.py
-------------
Typed errors raised by the scheduling services.

Every error is a DRF APIException, so the services can raise them directly and
the API views only need to let them propagate. Each class carries:
- status_code: HTTP status used when rendered
- default_code: stable upper-snake code clients can switch on
- category: validation / conflict / not_found / state / authorization / system

scheduling_exception_handler() renders them as {"code": ..., "detail": ...}.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class SchedulingError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Scheduling request failed."
    default_code = "SCHEDULING_ERROR"
    category = "validation"

    @property
    def code(self):
        return self.default_code


# -------------------------
# Validation
# -------------------------
class ValidationFailed(SchedulingError):
    category = "validation"


class InvalidId(ValidationFailed):
    default_detail = "Invalid identifier."
    default_code = "INVALID_ID"


class InvalidTimeFormat(ValidationFailed):
    default_detail = "Time must be in HH:MM format."
    default_code = "INVALID_TIME_FORMAT"


class InvalidDateFormat(ValidationFailed):
    default_detail = "Date must be in YYYY-MM-DD format."
    default_code = "INVALID_DATE_FORMAT"


class InvalidRange(ValidationFailed):
    default_detail = "End time must be after start time."
    default_code = "TIME_SLOT_INVALID_TIME_RANGE"


class AllFieldsEmpty(ValidationFailed):
    default_detail = "At least one field must be provided."
    default_code = "ALL_FIELDS_EMPTY"


class CannotUpdateSeparately(ValidationFailed):
    default_detail = "Start time and end time must be updated together."
    default_code = "TIME_SLOT_CANNOT_UPDATE_SEPARATELY"


class DuplicateWorkDate(ValidationFailed):
    default_detail = "The same work date appears more than once in the request."
    default_code = "SCHEDULE_DUPLICATE_WORK_DATE_INPUT"


class EmptyBatch(ValidationFailed):
    default_detail = "At least one item is required."
    default_code = "EMPTY_BATCH"


class EndBeforeStart(ValidationFailed):
    default_detail = "End date must not be before start date."
    default_code = "END_DATE_BEFORE_START_DATE"


class DateRangeExceeded(ValidationFailed):
    default_detail = "Date range is too long."
    default_code = "DATE_RANGE_EXCEEDED"

    def __init__(self, max_days, detail=None):
        if detail is None:
            detail = f"Date range cannot exceed {max_days} days."
        super().__init__(detail)


# -------------------------
# Conflict
# -------------------------
class ConflictError(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    category = "conflict"


class TimeSlotConflict(ConflictError):
    default_detail = "Time slots overlap."
    default_code = "TIME_SLOT_CONFLICT"


# Same error under the interval-algorithm name.
Overlap = TimeSlotConflict


class ScheduleAlreadyExists(ConflictError):
    default_detail = "A schedule already exists for this stylist, store and date."
    default_code = "SCHEDULE_ALREADY_EXISTS"


# -------------------------
# Not found
# -------------------------
class NotFoundError(SchedulingError):
    status_code = status.HTTP_404_NOT_FOUND
    category = "not_found"


class ScheduleNotFound(NotFoundError):
    default_detail = "Schedule not found."
    default_code = "SCHEDULE_NOT_FOUND"


class TimeSlotNotFound(NotFoundError):
    default_detail = "Time slot not found."
    default_code = "TIME_SLOT_NOT_FOUND"


class TemplateNotFound(NotFoundError):
    default_detail = "Time slot template not found."
    default_code = "TIME_SLOT_TEMPLATE_NOT_FOUND"


class TemplateItemNotFound(NotFoundError):
    default_detail = "Time slot template item not found."
    default_code = "TIME_SLOT_TEMPLATE_ITEM_NOT_FOUND"


class StylistNotFound(NotFoundError):
    default_detail = "Stylist not found."
    default_code = "STYLIST_NOT_FOUND"


class StoreNotFound(NotFoundError):
    default_detail = "Store not found."
    default_code = "STORE_NOT_FOUND"


class ScheduleNotBelongToStore(NotFoundError):
    default_detail = "Schedule does not belong to this store."
    default_code = "SCHEDULE_NOT_BELONG_TO_STORE"


class ScheduleNotBelongToStylist(NotFoundError):
    default_detail = "Schedule does not belong to this stylist."
    default_code = "SCHEDULE_NOT_BELONG_TO_STYLIST"


# -------------------------
# State guards
# -------------------------
class StateGuardError(SchedulingError):
    status_code = status.HTTP_409_CONFLICT
    category = "state"


class AlreadyBookedDoNotUpdate(StateGuardError):
    default_detail = "Time slot is already booked and cannot be updated."
    default_code = "TIME_SLOT_ALREADY_BOOKED_DO_NOT_UPDATE"


class AlreadyBookedDoNotDelete(StateGuardError):
    default_detail = "Time slot is already booked and cannot be deleted."
    default_code = "TIME_SLOT_ALREADY_BOOKED_DO_NOT_DELETE"


class ScheduleAlreadyBookedDoNotDelete(StateGuardError):
    default_detail = "Schedule has booked time slots and cannot be deleted."
    default_code = "SCHEDULE_ALREADY_BOOKED_DO_NOT_DELETE"


class StoreNotActive(StateGuardError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Store is not active."
    default_code = "STORE_NOT_ACTIVE"


# -------------------------
# Authorization
# -------------------------
class PermissionDenied(SchedulingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "AUTH_PERMISSION_DENIED"
    category = "authorization"


# -------------------------
# System
# -------------------------
class PersistenceError(SchedulingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Database operation failed."
    default_code = "SYS_DATABASE_ERROR"
    category = "system"

    def __init__(self, operation, detail=None):
        self.operation = operation
        if detail is None:
            detail = f"Database operation failed: {operation}."
        super().__init__(detail)


def scheduling_exception_handler(exc, context):
    """
    DRF exception handler: adds a stable "code" to scheduling errors.
    Everything else gets DRF's default rendering.

    System errors log at ERROR with the failed service operation; the rest
    log at INFO with their category.
    """
    response = exception_handler(exc, context)
    if response is None or not isinstance(exc, SchedulingError):
        return response

    if exc.category == "system":
        view = context.get("view")
        logger.error(
            "%s during %s (view=%s)",
            exc.code, getattr(exc, "operation", None), view.__class__.__name__ if view else None,
        )
    else:
        logger.info("%s error %s: %s", exc.category, exc.code, exc.detail)

    response.data = {"code": exc.code, "detail": str(exc.detail)}
    return response
