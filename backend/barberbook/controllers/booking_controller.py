"""
Booking controller for handling HTTP requests.

Handles HTTP concerns only: parse the request, delegate to the services,
and let the registered error handlers map booking errors to responses.
"""

from datetime import date

from flask import Blueprint, current_app, request

from ..core.api_utils import api_response
from ..core.exceptions import BadRequestError
from ..db.session import SessionLocal
from ..domain.entities import to_iso_z
from ..repositories.catalog_repo import ServiceRepository, ShopRepository, StaffRepository
from ..repositories.schedule_repo import TimeOffRepository, WorkingHoursRepository
from ..schemas.dtos import (
    AppointmentResponse,
    BookingCreateRequest,
    TimeOffRequest,
    WorkingHoursRequest,
    parse_instant_field,
    time_off_to_dict,
    working_hours_to_dict,
)
from ..services import build_booking_service, build_validation_service
from ..services.availability_service import AvailabilityService
from ..services.schedule_service import ScheduleService
from ..services.working_hours_service import WorkingHoursEvaluator

booking_bp = Blueprint("bookings", __name__, url_prefix="/api/shops/<shop_id>")


def _availability_port():
    return current_app.extensions["barberbook.availability_port"]


def _settings():
    return current_app.extensions["barberbook.settings"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError("Request body must be a JSON object")
    return data


@booking_bp.route("/bookings/validate", methods=["POST"])
def validate_booking(shop_id):
    """Run the full validation pipeline without persisting anything."""
    booking_request = BookingCreateRequest.from_json(shop_id, _json_body()).to_domain()
    db = SessionLocal()
    try:
        service = build_validation_service(db, _availability_port(), _settings())
        validated = service.validate(booking_request)
        return api_response(
            True,
            "Booking request is valid",
            {"start_at": to_iso_z(validated.start_at), "end_at": to_iso_z(validated.end_at)},
        )
    finally:
        db.close()


@booking_bp.route("/bookings", methods=["POST"])
def create_booking(shop_id):
    booking_request = BookingCreateRequest.from_json(shop_id, _json_body()).to_domain()
    db = SessionLocal()
    try:
        service = build_booking_service(db, _availability_port(), _settings())
        appointment = service.create_booking(booking_request)
        return api_response(
            True,
            "Appointment created",
            AppointmentResponse.from_domain(appointment).__dict__,
            201,
        )
    finally:
        db.close()


@booking_bp.route("/staff/<staff_id>/working", methods=["GET"])
def staff_working(shop_id, staff_id):
    at = parse_instant_field("at", request.args.get("at"))
    tz = request.args.get("tz") or None
    db = SessionLocal()
    try:
        if tz is None:
            shop = ShopRepository(db).get(shop_id)
            tz = (shop.time_zone if shop else None) or _settings().default_time_zone
        evaluator = WorkingHoursEvaluator(WorkingHoursRepository(db), TimeOffRepository(db))
        working = evaluator.is_working(shop_id, staff_id, at, tz)
        return api_response(True, "ok", {"working": working, "at": to_iso_z(at)})
    finally:
        db.close()


@booking_bp.route("/availability", methods=["GET"])
def availability(shop_id):
    service_id = request.args.get("service_id")
    if not service_id:
        raise BadRequestError("service_id is required")
    try:
        day = date.fromisoformat(request.args.get("date", ""))
    except ValueError as e:
        raise BadRequestError("date must be YYYY-MM-DD") from e

    db = SessionLocal()
    try:
        service = AvailabilityService(
            ShopRepository(db), ServiceRepository(db), StaffRepository(db), _availability_port()
        )
        slots = service.get_availability(
            shop_id, service_id, day, request.args.get("staff_id") or None
        )
        return api_response(True, f"{len(slots)} slots", [slot.to_dict() for slot in slots])
    finally:
        db.close()


def _schedule_service(db) -> ScheduleService:
    return ScheduleService(WorkingHoursRepository(db), TimeOffRepository(db), StaffRepository(db))


@booking_bp.route("/staff/<staff_id>/working-hours", methods=["GET"])
def list_working_hours(shop_id, staff_id):
    db = SessionLocal()
    try:
        rows = _schedule_service(db).list_working_hours(shop_id, staff_id)
        return api_response(True, "ok", [working_hours_to_dict(row) for row in rows])
    finally:
        db.close()


@booking_bp.route("/staff/<staff_id>/working-hours", methods=["PUT"])
def set_working_hours(shop_id, staff_id):
    data = _json_body()
    dto = WorkingHoursRequest(
        day_of_week=data.get("day_of_week"),
        start_time=data.get("start_time"),
        end_time=data.get("end_time"),
    )
    dto.validate()
    db = SessionLocal()
    try:
        hours = _schedule_service(db).set_working_hours(
            shop_id, staff_id, dto.day_of_week, dto.start_time, dto.end_time
        )
        return api_response(True, "Working hours saved", working_hours_to_dict(hours))
    finally:
        db.close()


@booking_bp.route("/working-hours/<hours_id>", methods=["PUT"])
def update_working_hours(shop_id, hours_id):
    data = _json_body()
    dto = WorkingHoursRequest(
        day_of_week=None, start_time=data.get("start_time"), end_time=data.get("end_time")
    )
    dto.validate_times()
    db = SessionLocal()
    try:
        hours = _schedule_service(db).update_working_hours(
            shop_id, hours_id, dto.start_time, dto.end_time
        )
        return api_response(True, "Working hours updated", working_hours_to_dict(hours))
    finally:
        db.close()


@booking_bp.route("/working-hours/<hours_id>", methods=["DELETE"])
def delete_working_hours(shop_id, hours_id):
    db = SessionLocal()
    try:
        _schedule_service(db).delete_working_hours(shop_id, hours_id)
        return api_response(True, "Working hours deleted")
    finally:
        db.close()


@booking_bp.route("/staff/<staff_id>/time-off", methods=["GET"])
def list_time_off(shop_id, staff_id):
    db = SessionLocal()
    try:
        rows = _schedule_service(db).list_time_off(shop_id, staff_id)
        return api_response(True, "ok", [time_off_to_dict(row) for row in rows])
    finally:
        db.close()


@booking_bp.route("/staff/<staff_id>/time-off", methods=["POST"])
def create_time_off(shop_id, staff_id):
    data = _json_body()
    dto = TimeOffRequest(
        start_at=data.get("start_at"), end_at=data.get("end_at"), reason=data.get("reason")
    )
    start_at, end_at = dto.parsed()
    db = SessionLocal()
    try:
        time_off = _schedule_service(db).create_time_off(
            shop_id, staff_id, start_at, end_at, dto.reason
        )
        return api_response(True, "Time off created", time_off_to_dict(time_off), 201)
    finally:
        db.close()


@booking_bp.route("/time-off/<time_off_id>", methods=["PUT"])
def update_time_off(shop_id, time_off_id):
    data = _json_body()
    dto = TimeOffRequest(
        start_at=data.get("start_at"), end_at=data.get("end_at"), reason=data.get("reason")
    )
    start_at, end_at = dto.parsed()
    db = SessionLocal()
    try:
        time_off = _schedule_service(db).update_time_off(
            shop_id, time_off_id, start_at, end_at, dto.reason
        )
        return api_response(True, "Time off updated", time_off_to_dict(time_off))
    finally:
        db.close()


@booking_bp.route("/time-off/<time_off_id>", methods=["DELETE"])
def delete_time_off(shop_id, time_off_id):
    db = SessionLocal()
    try:
        _schedule_service(db).delete_time_off(shop_id, time_off_id)
        return api_response(True, "Time off deleted")
    finally:
        db.close()
