# app/api/calendar/routes.py
from flask import Blueprint, request, jsonify, current_app, Response

from app.api.calendar.schemas import CalendarEventCreateSchema, CalendarEventUpdateSchema, CalendarEventResponseSchema
from app.core.errors import ValidationFailure
from app.core.session import current_session
from app.utils.request_utils import is_confirmed

calendar_bp = Blueprint('calendar_bp', __name__)

@calendar_bp.route('/events', methods=['GET'])
def get_events():
    """
    천문 일정을 조회합니다. (로그인 불필요)
    - ?year=2025&month=3 : 해당 월의 일정
    - ?date=2025-03-14 : 해당 날짜의 일정
    """
    calendar_service = current_app.services['calendar']
    date_param = request.args.get('date')
    if date_param:
        events = calendar_service.events_on(date_param)
    else:
        year = request.args.get('year', type=int)
        month = request.args.get('month', type=int)
        if (year is None) != (month is None):
            raise ValidationFailure("year와 month는 함께 지정해야 합니다.")
        events = calendar_service.list_events(year, month)
    return jsonify({"events": CalendarEventResponseSchema(many=True).dump(events)}), 200


@calendar_bp.route('/events', methods=['POST'])
def create_event():
    calendar_service = current_app.services['calendar']
    viewer = current_session().require_viewer()
    data = CalendarEventCreateSchema().load(request.get_json() or {})
    event = calendar_service.create_event(viewer, data)
    return jsonify(CalendarEventResponseSchema().dump(event)), 201


@calendar_bp.route('/events/<string:event_id>', methods=['PATCH'])
def update_event(event_id: str):
    """일정을 수정합니다. (등록한 본인만 가능)"""
    calendar_service = current_app.services['calendar']
    viewer = current_session().require_viewer()
    data = CalendarEventUpdateSchema().load(request.get_json() or {})
    event = calendar_service.update_event(viewer, event_id, data)
    return jsonify(CalendarEventResponseSchema().dump(event)), 200


@calendar_bp.route('/events/<string:event_id>', methods=['DELETE'])
def delete_event(event_id: str):
    """일정을 삭제합니다. (등록한 본인만, ?confirm=true 필요)"""
    calendar_service = current_app.services['calendar']
    viewer = current_session().require_viewer()
    calendar_service.delete_event(viewer, event_id, confirmed=is_confirmed())
    return Response(status=204)
