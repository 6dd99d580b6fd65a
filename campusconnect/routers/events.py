# campusconnect/routers/events.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from campusconnect.core.dependencies import get_current_user, get_event_service
from campusconnect.core.responses import success
from campusconnect.services.event_service import EventService
from campusconnect.utils.forms import form_payload, uploaded

router = APIRouter()


@router.get("")
def list_events(
    category: Optional[str] = None,
    upcoming: bool = False,
    search: Optional[str] = None,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    user=Depends(get_current_user),
    events: EventService = Depends(get_event_service),
):
    items, pagination = events.list(user, category=category, upcoming=upcoming,
                                    search=search, page=page, limit=limit)
    return success("Events retrieved successfully", {"events": items, "pagination": pagination})


@router.get("/{event_id}")
def get_event(event_id: str, user=Depends(get_current_user), events: EventService = Depends(get_event_service)):
    return success("Event retrieved successfully", {"event": events.get(event_id, user)})


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    venue: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    organizer: Optional[str] = Form(None),
    maxParticipants: Optional[str] = Form(None),
    registrationRequired: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
    events: EventService = Depends(get_event_service),
):
    payload = form_payload(
        title=title, description=description, date=date, time=time, venue=venue,
        category=category, organizer=organizer, maxParticipants=maxParticipants,
        registrationRequired=registrationRequired,
    )
    event = events.create(payload, user, image=uploaded(image))
    return success("Event created successfully", {"event": event})


@router.put("/{event_id}")
def update_event(
    event_id: str,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    time: Optional[str] = Form(None),
    venue: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    organizer: Optional[str] = Form(None),
    maxParticipants: Optional[str] = Form(None),
    registrationRequired: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user=Depends(get_current_user),
    events: EventService = Depends(get_event_service),
):
    payload = form_payload(
        title=title, description=description, date=date, time=time, venue=venue,
        category=category, organizer=organizer, maxParticipants=maxParticipants,
        registrationRequired=registrationRequired,
    )
    event = events.update(event_id, payload, user, image=uploaded(image))
    return success("Event updated successfully", {"event": event})


@router.delete("/{event_id}")
def delete_event(event_id: str, user=Depends(get_current_user), events: EventService = Depends(get_event_service)):
    events.delete(event_id, user)
    return success("Event deleted successfully")


@router.post("/{event_id}/register")
def register_for_event(event_id: str, user=Depends(get_current_user),
                       events: EventService = Depends(get_event_service)):
    return success("Successfully registered for event", {"event": events.register(event_id, user)})


@router.delete("/{event_id}/register")
def unregister_from_event(event_id: str, user=Depends(get_current_user),
                          events: EventService = Depends(get_event_service)):
    return success("Successfully unregistered from event", {"event": events.unregister(event_id, user)})
