"""
Normalization between store rows, carrier payloads and canonical entities.

Pure functions only. Reads validate at the edge and raise SchemaError; writes
produce the persisted-field subset of a row (never the temporary id).
"""

import re
from datetime import date, datetime, time, timezone, tzinfo
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from gated.errors import SchemaError
from gated.models.carrier import CarrierTrackingDetail, CarrierTrackingResponse
from gated.models.drop import DropEntity
from gated.models.garment import Category, GarmentEntity
from gated.models.order import (
    ESTIMATE_CALCULATING,
    ESTIMATE_PENDING,
    ESTIMATE_SENTINELS,
    ESTIMATE_UNKNOWN,
    SIMULATED_MARKER,
    Carrier,
    OrderEntity,
    TrackingEvent,
    TrackingStatus,
)
from gated.models.rows import DropRow, GarmentRow, OrderRow
from gated.sync.reconciler import is_temporary_id

EnumT = TypeVar("EnumT", bound=Enum)

# Provider status vocabulary -> internal status; anything else is PRE_TRANSIT
CARRIER_STATUS_MAP: dict[str, TrackingStatus] = {
    "delivered": TrackingStatus.DELIVERED,
    "out_for_delivery": TrackingStatus.OUT_FOR_DELIVERY,
    "in_transit": TrackingStatus.IN_TRANSIT,
    "pre_transit": TrackingStatus.PRE_TRANSIT,
}

DISPLAY_DATE_FORMAT = "%B %d, %Y"
DROP_TIME_SUFFIX = "UTC"
FALLBACK_LOCATION = "Processing Center"
FALLBACK_DESCRIPTION = "Tracking update"

_CLOCK_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])")

# Zone abbreviations users type after a drop time; daylight variants resolve
# through the regional zone so "EST" in August still means Eastern time
ZONE_ABBREVIATIONS: dict[str, str] = {
    "UTC": "UTC",
    "GMT": "UTC",
    "Z": "UTC",
    "ET": "America/New_York",
    "EST": "America/New_York",
    "EDT": "America/New_York",
    "CT": "America/Chicago",
    "CST": "America/Chicago",
    "CDT": "America/Chicago",
    "MT": "America/Denver",
    "MST": "America/Denver",
    "MDT": "America/Denver",
    "PT": "America/Los_Angeles",
    "PST": "America/Los_Angeles",
    "PDT": "America/Los_Angeles",
    "BST": "Europe/London",
    "CET": "Europe/Paris",
    "CEST": "Europe/Paris",
    "JST": "Asia/Tokyo",
    "KST": "Asia/Seoul",
}


# =============================================================================
# Formatting helpers
# =============================================================================


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def today() -> date:
    return datetime.now(timezone.utc).date()


def format_display_date(value: date) -> str:
    """'June 12, 2025'"""
    return f"{value:%B} {value.day}, {value.year}"


def format_short_date(value: date) -> str:
    """'6/12/2025'"""
    return f"{value.month}/{value.day}/{value.year}"


def format_event_datetime(value: datetime) -> str:
    """'6/10/2025, 8:00:00 AM' in UTC."""
    value = _as_utc(value)
    clock = value.strftime("%I:%M:%S %p").lstrip("0")
    return f"{format_short_date(value)}, {clock}"


def format_drop_time(value: datetime) -> str:
    """'02:30 PM UTC'"""
    return f"{_as_utc(value):%I:%M %p} {DROP_TIME_SUFFIX}"


def parse_drop_time(text: str) -> time:
    """Leading 'HH:MM AM/PM' of a display time; midnight when absent."""
    match = _CLOCK_PATTERN.match(text or "")
    if match is None:
        return time(0, 0)
    hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
    if not (1 <= hour <= 12 and 0 <= minute <= 59):
        return time(0, 0)
    hour = hour % 12
    if meridiem.lower() == "pm":
        hour += 12
    return time(hour, minute)


def parse_drop_zone(text: str) -> tzinfo:
    """Zone written after a display time ('EST', 'Europe/London'); UTC otherwise."""
    match = _CLOCK_PATTERN.match(text or "")
    if match is None:
        return timezone.utc
    zone = text[match.end():].strip()
    if not zone:
        return timezone.utc
    name = ZONE_ABBREVIATIONS.get(zone.upper(), zone)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return timezone.utc


def drop_instant(day: date, text: str) -> datetime:
    """UTC instant of a drop given its date and display time."""
    local = datetime.combine(day, parse_drop_time(text), parse_drop_zone(text))
    return local.astimezone(timezone.utc)


def parse_estimated_delivery(text: str) -> Optional[datetime]:
    """Display estimate back to a timestamp; sentinels and junk map to None."""
    if not text or text in ESTIMATE_SENTINELS:
        return None
    try:
        return datetime.strptime(text, DISPLAY_DATE_FORMAT).replace(
            tzinfo=timezone.utc
        )
    except ValueError:
        pass
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def _parse_enum(enum_cls: type[EnumT], value: str, field: str) -> EnumT:
    """Match by value, then case-insensitively by value or name."""
    try:
        return enum_cls(value)
    except ValueError:
        pass
    folded = str(value).strip().lower()
    for member in enum_cls:
        if folded in (str(member.value).lower(), member.name.lower()):
            return member
    raise SchemaError(f"{field} has unexpected value {value!r}")


def _validate(model_cls, data: Any, source: str):
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise SchemaError.from_validation(source, e) from e


def _base_row(entity_id: Optional[str], owner_id: Optional[str]) -> dict:
    row: dict[str, Any] = {}
    if entity_id and not is_temporary_id(entity_id):
        row["id"] = entity_id
    if owner_id is not None:
        row["owner_id"] = owner_id
    return row


# =============================================================================
# Garments
# =============================================================================


def garment_from_row(data: Mapping[str, Any]) -> GarmentEntity:
    """Store row -> GarmentEntity; date_added truncated to its UTC day."""
    row = _validate(GarmentRow, dict(data), "garment row")
    return GarmentEntity(
        id=row.id,
        name=row.name,
        brand=row.brand,
        category=_parse_enum(Category, row.category, "category"),
        color=row.color or "Multi",
        image_url=row.image_url,
        date_added=_as_utc(row.date_added).date() if row.date_added else today(),
    )


def garment_to_row(entity: GarmentEntity, owner_id: Optional[str] = None) -> dict:
    row = _base_row(entity.id, owner_id)
    row.update(
        name=entity.name,
        brand=entity.brand,
        category=entity.category.value,
        image_url=entity.image_url,
        date_added=datetime.combine(entity.date_added, time(0, 0), timezone.utc),
        color=entity.color,
    )
    return row


# =============================================================================
# Orders
# =============================================================================


def label_created_event(simulated: bool = False) -> TrackingEvent:
    """The event every new order starts with."""
    description = "Label Created"
    if simulated:
        description = f"{description} {SIMULATED_MARKER}"
    return TrackingEvent(
        date=format_short_date(today()),
        location="Origin Scan",
        description=description,
    )


def order_from_row(data: Mapping[str, Any]) -> OrderEntity:
    """Store row -> OrderEntity; null estimate becomes 'Pending'."""
    row = _validate(OrderRow, dict(data), "order row")
    history = [
        _validate(TrackingEvent, event, "order history event")
        for event in (row.history or [])
    ]
    return OrderEntity(
        id=row.id,
        carrier=_parse_enum(Carrier, row.carrier, "carrier"),
        tracking_number=row.tracking_number,
        item_name=row.item_name,
        status=_parse_enum(TrackingStatus, row.status, "status"),
        estimated_delivery=(
            format_display_date(_as_utc(row.estimated_delivery))
            if row.estimated_delivery
            else ESTIMATE_PENDING
        ),
        history=history or [label_created_event()],
    )


def order_to_row(entity: OrderEntity, owner_id: Optional[str] = None) -> dict:
    row = _base_row(entity.id, owner_id)
    row.update(
        tracking_number=entity.tracking_number,
        carrier=entity.carrier.value,
        item_name=entity.item_name,
        status=entity.status.value,
        estimated_delivery=parse_estimated_delivery(entity.estimated_delivery),
        history=[event.model_dump(mode="json") for event in entity.history],
    )
    return row


# =============================================================================
# Drops
# =============================================================================


def drop_from_row(data: Mapping[str, Any]) -> DropEntity:
    """Store row -> DropEntity; drop_datetime split into date and time text."""
    row = _validate(DropRow, dict(data), "drop row")
    released_at = _as_utc(row.drop_datetime)
    fields: dict[str, Any] = {
        "id": row.id,
        "brand": row.brand,
        "name": row.name,
        "date": released_at.date(),
        "time": format_drop_time(released_at),
        "notified": row.notified,
        "url": row.url,
    }
    if row.image_url:
        fields["image_url"] = row.image_url
    return DropEntity(**fields)


def drop_to_row(entity: DropEntity, owner_id: Optional[str] = None) -> dict:
    row = _base_row(entity.id, owner_id)
    row.update(
        brand=entity.brand,
        name=entity.name,
        drop_datetime=drop_instant(entity.date, entity.time),
        image_url=entity.image_url,
        notified=entity.notified,
        url=entity.url,
    )
    return row


# =============================================================================
# Carrier webhook
# =============================================================================


def map_carrier_status(status: Optional[str]) -> TrackingStatus:
    return CARRIER_STATUS_MAP.get((status or "").lower(), TrackingStatus.PRE_TRANSIT)


def parse_tracking_response(body: Any) -> CarrierTrackingResponse:
    """Validate a webhook body; any deviation is a SchemaError."""
    if not isinstance(body, dict):
        raise SchemaError("tracking response is not a JSON object")
    return _validate(CarrierTrackingResponse, body, "tracking response")


def tracking_event_from_detail(detail: CarrierTrackingDetail) -> TrackingEvent:
    location = detail.tracking_location
    if location is not None and location.city:
        where = f"{location.city}, {location.state}" if location.state else location.city
    else:
        where = FALLBACK_LOCATION
    return TrackingEvent(
        date=format_event_datetime(detail.occurred_at),
        location=where,
        description=detail.message or detail.status or FALLBACK_DESCRIPTION,
    )


def order_from_tracking(
    carrier: Carrier,
    tracking_number: str,
    item_name: str,
    response: CarrierTrackingResponse,
) -> OrderEntity:
    """Confirmed webhook response -> OrderEntity without a collection id."""
    history = [
        tracking_event_from_detail(detail)
        for detail in reversed(response.tracking_details)
    ]
    if not history:
        history = [
            TrackingEvent(
                date=format_short_date(today()),
                location="N/A",
                description="Tracking info received (No History)",
            )
        ]
    return OrderEntity(
        carrier=carrier,
        tracking_number=tracking_number,
        item_name=item_name,
        status=map_carrier_status(response.status),
        estimated_delivery=(
            response.est_delivery_date
            or response.estimated_delivery_date
            or ESTIMATE_UNKNOWN
        ),
        history=history,
    )


def simulated_order(
    carrier: Carrier, tracking_number: str, item_name: str
) -> OrderEntity:
    """Stand-in record used whenever live tracking is unavailable."""
    return OrderEntity(
        carrier=carrier,
        tracking_number=tracking_number,
        item_name=item_name,
        status=TrackingStatus.PRE_TRANSIT,
        estimated_delivery=ESTIMATE_CALCULATING,
        history=[label_created_event(simulated=True)],
    )
