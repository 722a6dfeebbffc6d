"""
Order tracking API routes.

Adding an order first asks the tracking webhook for live status (or
simulates it), then runs the record through the optimistic create path.
"""

from fastapi import APIRouter, Depends, Response

from gated.api.auth import get_ingestor, get_session
from gated.models.order import OrderCreateRequest, OrderCreateResponse, OrderEntity
from gated.sync.session import Session
from gated.tracking.ingestor import TrackingIngestor

router = APIRouter()


@router.get("/orders", response_model=list[OrderEntity])
async def list_orders(session: Session = Depends(get_session)) -> list[OrderEntity]:
    """List tracked orders, newest first."""
    return list(session.orders)


@router.post("/orders", response_model=OrderCreateResponse, status_code=202)
async def track_order(
    request: OrderCreateRequest,
    session: Session = Depends(get_session),
    ingestor: TrackingIngestor = Depends(get_ingestor),
) -> OrderCreateResponse:
    """
    Start tracking a package.

    Live tracking failures never fail the request: the order is added with
    simulated data and the response carries a one-time notice.
    """
    tracking = await ingestor.ingest(request)
    if not session.active:
        # Signed out while the webhook call was outstanding
        return OrderCreateResponse(
            order=tracking.order, simulated=tracking.simulated, notice=tracking.notice
        )

    session.coordinator.orders.create(tracking.order)
    return OrderCreateResponse(
        order=session.orders[0],
        simulated=tracking.simulated,
        notice=tracking.notice,
    )


@router.delete("/orders/{order_id}", status_code=204)
async def delete_order(
    order_id: str,
    session: Session = Depends(get_session),
) -> Response:
    """Stop tracking an order; removing an unknown id is a no-op."""
    session.coordinator.orders.delete(order_id)
    return Response(status_code=204)
