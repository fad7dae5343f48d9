import logging

from flask import jsonify, current_app, Response, stream_with_context

from Models.storeItemModel import StoreItem
from Utils.auth_decorator import token_required
from Utils.feeds import Subscription, sse_events
from Utils.ledger import get_or_404, purchase_item

logger = logging.getLogger(__name__)


def _items_snapshot():
    return {"items": [item.to_json() for item in StoreItem.objects]}


@token_required
def list_items(user):
    return jsonify({"success": True, **_items_snapshot()}), 200


@token_required
def stream_items(user):
    subscription = Subscription(
        current_app.extensions["change_hub"], "items", _items_snapshot,
        heartbeat=current_app.config["STREAM_HEARTBEAT_SECONDS"]
    )
    return Response(
        stream_with_context(sse_events(subscription, f"items:{user.username}")),
        mimetype="text/event-stream"
    )


@token_required
def purchase(user, item_id):
    item = get_or_404(StoreItem, item_id, "Item")
    order = purchase_item(user, item)

    current_app.extensions["change_hub"].notify("users", "orders")
    logger.info(f"🛒 {user.username} bought {item.name} for {item.price} T-Bucks")
    return jsonify({
        "success": True,
        "message": "Order placed successfully!",
        "order": order.to_json(),
        "t_bucks": user.t_bucks
    }), 201
