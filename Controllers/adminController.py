import logging
import math

from flask import request, jsonify, current_app, Response, stream_with_context
from mongoengine import ValidationError

from Models.orderModel import Order, OrderStatus
from Models.storeItemModel import StoreItem
from Models.userModel import User
from Utils.appError import AppError
from Utils.auth_decorator import roles_required, token_required
from Utils.feeds import Subscription, sse_events
from Utils.ledger import advance_order, gift_t_bucks, parse_positive_int, parse_text
from Utils.shortcut import KeySequenceTrigger

logger = logging.getLogger(__name__)

MAX_UNLOCK_KEYS = 256
BAD_KEYS = "keys must be a list of {key, at} objects"


def _hub():
    return current_app.extensions["change_hub"]


def _stream(channel, fetch, label):
    subscription = Subscription(
        _hub(), channel, fetch,
        heartbeat=current_app.config["STREAM_HEARTBEAT_SECONDS"]
    )
    return Response(stream_with_context(sse_events(subscription, label)), mimetype="text/event-stream")


def _users_snapshot():
    return {"users": [u.to_json() for u in User.objects.order_by("username")]}


def _orders_snapshot():
    orders = Order.objects.order_by("-created_at")
    return {"orders": [o.to_json(include_fulfillment=True) for o in orders]}


# =============================
# Users
# =============================
@roles_required("admin")
def admin_users_api(admin):
    return jsonify({"success": True, **_users_snapshot()}), 200


@roles_required("admin")
def admin_users_stream(admin):
    return _stream("users", _users_snapshot, f"admin-users:{admin.username}")


@roles_required("admin")
def admin_gift_t_bucks(admin, user_id):
    data = request.get_json(silent=True) or {}
    if data.get("amount") in (None, ""):
        raise AppError("Please select a user and enter an amount", 400)

    target = gift_t_bucks(user_id, data.get("amount"))
    _hub().notify("users")
    logger.info(f"🎁 {admin.username} gifted T-Bucks to {target.username} (balance={target.t_bucks})")
    return jsonify({
        "success": True,
        "message": f"Gifted T-Bucks to {target.username}",
        "user": target.to_json()
    }), 200


# =============================
# Store items
# =============================
@roles_required("admin")
def admin_add_item(admin):
    data = request.get_json(silent=True) or {}
    name = parse_text(data.get("name"), "name")
    description = parse_text(data.get("description"), "description")
    image_url = parse_text(data.get("image_url"), "image_url")
    price = data.get("price")

    if not (name and description and image_url and price):
        raise AppError("Please fill in all fields", 400)
    price = parse_positive_int(price, "price")

    item = StoreItem(name=name, description=description, price=price, image_url=image_url)
    try:
        item.save()
    except ValidationError as e:
        raise AppError(str(e), 400)

    _hub().notify("items")
    logger.info(f"📦 {admin.username} added store item {item.name} ({item.price} T-Bucks)")
    return jsonify({"success": True, "message": "Item added to store", "item": item.to_json()}), 201


# =============================
# Orders
# =============================
@roles_required("admin")
def admin_orders_api(admin):
    return jsonify({"success": True, **_orders_snapshot()}), 200


@roles_required("admin")
def admin_orders_stream(admin):
    return _stream("orders", _orders_snapshot, f"admin-orders:{admin.username}")


@roles_required("admin")
def admin_mark_seen(admin, order_id):
    order = advance_order(order_id, OrderStatus.SEEN)
    _hub().notify("orders")
    return jsonify({"success": True, "message": "Order status updated", "order": order.to_json(True)}), 200


@roles_required("admin")
def admin_ship_order(admin, order_id):
    data = request.get_json(silent=True) or {}
    order = advance_order(order_id, OrderStatus.SHIPPED, data.get("fulfillment_text"))
    _hub().notify("orders")
    return jsonify({"success": True, "message": "Order status updated", "order": order.to_json(True)}), 200


# =============================
# Key-sequence unlock
# =============================
@token_required
def admin_unlock(user):
    """
    Replay the client's recorded keystrokes through the unlock trigger.

    Body: {"keys": [{"key": "l", "at": 0.0}, ...]} with ``at`` in seconds.
    Only an admin can unlock; the sequence reveals the panel, it grants nothing.
    """
    data = request.get_json(silent=True) or {}
    keys = data.get("keys")
    if not isinstance(keys, list):
        raise AppError(BAD_KEYS, 400)
    if len(keys) > MAX_UNLOCK_KEYS:
        raise AppError(f"At most {MAX_UNLOCK_KEYS} keys per unlock attempt", 400)

    try:
        events = [(str(k["key"]), float(k["at"])) for k in keys]
    except (KeyError, TypeError, ValueError):
        raise AppError(BAD_KEYS, 400)

    previous = None
    for _, at in events:
        if not math.isfinite(at) or (previous is not None and at < previous):
            raise AppError("Key timestamps must be finite and in order", 400)
        previous = at

    trigger = KeySequenceTrigger(
        current_app.config["ADMIN_UNLOCK_PHRASE"],
        callback=lambda: None,
        timeout=current_app.config["ADMIN_UNLOCK_TIMEOUT"],
    )
    if not trigger.replay(events):
        return jsonify({"success": True, "unlocked": False}), 200

    if not user.is_admin:
        logger.warning(f"⚠️ Admin unlock sequence typed by non-admin {user.username}")
        raise AppError("Access denied. Requires role(s): admin", 403)

    logger.info(f"🔓 Admin panel unlocked by {user.username}")
    return jsonify({"success": True, "unlocked": True, "message": "Admin panel unlocked!"}), 200
