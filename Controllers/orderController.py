from bson import ObjectId
from flask import jsonify, current_app, Response, stream_with_context

from Models.orderModel import Order
from Utils.appError import AppError
from Utils.auth_decorator import token_required
from Utils.feeds import Subscription, sse_events
from Utils.hashid_utils import decode_code


def _user_orders(user_id):
    orders = Order.objects(user=user_id).order_by('-created_at')
    return {"orders": [o.to_json() for o in orders]}


@token_required
def get_my_orders(user):
    return jsonify({"success": True, **_user_orders(user.id)}), 200


@token_required
def get_my_order(user, code):
    order_id = decode_code(code)
    order = Order.objects(id=order_id, user=user.id).first() if order_id and ObjectId.is_valid(order_id) else None
    if not order:
        raise AppError("Order not found", 404)
    return jsonify({"success": True, "order": order.to_json()}), 200


@token_required
def stream_my_orders(user):
    user_id = user.id
    subscription = Subscription(
        current_app.extensions["change_hub"], "orders", lambda: _user_orders(user_id),
        heartbeat=current_app.config["STREAM_HEARTBEAT_SECONDS"]
    )
    return Response(
        stream_with_context(sse_events(subscription, f"orders:{user.username}")),
        mimetype="text/event-stream"
    )
