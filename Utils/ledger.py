"""
Balance and order mutations.

Every balance change is a single atomic ``$inc`` on the user document and
every status change is a compare-and-set on the stored status, so two
requests racing on the same record cannot overwrite each other.
"""
import logging

from bson import ObjectId

from Models.orderModel import Order, OrderStatus
from Models.storeItemModel import StoreItem
from Models.userModel import User
from Utils.appError import AppError

logger = logging.getLogger(__name__)
orders_logger = logging.getLogger("orders")

INSUFFICIENT_FUNDS = "Not enough T-Bucks!"


def get_or_404(model, object_id, label):
    doc = model.objects(id=object_id).first() if ObjectId.is_valid(str(object_id)) else None
    if not doc:
        raise AppError(f"{label} not found", 404)
    return doc


def parse_positive_int(value, field):
    """Accept ints and digit strings; reject bools, zero, negatives and the rest."""
    if isinstance(value, bool):
        raise AppError(f"{field} must be a positive whole number", 400)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise AppError(f"{field} must be a positive whole number", 400)
    return value


def parse_text(value, field):
    """Strip a text field; missing values become '', anything but a string is a 400."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AppError(f"{field} must be text", 400)
    return value.strip()


def purchase_item(user: User, item: StoreItem) -> Order:
    """
    Charge ``user`` for one ``item`` and record the order.

    The balance already loaded on ``user`` is checked first so an obviously
    unaffordable purchase never reaches the database. The charge itself is
    conditional on the stored balance still covering the price. If the order
    cannot be written afterwards, the charge is refunded.
    """
    if user.t_bucks < item.price:
        raise AppError(INSUFFICIENT_FUNDS, 400)

    # Raw $inc: mongoengine validates dec__ values against the field's min_value
    charged = User.objects(id=user.id, t_bucks__gte=item.price).update_one(
        __raw__={"$inc": {"t_bucks": -item.price}}
    )
    if not charged:
        user.reload()
        raise AppError(INSUFFICIENT_FUNDS, 400)

    order = Order(
        user=user,
        username=user.username,
        item_id=str(item.id),
        item_name=item.name,
        price=item.price,
        status=OrderStatus.PLACED,
    )
    try:
        order.save()
    except Exception:
        logger.exception(f"Order write failed for user={user.id} item={item.id}; refunding {item.price}")
        try:
            User.objects(id=user.id).update_one(inc__t_bucks=item.price)
        except Exception:
            logger.exception(f"Refund of {item.price} T-Bucks to user={user.id} failed; balance needs manual correction")
        raise AppError("Failed to place order", 500)

    user.reload()
    orders_logger.info(
        f"PURCHASE order={order.id} user={user.username} item={item.name} price={item.price} balance={user.t_bucks}"
    )
    return order


def gift_t_bucks(target_id, amount) -> User:
    amount = parse_positive_int(amount, "amount")
    target = get_or_404(User, target_id, "User")
    User.objects(id=target.id).update_one(inc__t_bucks=amount)
    target.reload()
    orders_logger.info(f"GIFT user={target.username} amount={amount} balance={target.t_bucks}")
    return target


def advance_order(order_id, target: OrderStatus, fulfillment_text=None) -> Order:
    """
    Move an order one step along placed -> seen -> shipped.

    Raises 409 when ``target`` is not the order's next status, including
    when another admin advanced it first.
    """
    order = get_or_404(Order, order_id, "Order")
    if order.status.next_status() != target:
        raise AppError(f"Cannot move order from '{order.status.value}' to '{target.value}'", 409)

    changes = {"set__status": target}
    if target == OrderStatus.SHIPPED:
        text = parse_text(fulfillment_text, "fulfillment_text")
        if text:
            changes["set__fulfillment_text"] = text

    updated = Order.objects(id=order.id, status=order.status).update_one(**changes)
    if not updated:
        raise AppError("Order was updated by someone else; reload and try again", 409)

    order.reload()
    orders_logger.info(f"STATUS order={order.id} status={order.status.value}")
    return order
