"""Admin panel: users, gifts, store items and order fulfilment."""
import pytest

from Models.orderModel import Order, OrderStatus
from Models.storeItemModel import StoreItem
from Models.userModel import User


@pytest.mark.parametrize("method,path", [
    ("get", "/admin/api/users"),
    ("get", "/admin/api/orders"),
    ("post", "/admin/api/items"),
    ("post", "/admin/api/users/5f1d7a3b9c8e4a0012345678/gift"),
])
def test_admin_routes_require_admin_role(client, make_user, auth_headers, method, path):
    assert getattr(client, method)(path).status_code == 401
    resp = getattr(client, method)(path, headers=auth_headers(make_user()))
    assert resp.status_code == 403


def test_demoted_admin_loses_access(client, admin, auth_headers):
    headers = auth_headers(admin)
    User.objects(id=admin.id).update_one(set__role="user")

    assert client.get("/admin/api/users", headers=headers).status_code == 403


def test_list_users_with_balances(client, admin, make_user, auth_headers):
    make_user("zoe", t_bucks=5)

    users = client.get("/admin/api/users", headers=auth_headers(admin)).get_json()["users"]

    assert {(u["username"], u["t_bucks"]) for u in users} == {("lachlan", 0), ("zoe", 5)}


def test_gift_adds_to_balance(client, admin, make_user, auth_headers):
    zoe = make_user("zoe", t_bucks=5)

    resp = client.post(f"/admin/api/users/{zoe.id}/gift", json={"amount": "25"}, headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.get_json()["user"]["t_bucks"] == 30
    zoe.reload()
    assert zoe.t_bucks == 30


@pytest.mark.parametrize("amount", [None, 0, -5, "abc", True, 2.5, "-3"])
def test_gift_rejects_invalid_amounts(client, admin, make_user, auth_headers, amount):
    zoe = make_user("zoe", t_bucks=5)

    resp = client.post(f"/admin/api/users/{zoe.id}/gift", json={"amount": amount}, headers=auth_headers(admin))

    assert resp.status_code == 400
    zoe.reload()
    assert zoe.t_bucks == 5


def test_gift_unknown_user(client, admin, auth_headers):
    headers = auth_headers(admin)
    assert client.post("/admin/api/users/5f1d7a3b9c8e4a0012345678/gift", json={"amount": 5}, headers=headers).status_code == 404
    assert client.post("/admin/api/users/nope/gift", json={"amount": 5}, headers=headers).status_code == 404


def test_add_item(client, admin, auth_headers):
    payload = {"name": "Sticker Pack", "description": "Five stickers.", "price": 10, "image_url": "https://img/s.png"}

    first = client.post("/admin/api/items", json=payload, headers=auth_headers(admin))
    duplicate = client.post("/admin/api/items", json=payload, headers=auth_headers(admin))

    assert first.status_code == 201
    assert first.get_json()["item"]["price"] == 10
    assert duplicate.status_code == 201
    assert StoreItem.objects(name="Sticker Pack").count() == 2


@pytest.mark.parametrize("overrides", [
    {"name": ""},
    {"description": None},
    {"image_url": "  "},
    {"price": 0},
    {"price": -10},
    {"price": "ten"},
    {"name": 123},
    {"description": ["Five", "stickers"]},
    {"image_url": {"href": "https://img/s.png"}},
])
def test_add_item_validation(client, admin, auth_headers, overrides):
    payload = {"name": "Sticker Pack", "description": "Five stickers.", "price": 10, "image_url": "https://img/s.png"}
    payload.update(overrides)

    resp = client.post("/admin/api/items", json=payload, headers=auth_headers(admin))

    assert resp.status_code == 400
    assert StoreItem.objects.count() == 0


def test_admin_sees_all_orders_newest_first(client, admin, make_user, make_item, make_order, auth_headers):
    box = make_item()
    older = make_order(make_user("alice"), box, minutes_ago=10)
    newer = make_order(make_user("bob"), box, status=OrderStatus.SEEN, fulfillment_text="draft", minutes_ago=1)

    orders = client.get("/admin/api/orders", headers=auth_headers(admin)).get_json()["orders"]

    assert [o["id"] for o in orders] == [str(newer.id), str(older.id)]
    assert orders[0]["fulfillment_text"] == "draft"


def test_order_moves_placed_seen_shipped(client, admin, make_user, make_item, make_order, auth_headers):
    order = make_order(make_user("alice"), make_item())
    headers = auth_headers(admin)

    seen = client.post(f"/admin/api/orders/{order.id}/seen", headers=headers)
    assert seen.status_code == 200
    assert seen.get_json()["order"]["status"] == "seen"

    shipped = client.post(
        f"/admin/api/orders/{order.id}/ship", json={"fulfillment_text": "Code: XYZ"}, headers=headers
    )
    assert shipped.status_code == 200

    order.reload()
    assert order.status == OrderStatus.SHIPPED
    assert order.fulfillment_text == "Code: XYZ"


def test_invalid_transitions_are_rejected(client, admin, make_user, make_item, make_order, auth_headers):
    order = make_order(make_user("alice"), make_item())
    headers = auth_headers(admin)

    # placed cannot skip straight to shipped
    assert client.post(f"/admin/api/orders/{order.id}/ship", json={}, headers=headers).status_code == 409

    client.post(f"/admin/api/orders/{order.id}/seen", headers=headers)
    assert client.post(f"/admin/api/orders/{order.id}/seen", headers=headers).status_code == 409

    client.post(f"/admin/api/orders/{order.id}/ship", json={}, headers=headers)
    assert client.post(f"/admin/api/orders/{order.id}/seen", headers=headers).status_code == 409
    assert client.post(f"/admin/api/orders/{order.id}/ship", json={}, headers=headers).status_code == 409

    order.reload()
    assert order.status == OrderStatus.SHIPPED
    assert order.fulfillment_text is None


def test_transition_unknown_order(client, admin, auth_headers):
    resp = client.post("/admin/api/orders/5f1d7a3b9c8e4a0012345678/seen", headers=auth_headers(admin))
    assert resp.status_code == 404


def test_ship_rejects_non_text_fulfillment(client, admin, make_user, make_item, make_order, auth_headers):
    order = make_order(make_user("alice"), make_item(), status=OrderStatus.SEEN)

    resp = client.post(f"/admin/api/orders/{order.id}/ship", json={"fulfillment_text": 42}, headers=auth_headers(admin))

    assert resp.status_code == 400
    order.reload()
    assert order.status == OrderStatus.SEEN
    assert order.fulfillment_text is None


def test_full_flow_makes_note_visible_to_owner(client, admin, make_user, make_item, auth_headers):
    alice = make_user("alice", t_bucks=100)
    item = make_item(price=60)
    client.post(f"/api/v1/items/{item.id}/purchase", headers=auth_headers(alice))
    order = Order.objects.get(user=alice.id)
    admin_headers = auth_headers(admin)

    client.post(f"/admin/api/orders/{order.id}/seen", headers=admin_headers)
    before = client.get("/api/v1/orders", headers=auth_headers(alice)).get_json()["orders"][0]
    client.post(f"/admin/api/orders/{order.id}/ship", json={"fulfillment_text": "See you Friday"}, headers=admin_headers)
    after = client.get("/api/v1/orders", headers=auth_headers(alice)).get_json()["orders"][0]

    assert "fulfillment_text" not in before
    assert after["fulfillment_text"] == "See you Friday"


def _keys(text, gap=0.1):
    return [{"key": ch, "at": i * gap} for i, ch in enumerate(text)]


def test_unlock_for_admin(client, admin, auth_headers):
    resp = client.post("/admin/api/unlock", json={"keys": _keys("lachlanadmin")}, headers=auth_headers(admin))

    assert resp.status_code == 200
    assert resp.get_json()["unlocked"] is True


def test_unlock_sequence_does_not_grant_access(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    assert client.post("/admin/api/unlock", json={"keys": _keys("LACHLANADMIN")}, headers=headers).status_code == 403
    assert client.get("/admin/api/users", headers=headers).status_code == 403


def test_unlock_without_match(client, admin, auth_headers):
    headers = auth_headers(admin)

    slow = client.post("/admin/api/unlock", json={"keys": _keys("lachlanadmin", gap=1.5)}, headers=headers)
    assert slow.get_json()["unlocked"] is False
    assert client.post("/admin/api/unlock", json={"keys": "lachlanadmin"}, headers=headers).status_code == 400
    assert client.post("/admin/api/unlock", json={"keys": [{"key": "l"}]}, headers=headers).status_code == 400
    assert client.post("/admin/api/unlock", json={"keys": []}).status_code == 401


@pytest.mark.parametrize("keys", [
    [{"key": ch, "at": "nan"} for ch in "lachlanadmin"],
    [{"key": "l", "at": 0.0}, {"key": "a", "at": "inf"}],
    [{"key": "l", "at": 0.5}, {"key": "a", "at": 0.2}],
    _keys("l" * 257),
])
def test_unlock_rejects_bad_timestamps_and_oversized_input(client, admin, auth_headers, keys):
    resp = client.post("/admin/api/unlock", json={"keys": keys}, headers=auth_headers(admin))

    assert resp.status_code == 400
    assert resp.get_json()["status"] == "fail"
