from flask import Blueprint
from Controllers.adminController import (
    admin_users_api, admin_users_stream, admin_gift_t_bucks,
    admin_add_item,
    admin_orders_api, admin_orders_stream, admin_mark_seen, admin_ship_order,
    admin_unlock
)

admin_routes = Blueprint("admin_routes", __name__, url_prefix='/admin/api')

# Users
admin_routes.add_url_rule('/users', view_func=admin_users_api, methods=['GET'])
admin_routes.add_url_rule('/users/stream', view_func=admin_users_stream, methods=['GET'])
admin_routes.add_url_rule('/users/<user_id>/gift', view_func=admin_gift_t_bucks, methods=['POST'])

# Store
admin_routes.add_url_rule('/items', view_func=admin_add_item, methods=['POST'])

# Orders
admin_routes.add_url_rule('/orders', view_func=admin_orders_api, methods=['GET'])
admin_routes.add_url_rule('/orders/stream', view_func=admin_orders_stream, methods=['GET'])
admin_routes.add_url_rule('/orders/<order_id>/seen', view_func=admin_mark_seen, methods=['POST'])
admin_routes.add_url_rule('/orders/<order_id>/ship', view_func=admin_ship_order, methods=['POST'])

# Hidden key-sequence unlock
admin_routes.add_url_rule('/unlock', view_func=admin_unlock, methods=['POST'])
