from flask import Blueprint
from Controllers.orderController import get_my_orders, get_my_order, stream_my_orders

order_routes = Blueprint('order_routes', __name__, url_prefix='/api/v1/orders')

order_routes.add_url_rule('', view_func=get_my_orders, methods=['GET'])
order_routes.add_url_rule('/stream', view_func=stream_my_orders, methods=['GET'])
order_routes.add_url_rule('/<code>', view_func=get_my_order, methods=['GET'])
