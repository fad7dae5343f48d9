from flask import Blueprint
from Controllers.storeController import list_items, stream_items, purchase
from Utils.rate_limit import limiter, purchase_limit

# ----------------------------
# Storefront routes
# ----------------------------
store_routes = Blueprint('store_routes', __name__, url_prefix='/api/v1/items')

store_routes.add_url_rule('', view_func=list_items, methods=['GET'])
store_routes.add_url_rule('/stream', view_func=stream_items, methods=['GET'])
store_routes.add_url_rule(
    '/<item_id>/purchase', view_func=limiter.limit(purchase_limit)(purchase), methods=['POST']
)
