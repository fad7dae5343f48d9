from mongoengine import (
    Document, StringField, IntField, DateTimeField, EnumField, ReferenceField
)
from datetime import datetime
from enum import Enum

from Utils.hashid_utils import encode_object_id


class OrderStatus(Enum):
    PLACED = "placed"
    SEEN = "seen"
    SHIPPED = "shipped"

    def next_status(self):
        """The only status this one may move to, or None once shipped."""
        return _NEXT_STATUS.get(self)


_NEXT_STATUS = {
    OrderStatus.PLACED: OrderStatus.SEEN,
    OrderStatus.SEEN: OrderStatus.SHIPPED,
}


class Order(Document):
    user = ReferenceField('User', required=True)
    username = StringField(required=True)
    # Item fields are a snapshot taken at purchase time, not a live reference
    item_id = StringField(required=True)
    item_name = StringField(required=True)
    price = IntField(required=True, min_value=1)
    status = EnumField(OrderStatus, default=OrderStatus.PLACED)
    fulfillment_text = StringField()
    created_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'orders',
        'indexes': ['user', 'created_at', 'status']
    }

    @property
    def code(self) -> str:
        return encode_object_id(self.id)

    @property
    def user_id(self) -> str:
        # to_mongo stores the reference as an ObjectId, no dereference needed
        return str(self.to_mongo().get('user'))

    def to_json(self, include_fulfillment: bool = False) -> dict:
        """
        Serialize the order.

        Owners only see the fulfillment text once the order has shipped;
        admin views pass include_fulfillment=True.
        """
        data = {
            'id': str(self.id),
            'code': self.code,
            'user_id': self.user_id,
            'username': self.username,
            'item_id': self.item_id,
            'item_name': self.item_name,
            'price': self.price,
            'status': self.status.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if include_fulfillment or self.status == OrderStatus.SHIPPED:
            data['fulfillment_text'] = self.fulfillment_text
        return data
