from mongoengine import Document, StringField, IntField, DateTimeField
from datetime import datetime


class StoreItem(Document):
    name = StringField(required=True, max_length=200)
    description = StringField(required=True, max_length=2000)
    price = IntField(required=True, min_value=1)  # T-Bucks
    image_url = StringField(required=True)
    created_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'store_items',
        'indexes': ['created_at'],
        'ordering': ['created_at']
    }

    def to_json(self) -> dict:
        return {
            'id': str(self.id),
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'image_url': self.image_url,
        }
