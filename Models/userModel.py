from mongoengine import (
    Document, EmailField, StringField, DateTimeField, EnumField, IntField
)
from bcrypt import hashpw, gensalt, checkpw
from datetime import datetime
from enum import Enum
import os

BCRYPT_ROUNDS = int(os.getenv('BCRYPT_ROUNDS', 12))


# =====================================
#  ROLE ENUM
# =====================================
class Role(Enum):
    USER = "user"
    ADMIN = "admin"


# =====================================
#  USER MODEL
# =====================================
class User(Document):
    username = StringField(required=True, unique=True, max_length=50)
    email = EmailField(required=True, unique=True)
    password = StringField(required=True, min_length=8)
    role = EnumField(Role, default=Role.USER)
    t_bucks = IntField(default=0, min_value=0)
    created_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'users',
        'indexes': ['email', 'username']
    }

    def clean(self):
        """Normalize input before saving."""
        if self.email:
            self.email = self.email.strip().lower()
        if self.username:
            self.username = self.username.strip()

    # =====================================
    #  SAVE OVERRIDE
    # =====================================
    def save(self, *args, **kwargs):
        """Hash the password on first save or after it was replaced."""
        if self.password and not self.password.startswith("$2b$"):
            self.password = self.hash_password(self.password)
        return super(User, self).save(*args, **kwargs)

    # =====================================
    #  PASSWORD HELPERS
    # =====================================
    def correct_password(self, candidate_password: str) -> bool:
        """Check if provided password matches the stored hash."""
        return checkpw(candidate_password.encode('utf-8'), self.password.encode('utf-8'))

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using bcrypt."""
        return hashpw(password.encode('utf-8'), gensalt(BCRYPT_ROUNDS)).decode('utf-8')

    @property
    def role_value(self) -> str:
        return self.role.value if isinstance(self.role, Role) else self.role

    @property
    def is_admin(self) -> bool:
        return self.role_value == Role.ADMIN.value

    @classmethod
    def find_by_identifier(cls, identifier: str):
        """Look a user up by email (anything with an @) or username."""
        identifier = (identifier or "").strip()
        if "@" in identifier:
            return cls.objects(email=identifier.lower()).first()
        return cls.objects(username=identifier).first()

    # =====================================
    #  JSON SERIALIZER
    # =====================================
    def to_json(self) -> dict:
        """Convert user document to JSON-friendly dict."""
        return {
            'id': str(self.id),
            'username': self.username,
            'email': self.email,
            'role': self.role_value,
            'is_admin': self.is_admin,
            't_bucks': self.t_bucks,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
