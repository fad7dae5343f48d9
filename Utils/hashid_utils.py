from hashids import Hashids
import os

# Short public order codes ("Order #...") derived from ObjectIds
HASHIDS_SALT = os.getenv('HASHIDS_SALT', 'tbucks-default-salt')
HASHIDS_MIN_LENGTH = int(os.getenv('HASHIDS_MIN_LENGTH', 8))
HASHIDS_ALPHABET = os.getenv(
    'HASHIDS_ALPHABET',
    'abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789'
)

hashids = Hashids(salt=HASHIDS_SALT, min_length=HASHIDS_MIN_LENGTH, alphabet=HASHIDS_ALPHABET)


def encode_object_id(obj_id) -> str:
    """Encode a Mongo ObjectId (or its hex string) into a short code."""
    return hashids.encode(int(str(obj_id), 16))


def decode_code(code: str) -> str | None:
    """Decode a code back into an ObjectId hex string, or None if it is not one of ours."""
    decoded = hashids.decode(code or "")
    if not decoded:
        return None
    return format(decoded[0], 'x').zfill(24)
