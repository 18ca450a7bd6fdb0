from sqlalchemy.orm import Session

from .errors import InvalidIdentifier, UserAlreadyExists, UserNotFound
from .models import User, is_valid_id


def register_user(db: Session, name, email):
    if db.query(User).filter(User.email == email).first():
        raise UserAlreadyExists("User already exists")
    user = User(name=name, email=email, cart_data={})
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _get_user(db: Session, user_id):
    if not is_valid_id(user_id):
        raise InvalidIdentifier("Invalid User ID")
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound("User not found")
    return user


def add_to_cart(db: Session, user_id, item_id):
    user = _get_user(db, user_id)
    if not is_valid_id(item_id):
        raise InvalidIdentifier("Invalid Food ID")
    user.cart_data[item_id] = user.cart_data.get(item_id, 0) + 1
    db.commit()
    return dict(user.cart_data)


def remove_from_cart(db: Session, user_id, item_id):
    user = _get_user(db, user_id)
    if not is_valid_id(item_id):
        raise InvalidIdentifier("Invalid Food ID")
    if user.cart_data.get(item_id, 0) > 1:
        user.cart_data[item_id] -= 1
    else:
        # Drop the line once it reaches zero.
        user.cart_data.pop(item_id, None)
    db.commit()
    return dict(user.cart_data)


def get_cart(db: Session, user_id):
    return dict(_get_user(db, user_id).cart_data)
