import logging

from sqlalchemy.orm import Session

from .errors import FoodNotFound, InvalidIdentifier
from .models import Food, is_valid_id

logger = logging.getLogger(__name__)


def list_foods(db: Session):
    return db.query(Food).order_by(Food.name).all()


def add_food(db: Session, name, description, price, category):
    food = Food(name=name, description=description, price=price, category=category)
    db.add(food)
    db.commit()
    db.refresh(food)
    logger.info("Food %s (%s) added at %s", food.id, name, price)
    return food


def remove_food(db: Session, food_id):
    if not is_valid_id(food_id):
        raise InvalidIdentifier("Invalid Food ID")
    food = db.get(Food, food_id)
    if food is None:
        raise FoodNotFound("Food not found")
    db.delete(food)
    db.commit()
    logger.info("Food %s removed", food_id)
