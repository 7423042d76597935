"""
Form checks run before a create or update reaches the API.

Each validator returns a mapping of field name to message; an empty mapping
means the form may be submitted. Some rules here are stricter than the
server, which only enforces what its models declare.
"""

from datetime import datetime
from typing import Any, Mapping, Optional

from src.domain.derivations import parse_datetime, utcnow

Errors = dict[str, str]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _out_of_range(value: Any, low: float, high: float) -> bool:
    if value is None or value == "":
        return False
    number = _number(value)
    return number is None or not low <= number <= high


def validate_inventory_item(form: Mapping[str, Any], now: Optional[datetime] = None) -> Errors:
    errors: Errors = {}
    if _blank(form.get("name")):
        errors["name"] = "Name is required"

    quantity = _number(form.get("quantity"))
    if quantity is None or quantity < 0:
        errors["quantity"] = "Valid quantity is required"

    if _blank(form.get("unit")):
        errors["unit"] = "Unit is required"

    cost = _number(form.get("cost"))
    if cost is None or cost < 0:
        errors["cost"] = "Valid cost is required"

    minimum = _number(form.get("minThreshold"))
    maximum = _number(form.get("maxThreshold"))
    if minimum is not None and maximum is not None and minimum >= maximum:
        errors["minThreshold"] = "Minimum threshold must be less than maximum"

    expiry = parse_datetime(form.get("expiryDate"))
    if expiry is not None and expiry <= (now or utcnow()):
        errors["expiryDate"] = "Expiry date must be in the future"
    return errors


def validate_enclosure(form: Mapping[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(form.get("name")):
        errors["name"] = "Enclosure name is required"
    if _blank(form.get("type")):
        errors["type"] = "Enclosure type is required"

    capacity = _number(form.get("capacity"))
    if capacity is None or capacity < 1:
        errors["capacity"] = "Capacity must be at least 1"

    if _blank(form.get("location")):
        errors["location"] = "Location is required"
    if _out_of_range(form.get("temperature"), -50, 60):
        errors["temperature"] = "Temperature must be between -50°C and 60°C"
    if _out_of_range(form.get("humidity"), 0, 100):
        errors["humidity"] = "Humidity must be between 0% and 100%"
    return errors


def validate_animal(form: Mapping[str, Any]) -> Errors:
    errors: Errors = {}
    if _blank(form.get("name")):
        errors["name"] = "Name is required"
    if _blank(form.get("species")) and _blank(form.get("speciesId")):
        errors["species"] = "Species is required"

    age = _number(form.get("age"))
    if age is not None and age < 0:
        errors["age"] = "Age must be positive"
    weight = _number(form.get("weight"))
    if weight is not None and weight <= 0:
        errors["weight"] = "Weight must be positive"

    if _blank(form.get("enclosureId")):
        errors["enclosureId"] = "Enclosure is required"
    return errors


def validate_feeding_schedule(form: Mapping[str, Any]) -> Errors:
    errors: Errors = {}
    if not form.get("item"):
        errors["item"] = "Food item is required"
    if not form.get("animalId"):
        errors["animalId"] = "Animal is required"
    if _blank(form.get("foodType")):
        errors["foodType"] = "Food type is required"

    quantity = _number(form.get("quantity"))
    if quantity is None or quantity <= 0:
        errors["quantity"] = "Quantity must be greater than 0"

    if not form.get("frequency"):
        errors["frequency"] = "Frequency is required"
    if not form.get("time"):
        errors["time"] = "Time is required"
    if not form.get("caretakerId"):
        errors["caretakerId"] = "Caretaker is required"
    return errors
