"""ORM Models: imported here so Base.metadata knows every table."""

from gateway.models.product import Product  # noqa: F401
