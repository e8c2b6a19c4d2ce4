"""Delivery address captured at checkout and copied onto each delivery."""

from protean.fields import Float, String

from kitchen.domain import kitchen


@kitchen.value_object
class Address:
    label = String(max_length=50)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=20)
    landmark = String(max_length=255)
    latitude = Float()
    longitude = Float()
