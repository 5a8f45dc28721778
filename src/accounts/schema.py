"""Schema for accounts module."""

from ninja import ModelSchema

from .models import FelicityUser


class MinimalUserSchema(ModelSchema):
    display_name: str

    class Meta:
        model = FelicityUser
        fields = ["id", "first_name", "last_name", "email"]
