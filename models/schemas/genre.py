from marshmallow import Schema, fields, validate, ValidationError


def _not_blank(value: str) -> None:
    if not value.strip():
        raise ValidationError("Name must not be blank.")


_name_validators = [validate.Length(min=1, max=64), _not_blank]


class GenreCreateSchema(Schema):
    name = fields.String(required=True, validate=_name_validators)


class GenreUpdateSchema(Schema):
    name = fields.String(validate=_name_validators)


class GenreOutSchema(Schema):
    id = fields.String()
    name = fields.String()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
