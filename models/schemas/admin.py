from marshmallow import Schema, fields, pre_load, EXCLUDE


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class SignUpSchema(Schema):
    """Presence of every field is checked by the handshake, not here."""
    class Meta:
        unknown = EXCLUDE

    full_name = fields.String(data_key="fullName", load_default=None)
    username = fields.String(load_default=None)
    email = fields.Email(load_default=None)
    password = fields.String(load_only=True, load_default=None)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data, email=_norm_email(data["email"]))
        return data


class SignInSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    username = fields.String(load_default=None)
    password = fields.String(load_default=None)
