# mentorportal/blueprints/forms.py
from __future__ import annotations

from flask import request
from flask_wtf import FlaskForm
from wtforms.validators import DataRequired, InputRequired

from ..exceptions import InvalidField, MissingField


def json_body() -> dict:
    """The request's JSON object; an absent or unparsable body reads as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidField("Request body must be a JSON object")
    return data


def text_value(data: dict, key: str) -> str:
    """Stripped string at ``key``; missing and null read as ''."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidField(f"{key} must be text")
    return value.strip()


class ApiForm(FlaskForm):
    """FlaskForm fed from the JSON body; bearer-token API, so no CSRF token."""

    class Meta:
        csrf = False

    def __init__(self, *args, **kwargs):
        # wtforms wraps the JSON payload as form data; only objects map onto fields
        if request.is_json:
            json_body()
        super().__init__(*args, **kwargs)

    def _missing(self) -> list[str]:
        missing = []
        for field in self:
            required = any(isinstance(v, (DataRequired, InputRequired)) for v in field.validators)
            if required and (field.data is None or (isinstance(field.data, str) and not field.data.strip())):
                missing.append(field.name)
        return missing

    def validate_or_raise(self, missing_message: str = "Please provide all required fields"):
        missing = self._missing()
        if missing:
            raise MissingField(f"{missing_message} ({', '.join(missing)})")
        if not self.validate():
            msgs = [f"{name}: {'; '.join(errs)}" for name, errs in self.errors.items()]
            raise InvalidField(". ".join(msgs))
