# mentorportal/blueprints/auth/forms.py
from __future__ import annotations

from wtforms import StringField, PasswordField, SelectField, IntegerField
from wtforms.validators import (
    DataRequired,
    Email,
    Length,
    Optional as Opt,
)

from ..forms import ApiForm
from ...models.user import Role


PASSWORD_VALIDATORS = [
    DataRequired(),
    Length(min=6, message="Password must be at least 6 characters long"),
]

ROLE_CHOICES = [(r.value, r.value) for r in Role]
SELF_SERVICE_ROLES = [(Role.MENTOR.value, Role.MENTOR.value), (Role.MENTEE.value, Role.MENTEE.value)]


class RegisterForm(ApiForm):
    firstName = StringField("First name", validators=[DataRequired(), Length(max=120)])
    lastName = StringField("Last name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=PASSWORD_VALIDATORS)
    # Admin accounts come from create.py or the users API
    role = SelectField("Role", choices=SELF_SERVICE_ROLES, validators=[DataRequired()])


class LoginForm(ApiForm):
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[DataRequired()])


class UserCreateForm(ApiForm):
    firstName = StringField("First name", validators=[DataRequired(), Length(max=120)])
    lastName = StringField("Last name", validators=[DataRequired(), Length(max=120)])
    email = StringField("Email", validators=[DataRequired(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=PASSWORD_VALIDATORS)
    role = SelectField("Role", choices=ROLE_CHOICES, validators=[DataRequired()])
    assignedMentorId = IntegerField("Assigned mentor", validators=[Opt()])


class UserUpdateForm(ApiForm):
    firstName = StringField("First name", validators=[Opt(), Length(max=120)])
    lastName = StringField("Last name", validators=[Opt(), Length(max=120)])
    email = StringField("Email", validators=[Opt(), Email(), Length(max=255)])
    password = PasswordField("Password", validators=[Opt(), Length(min=6, message="Password must be at least 6 characters long")])
    role = SelectField("Role", choices=[("", "")] + ROLE_CHOICES, validators=[Opt()], default="")
