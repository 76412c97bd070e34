# mentorportal/blueprints/auth/routes.py
import logging

from flask import jsonify
from flask_login import login_required, current_user

from ...exceptions import Conflict, Unauthorized
from ...extensions import db
from ...models.user import User
from ...security import issue_token
from ...services.directory import UserDirectory
from . import auth_bp
from .forms import RegisterForm, LoginForm

log = logging.getLogger(__name__)


def _with_token(user: User) -> dict:
    return {**user.to_dict(), "token": issue_token(user)}


@auth_bp.post("/register")
def register():
    form = RegisterForm()
    form.validate_or_raise()

    email = form.email.data.strip().lower()
    if UserDirectory().find_by_email(email):
        raise Conflict("User already exists with this email")

    user = User(
        first_name=form.firstName.data.strip(),
        last_name=form.lastName.data.strip(),
        email=email,
        role=form.role.data,
    )
    user.set_password(form.password.data)
    db.session.add(user)
    db.session.commit()
    log.info("Registered user id=%s role=%s", user.id, user.role)
    return jsonify(_with_token(user)), 201


@auth_bp.post("/login")
def login():
    form = LoginForm()
    form.validate_or_raise("Please provide email and password")

    user = UserDirectory().find_by_email(form.email.data)
    if not user or not user.check_password(form.password.data):
        log.info("Failed login for %s", form.email.data.strip().lower())
        raise Unauthorized("Invalid email or password")
    return jsonify(_with_token(user))


@auth_bp.get("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
