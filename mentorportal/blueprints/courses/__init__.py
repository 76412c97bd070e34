from flask import Blueprint

courses_bp = Blueprint("courses", __name__)

# Import route modules to register their endpoints
from . import courses, modules, content  # noqa: E402,F401
