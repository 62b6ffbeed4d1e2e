from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.extensions import get_services
from models.schemas.user import UserCreateSchema, UserUpdateSchema, UserOutSchema
from utils.decorators import jwt_required

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()


@bp.post("/users")
def register():
    """
    Register a new user.
    ---
    tags:
      - Users
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: Email already registered
    """
    data = user_create_schema.load(request.get_json(silent=True) or {})
    user = get_services().sessions.register(data["email"], data["password"])
    return jsonify({"data": user_out_schema.dump(user)}), 201


@bp.put("/users")
@jwt_required()
def update_me():
    """
    Replace the caller's email and password.
    Identity comes from the access token; any user id in the body is ignored.
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            email: { type: string }
            password: { type: string }
    responses:
      200:
        description: Updated profile
      400:
        description: Missing or invalid fields
      401:
        description: Unauthorized
      409:
        description: Email already registered
    """
    data = user_update_schema.load(request.get_json(silent=True) or {})
    user = get_services().sessions.update_credentials(g.current_user_id, data["email"], data["password"])
    return jsonify({"data": user_out_schema.dump(user)}), 200
