"""
Authentication blueprint:
- POST /login   -> access token + refresh token
- POST /refresh -> new access token (bearer = refresh token)
- POST /revoke  -> revoke the refresh token in the bearer header

Access tokens are HS256 JWTs; refresh tokens are opaque strings stored in
the database so they can be revoked.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from api.extensions import get_services
from models.schemas.user import LoginSchema, UserOutSchema
from utils.decorators import get_bearer_token

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
user_out_schema = UserOutSchema()


@bp.post("/login")
def login():
    """
    Login: return the profile, an access token and a refresh token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
             expiresIn: { type: integer, description: "seconds, capped at 3600" }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: Missing email or password
      401:
        description: Unauthorized
    """
    data = login_schema.load(request.get_json(silent=True) or {})
    result = get_services().sessions.login(data["email"], data["password"], data.get("expires_in"))
    return jsonify(
        {
            "user": user_out_schema.dump(result.user),
            "token": result.token,
            "refreshToken": result.refresh_token,
        }
    ), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token. The refresh token stays valid.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: OK (returns a new access token)
      401:
        description: Refresh token missing, unknown, revoked or expired
    """
    token = get_bearer_token(request)
    return jsonify({"token": get_services().sessions.refresh(token)}), 200


@bp.post("/revoke")
def revoke():
    """
    Logout: revoke the refresh token. Succeeds whether or not the token exists.
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      204:
        description: ""
      401:
        description: Missing bearer credential
    """
    token = get_bearer_token(request)
    get_services().sessions.revoke(token)
    return ("", 204)
