from __future__ import annotations

from flask import Blueprint, request, jsonify, g

from api.extensions import get_services
from models.schemas.chirp import ChirpCreateSchema, ChirpOutSchema
from services import chirps
from utils.decorators import jwt_required

bp = Blueprint("chirps", __name__)

chirp_create_schema = ChirpCreateSchema()
chirp_out_schema = ChirpOutSchema()
chirps_out_schema = ChirpOutSchema(many=True)


@bp.post("/chirps")
@jwt_required()
def create_chirp():
    """
    Post a chirp as the authenticated user
    ---
    tags: [Chirps]
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            body: { type: string, maxLength: 140 }
    responses:
      201: { description: Created }
      400: { description: Missing or too long body }
      401: { description: Unauthorized }
    """
    data = chirp_create_schema.load(request.get_json(silent=True) or {})
    chirp = chirps.create_chirp(get_services().storage, g.current_user_id, data["body"])
    return jsonify({"data": chirp_out_schema.dump(chirp)}), 201


@bp.get("/chirps")
def list_chirps():
    """
    List chirps, oldest first unless sort=desc
    ---
    tags: [Chirps]
    parameters:
      - in: query
        name: authorId
        type: string
      - in: query
        name: sort
        type: string
        default: asc
        description: "Allowed: asc or desc"
    responses:
      200: { description: OK }
      400: { description: Unsupported sort order }
    """
    rows = chirps.list_chirps(
        get_services().storage,
        author_id=request.args.get("authorId"),
        sort=request.args.get("sort"),
    )
    return jsonify({"data": chirps_out_schema.dump(rows)}), 200


@bp.get("/chirps/<chirp_id>")
def get_chirp(chirp_id: str):
    """
    Get a chirp by id
    ---
    tags: [Chirps]
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    chirp = chirps.get_chirp(get_services().storage, chirp_id)
    return jsonify({"data": chirp_out_schema.dump(chirp)}), 200


@bp.delete("/chirps/<chirp_id>")
@jwt_required()
def delete_chirp(chirp_id: str):
    """
    Delete one of your own chirps
    ---
    tags: [Chirps]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: chirp_id
        type: string
        required: true
    responses:
      204: { description: Deleted }
      401: { description: Unauthorized }
      403: { description: Not the owner }
      404: { description: Not found }
    """
    chirps.delete_chirp(get_services().storage, chirp_id, g.current_user_id)
    return ("", 204)
