"""
Authentication blueprint:
- POST /auth/sign-in
- POST /auth/sign-up
- POST /auth/verify
- POST /auth/refresh
- POST /auth/sign-out

The access token travels in JSON bodies; the refresh token only ever travels
in the HTTP-only refreshToken cookie.
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify, current_app

from models.schemas.admin import SignInSchema, SignUpSchema
from utils.decorators import json_body
from utils.errors import AuthError
from utils.handshake import SessionHandshake

bp = Blueprint("auth", __name__, url_prefix="/auth")

sign_in_schema = SignInSchema()
sign_up_schema = SignUpSchema()


def _handshake() -> SessionHandshake:
    return current_app.extensions["handshake"]


def _set_refresh_cookie(response, value: str, max_age: int):
    response.set_cookie(
        current_app.config["REFRESH_COOKIE_NAME"],
        value,
        max_age=max_age,
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Strict",
        path="/",
    )
    return response


@bp.post("/sign-in")
def sign_in():
    """
    Sign in: returns accessToken, sets the refreshToken cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string }
            password: { type: string }
    responses:
      200:
        description: Signed in (Set-Cookie refreshToken)
      400:
        description: Missing fields
      401:
        description: Invalid username or password
    """
    data = sign_in_schema.load(json_body())
    handshake = _handshake()
    access_token, refresh_token = handshake.sign_in(data["username"], data["password"])

    response = jsonify({"message": "Signed in successfully", "accessToken": access_token})
    max_age = int(handshake.tokens.refresh_expires.total_seconds())
    return _set_refresh_cookie(response, refresh_token, max_age), 200


@bp.post("/sign-up")
def sign_up():
    """
    Register an admin (at most two)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            fullName: { type: string }
            username: { type: string }
            email: { type: string }
            password: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Missing fields
      403:
        description: Admin cap reached
      409:
        description: Username or email already registered
    """
    data = sign_up_schema.load(json_body())
    _handshake().sign_up(
        full_name=data["full_name"],
        username=data["username"],
        email=data["email"],
        password=data["password"],
    )
    return jsonify({"message": "Admin registered successfully"}), 201


@bp.post("/verify")
def verify():
    """
    Verify an access token
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          properties:
            accessToken: { type: string }
    responses:
      200:
        description: "{valid: true, user}"
      401:
        description: "{valid: false, error}"
    """
    payload = json_body()
    try:
        claims = _handshake().verify(payload.get("accessToken"))
    except AuthError as err:
        return jsonify({"valid": False, "error": err.message}), err.status
    return jsonify({"valid": True, "user": claims}), 200


@bp.post("/refresh")
def refresh():
    """
    Exchange the refreshToken cookie for a new access token
    ---
    tags:
      - Auth
    responses:
      200:
        description: "{accessToken}"
      401:
        description: No refresh token
      403:
        description: Invalid or expired refresh token
    """
    token = request.cookies.get(current_app.config["REFRESH_COOKIE_NAME"])
    access_token = _handshake().refresh(token)
    return jsonify({"accessToken": access_token}), 200


@bp.post("/sign-out")
def sign_out():
    """
    Sign out: clears the refreshToken cookie
    ---
    tags:
      - Auth
    responses:
      200:
        description: Signed out
    """
    response = jsonify({"message": "Signed out successfully"})
    return _set_refresh_cookie(response, "", 0), 200
