"""
2FA API ROUTES - FLASK BLUEPRINT

    POST /decrypt-seed   {"encrypted_seed": "<base64>"} -> {"status": "ok"}
    GET  /generate-2fa   -> {"code": "123456", "valid_for": 17}
    POST /verify-2fa     {"code": "123456"} -> {"valid": "true" | "false"}
    GET  /               service description

Every decryption or seed-validation failure answers the same
{"error": "Decryption failed"}; the cause only goes to the server log.

eg..:
curl -X POST http://localhost:8080/decrypt-seed -H "Content-Type: application/json" -d "{\"encrypted_seed\": \"...\"}"
curl http://localhost:8080/generate-2fa
curl -X POST http://localhost:8080/verify-2fa -H "Content-Type: application/json" -d "{\"code\": \"123456\"}"
"""

import logging
import time

from flask import Blueprint, current_app, jsonify, request

from pki2fa_core import keys
from pki2fa_core.errors import TwoFactorError
from pki2fa_core.otp_core import generate_totp_code, verify_totp_code
from pki2fa_core.protocols import provision_seed_b64

logger = logging.getLogger(__name__)

twofa_bp = Blueprint("twofa", __name__)

SEED_MISSING = "Seed not decrypted yet"


def _state() -> dict:
    return current_app.extensions["pki2fa"]


def _private_key():
    """Student private key, loaded from disk on first use and cached."""
    state = _state()
    if state.get("private_key") is None:
        state["private_key"] = keys.load_private_key(current_app.config["STUDENT_PRIVATE_KEY"])
    return state["private_key"]


def _now() -> float:
    clock = current_app.config.get("CLOCK") or time.time
    return clock()


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _stored_seed():
    """Seed from the store, or None if it is missing or unreadable."""
    try:
        return _state()["seed_store"].get()
    except (OSError, TwoFactorError) as e:
        logger.error("Cannot read stored seed: %s", e)
        return None


@twofa_bp.route("/decrypt-seed", methods=["POST"])
def decrypt_seed():
    data = _json_body()
    encrypted_seed = data.get("encrypted_seed")
    if not encrypted_seed:
        return jsonify({"error": "Missing encrypted_seed parameter"}), 400

    logger.info("Decrypting seed...")
    try:
        seed = provision_seed_b64(encrypted_seed, _private_key())
        _state()["seed_store"].put(seed)
    except (TwoFactorError, OSError) as e:
        logger.error("Decryption error (%s): %s", getattr(e, "kind", type(e).__name__), e)
        return jsonify({"error": "Decryption failed"}), 500

    logger.info("Seed decrypted and saved successfully")
    return jsonify({"status": "ok"}), 200


@twofa_bp.route("/generate-2fa", methods=["GET"])
def generate_2fa():
    seed = _stored_seed()
    if seed is None:
        return jsonify({"error": SEED_MISSING}), 500

    code, valid_for = generate_totp_code(seed, _now())
    logger.debug("Generated code valid for %ds", valid_for)
    return jsonify({"code": code, "valid_for": valid_for}), 200


@twofa_bp.route("/verify-2fa", methods=["POST"])
def verify_2fa():
    data = _json_body()
    code = data.get("code")
    if not code:
        return jsonify({"error": "Missing code"}), 400

    seed = _stored_seed()
    if seed is None:
        return jsonify({"error": SEED_MISSING}), 500

    is_valid = verify_totp_code(seed, code, _now(), window=current_app.config["TOTP_WINDOW"])
    logger.info("Verification result: %s", "VALID" if is_valid else "INVALID")
    return jsonify({"valid": "true" if is_valid else "false"}), 200


@twofa_bp.route("/", methods=["GET"])
def index():
    return jsonify({
        "service": "PKI-Based 2FA Microservice",
        "status": "running",
        "endpoints": [
            "POST /decrypt-seed",
            "GET /generate-2fa",
            "POST /verify-2fa",
        ],
    })
