"""
Configuration for the 2FA microservice, read from the environment.

    PORT                 port for `python -m pki2fa_backend.app` (8080)
    SEED_FILE            where the decrypted seed is stored
    STUDENT_PRIVATE_KEY  PEM private key used by /decrypt-seed
    TOTP_WINDOW          +/- periods accepted by /verify-2fa (1)
    LOG_LEVEL            logging level name (INFO)
"""

import os

from pki2fa_store import default_seed_path


class Config:
    PORT = int(os.getenv("PORT", "8080"))
    SEED_FILE = os.getenv("SEED_FILE") or default_seed_path()
    STUDENT_PRIVATE_KEY = os.getenv("STUDENT_PRIVATE_KEY", "student_private.pem")
    TOTP_WINDOW = int(os.getenv("TOTP_WINDOW", "1"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Injected objects; None means "build from the settings above"
    PRIVATE_KEY = None
    SEED_STORE = None
    CLOCK = None
