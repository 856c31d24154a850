"""
seed_client.py - Ask the instructor API for an encrypted seed.

The API takes the student's public key and answers with the seed already
encrypted under it (RSA/OAEP-SHA256, base64).
"""

import requests

from .errors import SeedRequestError

DEFAULT_TIMEOUT = 30  # seconds


def request_encrypted_seed(
    api_url: str,
    student_id: str,
    github_repo_url: str,
    public_key_pem: str,
    timeout: float = DEFAULT_TIMEOUT,
    session=None,
) -> str:
    """
    POST the student identity and public key, return `encrypted_seed`.

    The public key is sent as-is, PEM newlines included.

    Raises:
        SeedRequestError: network failure, non-JSON body, or an API error
    """
    payload = {
        "student_id": student_id,
        "github_repo_url": github_repo_url,
        "public_key": public_key_pem.strip(),
    }
    http = session or requests
    try:
        resp = http.post(api_url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise SeedRequestError(f"Request failed: {e}") from e

    try:
        body = resp.json()
    except ValueError as e:
        raise SeedRequestError(
            f"Unexpected response (HTTP {resp.status_code}): {resp.text[:200]}"
        ) from e

    if isinstance(body, dict) and body.get("encrypted_seed"):
        return body["encrypted_seed"]
    if isinstance(body, dict) and body.get("error"):
        raise SeedRequestError(f"API error: {body['error']}")
    raise SeedRequestError(f"Unexpected response format (HTTP {resp.status_code})")
