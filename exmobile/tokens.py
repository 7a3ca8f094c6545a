# exmobile/tokens.py
import datetime

import jwt  # PyJWT

ALGORITHM = "HS256"


class InvalidToken(Exception):
    """Raised when a token's signature, format or expiry check fails."""


def issue_token(email, secret, expires_days=9):
    """
    Signs an access token binding `email` to the payload.
    Callers must make sure a user with this email exists before issuing.
    """
    payload = {
        'email': email,
        'exp': datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=expires_days)
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token, secret):
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise InvalidToken("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidToken(f"Token is invalid: {e}") from e
