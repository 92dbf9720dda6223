"""Local accounts: a plaintext lookup against the client's own user list."""
import logging
import time

from models import User

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


def timestamp_id():
    """Millisecond timestamp as a string, used for client-generated ids."""
    return str(int(time.time() * 1000))


def register(state, name, email, password):
    if any(u.email == email for u in state.users):
        raise AuthError("User already exists.")

    user = User(id=timestamp_id(), name=name, email=email, password=password)
    state.users.append(user)
    state.user = user.session_record()
    logger.info("Registered user %s", user.id)
    return state.user


def login(state, email, password):
    user = next((u for u in state.users if u.email == email and u.password == password), None)
    if not user:
        raise AuthError("Invalid email or password.")

    state.user = user.session_record()
    return state.user


def logout(state):
    state.user = None
