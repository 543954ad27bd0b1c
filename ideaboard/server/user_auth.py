"""Resolution of the requesting user.

A single strategy: when session API keys are configured each request must
carry one in the X-Session-API-Key header and is attributed to the user the
key maps to. Without configured keys the server runs in single-user mode.
"""

import hmac

from fastapi import HTTPException, Request, status

from ideaboard.core.logger import ideaboard_logger as logger
from ideaboard.server.shared import config

SESSION_API_KEY_HEADER = 'X-Session-API-Key'
LOCAL_USER_ID = 'local'


async def get_user_id(request: Request) -> str:
    api_keys = config.session_api_keys
    if not api_keys:
        return LOCAL_USER_ID

    api_key = request.headers.get(SESSION_API_KEY_HEADER)
    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail='Missing session API key',
        )

    for known_key, user_id in api_keys.items():
        # Constant-time comparison to prevent timing attacks
        if hmac.compare_digest(known_key.encode(), api_key.encode()):
            return user_id

    logger.warning(f'Rejected request to {request.url.path} with unknown session API key')
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail='Invalid session API key',
    )
