import logging

from fastapi import APIRouter, Depends, status

from modelchat.api.deps import get_account_service
from modelchat.errors import InternalError, ServiceError
from modelchat.models.domain import Credentials, LoginResponse, MessageResponse
from modelchat.services.accounts import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["accounts"])


# bcrypt is CPU-bound, so these run in the threadpool rather than on the loop
@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register(body: Credentials, accounts: AccountService = Depends(get_account_service)):
    """Creates a user account. Nothing about the account is echoed back."""
    try:
        accounts.register(body.username, body.password)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error creating user: {e}", exc_info=True)
        raise InternalError("Error creating user")
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse)
def login(body: Credentials, accounts: AccountService = Depends(get_account_service)):
    """Exchanges a username/password pair for a 24h bearer token."""
    try:
        token, username = accounts.login(body.username, body.password)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(f"Error logging in: {e}", exc_info=True)
        raise InternalError("Error logging in")
    return LoginResponse(token=token, username=username)
