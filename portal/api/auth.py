from fastapi import APIRouter, Depends

from portal.api.deps import get_storage, guest_only, require_authenticated
from portal.core.security import issue_token
from portal.models.principal import Principal
from portal.repositories.storage import PortalStorage
from portal.schemas.auth import LoginData, LoginRequest, RegisterRequest
from portal.schemas.outcome import ActionResult, success
from portal.schemas.user import UserOut
from portal.services.users_service import authenticate, home_for, register_citizen

router = APIRouter(tags=["Auth"])


# =========================
# Register - citizens only
# =========================
@router.post("/auth/register", response_model=ActionResult, dependencies=[Depends(guest_only)])
async def register(body: RegisterRequest, storage: PortalStorage = Depends(get_storage)):
    user = await register_citizen(storage, body)
    return success(
        "Registration successful, you can now log in",
        data=user,
        redirect="/auth/login",
    )


# =========================
# Login
# =========================
@router.post("/auth/login", response_model=ActionResult, dependencies=[Depends(guest_only)])
async def login(body: LoginRequest, storage: PortalStorage = Depends(get_storage)):
    user = await authenticate(storage, body.email, body.password)
    principal = user.to_principal()
    home = home_for(principal.role)

    data = LoginData(
        user=UserOut(**user.model_dump()),
        token=issue_token(principal),
        home=home,
    )
    return success(f"Welcome, {user.name}", data=data, redirect=home)


@router.post("/auth/logout", response_model=ActionResult)
async def logout():
    # tokens are self-contained; the client drops its copy
    return success("You are logged out.", redirect="/auth/login")


# =========================
# Authenticated home
# =========================
@router.get("/dashboard", response_model=ActionResult)
async def dashboard(principal: Principal = Depends(require_authenticated)):
    home = home_for(principal.role)
    return ActionResult(redirect=home, data={"home": home, "user": principal})
