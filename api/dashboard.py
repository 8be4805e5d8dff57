from fastapi import APIRouter, Depends

from api.deps import get_backend, get_session_context, raise_for_error
from services.backend import Backend
from services.dashboards import build_dashboard
from services.session_context import SessionContext
from utils.case import dict_keys_to_camel

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/dashboard")
async def get_dashboard(
    backend: Backend = Depends(get_backend),
    context: SessionContext = Depends(get_session_context),
):
    result = await build_dashboard(backend, context)
    raise_for_error(result)
    return dict_keys_to_camel(result.data.model_dump(mode="json"))
