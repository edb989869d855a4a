"""
Notification config routes: stored Telegram credentials and a test send.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..models import ConfigResponse, ConfigUpdate, MessageResponse, TelegramTestRequest
from ..services import BotConfigService
from .dependencies import get_bot_config_service

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", response_model=ConfigResponse)
async def get_config(service: BotConfigService = Depends(get_bot_config_service)):
    """Caller's config, created empty on first access."""
    return await service.get()


@router.put("", response_model=ConfigResponse)
async def update_config(
    payload: ConfigUpdate,
    service: BotConfigService = Depends(get_bot_config_service),
):
    return await service.update(payload.bot_token, payload.chat_id)


@router.post(
    "/test-telegram",
    response_model=MessageResponse,
    responses={400: {"description": "Missing credentials or Telegram rejected the message"}},
)
async def test_telegram(
    payload: TelegramTestRequest,
    service: BotConfigService = Depends(get_bot_config_service),
):
    """Send a test message with the given credentials and report Telegram's answer."""
    result = await service.send_test(payload.bot_token, payload.chat_id)
    if not result.success:
        return JSONResponse(status_code=400, content={"error": result.error})
    return MessageResponse(message="Message sent successfully")
