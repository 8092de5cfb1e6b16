from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from menu_analyst.api.schemas import ConversationResponseSchema, OptionRequestSchema, TextRequestSchema
from menu_analyst.application.conversation.controller import ConversationController
from menu_analyst.core.config import settings
from menu_analyst.wiring.dependencies import get_controller


router = APIRouter(prefix="/conversation")
logger = logging.getLogger(__name__)


@router.get("", response_model=ConversationResponseSchema)
def read_conversation(controller: ConversationController = Depends(get_controller)):
    return ConversationResponseSchema.from_controller(controller)


@router.post("/text", response_model=ConversationResponseSchema)
async def submit_text(
    req: TextRequestSchema,
    controller: ConversationController = Depends(get_controller),
):
    await controller.submit_text(req.text)
    return ConversationResponseSchema.from_controller(controller)


@router.post("/option", response_model=ConversationResponseSchema)
async def select_option(
    req: OptionRequestSchema,
    controller: ConversationController = Depends(get_controller),
):
    await controller.select_option(req.option)
    return ConversationResponseSchema.from_controller(controller)


@router.post("/image", response_model=ConversationResponseSchema)
async def submit_image(
    file: UploadFile = File(...),
    controller: ConversationController = Depends(get_controller),
):
    data = await file.read()
    if len(data) > settings.MAX_IMAGE_BYTES:
        logger.info("Image rejected", extra={"reason": "too_large", "mime_type": file.content_type})
        raise HTTPException(status_code=413, detail="Image too large")

    await controller.submit_image(
        data,
        mime_type=file.content_type or "application/octet-stream",
        filename=file.filename,
    )
    return ConversationResponseSchema.from_controller(controller)
