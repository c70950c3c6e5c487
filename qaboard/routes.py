"""
HTTP routes for listing and submitting records.
"""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

from qaboard.config import Settings, get_settings
from qaboard.dependencies import get_notification_publisher, get_storage_client
from qaboard.exceptions import StorageReadError, StorageWriteError
from qaboard.notifications import NotificationPublisher
from qaboard.schemas import (
    AnswerRecord,
    AnswerSubmission,
    EmailSubmission,
    HealthResponse,
    QuerySubmission,
    QuestionRecord,
    QuestionSubmission,
)
from qaboard.storage import EntityKind, StorageClient

logger = logging.getLogger(__name__)

router = APIRouter()


async def read_submitted_fields(request: Request) -> dict:
    """
    Return the request body as a flat dict, from either a JSON object or form data.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        if not await request.body():
            return {}
        try:
            body = await request.json()
        except json.JSONDecodeError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        return body if isinstance(body, dict) else {}

    form = await request.form()
    fields: dict = {}
    for key, value in form.multi_items():
        # File parts carry no free text to store.
        if not isinstance(value, str):
            continue
        if key not in fields:
            fields[key] = value
        elif isinstance(fields[key], list):
            fields[key].append(value)
        else:
            fields[key] = [fields[key], value]
    return fields


async def _store_and_notify(
    storage: StorageClient,
    publisher: NotificationPublisher,
    kind: EntityKind,
    fields: dict,
    *,
    message: str,
    redirect_to: str,
    error_detail: str,
):
    try:
        record = await run_in_threadpool(storage.insert, kind, fields)
    except StorageWriteError:
        logger.exception("Error inserting %s record", kind.name.lower())
        return PlainTextResponse(error_detail, status_code=500)

    logger.info("Inserted %s record %s", kind.name.lower(), record[kind.primary_key])
    await run_in_threadpool(publisher.publish, message)
    return RedirectResponse(redirect_to, status_code=302)


async def _scan(
    storage: StorageClient, kind: EntityKind, settings: Settings, error_detail: str
):
    try:
        return await run_in_threadpool(storage.scan_all, kind)
    except StorageReadError:
        if settings.strict_reads:
            logger.exception("Error fetching %s records", kind.name.lower())
            return PlainTextResponse(error_detail, status_code=500)
        logger.warning(
            "Error fetching %s records, answering with an empty list",
            kind.name.lower(),
            exc_info=True,
        )
        return []


@router.get("/health", response_model=HealthResponse)
def health_check():
    return HealthResponse(status="ok")


@router.get("/questions", response_model=list[QuestionRecord])
async def list_questions(
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    return await _scan(
        storage, EntityKind.QUESTION, settings, "Error fetching questions."
    )


@router.get("/answers", response_model=list[AnswerRecord])
async def list_answers(
    storage: StorageClient = Depends(get_storage_client),
    settings: Settings = Depends(get_settings),
):
    return await _scan(storage, EntityKind.ANSWER, settings, "Error fetching answers.")


@router.post("/submitQuery")
async def submit_query(
    request: Request,
    storage: StorageClient = Depends(get_storage_client),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
):
    submission = QuerySubmission.model_validate(await read_submitted_fields(request))
    return await _store_and_notify(
        storage,
        publisher,
        EntityKind.QUERY,
        submission.model_dump(),
        message=f"New query submitted by {submission.name}: {submission.query}",
        redirect_to="/",
        error_detail="Error submitting query.",
    )


@router.post("/submitQuestion")
async def submit_question(
    request: Request,
    storage: StorageClient = Depends(get_storage_client),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
):
    submission = QuestionSubmission.model_validate(
        await read_submitted_fields(request)
    )
    return await _store_and_notify(
        storage,
        publisher,
        EntityKind.QUESTION,
        submission.model_dump(),
        message=f"New question submitted: {submission.question}",
        redirect_to="/nn.html",
        error_detail="Error submitting question.",
    )


@router.post("/submitEmail")
async def submit_email(
    request: Request,
    storage: StorageClient = Depends(get_storage_client),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
):
    submission = EmailSubmission.model_validate(await read_submitted_fields(request))
    logger.info("Email submitted: %s", submission.email)
    return await _store_and_notify(
        storage,
        publisher,
        EntityKind.EMAIL,
        submission.model_dump(),
        message=f"New email submitted: {submission.email}",
        redirect_to="/about",
        error_detail="Error submitting email.",
    )


@router.post("/submitAnswer")
async def submit_answer(
    request: Request,
    storage: StorageClient = Depends(get_storage_client),
    publisher: NotificationPublisher = Depends(get_notification_publisher),
):
    submission = AnswerSubmission.model_validate(await read_submitted_fields(request))
    return await _store_and_notify(
        storage,
        publisher,
        EntityKind.ANSWER,
        submission.model_dump(),
        message=f"New answer submitted: {submission.answer}",
        redirect_to="/",
        error_detail="Error submitting answer.",
    )
