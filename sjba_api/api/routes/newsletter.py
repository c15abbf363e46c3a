"""
Newsletter signup endpoint.

POST /v1/newsletter-sign-ups
- 201 new signup, 200 existing signup updated
- 400 VALIDATION_ERROR, 409 EMAIL_ALREADY_SUBSCRIBED (reject policy)
- 500 MAILING_LIST_ERROR or DATABASE_ERROR
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from sjba_api.adapters.sqlite_db import SQLiteNewsletterSignupRepo
from sjba_api.api.deps import get_mailing_list, get_newsletter_config, get_newsletter_repo
from sjba_api.api.errors import error_response
from sjba_api.api.schemas import NewsletterSignupRequest, ok
from sjba_api.components.newsletter import (
    EMAIL_ALREADY_SUBSCRIBED,
    VALIDATION_ERROR,
    NewsletterConfig,
    SignupInput,
    SignupOutput,
    run,
)
from sjba_api.core.ports.mailing_list import MailingListPort

router = APIRouter()

SUCCESS_MESSAGE = "Successfully signed up for newsletter"


def _failure_response(result: SignupOutput) -> JSONResponse:
    code = result.error_code or "INTERNAL_SERVER_ERROR"
    if code == VALIDATION_ERROR:
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Validation failed",
            code,
            [e.message for e in result.errors],
        )
    if code == EMAIL_ALREADY_SUBSCRIBED:
        return error_response(status.HTTP_409_CONFLICT, result.errors[0].message, code)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, result.errors[0].message, code
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=None)
def create_signup(
    body: NewsletterSignupRequest,
    repo: SQLiteNewsletterSignupRepo = Depends(get_newsletter_repo),
    mailing_list: MailingListPort = Depends(get_mailing_list),
    config: NewsletterConfig = Depends(get_newsletter_config),
) -> JSONResponse:
    result = run(
        SignupInput(
            email=body.email,
            first_name=body.first_name,
            last_name=body.last_name,
            year=body.year,
            college=body.college,
        ),
        repo=repo,
        mailing_list=mailing_list,
        config=config,
    )
    if not result.success or result.signup is None:
        return _failure_response(result)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        content=ok(result.signup.to_json(), message=SUCCESS_MESSAGE),
    )
