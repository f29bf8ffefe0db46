"""
HTTP surface for the setup form: the form page and the multipart submission endpoint.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse, JSONResponse

from ..config import DEFAULT_LANGUAGE, CustomerSubmission, ScaffoldSettings, get_settings
from ..errors import AlreadyExists, ValidationError
from ..scaffold import ALLOWED_LOGO_EXTENSIONS, run_scaffold

logger = logging.getLogger(__name__)

router = APIRouter(tags=["setup"])

SETUP_FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>New customer project</title>
  <style>
    body {{ font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
           background: #0a0a0a; color: #eee; margin: 0 auto; padding: 20px; max-width: 640px; }}
    h1 {{ margin-top: 0; }}
    label {{ display: block; margin: 16px 0 6px; font-weight: bold; }}
    input, select {{ width: 100%; padding: 8px; border-radius: 4px; border: 1px solid #444;
                    background: #151515; color: #eee; box-sizing: border-box; }}
    button {{ margin-top: 24px; padding: 10px 18px; border: 0; border-radius: 4px;
             background: #0066cc; color: #fff; font-weight: bold; cursor: pointer; }}
    .hint {{ font-size: 0.9em; color: #999; }}
  </style>
</head>
<body>
  <h1>New customer project</h1>
  <form action="/api/setup" method="post" enctype="multipart/form-data">
    <label for="customerName">Customer name</label>
    <input id="customerName" name="customerName" required>
    <label for="websiteUrl">Website URL</label>
    <input id="websiteUrl" name="websiteUrl" type="url" required>
    <label for="defaultLang">Default language</label>
    <select id="defaultLang" name="defaultLang">
      <option value="de" selected>Deutsch (DE)</option>
      <option value="en">English (EN)</option>
    </select>
    <label for="logo">Logo</label>
    <input id="logo" name="logo" type="file" accept="{accept}" required>
    <p class="hint">The project is copied next to {template_name}; dependencies install in the background.</p>
    <button type="submit">Create project</button>
  </form>
</body>
</html>
"""


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _settings_for(request: Request) -> ScaffoldSettings:
    return request.app.state.settings or get_settings()


@router.get("/admin/setup", response_class=HTMLResponse)
async def setup_form(request: Request) -> HTMLResponse:
    """Render the customer setup form."""
    settings = _settings_for(request)
    return HTMLResponse(
        SETUP_FORM_TEMPLATE.format(
            accept=",".join(ALLOWED_LOGO_EXTENSIONS),
            template_name=settings.template_root.name,
        )
    )


@router.post("/api/setup")
async def create_project(
    request: Request,
    customer_name: Optional[str] = Form(None, alias="customerName"),
    website_url: Optional[str] = Form(None, alias="websiteUrl"),
    default_lang: Optional[str] = Form(None, alias="defaultLang"),
    logo: Optional[UploadFile] = File(None),
) -> JSONResponse:
    """
    Clone the template for a customer and brand the copy.

    Returns 400 for missing or invalid fields, 409 if the project already exists
    and 500 for anything else. Dependency installation keeps running after the
    response has been sent.
    """
    if not (customer_name or "").strip() or not (website_url or "").strip() or logo is None or not logo.filename:
        return _error("Missing required fields", 400)

    try:
        submission = CustomerSubmission.build(
            customer_name=customer_name,
            website_url=website_url,
            default_lang=(default_lang or "").strip() or DEFAULT_LANGUAGE,
            logo_bytes=await logo.read(),
            logo_filename=logo.filename,
        )
        report = await run_in_threadpool(run_scaffold, submission, _settings_for(request))
    except ValidationError as exc:
        return _error(str(exc), 400)
    except AlreadyExists as exc:
        return _error(str(exc), 409)
    except Exception as exc:
        logger.exception("Setup failed for %r", customer_name)
        return _error(str(exc), 500)
    finally:
        if logo is not None:
            await logo.close()

    return JSONResponse(report.to_response())


def create_app(settings: Optional[ScaffoldSettings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Fixed settings for this app; the environment-derived ones are used when omitted.
    """
    app = FastAPI(title="Portfolio setup")
    app.state.settings = settings
    app.include_router(router)
    return app
