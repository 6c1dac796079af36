"""
Onboarding API Routes

Property-listing wizard endpoints. Static paths are registered before the
{session_id} and catch-all routes so they are matched first.
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from core.forms import is_multipart, read_form_payload
from gateway.dependencies import get_onboarding_service, json_body

from .onboarding_service import OnboardingService

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


@router.post("/start")
async def start_onboarding(service: OnboardingService = Depends(get_onboarding_service)):
    """Open a new wizard session"""
    return (await service.start()).to_response()


# ====================
# Step 1
# ====================


@router.get("/step1/{session_id}")
async def get_step1(session_id: str, service: OnboardingService = Depends(get_onboarding_service)):
    return (await service.get_step1(session_id)).to_response()


@router.post("/step1/{session_id}")
async def submit_step1(
    session_id: str,
    request: Request,
    service: OnboardingService = Depends(get_onboarding_service),
):
    form = await read_form_payload(request)
    return (await service.submit_step1(session_id, form)).to_response()


@router.patch("/step1/{session_id}")
async def update_step1(
    session_id: str,
    request: Request,
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Multipart updates carry new document scans; JSON updates only fields"""
    if is_multipart(request):
        form = await read_form_payload(request)
        result = await service.update_step1(session_id, form=form)
    else:
        result = await service.update_step1(session_id, body=await json_body(request))
    return result.to_response()


# ====================
# Step 2
# ====================


@router.get("/step2/{session_id}")
async def get_step2(session_id: str, service: OnboardingService = Depends(get_onboarding_service)):
    return (await service.get_step2(session_id)).to_response()


@router.post("/step2/{session_id}")
async def submit_step2(
    session_id: str,
    request: Request,
    service: OnboardingService = Depends(get_onboarding_service),
):
    form = await read_form_payload(request)
    return (await service.save_step2(session_id, form, "POST")).to_response()


@router.patch("/step2/{session_id}")
async def update_step2(
    session_id: str,
    request: Request,
    service: OnboardingService = Depends(get_onboarding_service),
):
    form = await read_form_payload(request)
    return (await service.save_step2(session_id, form, "PATCH")).to_response()


# ====================
# Step 3
# ====================


@router.get("/step3/facilities")
async def list_facilities(service: OnboardingService = Depends(get_onboarding_service)):
    """Default facilities offered in step 3"""
    return (await service.list_facilities()).to_response()


@router.get("/step3/{session_id}")
async def get_step3(session_id: str, service: OnboardingService = Depends(get_onboarding_service)):
    return (await service.get_step3(session_id)).to_response()


@router.post("/step3/{session_id}")
async def submit_step3(
    session_id: str,
    body: Any = Depends(json_body),
    service: OnboardingService = Depends(get_onboarding_service),
):
    return (await service.save_step3(session_id, body, "POST")).to_response()


@router.patch("/step3/{session_id}")
async def update_step3(
    session_id: str,
    body: Any = Depends(json_body),
    service: OnboardingService = Depends(get_onboarding_service),
):
    return (await service.save_step3(session_id, body, "PATCH")).to_response()


# ====================
# Step 4
# ====================


@router.get("/step4/{session_id}")
async def get_step4(session_id: str, service: OnboardingService = Depends(get_onboarding_service)):
    return (await service.get_step4(session_id)).to_response()


@router.post("/step4/{session_id}")
async def submit_step4(
    session_id: str,
    body: Any = Depends(json_body),
    service: OnboardingService = Depends(get_onboarding_service),
):
    return (await service.save_step4(session_id, body, "POST")).to_response()


@router.patch("/step4/{session_id}")
async def update_step4(
    session_id: str,
    body: Any = Depends(json_body),
    service: OnboardingService = Depends(get_onboarding_service),
):
    return (await service.save_step4(session_id, body, "PATCH")).to_response()


# ====================
# Finalize
# ====================


@router.post("/finalize/{session_id}")
async def finalize(
    session_id: str,
    body: Any = Depends(json_body),
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Create the owner account for a completed wizard"""
    return (await service.finalize(session_id, body)).to_response()


# ====================
# Catch-all
# ====================


@router.api_route("/{path:path}", methods=["GET", "POST", "PATCH"])
async def forward_onboarding(
    path: str,
    request: Request,
    service: OnboardingService = Depends(get_onboarding_service),
):
    form = None
    body = None
    if request.method != "GET":
        if is_multipart(request):
            form = await read_form_payload(request)
        else:
            body = await json_body(request)
    return (await service.forward(request.method, path, form=form, body=body)).to_response()
