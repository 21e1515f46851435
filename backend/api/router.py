from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from api.dependencies import (
    get_bid_match_rate_workflow,
    get_container,
    get_correlation_workflow,
    get_create_bid_workflow,
    get_dictionary_workflow,
    get_export_workflow,
    get_import_workflow,
    get_profile_workflow,
    get_resume_match_rate_workflow,
    get_review_workflow,
    get_statistics_workflow,
)
from config import settings
from models.requests import (
    AddSkillRequest,
    AddVariationRequest,
    ApproveSkillRequest,
    CreateBidRequest,
    CreateProfileRequest,
    CreateResumeRequest,
    ExportDictionaryRequest,
    ImportDictionaryRequest,
    RejectSkillRequest,
    UpdateSkillRequest,
)
from models.responses import (
    ApprovalResponse,
    BidResponse,
    CreateProfileResponse,
    ProfileResponse,
    RoleLayerWeightsResponse,
)
from models.schemas.correlation import BidMatchRateResult, CorrelationResult, ResumeMatchResult
from models.schemas.layers import TechLayer
from models.schemas.review_queue import RejectionDecision, ReviewStatus, UnknownSkillItem
from models.schemas.skill_dictionary import (
    DictionarySkills,
    ExportDictionaryResponse,
    ImportDictionaryResponse,
    SkillOperationOutput,
    SkillVariations,
)
from models.schemas.statistics import SkillUsageStatisticsRequest, SkillUsageStatisticsResponse
from services.exceptions import DictionaryVersionNotFoundError
from services.resume import ResumeMetadata
from services.roles import RoleService

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


@router.get("/health")
async def health():
    container = get_container()
    dictionary = await container.dictionaries.get_current()
    return {
        "status": "ok",
        "storage_backend": settings.storage_backend,
        "dictionary_version": dictionary.version,
    }


# --- JD specifications -------------------------------------------------------


@router.post("/jd", response_model=CreateProfileResponse, status_code=201)
@limiter.limit(settings.rate_limit)
async def create_jd(request: Request, body: CreateProfileRequest, workflow=Depends(get_profile_workflow)):
    output = await workflow.execute(body)
    return CreateProfileResponse(
        profile=ProfileResponse.from_profile(output.profile),
        unknown_skills=output.unknown_skills,
    )


@router.get("/jd", response_model=list[ProfileResponse])
async def list_jds(workflow=Depends(get_profile_workflow)):
    return [ProfileResponse.from_profile(p) for p in await workflow.list_all()]


@router.get("/jd/correlation", response_model=CorrelationResult)
async def jd_correlation(current_id: str, past_id: str, workflow=Depends(get_correlation_workflow)):
    return await workflow.execute(current_id, past_id)


@router.get("/jd/{profile_id}", response_model=ProfileResponse)
async def get_jd(profile_id: str, workflow=Depends(get_profile_workflow)):
    return ProfileResponse.from_profile(await workflow.get(profile_id))


@router.put("/jd/{profile_id}", response_model=CreateProfileResponse)
@limiter.limit(settings.rate_limit)
async def update_jd(
    request: Request,
    profile_id: str,
    body: CreateProfileRequest,
    workflow=Depends(get_profile_workflow),
):
    output = await workflow.update(profile_id, body)
    return CreateProfileResponse(
        profile=ProfileResponse.from_profile(output.profile),
        unknown_skills=output.unknown_skills,
    )


@router.delete("/jd/{profile_id}", status_code=204)
async def delete_jd(profile_id: str, workflow=Depends(get_profile_workflow)):
    await workflow.delete(profile_id)


# --- Skill dictionary --------------------------------------------------------


@router.get("/dictionary/current", response_model=DictionarySkills)
async def current_dictionary(category: TechLayer | None = None, workflow=Depends(get_dictionary_workflow)):
    if category is not None:
        return await workflow.get_skills_by_category(category)
    return await workflow.get_skills()


@router.get("/dictionary/versions", response_model=list[str])
async def dictionary_versions():
    return await get_container().dictionaries.get_all_versions()


@router.get("/dictionary/versions/{version}")
async def dictionary_version(version: str):
    dictionary = await get_container().dictionaries.get_version(version)
    if dictionary is None:
        raise DictionaryVersionNotFoundError(version)
    return dictionary.to_dict()


@router.post("/dictionary/skills", response_model=SkillOperationOutput, status_code=201)
@limiter.limit(settings.rate_limit)
async def add_skill(request: Request, body: AddSkillRequest, workflow=Depends(get_dictionary_workflow)):
    return await workflow.add_canonical_skill(body.name, body.category)


@router.put("/dictionary/skills/{name}", response_model=SkillOperationOutput)
@limiter.limit(settings.rate_limit)
async def update_skill(
    request: Request,
    name: str,
    body: UpdateSkillRequest,
    workflow=Depends(get_dictionary_workflow),
):
    return await workflow.update_canonical_skill(name, body.new_name, body.category)


@router.delete("/dictionary/skills/{name}", response_model=SkillOperationOutput)
@limiter.limit(settings.rate_limit)
async def remove_skill(request: Request, name: str, workflow=Depends(get_dictionary_workflow)):
    return await workflow.remove_canonical_skill(name)


@router.post("/dictionary/variations", response_model=SkillOperationOutput, status_code=201)
@limiter.limit(settings.rate_limit)
async def add_variation(request: Request, body: AddVariationRequest, workflow=Depends(get_dictionary_workflow)):
    return await workflow.add_skill_variation(body.variation, body.canonical_name)


@router.get("/dictionary/variations/{canonical}", response_model=SkillVariations)
async def list_variations(canonical: str, workflow=Depends(get_dictionary_workflow)):
    return await workflow.get_variations(canonical)


@router.post("/dictionary/export", response_model=ExportDictionaryResponse)
async def export_dictionary(body: ExportDictionaryRequest | None = None, workflow=Depends(get_export_workflow)):
    return await workflow.execute(body)


@router.post("/dictionary/import", response_model=ImportDictionaryResponse)
@limiter.limit(settings.rate_limit)
async def import_dictionary(request: Request, body: ImportDictionaryRequest, workflow=Depends(get_import_workflow)):
    return await workflow.execute(body)


# --- Review queue ------------------------------------------------------------


@router.get("/review-queue", response_model=list[UnknownSkillItem])
async def review_queue(status: ReviewStatus | None = None, workflow=Depends(get_review_workflow)):
    return await workflow.get_queue_items(status)


@router.post("/review-queue/approve", response_model=ApprovalResponse)
@limiter.limit(settings.rate_limit)
async def approve_skill(request: Request, body: ApproveSkillRequest, workflow=Depends(get_review_workflow)):
    if body.decision == "canonical":
        if body.category is None:
            raise HTTPException(status_code=400, detail="category is required to approve as canonical")
        output = await workflow.approve_as_canonical(body.skill_name, body.category)
    else:
        output = await workflow.approve_as_variation(body.skill_name, body.canonical_name or "")
    return output


@router.post("/review-queue/reject", response_model=RejectionDecision)
@limiter.limit(settings.rate_limit)
async def reject_skill(request: Request, body: RejectSkillRequest, workflow=Depends(get_review_workflow)):
    return await workflow.reject_skill(body.skill_name, body.reason)


# --- Statistics --------------------------------------------------------------


@router.get("/statistics/skills", response_model=SkillUsageStatisticsResponse)
async def skill_statistics(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    category: TechLayer | None = None,
    sort_by: Literal["frequency", "name"] = "frequency",
    sort_order: Literal["asc", "desc"] = "desc",
    workflow=Depends(get_statistics_workflow),
):
    return await workflow.execute(
        SkillUsageStatisticsRequest(
            start_date=start_date,
            end_date=end_date,
            category=category,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


@router.post("/resumes", response_model=ResumeMetadata, status_code=201)
@limiter.limit(settings.rate_limit)
async def create_resume(request: Request, body: CreateResumeRequest):
    fields = body.model_dump(exclude_none=True)
    resume = ResumeMetadata(**fields)
    await get_container().resumes.save(resume)
    return resume


@router.get("/resumes/match-rate", response_model=list[ResumeMatchResult])
async def resume_match_rates(current_jd_id: str, workflow=Depends(get_resume_match_rate_workflow)):
    return await workflow.execute_for_all(current_jd_id)


@router.get("/resumes/{resume_id}/match-rate", response_model=ResumeMatchResult)
async def resume_match_rate(resume_id: str, current_jd_id: str, workflow=Depends(get_resume_match_rate_workflow)):
    return await workflow.execute(current_jd_id, resume_id)


# --- Bids and roles ----------------------------------------------------------


@router.post("/bids", response_model=BidResponse, status_code=201)
@limiter.limit(settings.rate_limit)
async def create_bid(request: Request, body: CreateBidRequest, workflow=Depends(get_create_bid_workflow)):
    return BidResponse.from_bid(await workflow.execute(body))


@router.get("/bids/{bid_id}/match-rate", response_model=list[BidMatchRateResult])
async def bid_match_rate(bid_id: str, workflow=Depends(get_bid_match_rate_workflow)):
    return await workflow.execute(bid_id)


@router.get("/roles/{role}/layer-weights", response_model=RoleLayerWeightsResponse)
async def role_layer_weights(role: str):
    service = RoleService()
    return RoleLayerWeightsResponse(
        role=role,
        basic_title=service.extract_basic_title(role),
        layer_weights=service.get_default_layer_weights(role),
    )
