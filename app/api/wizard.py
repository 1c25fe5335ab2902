import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import (
    get_current_path,
    get_device_directory,
    get_device_identity,
    get_optional_user,
    get_telemetry_dispatcher,
    get_wizard_rules,
)
from app.logic.wizard_logic import WIZARD_STEPS, run_wizard
from app.schemas.wizard import (
    BrandRead,
    DeviceModelRead,
    EquipmentSelection,
    WizardAnswers,
    WizardDiagnosis,
    WizardOptionRead,
    WizardStepRead,
)
from app.services import analytics as analytics_service
from app.services.device_directory import DeviceDirectoryError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wizard", tags=["wizard"])


@router.get("/steps", response_model=list[WizardStepRead])
def list_steps():
    return [
        WizardStepRead(
            question=step.question,
            options=[WizardOptionRead(value=o.value, label=o.label) for o in step.options],
        )
        for step in WIZARD_STEPS
    ]


@router.post("/diagnosis", response_model=WizardDiagnosis)
def diagnose(payload: WizardAnswers, rules=Depends(get_wizard_rules)):
    if len(payload.answers) != len(WIZARD_STEPS) or not all(payload.answers):
        raise HTTPException(status_code=400, detail="Every step needs an answer")
    try:
        session = run_wizard(payload.answers, rules)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return WizardDiagnosis(answers=session.answers, diagnosis=session.diagnosis)


@router.get("/brands", response_model=list[BrandRead])
def list_brands(directory=Depends(get_device_directory)):
    try:
        return directory.get_all_brands()
    except DeviceDirectoryError as exc:
        logger.error("wizard_brands_load_failed error=%s", exc)
        return []


@router.get("/brands/{brand_id}/models", response_model=list[DeviceModelRead])
def list_brand_models(brand_id: str, directory=Depends(get_device_directory)):
    try:
        return directory.get_brand_models(brand_id)
    except DeviceDirectoryError as exc:
        logger.error("wizard_models_load_failed brand_id=%s error=%s", brand_id, exc)
        return []


@router.post("/equipment", status_code=status.HTTP_202_ACCEPTED)
def select_equipment(
    payload: EquipmentSelection,
    auth=Depends(get_optional_user),
    identity=Depends(get_device_identity),
    dispatcher=Depends(get_telemetry_dispatcher),
    current_path: str | None = Depends(get_current_path),
):
    # Recorded for analytics only; the diagnosis ignores the equipment.
    analytics_service.track_device_view(
        payload.brand_name,
        payload.model_name,
        current_user_id=auth["user_id"] if auth else None,
        current_path=current_path,
        identity=identity,
        dispatcher=dispatcher,
    )
    return {"accepted": True}
