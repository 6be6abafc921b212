from fastapi import APIRouter

from app.api import auth, notifications, oee, production_plans, reports, user_per_lines, users
from app.api.master_data import (
    child_parts,
    lines,
    machine_type_parameters,
    machine_types,
    machines,
    parameters,
    parts,
    pdt_categories,
    plants,
    reject_criteria,
    shifts,
    updt_categories,
)

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["Auth"])
router.include_router(plants.router, prefix="/plants", tags=["Plants"])
router.include_router(lines.router, prefix="/lines", tags=["Lines"])
router.include_router(machine_types.router, prefix="/machine-types", tags=["MachineTypes"])
router.include_router(parameters.router, prefix="/parameters", tags=["Parameters"])
router.include_router(machine_type_parameters.router, prefix="/machine-type-parameters", tags=["MachineTypeParameters"])
router.include_router(machines.router, prefix="/machines", tags=["Machines"])
router.include_router(parts.router, prefix="/parts", tags=["Parts"])
router.include_router(child_parts.router, prefix="/child-parts", tags=["ChildParts"])
router.include_router(shifts.router, prefix="/shifts", tags=["Shifts"])
router.include_router(pdt_categories.router, prefix="/pdt-categories", tags=["PdtCategories"])
router.include_router(updt_categories.router, prefix="/updt-categories", tags=["UpdtCategories"])
router.include_router(reject_criteria.router, prefix="/reject-criteria", tags=["RejectCriteria"])
router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(user_per_lines.router, prefix="/user-per-lines", tags=["UserPerLines"])
router.include_router(production_plans.router, prefix="/production-plans", tags=["ProductionPlans"])
router.include_router(oee.router, prefix="/oee", tags=["OEE"])
router.include_router(reports.router, prefix="/reports", tags=["Reports"])
router.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
