"""CRM router: admin CRUD over customers, leads, tasks, templates and campaigns."""

import logging
from typing import Annotated, Any, Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas import crm as schemas
from ..services.crm_service import (
    CrudService,
    CustomerInteractionService,
    CustomerPreferenceService,
    CustomerService,
    EmailCampaignService,
    EmailTemplateService,
    LeadActivityService,
    LeadService,
    OpportunityService,
    TaskService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["crm"], dependencies=[Depends(require_admin)])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _dump(schema: type[BaseModel], obj: Any) -> dict:
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


async def _guarded(operation: str, resource: str, call: Callable[[], Awaitable[Any]]) -> Any:
    """Run a service call, turning unexpected failures into a logged 500."""
    try:
        return await call()

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            f"Unexpected error in CRM {operation}",
            extra={"resource": resource, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


def register_crud(
    path: str,
    service_cls: type[CrudService],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    read_schema: type[BaseModel],
    query_schema: type[BaseModel],
) -> None:
    """
    Add list/get/create/update/delete routes for one CRM resource.

    Args:
        path: URL segment under ``/admin``, e.g. ``customers``
        service_cls: ``CrudService`` subclass for the table
        create_schema: Request body for POST
        update_schema: Partial request body for PUT
        read_schema: Response schema
        query_schema: Query-options model for the list route
    """
    slug = path.replace("-", "_")

    async def list_items(
        query: Annotated[query_schema, Query()],
        db: AsyncSession = DB_DEPENDENCY
    ) -> JSONResponse:
        items = await _guarded("list", path, lambda: service_cls(db).list_items(query))
        return JSONResponse(status_code=200, content=[_dump(read_schema, item) for item in items])

    async def get_item(item_id: int, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
        item = await service_cls(db).get_by_id_or_raise(item_id)
        return JSONResponse(status_code=200, content=_dump(read_schema, item))

    async def create_item(
        request: create_schema,
        db: AsyncSession = DB_DEPENDENCY,
        admin: User = ADMIN_DEPENDENCY
    ) -> JSONResponse:
        item = await _guarded("create", path, lambda: service_cls(db).create(request, admin))
        return JSONResponse(status_code=201, content=_dump(read_schema, item))

    async def update_item(
        item_id: int,
        request: update_schema,
        db: AsyncSession = DB_DEPENDENCY
    ) -> JSONResponse:
        item = await _guarded("update", path, lambda: service_cls(db).update(item_id, request))
        return JSONResponse(status_code=200, content=_dump(read_schema, item))

    async def delete_item(item_id: int, db: AsyncSession = DB_DEPENDENCY) -> Response:
        await _guarded("delete", path, lambda: service_cls(db).delete(item_id))
        return Response(status_code=204)

    router.add_api_route(
        f"/{path}", list_items, methods=["GET"], response_model=list[read_schema], name=f"list_{slug}"
    )
    router.add_api_route(
        f"/{path}/{{item_id}}", get_item, methods=["GET"], response_model=read_schema, name=f"get_{slug}"
    )
    router.add_api_route(
        f"/{path}", create_item, methods=["POST"], response_model=read_schema,
        status_code=201, name=f"create_{slug}"
    )
    router.add_api_route(
        f"/{path}/{{item_id}}", update_item, methods=["PUT"], response_model=read_schema, name=f"update_{slug}"
    )
    router.add_api_route(
        f"/{path}/{{item_id}}", delete_item, methods=["DELETE"], status_code=204, name=f"delete_{slug}"
    )


register_crud(
    "customers", CustomerService,
    schemas.CustomerCreate, schemas.CustomerUpdate, schemas.Customer, schemas.CustomerQuery,
)
register_crud(
    "leads", LeadService,
    schemas.LeadCreate, schemas.LeadUpdate, schemas.Lead, schemas.LeadQuery,
)
register_crud(
    "lead-activities", LeadActivityService,
    schemas.LeadActivityCreate, schemas.LeadActivityUpdate, schemas.LeadActivity, schemas.LeadActivityQuery,
)
register_crud(
    "opportunities", OpportunityService,
    schemas.OpportunityCreate, schemas.OpportunityUpdate, schemas.Opportunity, schemas.OpportunityQuery,
)
register_crud(
    "customer-interactions", CustomerInteractionService,
    schemas.CustomerInteractionCreate, schemas.CustomerInteractionUpdate,
    schemas.CustomerInteraction, schemas.CustomerInteractionQuery,
)
register_crud(
    "customer-preferences", CustomerPreferenceService,
    schemas.CustomerPreferenceCreate, schemas.CustomerPreferenceUpdate,
    schemas.CustomerPreference, schemas.CustomerPreferenceQuery,
)
register_crud(
    "tasks", TaskService,
    schemas.TaskCreate, schemas.TaskUpdate, schemas.Task, schemas.TaskQuery,
)
register_crud(
    "email-templates", EmailTemplateService,
    schemas.EmailTemplateCreate, schemas.EmailTemplateUpdate, schemas.EmailTemplate, schemas.EmailTemplateQuery,
)
register_crud(
    "email-campaigns", EmailCampaignService,
    schemas.EmailCampaignCreate, schemas.EmailCampaignUpdate, schemas.EmailCampaign, schemas.EmailCampaignQuery,
)


@router.post("/leads/{lead_id}/convert", response_model=schemas.LeadConversion, status_code=201)
async def convert_lead(
    lead_id: int,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    """Create a customer from a lead and mark the lead won."""
    lead, customer = await _guarded("lead conversion", "leads", lambda: LeadService(db).convert(lead_id, admin))
    response_data = schemas.LeadConversion(
        lead=schemas.Lead.model_validate(lead),
        customer=schemas.Customer.model_validate(customer),
    )
    return JSONResponse(status_code=201, content=response_data.model_dump(mode="json", by_alias=True))


@router.post("/tasks/{task_id}/complete", response_model=schemas.Task)
async def complete_task(task_id: int, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    task = await _guarded("task completion", "tasks", lambda: TaskService(db).complete(task_id))
    return JSONResponse(status_code=200, content=_dump(schemas.Task, task))


@router.post("/email-templates/{template_id}/preview", response_model=schemas.TemplatePreview)
async def preview_email_template(
    template_id: int,
    request: schemas.TemplatePreviewRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Render a template's subject and body with sample variables."""
    subject, body = await EmailTemplateService(db).preview(template_id, request.variables)
    response_data = schemas.TemplatePreview(subject=subject, body=body)
    return JSONResponse(status_code=200, content=response_data.model_dump(by_alias=True))
