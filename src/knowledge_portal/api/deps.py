"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy import select
from sqlalchemy.orm import Session

from knowledge_portal.adapters.auth import AuthAdapter, AuthUser
from knowledge_portal.adapters.catalog import CatalogAdapter
from knowledge_portal.adapters.notifier import TrainingNotifier
from knowledge_portal.adapters.storage import BlobStorageAdapter
from knowledge_portal.adapters.summary import SummaryGenerator
from knowledge_portal.db.models import ClientModel, UserRoleModel
from knowledge_portal.db.session import get_session
from knowledge_portal.domain import (
    AuthenticationError,
    AuthorizationError,
    RequestContext,
    UserRole,
    ValidationError,
)
from knowledge_portal.logging import get_logger
from knowledge_portal.services import CourseAggregator, LessonLifecycleService, TrainingStatusStore
from knowledge_portal.services.providers import (
    get_auth_adapter,
    get_catalog_adapter,
    get_notifier,
    get_storage_adapter,
    get_summary_generator,
)

logger = get_logger(__name__)

# Database session dependency
SessionDep = Annotated[Session, Depends(get_session)]

AuthDep = Annotated[AuthAdapter, Depends(get_auth_adapter)]
CatalogDep = Annotated[CatalogAdapter, Depends(get_catalog_adapter)]
StorageDep = Annotated[BlobStorageAdapter, Depends(get_storage_adapter)]
NotifierDep = Annotated[TrainingNotifier, Depends(get_notifier)]
SummaryDep = Annotated[SummaryGenerator, Depends(get_summary_generator)]


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_role(session: Session, user: AuthUser) -> UserRole:
    """Role from the user_roles table, then the identity provider's metadata."""
    stored = session.execute(
        select(UserRoleModel.role).where(UserRoleModel.user_id == user.id)
    ).scalar_one_or_none()

    for candidate in (stored, user.user_metadata.get("role")):
        if candidate in (UserRole.ADMIN, UserRole.CLIENT):
            return UserRole(candidate)
    return UserRole.CLIENT


def resolve_client_company(session: Session, user_id: str) -> str | None:
    """The company linked to a client user's active portal account."""
    return session.execute(
        select(ClientModel.whop_company_id)
        .where(ClientModel.user_id == user_id, ClientModel.is_active.is_(True))
        .limit(1)
    ).scalar_one_or_none()


async def get_request_context(
    session: SessionDep,
    auth: AuthDep,
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Authenticate the caller and resolve their role and tenant."""
    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Unauthorized")

    user = await auth.get_user(token)
    if user is None:
        raise AuthenticationError("Unauthorized")

    role = resolve_role(session, user)
    company_id = None if role == UserRole.ADMIN else resolve_client_company(session, user.id)

    logger.debug("request_authenticated", user_id=user.id, role=str(role), company_id=company_id)
    return RequestContext(user_id=user.id, role=role, company_id=company_id)


ContextDep = Annotated[RequestContext, Depends(get_request_context)]


def resolve_company_id(context: RequestContext, requested: str | None) -> str:
    """Tenant an operation is scoped to.

    Admins act on the requested company. Clients are pinned to their own
    company and may not name another one.

    Raises:
        ValidationError: An admin did not name a company
        AuthorizationError: A client named another company, or has none
    """
    if context.is_admin:
        company_id = requested or context.company_id
        if not company_id:
            raise ValidationError("Missing required field: company_id")
        return company_id

    if not context.company_id:
        raise AuthorizationError("No company is linked to this account")
    if requested and requested != context.company_id:
        logger.warning(
            "tenant_scope_violation",
            user_id=context.user_id,
            requested_company_id=requested,
        )
        raise AuthorizationError("Not allowed to access this company")
    return context.company_id


def get_store(session: SessionDep) -> TrainingStatusStore:
    return TrainingStatusStore(session)


StoreDep = Annotated[TrainingStatusStore, Depends(get_store)]


def get_aggregator(store: StoreDep, catalog: CatalogDep) -> CourseAggregator:
    return CourseAggregator(catalog=catalog, store=store)


def get_lifecycle_service(
    store: StoreDep,
    catalog: CatalogDep,
    storage: StorageDep,
    notifier: NotifierDep,
    summary: SummaryDep,
) -> LessonLifecycleService:
    return LessonLifecycleService(
        store=store,
        catalog=catalog,
        storage=storage,
        notifier=notifier,
        summary=summary,
    )


AggregatorDep = Annotated[CourseAggregator, Depends(get_aggregator)]
LifecycleDep = Annotated[LessonLifecycleService, Depends(get_lifecycle_service)]
