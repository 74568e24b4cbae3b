# freshcart/api/deps.py
from fastapi import Depends, Request

from freshcart.core.services import Services
from freshcart.domain.repositories.interaction_repo import InteractionRepo
from freshcart.domain.services.context_svc import ContextService


# Services are wired once in the lifespan and kept on app.state
def services_dep(request: Request) -> Services:
    return request.app.state.services


def interactions_dep(services: Services = Depends(services_dep)) -> InteractionRepo:
    return services.interactions


def context_dep(services: Services = Depends(services_dep)) -> ContextService:
    return services.context
