"""
Snippet Manager Backend — Request Dependencies
================================================

What:  FastAPI dependency getters for the collaborators built by
       `create_app()`.
Why:   Clients are constructed once per process from Settings and injected,
       never imported as module-level singletons. Tests pass fakes to
       `create_app()` and every route picks them up from here.
How:   Each getter reads one attribute of `request.app.state`.
"""

from fastapi import Request

from snippet_manager.config import Settings
from snippet_manager.database import Database
from snippet_manager.services.ai_service import AIAssistService
from snippet_manager.services.auth_service import HostedAuthClient
from snippet_manager.services.snippet_service import SnippetServiceFactory


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_auth_client(request: Request) -> HostedAuthClient:
    return request.app.state.auth_client


def get_ai_service(request: Request) -> AIAssistService:
    return request.app.state.ai_service


def get_snippet_services(request: Request) -> SnippetServiceFactory:
    return request.app.state.snippet_services
