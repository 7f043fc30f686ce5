from fastapi import Request

from pvinspect.dal.upload_repo import UploadRepository
from pvinspect.services.intake_validator import IntakeValidator
from pvinspect.services.result_aggregator import ResultAggregator

# Services are built once in create_app() and kept on app.state.

def get_aggregator(request: Request) -> ResultAggregator:
    return request.app.state.aggregator

def get_validator(request: Request) -> IntakeValidator:
    return request.app.state.validator

def get_upload_repo(request: Request) -> UploadRepository:
    return request.app.state.upload_repo
