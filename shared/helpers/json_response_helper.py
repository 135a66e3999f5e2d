# shared/helpers/json_response_helper.py
from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def failure_payload(message: str, status_code: str = AppStatusCode.OPERATION_FAILED) -> dict:
    return JsonOutResult(
        data=None,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()
