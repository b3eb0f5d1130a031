"""
NutriTrack Backend — Result → HTTP Response
============================================

Routes decide the status codes per call site (reads and deletes fail with
404, creates and updates with 400); this helper applies the choice and
serializes the envelope.
"""

from fastapi.responses import JSONResponse

from nutritrack.schemas.result import Result, to_envelope


def respond(result: Result, success_status: int = 200, failure_status: int = 400) -> JSONResponse:
    status_code = success_status if result.success else failure_status
    return JSONResponse(status_code=status_code, content=to_envelope(result))
