"""HTTP error mapping for the Shipping API.

Protean's handlers cover domain validation (400) and missing aggregates
(404). A cart that cannot be priced is reported as 422 with the vendor
that blocked it.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shipping.errors import CalculationError


async def calculation_error_handler(request: Request, exc: CalculationError) -> JSONResponse:
    return JSONResponse(status_code=422, content={"error": exc.to_dict()})


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(CalculationError, calculation_error_handler)
