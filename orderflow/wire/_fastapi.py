import inspect
import re
from typing import Annotated, Any

import fastapi
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from kungfu import Error, Ok, Result
from pydantic import BaseModel, ValidationError

from orderflow.errors import OrderError
from orderflow.ops import Op, Runner
from orderflow.wire._http import Application, Endpoint, HTTPRouteTrigger, RouteContext

_PATH_PARAM = re.compile(r"{(\w+)}")
_BODY = "body"
_KW = inspect.Parameter.KEYWORD_ONLY


def _header_param(header: str) -> str:
    return "h_" + header.lower().replace("-", "_")


def _query_params(req_cls: type[BaseModel]) -> dict[str, tuple[str, inspect.Parameter]]:
    """Flatten a query model into one Query() param per field: name → (alias, param)."""
    out: dict[str, tuple[str, inspect.Parameter]] = {}
    for fname, f in req_cls.model_fields.items():
        alias = f.alias or fname
        pname = "q_" + fname
        default = ... if f.is_required() else f.default
        out[pname] = (
            alias,
            inspect.Parameter(
                pname,
                _KW,
                annotation=Annotated[f.annotation, fastapi.Query(alias=alias)],
                default=default if default is not ... else inspect.Parameter.empty,
            ),
        )
    return out


def _status_of(result: Result[Any, Any]) -> int:
    match result:
        case Ok(_):
            return 200
        case Error(e):
            return e.status if isinstance(e, OrderError) else 500


def make_handler(
    trigger: HTTPRouteTrigger,
    req_cls: type[Any],
    resp_cls: type[Any],
    runner: Runner,
) -> Any:
    """
    Build a FastAPI endpoint for one exposure.

    Path params and trigger headers become typed params; the request model
    is the JSON body for writes and is flattened into query params for
    reads. The codec's response model renders both Ok and Error, the
    HTTP status comes from the error.
    """
    path_names = _PATH_PARAM.findall(trigger.path)
    headers = {_header_param(h): h for h in sorted(trigger.headers)}
    has_body = trigger.method in ("POST", "PUT", "PATCH")
    query = {} if has_body else _query_params(req_cls)

    params: list[inspect.Parameter] = [
        inspect.Parameter(
            name, _KW, annotation=Annotated[trigger.path_types.get(name, str), fastapi.Path()]
        )
        for name in path_names
    ]
    params += [
        inspect.Parameter(
            pname,
            _KW,
            default=None,
            annotation=Annotated[str | None, fastapi.Header(alias=header)],
        )
        for pname, header in headers.items()
    ]
    if has_body:
        params.append(inspect.Parameter(_BODY, _KW, annotation=req_cls))
    params += [p for _, p in query.values()]

    def _request(kwargs: dict[str, Any]) -> Any:
        if has_body:
            return kwargs[_BODY]
        try:
            return req_cls.model_validate({alias: kwargs[pname] for pname, (alias, _) in query.items()})
        except ValidationError as e:
            raise RequestValidationError(
                [{**err, "loc": ("query", *err["loc"])} for err in e.errors()]
            ) from e

    async def _route_handler(**kwargs: Any) -> JSONResponse:
        ctx = RouteContext(
            path={name: kwargs[name] for name in path_names},
            headers={header: kwargs[pname] for pname, header in headers.items()},
        )
        req = _request(kwargs)

        result: Result[Any, Any]
        try:
            domain_op: Op[Any, Any] = req.to_domain(ctx)
        except OrderError as e:
            result = Error(e)
        else:
            result = await runner.run(domain_op)

        body = resp_cls.from_domain(result)
        return JSONResponse(status_code=_status_of(result), content=jsonable_encoder(body))

    _route_handler.__signature__ = inspect.Signature(params)  # type: ignore[attr-defined]
    _route_handler.__name__ = f"{trigger.method.lower()}_{req_cls.__name__}"
    return _route_handler


def add_endpoint_to_app(app: fastapi.FastAPI, endp: Endpoint) -> None:
    """Register every route of an endpoint on the app, in declaration order."""
    for trigger, codec in endp.routes:
        handler = make_handler(trigger, codec.request, codec.response, endp.runner)
        app.add_api_route(
            trigger.path,
            handler,
            methods=[trigger.method],
            response_model=None,
            summary=trigger.summary,
        )


def from_application(app: Application, **fastapi_kwargs: Any) -> fastapi.FastAPI:
    f_app = fastapi.FastAPI(**fastapi_kwargs)

    for endp in app.endpoints:
        add_endpoint_to_app(f_app, endp)

    return f_app


__all__ = ("make_handler", "add_endpoint_to_app", "from_application")
